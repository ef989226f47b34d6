"""Helper functions for the relay_alerts CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_config_arg


def parse_relay_alerts_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for relay_alerts.'''

    parser = argparse.ArgumentParser(description="Relay new emergency alerts to chat webhooks")
    add_config_arg(parser)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and select new alerts, log the messages, but do not deliver or commit watermarks",
    )
    parser.add_argument("--save-local", action="store_true", help="Save new alerts to a local JSONL file")
    return parser.parse_args(argv)
