"""CLI for running the alert relay outside Lambda."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.local_io import save_jsonl_records_local
from relay_alerts.config import load_config
from relay_alerts.helpers import parse_relay_alerts_args
from relay_alerts.relay_alerts import AlertRelay

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_relay_alerts_args(argv)

    config = load_config(args.config)
    relay = AlertRelay.from_config(config)
    result = relay.run(dry_run=args.dry_run)

    if not result.new_alerts:
        logger.info("No new alerts")
        return

    if args.save_local:
        save_jsonl_records_local(list(result.new_alerts.values()), "new_alerts")


if __name__ == "__main__":
    main()
