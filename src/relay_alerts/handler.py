"""AWS Lambda entry point."""

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from relay_alerts.config import load_config
from relay_alerts.relay_alerts import AlertRelay

load_dotenv()

setup_logging()
# The Lambda runtime installs its own root handler, so basicConfig alone does not set the level
logging.getLogger().setLevel(logging.INFO)

relay = AlertRelay.from_config(load_config())


def handler(event, context):
    return relay.handle(event)
