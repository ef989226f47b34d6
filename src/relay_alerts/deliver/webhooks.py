"""Post formatted alerts to chat webhooks."""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)


class WebhookDispatcher:
    """Delivers `{"text": ...}` payloads to each configured endpoint independently."""

    def __init__(self, session: requests.Session, endpoints: tuple[str, ...], timeout: int = 10):
        self.session = session
        self.endpoints = tuple(endpoints)
        self.timeout = timeout

    def deliver(self, endpoint: str, text: str) -> bool:
        """Post one message to one endpoint. Failures are logged and reported as False."""
        try:
            response = self.session.post(endpoint, json={"text": text}, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Delivery to %s failed: %s", _redact(endpoint), e)
            return False
        return True


def _redact(endpoint: str) -> str:
    """Webhook URLs embed their secret in the path; keep only the host for logs."""
    scheme, _, rest = endpoint.partition("://")
    host = rest.split("/", 1)[0]
    return f"{scheme}://{host}/..." if host else "<webhook>"
