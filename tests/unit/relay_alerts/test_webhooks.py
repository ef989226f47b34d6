"""Tests for relay_alerts.deliver.webhooks module."""

from unittest.mock import Mock

import requests

from relay_alerts.deliver.webhooks import WebhookDispatcher, _redact


class TestDeliver:
    def test_posts_text_payload(self) -> None:
        session = Mock()
        dispatcher = WebhookDispatcher(session, ("https://hooks.example/a",), timeout=3)

        assert dispatcher.deliver("https://hooks.example/a", "hello") is True
        session.post.assert_called_once_with("https://hooks.example/a", json={"text": "hello"}, timeout=3)

    def test_connection_error_returns_false(self) -> None:
        session = Mock()
        session.post.side_effect = requests.ConnectionError("refused")
        dispatcher = WebhookDispatcher(session, ("https://hooks.example/a",))

        assert dispatcher.deliver("https://hooks.example/a", "hello") is False

    def test_http_error_returns_false(self) -> None:
        session = Mock()
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        dispatcher = WebhookDispatcher(session, ("https://hooks.example/a",))

        assert dispatcher.deliver("https://hooks.example/a", "hello") is False


class TestRedact:
    def test_hides_path(self) -> None:
        assert _redact("https://hooks.slack.com/services/T0/B0/secret") == "https://hooks.slack.com/..."

    def test_no_scheme(self) -> None:
        assert _redact("not-a-url") == "<webhook>"
