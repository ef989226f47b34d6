"""Fetch one feed and normalize it, degrading to no data on any failure."""

from __future__ import annotations

import logging
import time

import requests

from relay_alerts.fetch_alerts.normalize_feed import normalize_payload
from relay_alerts.models import FeedResult, SourceDescriptor

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def create_http_session() -> requests.Session:
    """Keep-alive session shared by feed fetches and webhook posts."""
    session = requests.Session()
    session.headers.update({
        "Accept": JSON_CONTENT_TYPE,
        "User-Agent": "relay-alerts/1.0",
    })
    return session


def cache_buster() -> str:
    return str(int(time.time() * 1000))


def media_type(content_type: str | None) -> str:
    """'application/json; charset=utf-8' -> 'application/json'."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def fetch_feed(session: requests.Session, source: SourceDescriptor, timeout: int) -> FeedResult:
    """Fetch and normalize a single source.

    Network errors, non-JSON responses, a false success flag and malformed
    payloads are logged and returned as FeedResult(records=None).
    """
    start_time = time.monotonic()

    try:
        response = session.get(source.location, params={"_": cache_buster()}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("Failed to fetch %s: %s", source.location, e)
        return FeedResult(source=source, records=None)

    content_type = media_type(response.headers.get("Content-Type"))
    if content_type != JSON_CONTENT_TYPE:
        logger.warning("Source %s returned %r, expected JSON", source.location, content_type)
        return FeedResult(source=source, records=None)

    try:
        records = normalize_payload(source, response.json())
    except ValueError as e:
        logger.error("Failed to parse %s: %s", source.location, e)
        return FeedResult(source=source, records=None)

    elapsed = time.monotonic() - start_time
    if records is not None:
        logger.info("Fetched %d alerts from %s in %.2fs", len(records), source.location, elapsed)
    return FeedResult(source=source, records=records)
