"""Turn raw feed payloads into flat, time-ordered alert records."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from relay_alerts.models import AlertRecord, SourceDescriptor, SourceKind

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("release_time", "page_key", "CMAMtext")


def normalize_payload(source: SourceDescriptor, payload: Any) -> Optional[list[AlertRecord]]:
    """Extract alert records from a parsed feed body.

    Args:
        source: The descriptor the payload was fetched for
        payload: Parsed JSON body

    Returns:
        Records sorted ascending by release time (stable), or None when the
        payload reports failure.

    Raises:
        ValueError: If the payload does not have the expected shape
    """
    if not isinstance(payload, dict) or payload.get("success") is not True:
        logger.warning("Source %s reported no usable data", source.location)
        return None

    data = payload.get("data")
    if source.kind is SourceKind.SINGLE:
        records = _single_records(data, source.category)
    else:
        records = _aggregated_records(data)

    return sorted(records, key=lambda r: r.release_time)


def _single_records(data: Any, category: str) -> list[AlertRecord]:
    if not isinstance(data, dict) or not isinstance(data.get("alertMessages"), list):
        raise ValueError("Single-category payload has no alertMessages list")
    return list(_to_records(data["alertMessages"], category))


def _aggregated_records(data: Any) -> list[AlertRecord]:
    if not isinstance(data, dict):
        raise ValueError("Aggregated payload data is not a mapping")

    raw_alerts = []
    for group_name, group in data.items():
        if not isinstance(group, dict):
            raise ValueError(f"Aggregated group {group_name!r} is not a mapping")
        raw_alerts.extend(group.values())

    return list(_to_records(raw_alerts, None))


def _to_records(raw_alerts: Iterable[Any], category: Optional[str]) -> Iterable[AlertRecord]:
    """Yield records, tagging with `category` or, when None, each alert's own alertType."""
    for raw in raw_alerts:
        record = _to_record(raw, category)
        if record is None:
            logger.warning("Skipping malformed alert: %r", raw)
            continue
        yield record


def _to_record(raw: Any, category: Optional[str]) -> Optional[AlertRecord]:
    if not isinstance(raw, dict) or any(raw.get(f) is None for f in REQUIRED_FIELDS):
        return None

    if category is None:
        category = raw.get("alertType")
        if not category:
            return None

    return AlertRecord(
        release_time=str(raw["release_time"]),
        page_key=str(raw["page_key"]),
        category=str(category),
        body_text=str(raw["CMAMtext"]),
    )
