"""Resolve templated feed locations into source descriptors."""

from __future__ import annotations

import logging
import re
import string
from datetime import datetime
from typing import Iterable
from urllib.parse import urlsplit
from zoneinfo import ZoneInfo

from relay_alerts.models import SourceDescriptor, SourceKind

logger = logging.getLogger(__name__)

PLACEHOLDERS = frozenset({"year", "month"})

# <digits>_<category>.json, e.g. 2024_earthquakeew.json
SINGLE_PATTERN = re.compile(r"/\d+_(\w+)\.json$")
# <digits>.json, e.g. 202401.json
AGGREGATED_PATTERN = re.compile(r"/\d+\.json$")


def local_now(tz_name: str) -> datetime:
    """Current time in the feed publisher's civil time zone."""
    return datetime.now(ZoneInfo(tz_name))


def validate_template(template: str) -> None:
    """Raise ValueError if the template uses placeholders other than year/month."""
    try:
        fields = {name for _, name, _, _ in string.Formatter().parse(template) if name is not None}
    except ValueError as exc:
        raise ValueError(f"Malformed source template {template!r}: {exc}") from exc

    unknown = fields - PLACEHOLDERS
    if unknown:
        raise ValueError(
            f"Source template {template!r} uses unknown placeholders: {', '.join(sorted(unknown))}"
        )


def classify_location(location: str) -> tuple[SourceKind, str | None]:
    """Classify a resolved location as a single-category feed or an aggregated report."""
    path = urlsplit(location).path

    match = SINGLE_PATTERN.search(path)
    if match:
        return SourceKind.SINGLE, match.group(1)

    if AGGREGATED_PATTERN.search(path):
        return SourceKind.AGGREGATED, None

    raise ValueError(f"Source {location!r} matches no known feed pattern")


def resolve_source(template: str, now: datetime) -> SourceDescriptor:
    validate_template(template)
    location = template.format(year=f"{now.year:04d}", month=f"{now.month:02d}")
    kind, category = classify_location(location)
    return SourceDescriptor(template=template, location=location, kind=kind, category=category)


def resolve_sources(templates: Iterable[str], now: datetime) -> list[SourceDescriptor]:
    """Resolve every template for this run, failing on the first invalid one.

    Args:
        templates: Location templates with {year}/{month} placeholders
        now: Current time in the publisher's time zone

    Returns:
        Descriptors in configured order

    Raises:
        ValueError: If any template is malformed or matches no feed pattern
    """
    descriptors = [resolve_source(template, now) for template in templates]
    for descriptor in descriptors:
        logger.info(
            "Source %s -> %s (%s)",
            descriptor.location,
            descriptor.kind.value,
            descriptor.category or "all categories",
        )
    return descriptors


def tracked_categories(descriptors: Iterable[SourceDescriptor]) -> set[str]:
    """Category names configured through single-category feeds."""
    return {d.category for d in descriptors if d.kind is SourceKind.SINGLE and d.category}
