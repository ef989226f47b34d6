"""Data models for the alert relay."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SourceKind(Enum):
    """How a feed groups its alerts."""
    SINGLE = "single"
    AGGREGATED = "aggregated"


@dataclass(frozen=True)
class SourceDescriptor:
    """A feed location resolved for this run.

    `category` is set for SINGLE feeds and None for AGGREGATED reports,
    whose records carry their own category.
    """
    template: str
    location: str
    kind: SourceKind
    category: Optional[str] = None


@dataclass(frozen=True)
class AlertRecord:
    """One bulletin as read from a feed."""
    release_time: str
    page_key: str
    category: str
    body_text: str


@dataclass(frozen=True)
class FeedResult:
    """Normalized records for one source. `records` is None when the source had no usable data."""
    source: SourceDescriptor
    records: Optional[list[AlertRecord]]


@dataclass
class DedupResult:
    """New alerts keyed by physical identity, and the watermark advances they imply."""
    new_alerts: dict[str, AlertRecord] = field(default_factory=dict)
    watermark_updates: dict[str, str] = field(default_factory=dict)


@dataclass
class RelayResult:
    """Outcome of one relay run."""
    new_alerts: dict[str, AlertRecord]
    watermark_updates: dict[str, str]
    delivered: int = 0
    failed_deliveries: int = 0
    committed: bool = False
