"""Decide which alerts are new and which watermarks they advance.

Each category's watermark is the release time of the newest bulletin already
relayed. A record is new when its release time sorts strictly after that
watermark (persisted value, or the value advanced earlier in this run) and its
body is not a drill. New records are keyed by physical identity, so the same
bulletin reported by several feeds is relayed once; the last one processed wins.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from relay_alerts.models import AlertRecord, DedupResult, FeedResult, SourceKind
from relay_alerts.sources import tracked_categories

logger = logging.getLogger(__name__)


def is_drill(body_text: str, markers: Iterable[str]) -> bool:
    """True if the body contains any drill/exercise marker (case-insensitive)."""
    body = body_text.casefold()
    return any(marker.casefold() in body for marker in markers)


def dedup_alerts(
    results: list[FeedResult],
    watermarks: dict[str, str],
    drill_markers: Iterable[str],
    key_func: Callable[[AlertRecord], str],
) -> DedupResult:
    """Select new alerts across all sources.

    Args:
        results: Normalized records per source, in configured source order
        watermarks: Persisted category -> last relayed release time
        drill_markers: Substrings marking drill/test bulletins
        key_func: Maps a record to its physical identity

    Returns:
        DedupResult with new alerts keyed by identity and the advanced watermarks
    """
    drill_markers = tuple(drill_markers)
    tracked = tracked_categories(r.source for r in results)
    result = DedupResult()

    for feed in results:
        if feed.records is None:
            continue

        records = feed.records
        if feed.source.kind is SourceKind.AGGREGATED:
            records = [r for r in records if r.category in tracked]
            ignored = len(feed.records) - len(records)
            if ignored:
                logger.info("Ignoring %d untracked alerts from %s", ignored, feed.source.location)

        included = 0
        for record in records:
            if _accept(record, watermarks, result.watermark_updates, drill_markers):
                result.new_alerts[key_func(record)] = record
                result.watermark_updates[record.category] = record.release_time
                included += 1

        logger.info("Selected %d new alerts from %s", included, feed.source.location)

    return result


def _accept(
    record: AlertRecord,
    watermarks: dict[str, str],
    updates: dict[str, str],
    drill_markers: tuple[str, ...],
) -> bool:
    watermark = updates.get(record.category, watermarks.get(record.category, ""))
    if record.release_time <= watermark:
        return False

    if is_drill(record.body_text, drill_markers):
        logger.info("Skipping drill alert %s (%s)", record.page_key, record.release_time)
        return False

    return True
