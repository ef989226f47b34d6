"""Fetch feeds, select new alerts, relay them and advance watermarks.

One run is: load watermarks and fetch every source concurrently, dedup, then
commit watermark updates and deliver every message to every endpoint. In the
default "concurrent" commit mode the commit races the deliveries, so a crash
or overlapping invocation can duplicate or drop a bulletin. "before_dispatch"
commits first and skips delivery if the commit fails.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

import requests
from botocore.exceptions import BotoCoreError, ClientError

from common.aws import get_lambda_client
from relay_alerts.config import Config
from relay_alerts.dedup import dedup_alerts
from relay_alerts.deliver.webhooks import WebhookDispatcher
from relay_alerts.fetch_alerts.fetch_feed import create_http_session, fetch_feed
from relay_alerts.format_alert import format_alert
from relay_alerts.identity import compute_page_key
from relay_alerts.models import AlertRecord, FeedResult, RelayResult, SourceDescriptor
from relay_alerts.sources import local_now, resolve_sources
from relay_alerts.watermarks import WatermarkStore

logger = logging.getLogger(__name__)

ACCEPTED_RESPONSE = {"statusCode": 204, "body": ""}


class AlertRelay:
    def __init__(
        self,
        config: Config,
        session: requests.Session,
        watermark_store: WatermarkStore,
        dispatcher: WebhookDispatcher,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config
        self.session = session
        self.watermark_store = watermark_store
        self.dispatcher = dispatcher
        self.clock = clock or (lambda: local_now(config.timezone))

    @classmethod
    def from_config(cls, config: Config) -> "AlertRelay":
        """Build the relay and its clients once per process."""
        session = create_http_session()
        store = WatermarkStore(get_lambda_client(), config.lambda_arn, config.tag_prefix)
        dispatcher = WebhookDispatcher(session, config.webhooks, config.request_timeout)
        return cls(config, session, store, dispatcher)

    def handle(self, event) -> dict:
        """Lambda contract: always 204. Source configuration errors still raise."""
        logger.debug("Trigger event: %s", event)
        try:
            self.run()
        except (BotoCoreError, ClientError):
            logger.exception("Relay run aborted: watermark store unavailable")
        return dict(ACCEPTED_RESPONSE)

    def run(self, dry_run: bool = False) -> RelayResult:
        return asyncio.run(self.run_async(dry_run=dry_run))

    async def run_async(self, dry_run: bool = False) -> RelayResult:
        sources = resolve_sources(self.config.sources, self.clock())
        logger.info(
            "Starting relay run: %d sources, %d endpoints", len(sources), len(self.dispatcher.endpoints)
        )

        watermarks, results = await self._load_and_fetch(sources)

        dedup = dedup_alerts(results, watermarks, self.config.drill_markers, self.page_key)
        logger.info("%d new alerts, watermark updates: %s", len(dedup.new_alerts), dedup.watermark_updates)

        result = RelayResult(new_alerts=dedup.new_alerts, watermark_updates=dedup.watermark_updates)
        messages = [format_alert(record, self.config.format) for record in dedup.new_alerts.values()]

        if dry_run:
            for message in messages:
                logger.info("[dry-run] %s", message)
            return result

        await self._commit_and_dispatch(messages, dedup.watermark_updates, result)
        logger.info(
            "Relay run complete: %d delivered, %d failed, watermarks committed=%s",
            result.delivered,
            result.failed_deliveries,
            result.committed,
        )
        return result

    def page_key(self, record: AlertRecord) -> str:
        return compute_page_key(record, self.config.format.page_key_unique_length)

    async def _load_and_fetch(self, sources: list[SourceDescriptor]) -> tuple[dict[str, str], list[FeedResult]]:
        load = asyncio.to_thread(self.watermark_store.load)
        fetches = [self._fetch(source) for source in sources]
        watermarks, *results = await asyncio.gather(load, *fetches)
        return watermarks, results

    async def _fetch(self, source: SourceDescriptor) -> FeedResult:
        try:
            return await asyncio.to_thread(fetch_feed, self.session, source, self.config.request_timeout)
        except Exception as e:
            logger.error("Failed to fetch %s: %s", source.location, e, exc_info=True)
            return FeedResult(source=source, records=None)

    async def _commit(self, updates: dict[str, str]) -> bool:
        try:
            await asyncio.to_thread(self.watermark_store.commit, updates)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to commit watermarks %s: %s", updates, e)
            return False
        return bool(updates)

    async def _commit_and_dispatch(self, messages: list[str], updates: dict[str, str], result: RelayResult) -> None:
        if self.config.commit_mode == "before_dispatch":
            result.committed = await self._commit(updates)
            if updates and not result.committed:
                logger.warning("Skipping %d messages until watermarks can be committed", len(messages))
                return
            outcomes = await asyncio.gather(*self._deliveries(messages))
        else:
            result.committed, *outcomes = await asyncio.gather(self._commit(updates), *self._deliveries(messages))

        result.delivered = sum(1 for ok in outcomes if ok)
        result.failed_deliveries = len(outcomes) - result.delivered

    def _deliveries(self, messages: list[str]) -> list:
        return [
            asyncio.to_thread(self.dispatcher.deliver, endpoint, message)
            for message in messages
            for endpoint in self.dispatcher.endpoints
        ]
