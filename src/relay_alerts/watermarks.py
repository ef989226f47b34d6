"""Per-category watermarks persisted as tags on the relay's own Lambda function."""

from __future__ import annotations

import logging

from common.aws import list_prefixed_tags, tag_resource

logger = logging.getLogger(__name__)


class WatermarkStore:
    """Reads and merge-writes `<prefix><category>` -> release time tags."""

    def __init__(self, lambda_client, resource_arn: str, prefix: str):
        self.lambda_client = lambda_client
        self.resource_arn = resource_arn
        self.prefix = prefix

    def tag_key(self, category: str) -> str:
        return f"{self.prefix}{category}"

    def load(self) -> dict[str, str]:
        """Return category -> last relayed release time. Errors propagate."""
        tags = list_prefixed_tags(self.lambda_client, self.resource_arn, self.prefix)
        watermarks = {key[len(self.prefix):]: value for key, value in tags.items()}
        logger.info("Loaded %d watermarks from %s", len(watermarks), self.resource_arn)
        return watermarks

    def commit(self, updates: dict[str, str]) -> None:
        """Merge category -> release time updates onto the resource."""
        if not updates:
            logger.info("No watermark updates to commit")
            return
        tags = {self.tag_key(category): value for category, value in updates.items()}
        tag_resource(self.lambda_client, self.resource_arn, tags)
