"""AWS client helpers."""

import logging

import boto3
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def get_lambda_client():
    """Create Lambda client."""
    return boto3.client("lambda")


def list_prefixed_tags(lambda_client, resource_arn: str, prefix: str) -> dict[str, str]:
    """Return the tags on a Lambda resource whose keys start with `prefix`."""
    response = lambda_client.list_tags(Resource=resource_arn)
    tags = response.get("Tags", {})
    return {key: value for key, value in tags.items() if key.startswith(prefix)}


def tag_resource(lambda_client, resource_arn: str, tags: dict[str, str]) -> None:
    """Merge `tags` onto a Lambda resource. Existing keys not named are kept."""
    lambda_client.tag_resource(Resource=resource_arn, Tags=tags)
    logger.info("Tagged %s with %d tags", resource_arn, len(tags))
