"""Tests for common.aws module."""

from unittest.mock import MagicMock, patch

from common.aws import get_lambda_client, list_prefixed_tags, tag_resource


class TestLambdaTags:
    def test_filters_by_prefix(self) -> None:
        client = MagicMock()
        client.list_tags.return_value = {"Tags": {"p_a": "1", "other": "2"}}

        assert list_prefixed_tags(client, "arn", "p_") == {"p_a": "1"}

    def test_tag_resource_merges(self) -> None:
        client = MagicMock()
        tag_resource(client, "arn", {"p_a": "1"})
        client.tag_resource.assert_called_once_with(Resource="arn", Tags={"p_a": "1"})

    @patch("common.aws.boto3")
    def test_get_lambda_client(self, mock_boto3) -> None:
        get_lambda_client()
        mock_boto3.client.assert_called_once_with("lambda")
