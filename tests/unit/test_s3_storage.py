"""
Unit tests for S3Storage and object key helpers
"""

import re
import pytest
from unittest.mock import patch

from botocore.exceptions import ClientError

from glance.storage.base import build_object_key, sanitize_filename
from glance.storage.s3 import S3Storage


@pytest.mark.unit
class TestObjectKeys:

    def test_sanitize_filename(self):
        assert sanitize_filename("My Paper (final).pdf") == "My_Paper__final_.pdf"
        assert sanitize_filename("résumé.pdf") == "r_sum_.pdf"

    def test_key_format(self):
        key = build_object_key("user_123", "my paper.pdf")
        assert re.fullmatch(r"user_123/\d{13}-[0-9a-f]{8}-my_paper\.pdf", key)

    def test_keys_are_unique(self):
        keys = {build_object_key("user_123", "paper.pdf") for _ in range(50)}
        assert len(keys) == 50


@pytest.mark.unit
class TestS3Storage:

    @patch("glance.storage.s3.boto3")
    def test_save_uploads_public_object(self, mock_boto3):
        client = mock_boto3.client.return_value
        storage = S3Storage(bucket_name="docs", region_name="eu-west-1")

        url = storage.save("user_1/123-abcd-paper.pdf", b"%PDF", "application/pdf")

        client.put_object.assert_called_once_with(
            Bucket="docs",
            Key="user_1/123-abcd-paper.pdf",
            Body=b"%PDF",
            ACL="public-read",
            ContentType="application/pdf",
        )
        assert url == "https://docs.s3.eu-west-1.amazonaws.com/user_1/123-abcd-paper.pdf"

    @patch("glance.storage.s3.boto3")
    def test_save_propagates_client_errors(self, mock_boto3):
        mock_boto3.client.return_value.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        storage = S3Storage(bucket_name="docs", region_name="us-east-1")

        with pytest.raises(ClientError):
            storage.save("k.pdf", b"%PDF")

    @patch("glance.storage.s3.boto3")
    def test_delete(self, mock_boto3):
        storage = S3Storage(bucket_name="docs", region_name="us-east-1")
        storage.delete("user_1/paper.pdf")

        mock_boto3.client.return_value.delete_object.assert_called_once_with(
            Bucket="docs", Key="user_1/paper.pdf"
        )

    @patch("glance.storage.s3.boto3")
    def test_url_round_trip(self, mock_boto3):
        storage = S3Storage(bucket_name="docs", region_name="us-east-1")
        key = "user_1/123-abcd-paper_v2.pdf"

        assert storage.key_from_url(storage.get_url(key)) == key

    @patch("glance.storage.s3.boto3")
    def test_path_style_urls_on_custom_endpoint(self, mock_boto3):
        storage = S3Storage(bucket_name="docs", region_name="us-east-1", endpoint_url="http://minio:9000/")

        url = storage.get_url("user_1/paper.pdf")

        assert url == "http://minio:9000/docs/user_1/paper.pdf"
        assert storage.key_from_url(url) == "user_1/paper.pdf"
        assert mock_boto3.client.call_args.kwargs["endpoint_url"] == "http://minio:9000"

    @patch("glance.storage.s3.boto3")
    def test_key_from_empty_url(self, mock_boto3):
        storage = S3Storage(bucket_name="docs", region_name="us-east-1")
        assert storage.key_from_url("") is None
        assert storage.key_from_url("https://docs.s3.us-east-1.amazonaws.com/") is None
