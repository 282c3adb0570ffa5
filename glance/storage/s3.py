"""
S3 file storage backend
Implements StorageBackend for AWS S3 (or compatible services)
"""

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from typing import Optional
from urllib.parse import quote, unquote, urlparse
import logging

from glance.config import settings
from glance.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    """S3 blob storage with public-read objects"""

    def __init__(
        self,
        bucket_name: str = None,
        aws_access_key_id: str = None,
        aws_secret_access_key: str = None,
        region_name: str = None,
        endpoint_url: str = None
    ):
        """
        Initialize S3 storage backend

        Args:
            bucket_name: S3 bucket name
            aws_access_key_id: AWS access key (optional, uses env/IAM if not provided)
            aws_secret_access_key: AWS secret key (optional)
            region_name: AWS region (optional)
            endpoint_url: Custom S3 endpoint (for MinIO, DigitalOcean Spaces, etc.)
        """
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.region_name = region_name or settings.S3_REGION
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None

        s3_config = {'region_name': self.region_name}
        if aws_access_key_id:
            s3_config['aws_access_key_id'] = aws_access_key_id
        if aws_secret_access_key:
            s3_config['aws_secret_access_key'] = aws_secret_access_key
        if self.endpoint_url:
            s3_config['endpoint_url'] = self.endpoint_url

        self.s3_client = boto3.client('s3', **s3_config)

    def save(self, key: str, content: bytes, content_type: Optional[str] = None) -> str:
        """Upload blob as public-read and return its public URL"""
        extra_args = {'ACL': 'public-read'}
        if content_type:
            extra_args['ContentType'] = content_type

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                **extra_args
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload to S3: {e}")
            raise

        logger.info(f"Uploaded file to S3: {key} ({len(content)} bytes)")
        return self.get_url(key)

    def delete(self, key: str):
        """Delete blob from S3"""
        try:
            self.s3_client.delete_object(
                Bucket=self.bucket_name,
                Key=key
            )
            logger.info(f"Deleted file from S3: {key}")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete from S3: {e}")
            raise

    def get_url(self, key: str) -> str:
        """Virtual-hosted URL on AWS, path-style URL on custom endpoints"""
        quoted = quote(key)
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket_name}/{quoted}"
        return f"https://{self.bucket_name}.s3.{self.region_name}.amazonaws.com/{quoted}"

    def key_from_url(self, url: str) -> Optional[str]:
        """Object key is the percent-decoded URL path (minus the bucket on path-style URLs)"""
        if not url:
            return None

        path = unquote(urlparse(url).path).lstrip("/")
        if self.endpoint_url and path.startswith(f"{self.bucket_name}/"):
            path = path[len(self.bucket_name) + 1:]

        return path or None
