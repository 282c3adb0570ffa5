"""
Storage backend factory
Creates the configured storage backend once per process
"""

from functools import lru_cache
import logging

from glance.config import settings
from glance.storage.base import StorageBackend
from glance.storage.s3 import S3Storage

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_storage_backend() -> StorageBackend:
    """
    Create and return the S3 storage backend

    Returns:
        StorageBackend: Configured S3Storage
    """
    logger.info(f"Using S3 storage: bucket={settings.S3_BUCKET_NAME}, region={settings.S3_REGION}")

    # Build S3 config (only pass non-empty values)
    s3_config = {
        "bucket_name": settings.S3_BUCKET_NAME,
    }

    if settings.S3_ACCESS_KEY_ID:
        s3_config["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
    if settings.S3_SECRET_ACCESS_KEY:
        s3_config["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY
    if settings.S3_REGION:
        s3_config["region_name"] = settings.S3_REGION
    if settings.S3_ENDPOINT_URL:
        s3_config["endpoint_url"] = settings.S3_ENDPOINT_URL

    return S3Storage(**s3_config)
