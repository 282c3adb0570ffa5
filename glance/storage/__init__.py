"""
Blob storage for uploaded PDFs
S3-compatible object storage with public-read objects
"""

from glance.storage.base import StorageBackend, build_object_key, sanitize_filename
from glance.storage.s3 import S3Storage
from glance.storage.factory import get_storage_backend

__all__ = [
    "StorageBackend",
    "S3Storage",
    "build_object_key",
    "sanitize_filename",
    "get_storage_backend",
]
