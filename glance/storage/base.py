"""
Abstract base class for storage backends
Defines the interface for PDF blob storage (S3 or compatible)
"""

from abc import ABC, abstractmethod
from typing import Optional
import re
import secrets
import time

# Anything outside this set is replaced in object keys
_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def sanitize_filename(filename: str) -> str:
    """Map every character outside [A-Za-z0-9.-] to an underscore"""
    return _UNSAFE_KEY_CHARS.sub("_", filename)


def build_object_key(owner_id: str, filename: str) -> str:
    """
    Generate a unique object key for an upload

    Format: {owner_id}/{epoch_millis}-{random}-{sanitized_filename}
    """
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4)
    return f"{owner_id}/{timestamp}-{random_part}-{sanitize_filename(filename)}"


class StorageBackend(ABC):
    """Abstract base class for blob storage backends"""

    @abstractmethod
    def save(self, key: str, content: bytes, content_type: Optional[str] = None) -> str:
        """
        Store a blob under the given key

        Args:
            key: Object key (see build_object_key)
            content: Raw bytes
            content_type: MIME type reported by the client

        Returns:
            str: Public URL of the stored blob
        """
        pass

    @abstractmethod
    def delete(self, key: str):
        """
        Delete a blob

        Args:
            key: Object key
        """
        pass

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Public URL for a key"""
        pass

    @abstractmethod
    def key_from_url(self, url: str) -> Optional[str]:
        """
        Resolve the object key from a public URL

        Returns:
            Optional[str]: Key, or None when the URL does not point into this store
        """
        pass
