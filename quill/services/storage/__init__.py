"""
Blob store package.

Provides the blob store protocol and its local filesystem backend.
"""

from quill.services.storage.base import BlobStore
from quill.services.storage.local import LocalStorage


def get_storage_service() -> BlobStore:
    """
    Get the configured blob store.

    Returns:
        BlobStore: Local filesystem store rooted at ``UPLOADS_DIR``
    """
    return LocalStorage()


__all__ = [
    "BlobStore",
    "LocalStorage",
    "get_storage_service",
]
