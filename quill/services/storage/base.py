"""
Blob store protocol.

Images live outside the record store and are addressed by
``(folder, filename)``; records only ever keep the filename.
"""

from abc import abstractmethod
from typing import Protocol


class BlobStore(Protocol):
    """Interface every blob store backend implements."""

    @abstractmethod
    async def save(self, folder: str, file_data: bytes, content_type: str) -> str:
        """
        Store a new blob.

        Args:
            folder: Storage folder (e.g. "post_images", "profile_pictures")
            file_data: Raw file bytes
            content_type: MIME type, used to pick the file extension

        Returns:
            str: Generated filename of the stored blob
        """
        ...

    @abstractmethod
    async def delete(self, folder: str, filename: str) -> bool:
        """
        Remove a blob.

        Args:
            folder: Storage folder
            filename: Filename returned by ``save``

        Returns:
            bool: True if a file was removed, False if it was already gone

        Raises:
            OSError: If the file exists but cannot be removed
        """
        ...

    @abstractmethod
    async def exists(self, folder: str, filename: str) -> bool:
        """Return whether the blob is currently stored."""
        ...
