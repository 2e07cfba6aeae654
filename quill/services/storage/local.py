"""
Local filesystem blob store.

Files are stored under ``UPLOADS_DIR/<folder>/<filename>`` and served by
the ``/uploads`` static mount.
"""

from pathlib import Path
from uuid import uuid4

import aiofiles
import aiofiles.os

from quill.configs.settings import settings
from quill.errors.upload import StorageError
from quill.monitoring import get_logger

logger = get_logger(__name__)

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class LocalStorage:
    """Blob store backed by a directory on the local filesystem."""

    def __init__(self, uploads_dir: Path | None = None) -> None:
        self.uploads_dir = Path(uploads_dir or settings.UPLOADS_DIR)

    def _get_file_path(self, folder: str, filename: str) -> Path:
        # Stored names are generated here; anything with a path part is foreign
        if Path(filename).name != filename or Path(folder).name != folder:
            mssg = f"Invalid blob reference: {folder}/{filename}"
            raise ValueError(mssg)
        return self.uploads_dir / folder / filename

    async def save(self, folder: str, file_data: bytes, content_type: str) -> str:
        """
        Write a new blob under a freshly generated filename.

        Raises:
            StorageError: If the file cannot be written
        """
        filename = f"{uuid4().hex}.{EXTENSIONS.get(content_type, 'bin')}"
        file_path = self._get_file_path(folder, filename)
        try:
            await aiofiles.os.makedirs(file_path.parent, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(file_data)
        except OSError as e:
            logger.exception("Failed to store blob", folder=folder, filename=filename)
            raise StorageError from e

        logger.debug("Stored blob", folder=folder, filename=filename, size=len(file_data))
        return filename

    async def delete(self, folder: str, filename: str) -> bool:
        try:
            await aiofiles.os.remove(self._get_file_path(folder, filename))
        except FileNotFoundError:
            return False
        return True

    async def exists(self, folder: str, filename: str) -> bool:
        return await aiofiles.os.path.exists(self._get_file_path(folder, filename))
