"""
Blob cleanup shared by every deletion and replacement path.

Removal is best-effort: a blob that cannot be unlinked is logged and
counted, never raised, so the record-store change that follows still runs.
"""

from asyncio import gather
from collections.abc import Iterable
from dataclasses import dataclass

from quill.configs import POST_IMAGES, PROFILE_PICTURES
from quill.errors import BASE_EXCEPTION
from quill.managers.metrics import MetricsManager, metrics_manager
from quill.models import PostDB, UserDB
from quill.monitoring import get_logger
from quill.services.storage import BlobStore

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class BlobRef:
    """Address of one blob in the store."""

    folder: str
    filename: str

    @classmethod
    def post_image(cls, post: PostDB) -> "BlobRef | None":
        return cls(POST_IMAGES, post.image) if post.image else None

    @classmethod
    def profile_picture(cls, user: UserDB) -> "BlobRef | None":
        return cls(PROFILE_PICTURES, user.profile_picture) if user.profile_picture else None


class BlobCleaner:
    """Removes blobs in parallel under the best-effort policy."""

    def __init__(self, storage: BlobStore, metrics: MetricsManager | None = None) -> None:
        self.storage = storage
        self.metrics = metrics or metrics_manager

    async def discard(self, refs: Iterable[BlobRef | None]) -> int:
        """
        Remove every referenced blob, ignoring ``None`` entries.

        Args:
            refs: Blob references, duplicates are removed once

        Returns:
            int: Number of blobs no longer present in the store
        """
        targets = list(dict.fromkeys(ref for ref in refs if ref is not None))
        if not targets:
            return 0
        results = await gather(*(self._discard_one(ref) for ref in targets))
        return sum(results)

    async def _discard_one(self, ref: BlobRef) -> bool:
        try:
            removed = await self.storage.delete(ref.folder, ref.filename)
        except (*BASE_EXCEPTION, ValueError) as e:
            self.metrics.record_blob_failure()
            logger.warning(
                "Failed to delete blob",
                folder=ref.folder,
                filename=ref.filename,
                error=str(e),
            )
            return False

        if not removed:
            logger.info("Blob already absent", folder=ref.folder, filename=ref.filename)
        return True
