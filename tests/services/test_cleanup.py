# tests/services/test_cleanup.py
"""Tests for best-effort blob cleanup."""

from unittest.mock import AsyncMock

import pytest

from quill.configs import POST_IMAGES, PROFILE_PICTURES
from quill.managers.metrics import MetricsManager
from quill.models import PostDB, UserDB
from quill.services.cleanup import BlobCleaner, BlobRef
from quill.services.storage import LocalStorage


class TestBlobRef:
    def test_from_post_with_image(self) -> None:
        post = PostDB(title="t", content="c", image="a.jpg")
        assert BlobRef.post_image(post) == BlobRef(POST_IMAGES, "a.jpg")

    def test_from_post_without_image(self) -> None:
        assert BlobRef.post_image(PostDB(title="t", content="c")) is None

    def test_from_user(self) -> None:
        user = UserDB(username="alice", password_hash="h", profile_picture="me.jpg")
        assert BlobRef.profile_picture(user) == BlobRef(PROFILE_PICTURES, "me.jpg")


class TestBlobCleaner:
    @pytest.mark.asyncio
    async def test_discard_removes_files(
        self,
        storage: LocalStorage,
        valid_jpeg_bytes: bytes,
        fresh_metrics: MetricsManager,
    ) -> None:
        first = await storage.save(POST_IMAGES, valid_jpeg_bytes, "image/jpeg")
        second = await storage.save(PROFILE_PICTURES, valid_jpeg_bytes, "image/jpeg")
        cleaner = BlobCleaner(storage, fresh_metrics)

        removed = await cleaner.discard([BlobRef(POST_IMAGES, first), BlobRef(PROFILE_PICTURES, second)])

        assert removed == 2
        assert not await storage.exists(POST_IMAGES, first)
        assert not await storage.exists(PROFILE_PICTURES, second)

    @pytest.mark.asyncio
    async def test_none_and_duplicates_skipped(self, fresh_metrics: MetricsManager) -> None:
        storage = AsyncMock()
        storage.delete.return_value = True
        cleaner = BlobCleaner(storage, fresh_metrics)
        ref = BlobRef(POST_IMAGES, "a.jpg")

        assert await cleaner.discard([None, ref, ref]) == 1
        storage.delete.assert_awaited_once_with(POST_IMAGES, "a.jpg")

    @pytest.mark.asyncio
    async def test_empty_input(self, fresh_metrics: MetricsManager) -> None:
        storage = AsyncMock()
        assert await BlobCleaner(storage, fresh_metrics).discard([]) == 0
        storage.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_file_counts_as_removed(
        self,
        storage: LocalStorage,
        fresh_metrics: MetricsManager,
    ) -> None:
        cleaner = BlobCleaner(storage, fresh_metrics)
        assert await cleaner.discard([BlobRef(POST_IMAGES, "gone.jpg")]) == 1
        assert fresh_metrics.get_metrics()["blob_cleanup_failures"] == 0

    @pytest.mark.asyncio
    async def test_failure_is_counted_not_raised(self, fresh_metrics: MetricsManager) -> None:
        """Test one failing blob does not stop the others."""
        storage = AsyncMock()
        storage.delete.side_effect = [PermissionError("locked"), True]
        cleaner = BlobCleaner(storage, fresh_metrics)

        removed = await cleaner.discard([BlobRef(POST_IMAGES, "a.jpg"), BlobRef(POST_IMAGES, "b.jpg")])

        assert removed == 1
        assert storage.delete.await_count == 2
        assert fresh_metrics.get_metrics()["blob_cleanup_failures"] == 1

    @pytest.mark.asyncio
    async def test_foreign_reference_is_counted(
        self,
        storage: LocalStorage,
        fresh_metrics: MetricsManager,
    ) -> None:
        cleaner = BlobCleaner(storage, fresh_metrics)
        assert await cleaner.discard([BlobRef(POST_IMAGES, "../escape.jpg")]) == 0
        assert fresh_metrics.get_metrics()["blob_cleanup_failures"] == 1
