# tests/services/test_admin_service.py
"""Tests for administrative cleanup."""

from collections.abc import Callable
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi import UploadFile

from quill.errors import PostNotFoundError, UserNotFoundError
from quill.repositories import PostRepository, UserRepository
from quill.services import AccountService, AdminService, PostService


class TestAdminDeleteAccount:
    @pytest.mark.asyncio
    async def test_deletes_account_posts_and_images(
        self,
        admin_service: AdminService,
        account_service: AccountService,
        post_service: PostService,
        user_repo: UserRepository,
        post_repo: PostRepository,
        make_upload: Callable[..., UploadFile],
        post_image_path: Callable[[str], Path],
    ) -> None:
        author = await account_service.register("author", "pw1", profile_picture=make_upload())
        rows = [
            await post_service.create_post(author.uuid, f"post {i}", "body", make_upload())
            for i in range(2)
        ]

        await admin_service.delete_account(author.uuid, admin_id=uuid4())

        assert await user_repo.get_by_id(author.uuid) is None
        assert await post_repo.list_by_author(author.uuid) == []
        for row in rows:
            assert row.post.image
            assert not post_image_path(row.post.image).exists()

    @pytest.mark.asyncio
    async def test_missing_account(self, admin_service: AdminService) -> None:
        with pytest.raises(UserNotFoundError):
            await admin_service.delete_account(uuid4(), admin_id=uuid4())


class TestAdminDeletePost:
    @pytest.mark.asyncio
    async def test_deletes_any_post(
        self,
        admin_service: AdminService,
        account_service: AccountService,
        post_service: PostService,
        post_repo: PostRepository,
        make_upload: Callable[..., UploadFile],
        post_image_path: Callable[[str], Path],
    ) -> None:
        author = await account_service.register("author", "pw1")
        row = await post_service.create_post(author.uuid, "post", "body", make_upload())

        await admin_service.delete_post(row.post.id, admin_id=uuid4())

        assert await post_repo.get_by_id(row.post.id) is None
        assert row.post.image
        assert not post_image_path(row.post.image).exists()

    @pytest.mark.asyncio
    async def test_missing_post(self, admin_service: AdminService) -> None:
        with pytest.raises(PostNotFoundError):
            await admin_service.delete_post(uuid4(), admin_id=uuid4())
