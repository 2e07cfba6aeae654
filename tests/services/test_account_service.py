# tests/services/test_account_service.py
"""Tests for the account lifecycle service."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import UploadFile
from sqlmodel.ext.asyncio.session import AsyncSession

from quill.configs import settings
from quill.errors import (
    DatabaseError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    UsernameTakenError,
    UserNotFoundError,
)
from quill.managers.token_manager import decode_access_token
from quill.models import Role
from quill.repositories import PostRepository, UserRepository
from quill.services import AccountService, PostService
from quill.services.storage import LocalStorage


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_stores_hash_only(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")

        assert user.username == "alice"
        assert user.role == Role.STANDARD
        assert user.password_hash != "pw1"
        assert user.password_hash.startswith("$argon2")
        assert user.profile_picture is None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(
        self,
        account_service: AccountService,
        user_repo: UserRepository,
    ) -> None:
        await account_service.register("alice", "pw1")

        with pytest.raises(UsernameTakenError) as exc_info:
            await account_service.register("alice", "pw2")

        assert exc_info.value.status_code == 400
        assert await user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_admin_self_registration_refused(self, account_service: AccountService) -> None:
        with pytest.raises(ForbiddenError):
            await account_service.register("root", "pw1", role=Role.ADMINISTRATOR)

    @pytest.mark.asyncio
    async def test_admin_registration_when_enabled(
        self,
        account_service: AccountService,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "ALLOW_ADMIN_REGISTRATION", True)
        user = await account_service.register("root", "pw1", role=Role.ADMINISTRATOR)
        assert user.is_admin

    @pytest.mark.asyncio
    async def test_register_with_picture(
        self,
        account_service: AccountService,
        make_upload: Callable[..., UploadFile],
        profile_picture_path: Callable[[str], Path],
    ) -> None:
        user = await account_service.register("alice", "pw1", profile_picture=make_upload())

        assert user.profile_picture
        assert profile_picture_path(user.profile_picture).exists()

    @pytest.mark.asyncio
    async def test_failed_save_discards_new_picture(
        self,
        account_service: AccountService,
        make_upload: Callable[..., UploadFile],
        storage: LocalStorage,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test a picture stored for a registration that failed is removed again."""
        monkeypatch.setattr(
            account_service.user_repo,
            "commit",
            AsyncMock(side_effect=DatabaseError("Failed to save changes")),
        )

        with pytest.raises(DatabaseError):
            await account_service.register("alice", "pw1", profile_picture=make_upload())

        assert list((storage.uploads_dir / "profile_pictures").iterdir()) == []


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_success_returns_token_for_account(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")

        login = await account_service.authenticate("alice", "pw1")

        assert login.user_id == user.uuid
        assert login.role == "standard"
        token_data = decode_access_token(login.token)
        assert token_data is not None
        assert token_data.user_id == user.uuid

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_user_look_the_same(
        self,
        account_service: AccountService,
    ) -> None:
        await account_service.register("alice", "pw1")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await account_service.authenticate("alice", "nope")
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            await account_service.authenticate("bob", "pw1")

        assert wrong_password.value.detail == unknown_user.value.detail
        assert wrong_password.value.status_code == unknown_user.value.status_code == 401


class TestLookup:
    @pytest.mark.asyncio
    async def test_get_missing_account(self, account_service: AccountService) -> None:
        with pytest.raises(UserNotFoundError):
            await account_service.get_account(uuid4())

    @pytest.mark.asyncio
    async def test_list_empty_store(self, account_service: AccountService) -> None:
        with pytest.raises(UserNotFoundError, match="No users found"):
            await account_service.list_accounts()

    @pytest.mark.asyncio
    async def test_list_accounts(self, account_service: AccountService) -> None:
        await account_service.register("alice", "pw1")
        await account_service.register("bob", "pw1")

        users = await account_service.list_accounts()
        assert [user.username for user in users] == ["alice", "bob"]


class TestCredentialChanges:
    @pytest.mark.asyncio
    async def test_change_username(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")

        updated = await account_service.change_username(user.uuid, "alice2")

        assert updated.username == "alice2"
        assert updated.updated_at is not None
        await account_service.authenticate("alice2", "pw1")

    @pytest.mark.asyncio
    async def test_change_username_to_taken_name(self, account_service: AccountService) -> None:
        await account_service.register("alice", "pw1")
        bob = await account_service.register("bob", "pw1")

        with pytest.raises(UsernameTakenError):
            await account_service.change_username(bob.uuid, "alice")

    @pytest.mark.asyncio
    async def test_keep_own_username(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")
        assert (await account_service.change_username(user.uuid, "alice")).username == "alice"

    @pytest.mark.asyncio
    async def test_change_username_missing_account(self, account_service: AccountService) -> None:
        with pytest.raises(UserNotFoundError):
            await account_service.change_username(uuid4(), "ghost")

    @pytest.mark.asyncio
    async def test_change_password(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")

        await account_service.change_password(user.uuid, "pw1", "pw2")

        await account_service.authenticate("alice", "pw2")
        with pytest.raises(InvalidCredentialsError):
            await account_service.authenticate("alice", "pw1")

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")

        with pytest.raises(InvalidCurrentPasswordError):
            await account_service.change_password(user.uuid, "wrong", "pw2")

        await account_service.authenticate("alice", "pw1")


class TestProfilePicture:
    @pytest.mark.asyncio
    async def test_replacement_removes_old_blob(
        self,
        account_service: AccountService,
        make_upload: Callable[..., UploadFile],
        profile_picture_path: Callable[[str], Path],
    ) -> None:
        user = await account_service.register("alice", "pw1", profile_picture=make_upload())
        old_picture = user.profile_picture
        assert old_picture

        updated = await account_service.change_profile_picture(user.uuid, make_upload())

        assert updated.profile_picture
        assert updated.profile_picture != old_picture
        assert profile_picture_path(updated.profile_picture).exists()
        assert not profile_picture_path(old_picture).exists()

    @pytest.mark.asyncio
    async def test_first_picture(
        self,
        account_service: AccountService,
        make_upload: Callable[..., UploadFile],
        profile_picture_path: Callable[[str], Path],
    ) -> None:
        user = await account_service.register("alice", "pw1")

        updated = await account_service.change_profile_picture(user.uuid, make_upload())

        assert updated.profile_picture
        assert profile_picture_path(updated.profile_picture).exists()


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_cascade_removes_posts_likes_and_blobs(
        self,
        session: AsyncSession,
        account_service: AccountService,
        post_service: PostService,
        post_repo: PostRepository,
        user_repo: UserRepository,
        make_upload: Callable[..., UploadFile],
        post_image_path: Callable[[str], Path],
        profile_picture_path: Callable[[str], Path],
    ) -> None:
        alice = await account_service.register("alice", "pw1", profile_picture=make_upload())
        bob = await account_service.register("bob", "pw1")
        alice_posts = [
            await post_service.create_post(alice.uuid, f"post {i}", "body", make_upload())
            for i in range(3)
        ]
        bob_post = await post_service.create_post(bob.uuid, "bob's", "body", make_upload())
        await post_service.like_post(bob_post.post.id, alice.uuid)
        await post_service.like_post(alice_posts[0].post.id, bob.uuid)

        await account_service.delete_account(alice.uuid)

        assert await user_repo.get_by_id(alice.uuid) is None
        for row in alice_posts:
            assert await post_repo.get_by_id(row.post.id) is None
            assert row.post.image
            assert not post_image_path(row.post.image).exists()
        assert alice.profile_picture
        assert not profile_picture_path(alice.profile_picture).exists()

        # Alice's like on Bob's post is withdrawn too
        surviving = bob_post.post
        await session.refresh(surviving)
        assert surviving.likes_count == 0
        assert await post_repo.count_likes(surviving.id) == 0
        assert surviving.image
        assert post_image_path(surviving.image).exists()

    @pytest.mark.asyncio
    async def test_missing_account(self, account_service: AccountService) -> None:
        with pytest.raises(UserNotFoundError):
            await account_service.delete_account(uuid4())

    @pytest.mark.asyncio
    async def test_second_delete_is_not_found(self, account_service: AccountService) -> None:
        user = await account_service.register("alice", "pw1")
        await account_service.delete_account(user.uuid)

        with pytest.raises(UserNotFoundError):
            await account_service.delete_account(user.uuid)

    @pytest.mark.asyncio
    async def test_blob_failure_does_not_block_deletion(
        self,
        account_service: AccountService,
        user_repo: UserRepository,
        make_upload: Callable[..., UploadFile],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        user = await account_service.register("alice", "pw1", profile_picture=make_upload())
        monkeypatch.setattr(
            account_service.cleaner.storage,
            "delete",
            AsyncMock(side_effect=PermissionError("read-only filesystem")),
        )

        await account_service.delete_account(user.uuid)

        assert await user_repo.get_by_id(user.uuid) is None
