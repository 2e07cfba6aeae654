"""
Account lifecycle service.

Registration, authentication, credential changes, profile picture
replacement and the cascading account deletion shared by the self-service
and administrative paths.
"""

from uuid import UUID

from fastapi import UploadFile

from quill.configs import PROFILE_PICTURES, settings
from quill.errors import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    UsernameTakenError,
    UserNotFoundError,
)
from quill.managers.password_manager import hash_password, verify_password
from quill.managers.token_manager import create_access_token
from quill.models import Role, UserDB
from quill.monitoring import get_logger
from quill.repositories import PostRepository, UserRepository
from quill.schemas.auth import LoginResponse
from quill.services.cleanup import BlobCleaner, BlobRef
from quill.services.images import ImageService
from quill.services.storage import BlobStore, get_storage_service

logger = get_logger(__name__)


class AccountService:
    """
    Service for account lifecycle operations.

    Records are reached through the repositories bound to the request's
    session; image files through the injected blob store.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        post_repo: PostRepository,
        storage: BlobStore | None = None,
    ) -> None:
        """
        Initialize the account service.

        Args:
            user_repo: Repository for account records
            post_repo: Repository for post and like records
            storage: Optional blob store instance. If not provided,
                    the default blob store will be used.
        """
        self.user_repo = user_repo
        self.post_repo = post_repo
        self.storage = storage or get_storage_service()
        self.images = ImageService(
            folder=PROFILE_PICTURES,
            max_dimension=settings.PROFILE_PICTURE_MAX_DIMENSION,
            storage=self.storage,
        )
        self.cleaner = BlobCleaner(self.storage)

    async def get_account(self, user_id: UUID) -> UserDB:
        """
        Get an account by ID.

        Raises:
            UserNotFoundError: If no account has this ID
        """
        if not (db_user := await self.user_repo.get_by_id(user_id)):
            raise UserNotFoundError
        return db_user

    async def list_accounts(self) -> list[UserDB]:
        """
        List every account.

        Raises:
            UserNotFoundError: If the store holds no accounts at all
        """
        if not (users := await self.user_repo.get_all()):
            raise UserNotFoundError(detail="No users found")
        return users

    async def register(
        self,
        username: str,
        password: str,
        role: Role = Role.STANDARD,
        profile_picture: UploadFile | None = None,
    ) -> UserDB:
        """
        Register a new account.

        Args:
            username: Unique username
            password: Plaintext password, only its hash is stored
            role: Requested role
            profile_picture: Optional uploaded profile picture

        Returns:
            UserDB: The created account

        Raises:
            ForbiddenError: If an administrator is requested while
                administrator self-registration is disabled
            UsernameTakenError: If the username is already in use
        """
        if role is Role.ADMINISTRATOR and not settings.ALLOW_ADMIN_REGISTRATION:
            raise ForbiddenError(detail="Administrator accounts cannot be self-registered")

        if await self.user_repo.username_taken(username):
            raise UsernameTakenError

        password_hash = await hash_password(password)
        filename = await self.images.store(profile_picture) if profile_picture else None

        try:
            db_user = await self.user_repo.create(
                username=username,
                password_hash=password_hash,
                role=role,
                profile_picture=filename,
            )
            await self.user_repo.commit()
        except Exception:
            await self.cleaner.discard([BlobRef(PROFILE_PICTURES, filename) if filename else None])
            raise

        logger.info("Account registered", user_id=str(db_user.uuid), role=db_user.role)
        return db_user

    async def authenticate(self, username: str, password: str) -> LoginResponse:
        """
        Verify credentials and issue a session token.

        Unknown usernames and wrong passwords fail identically.

        Raises:
            InvalidCredentialsError: If the credentials do not match an account
        """
        db_user = await self.user_repo.get_by_username(username)
        password_hash = db_user.password_hash if db_user else None

        if not await verify_password(password, password_hash) or db_user is None:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError

        return LoginResponse(
            token=create_access_token(db_user.uuid),
            user_id=db_user.uuid,
            role=db_user.role,
        )

    async def change_username(self, user_id: UUID, new_username: str) -> UserDB:
        """
        Rename an account.

        Raises:
            UserNotFoundError: If the account does not exist
            UsernameTakenError: If another account already uses the name
        """
        db_user = await self.get_account(user_id)
        if await self.user_repo.username_taken(new_username, exclude_id=user_id):
            raise UsernameTakenError

        db_user = await self.user_repo.update(db_user, username=new_username)
        await self.user_repo.commit()
        return db_user

    async def change_password(
        self,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Replace the stored password hash after checking the current password.

        Raises:
            UserNotFoundError: If the account does not exist
            InvalidCurrentPasswordError: If ``current_password`` does not match
        """
        db_user = await self.get_account(user_id)
        if not await verify_password(current_password, db_user.password_hash):
            raise InvalidCurrentPasswordError

        await self.user_repo.update(db_user, password_hash=await hash_password(new_password))
        await self.user_repo.commit()
        logger.info("Password changed", user_id=str(user_id))

    async def change_profile_picture(self, user_id: UUID, file: UploadFile) -> UserDB:
        """
        Store a new profile picture and discard the previous one.

        The new blob is written and the record committed before the old
        blob is removed; a failed commit removes the new blob instead.

        Raises:
            UserNotFoundError: If the account does not exist
        """
        db_user = await self.get_account(user_id)
        old_picture = BlobRef.profile_picture(db_user)

        filename = await self.images.store(file)
        try:
            db_user = await self.user_repo.update(db_user, profile_picture=filename)
            await self.user_repo.commit()
        except Exception:
            await self.cleaner.discard([BlobRef(PROFILE_PICTURES, filename)])
            raise

        await self.cleaner.discard([old_picture])
        return db_user

    async def delete_account(self, user_id: UUID) -> None:
        """
        Delete an account and everything that belongs to it.

        Blobs go first (best-effort), then likes given by the account,
        its posts and the account itself, all committed in one transaction.

        Raises:
            UserNotFoundError: If the account does not exist
        """
        db_user = await self.get_account(user_id)
        posts = await self.post_repo.list_by_author(user_id)

        removed = await self.cleaner.discard(
            [BlobRef.profile_picture(db_user), *(BlobRef.post_image(post) for post in posts)],
        )

        await self.post_repo.remove_likes_by_user(user_id)
        deleted_posts = await self.post_repo.delete_by_author(user_id)
        await self.user_repo.delete(db_user)
        await self.user_repo.commit()

        logger.info(
            "Account deleted",
            user_id=str(user_id),
            posts=deleted_posts,
            blobs_removed=removed,
        )
