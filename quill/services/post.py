"""
Post lifecycle service.

Creation, retrieval, editing, likes and owner deletion of posts. Owner
and administrative deletion share ``remove_post``.
"""

from dataclasses import dataclass
from uuid import UUID

from fastapi import UploadFile

from quill.configs import POST_IMAGES, settings
from quill.errors import AlreadyLikedError, PostNotFoundError, UserNotFoundError
from quill.models import PostDB
from quill.monitoring import get_logger
from quill.repositories import Liker, PostRepository, PostWithAuthor, UserRepository
from quill.services.cleanup import BlobCleaner, BlobRef
from quill.services.images import ImageService
from quill.services.storage import BlobStore, get_storage_service

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PostDetail:
    """A post with its author's username and the accounts that liked it."""

    post: PostDB
    author_username: str | None
    likers: list[Liker]


class PostService:
    """Service for post lifecycle operations."""

    def __init__(
        self,
        post_repo: PostRepository,
        user_repo: UserRepository,
        storage: BlobStore | None = None,
    ) -> None:
        self.post_repo = post_repo
        self.user_repo = user_repo
        self.storage = storage or get_storage_service()
        self.images = ImageService(
            folder=POST_IMAGES,
            max_dimension=settings.POST_IMAGE_MAX_DIMENSION,
            storage=self.storage,
        )
        self.cleaner = BlobCleaner(self.storage)

    async def _joined(self, post_id: UUID) -> PostWithAuthor:
        if not (row := await self.post_repo.get_with_author(post_id)):
            raise PostNotFoundError
        return row

    async def create_post(
        self,
        author_id: UUID,
        title: str,
        content: str,
        image: UploadFile | None = None,
    ) -> PostWithAuthor:
        """
        Create a post owned by ``author_id``.

        The image is stored as a blob and the post keeps its filename.

        Returns:
            PostWithAuthor: The new post joined with its author's username
        """
        filename = await self.images.store(image) if image else None
        try:
            db_post = await self.post_repo.create(
                author_id=author_id,
                title=title,
                content=content,
                image=filename,
            )
            await self.post_repo.commit()
        except Exception:
            await self.cleaner.discard([BlobRef(POST_IMAGES, filename) if filename else None])
            raise

        logger.info("Post created", post_id=str(db_post.id), author_id=str(author_id))
        return await self._joined(db_post.id)

    async def list_posts(self) -> list[PostWithAuthor]:
        return await self.post_repo.list_with_authors()

    async def list_by_author(self, author_id: UUID) -> list[PostWithAuthor]:
        return await self.post_repo.list_with_authors(author_id=author_id)

    async def list_by_username(self, username: str) -> list[PostWithAuthor]:
        """
        List the posts of the account called ``username``.

        Raises:
            UserNotFoundError: If no account has this username
        """
        if not (db_user := await self.user_repo.get_by_username(username)):
            raise UserNotFoundError
        return await self.post_repo.list_with_authors(author_id=db_user.uuid)

    async def get_post(self, post_id: UUID) -> PostDetail:
        """
        Get one post with its author and likers.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        row = await self._joined(post_id)
        likers = await self.post_repo.get_likers(post_id)
        return PostDetail(post=row.post, author_username=row.author_username, likers=likers)

    async def edit_post(
        self,
        post_id: UUID,
        author_id: UUID,
        title: str,
        content: str,
        image: UploadFile | None = None,
    ) -> PostWithAuthor:
        """
        Edit a post owned by ``author_id``.

        The image is replaced only when a new one is supplied; the old blob
        is discarded after the change is committed.

        Raises:
            PostNotFoundError: If no post has this ID and author
        """
        if not (db_post := await self.post_repo.get_owned(post_id, author_id)):
            raise PostNotFoundError

        old_image = BlobRef.post_image(db_post) if image else None
        filename = await self.images.store(image) if image else None
        try:
            await self.post_repo.update(db_post, title=title, content=content, image=filename)
            await self.post_repo.commit()
        except Exception:
            await self.cleaner.discard([BlobRef(POST_IMAGES, filename) if filename else None])
            raise

        await self.cleaner.discard([old_image])
        return await self._joined(post_id)

    async def like_post(self, post_id: UUID, liker_id: UUID) -> PostDB:
        """
        Like a post once per account.

        Raises:
            PostNotFoundError: If the post does not exist
            AlreadyLikedError: If ``liker_id`` already liked it
        """
        if not (db_post := await self.post_repo.get_by_id(post_id)):
            raise PostNotFoundError
        if await self.post_repo.has_liked(post_id, liker_id):
            raise AlreadyLikedError

        db_post = await self.post_repo.add_like(db_post, liker_id)
        await self.post_repo.commit()
        return db_post

    async def delete_post(self, post_id: UUID, author_id: UUID) -> None:
        """
        Delete a post owned by ``author_id``.

        Raises:
            PostNotFoundError: If no post has this ID and author
        """
        if not (db_post := await self.post_repo.get_owned(post_id, author_id)):
            raise PostNotFoundError
        await self.remove_post(db_post)

    async def remove_post(self, db_post: PostDB) -> None:
        """Discard the post's image (best-effort), then delete and commit the record."""
        await self.cleaner.discard([BlobRef.post_image(db_post)])
        await self.post_repo.delete(db_post)
        await self.post_repo.commit()
        logger.info("Post deleted", post_id=str(db_post.id))
