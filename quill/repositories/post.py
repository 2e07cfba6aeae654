"""Post repository for database operations."""

from datetime import UTC, datetime
from typing import NamedTuple, cast
from uuid import UUID

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.expression import ColumnElement

from quill.errors.database import AlreadyLikedError
from quill.models.post import PostDB, PostLikeDB
from quill.models.user import UserDB
from quill.repositories.base import BaseRepository


class PostWithAuthor(NamedTuple):
    """A post row joined with its author's username."""

    post: PostDB
    author_username: str | None


class Liker(NamedTuple):
    user_id: UUID
    username: str


def _eq(left: object, right: object) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], left == right)


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for posts and their likes.

    Every method that changes ``post_likes`` adjusts ``likes_count`` with a
    single SQL statement in the same transaction, so the counter always
    equals the number of like rows.
    """

    model = PostDB
    duplicate_error = AlreadyLikedError

    def _with_author(self):  # noqa: ANN202
        return (
            select(PostDB, UserDB.username)
            .outerjoin(UserDB, _eq(UserDB.uuid, PostDB.author_id))
            .order_by(desc(PostDB.created_at))  # type: ignore[arg-type]
        )

    async def create(
        self,
        author_id: UUID,
        title: str,
        content: str,
        image: str | None = None,
    ) -> PostDB:
        db_post = PostDB(author_id=author_id, title=title, content=content, image=image)
        return await self._add_and_refresh(db_post)

    async def get_owned(self, post_id: UUID, author_id: UUID) -> PostDB | None:
        """Return the post only when ``author_id`` wrote it."""
        result = await self.session.execute(
            select(PostDB).where(_eq(PostDB.id, post_id), _eq(PostDB.author_id, author_id)),
        )
        return result.scalar_one_or_none()

    async def get_with_author(self, post_id: UUID) -> PostWithAuthor | None:
        result = await self.session.execute(self._with_author().where(_eq(PostDB.id, post_id)))
        row = result.first()
        return PostWithAuthor(*row) if row else None

    async def list_with_authors(self, author_id: UUID | None = None) -> list[PostWithAuthor]:
        """
        List posts, newest first, each joined with its author's username.

        Args:
            author_id: Restrict the listing to one author when given

        Returns:
            list[PostWithAuthor]: Matching posts
        """
        statement = self._with_author()
        if author_id is not None:
            statement = statement.where(_eq(PostDB.author_id, author_id))
        result = await self.session.execute(statement)
        return [PostWithAuthor(*row) for row in result.all()]

    async def list_by_author(self, author_id: UUID) -> list[PostDB]:
        result = await self.session.execute(select(PostDB).where(_eq(PostDB.author_id, author_id)))
        return list(result.scalars().all())

    async def update(
        self,
        db_post: PostDB,
        title: str,
        content: str,
        image: str | None = None,
    ) -> PostDB:
        """Replace title and content, and the image only when one is given."""
        db_post.title = title
        db_post.content = content
        if image is not None:
            db_post.image = image
        db_post.updated_at = datetime.now(tz=UTC)
        await self.session.flush()
        await self.session.refresh(db_post)
        return db_post

    async def has_liked(self, post_id: UUID, user_id: UUID) -> bool:
        result = await self.session.execute(
            select(PostLikeDB.id)
            .where(_eq(PostLikeDB.post_id, post_id), _eq(PostLikeDB.user_id, user_id))
            .limit(1),
        )
        return result.scalar_one_or_none() is not None

    async def add_like(self, db_post: PostDB, user_id: UUID) -> PostDB:
        """
        Record a like and bump the counter by exactly one.

        Raises:
            AlreadyLikedError: If the account already liked the post, including
                when a concurrent request inserted the like first
        """
        try:
            self.session.add(PostLikeDB(post_id=db_post.id, user_id=user_id))
            await self.session.flush()
            await self.session.execute(
                update(PostDB)
                .where(_eq(PostDB.id, db_post.id))
                .values(likes_count=PostDB.likes_count + 1)
                .execution_options(synchronize_session=False),
            )
        except IntegrityError as e:
            await self.session.rollback()
            self._raise_integrity_error(e)
        await self.session.refresh(db_post)
        return db_post

    async def get_likers(self, post_id: UUID) -> list[Liker]:
        result = await self.session.execute(
            select(UserDB.uuid, UserDB.username)
            .join(PostLikeDB, _eq(PostLikeDB.user_id, UserDB.uuid))
            .where(_eq(PostLikeDB.post_id, post_id))
            .order_by(PostLikeDB.created_at),  # type: ignore[arg-type]
        )
        return [Liker(*row) for row in result.all()]

    async def count_likes(self, post_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(PostLikeDB).where(_eq(PostLikeDB.post_id, post_id)),
        )
        return result.scalar() or 0

    async def delete(self, record: PostDB) -> None:
        """Delete a post together with its like rows."""
        await self.session.execute(
            delete(PostLikeDB)
            .where(_eq(PostLikeDB.post_id, record.id))
            .execution_options(synchronize_session=False),
        )
        await super().delete(record)

    async def delete_by_author(self, author_id: UUID) -> int:
        """
        Bulk delete every post written by ``author_id`` and their likes.

        Returns:
            int: Number of posts removed
        """
        authored = select(PostDB.id).where(_eq(PostDB.author_id, author_id))
        await self.session.execute(
            delete(PostLikeDB)
            .where(PostLikeDB.post_id.in_(authored))  # type: ignore[attr-defined]
            .execution_options(synchronize_session=False),
        )
        result = await self.session.execute(
            delete(PostDB)
            .where(_eq(PostDB.author_id, author_id))
            .execution_options(synchronize_session=False),
        )
        return result.rowcount or 0  # type: ignore[attr-defined]

    async def remove_likes_by_user(self, user_id: UUID) -> None:
        """
        Withdraw every like given by ``user_id``.

        Each affected post loses exactly one from its counter, keeping it
        equal to the number of remaining like rows.
        """
        liked = select(PostLikeDB.post_id).where(_eq(PostLikeDB.user_id, user_id))
        await self.session.execute(
            update(PostDB)
            .where(PostDB.id.in_(liked))  # type: ignore[attr-defined]
            .values(likes_count=PostDB.likes_count - 1)
            .execution_options(synchronize_session=False),
        )
        await self.session.execute(
            delete(PostLikeDB)
            .where(_eq(PostLikeDB.user_id, user_id))
            .execution_options(synchronize_session=False),
        )
