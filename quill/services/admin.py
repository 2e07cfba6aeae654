"""
Administrative cleanup service.

Privileged deletions that skip ownership checks. They reuse the same
cascades as the self-service paths so every deletion follows one policy.
"""

from uuid import UUID

from quill.errors import PostNotFoundError
from quill.monitoring import get_logger
from quill.services.account import AccountService
from quill.services.post import PostService

logger = get_logger(__name__)


class AdminService:
    def __init__(self, accounts: AccountService, posts: PostService) -> None:
        self.accounts = accounts
        self.posts = posts

    async def delete_account(self, user_id: UUID, admin_id: UUID) -> None:
        """
        Delete any account with its posts, likes and blobs.

        Raises:
            UserNotFoundError: If the account does not exist
        """
        await self.accounts.delete_account(user_id)
        logger.info("Admin deleted account", user_id=str(user_id), admin_id=str(admin_id))

    async def delete_post(self, post_id: UUID, admin_id: UUID) -> None:
        """
        Delete any post regardless of its author.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        if not (db_post := await self.posts.post_repo.get_by_id(post_id)):
            raise PostNotFoundError
        await self.posts.remove_post(db_post)
        logger.info("Admin deleted post", post_id=str(post_id), admin_id=str(admin_id))
