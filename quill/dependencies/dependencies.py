# quill/dependencies/dependencies.py

"""Application dependencies: sessions, repositories, services and the current user."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from quill.db import get_session
from quill.errors import InvalidTokenError
from quill.managers.token_manager import decode_access_token
from quill.models import UserDB
from quill.repositories import PostRepository, UserRepository
from quill.services import AccountService, AdminService, PostService
from quill.services.storage import BlobStore, get_storage_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/users/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
StorageDep = Annotated[BlobStore, Depends(get_storage_service)]


def get_user_repository(session: SessionDep) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session for the current request.

    Returns
    -------
    UserRepository
        Repository bound to the session.
    """
    return UserRepository(session)


def get_post_repository(session: SessionDep) -> PostRepository:
    """
    Resolve the `PostRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session for the current request.

    Returns
    -------
    PostRepository
        Repository bound to the session.
    """
    return PostRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


def get_account_service(
    user_repo: UserRepoDep,
    post_repo: PostRepoDep,
    storage: StorageDep,
) -> AccountService:
    return AccountService(user_repo, post_repo, storage=storage)


def get_post_service(
    post_repo: PostRepoDep,
    user_repo: UserRepoDep,
    storage: StorageDep,
) -> PostService:
    return PostService(post_repo, user_repo, storage=storage)


AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]


def get_admin_service(accounts: AccountServiceDep, posts: PostServiceDep) -> AdminService:
    return AdminService(accounts, posts)


AdminServiceDep = Annotated[AdminService, Depends(get_admin_service)]


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    repo: UserRepoDep,
) -> UserDB:
    """
    Get the account the bearer token was issued for.

    Parameters
    ----------
    token : str | None
        Bearer token, ``None`` when the header is missing.
    repo : UserRepository
        Repository used to load the account.

    Returns
    -------
    UserDB
        Current authenticated account.

    Raises
    ------
    InvalidTokenError
        If the token is missing or invalid, or its account no longer exists.
    """
    if not token or not (token_data := decode_access_token(token)):
        raise InvalidTokenError

    if not (user := await repo.get_by_id(token_data.user_id)):
        raise InvalidTokenError

    return user


CurrentUserDep = Annotated[UserDB, Depends(get_current_user)]
