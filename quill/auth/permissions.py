"""Role-based access control dependencies."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends

from quill.dependencies.dependencies import get_current_user
from quill.errors import ForbiddenError
from quill.models import UserDB


def check_owner_or_admin(target_id: UUID, current_user: UserDB) -> None:
    """
    Allow an action on ``target_id`` only for that account or an administrator.

    Raises:
        ForbiddenError: If the current account is neither
    """
    if current_user.uuid != target_id and not current_user.is_admin:
        raise ForbiddenError(detail="You can only modify your own account")


async def require_admin(
    user: Annotated[UserDB, Depends(get_current_user)],
) -> UserDB:
    """
    Dependency that requires the administrator role.

    Parameters
    ----------
    user : UserDB
        Current authenticated user.

    Returns
    -------
    UserDB
        The user if they are an administrator.

    Raises
    ------
    ForbiddenError
        If user is not an administrator.
    """
    if not user.is_admin:
        raise ForbiddenError(detail="Admin access required")
    return user


AdminUserDep = Annotated[UserDB, Depends(require_admin)]
