"""
Admin Routes.

Endpoints for administrative cleanup requiring the administrator role.
Deletions here skip ownership checks but follow the same cascade as the
self-service paths.
"""

from uuid import UUID

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse

from quill.auth.permissions import AdminUserDep
from quill.decorators.metrics import timed
from quill.dependencies import AdminServiceDep
from quill.schemas import MessageResponse

router = APIRouter(prefix="/admin", tags=["👑 Admin"])

FORBIDDEN_RESPONSE = {
    "description": "Forbidden",
    "content": {"application/json": {"example": {"detail": "Admin access required"}}},
}


@router.delete(
    "/users/{user_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete any account (admin only)",
    description="Delete an account with its posts, likes and images. Admin access required.",
    responses={
        403: FORBIDDEN_RESPONSE,
        404: {
            "description": "User not found",
            "content": {"application/json": {"example": {"detail": "User not found"}}},
        },
    },
    operation_id="admin_delete_user",
)
@timed("/admin/users/{user_id}/delete")
async def delete_user_account(
    user_id: UUID,
    admin_user: AdminUserDep,
    service: AdminServiceDep,
) -> MessageResponse:
    """
    Delete any account.

    Parameters
    ----------
    user_id : UUID
        Account identifier.
    admin_user : UserDB
        Authenticated administrator.
    service : AdminService
        Administrative cleanup service.

    Returns
    -------
    MessageResponse
        Confirmation message.

    Examples
    --------
    Request
        DELETE /admin/users/123e4567-e89b-12d3-a456-426614174000
    Response
        200 OK
        {"message": "User account deleted successfully"}
    """
    await service.delete_account(user_id, admin_id=admin_user.uuid)
    return MessageResponse(message="User account deleted successfully")


@router.delete(
    "/posts/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete any post (admin only)",
    responses={
        403: FORBIDDEN_RESPONSE,
        404: {
            "description": "Post not found",
            "content": {"application/json": {"example": {"detail": "Post not found"}}},
        },
    },
    operation_id="admin_delete_post",
)
@timed("/admin/posts/{post_id}/delete")
async def delete_any_post(
    post_id: UUID,
    admin_user: AdminUserDep,
    service: AdminServiceDep,
) -> MessageResponse:
    """
    Delete any post and its image regardless of author.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    admin_user : UserDB
        Authenticated administrator.
    service : AdminService
        Administrative cleanup service.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    await service.delete_post(post_id, admin_id=admin_user.uuid)
    return MessageResponse(message="Post deleted successfully")
