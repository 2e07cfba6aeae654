# quill/routes/user.py

"""
User Routes.

Registration, login and account management endpoints.

Summary
-------
Endpoints include:
  - Register an account (multipart, optional profile picture)
  - Log in and receive a session token
  - List accounts and get one account
  - Change username, password or profile picture
  - Delete an account together with its posts and images

Dependencies
------------
  - `AccountServiceDep`: Account lifecycle service bound to the request session.
  - `CurrentUserDep`: Account resolved from the bearer token.

Rate Limiting
-------------
Registration and login are rate limited per client; other endpoints rely on
the limiter's default limits.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from quill.auth.permissions import check_owner_or_admin
from quill.configs import PROFILE_PICTURES
from quill.decorators.metrics import timed
from quill.dependencies import AccountServiceDep, CurrentUserDep
from quill.managers.rate_limiter import limiter
from quill.models import Role, UserDB
from quill.schemas import (
    BlobReference,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PasswordUpdate,
    RegisterResponse,
    UsernameUpdate,
    UserMessageResponse,
    UserResponse,
)
from quill.schemas.user import USERNAME_PATTERN

router = APIRouter(prefix="/users", tags=["👤 Users"])

NOT_FOUND_RESPONSE = {
    "description": "User not found",
    "content": {"application/json": {"example": {"detail": "User not found"}}},
}
FORBIDDEN_RESPONSE = {
    "description": "Forbidden",
    "content": {
        "application/json": {"example": {"detail": "You can only modify your own account"}},
    },
}


def db_user_to_response(db_user: UserDB) -> UserResponse:
    """
    Convert a `UserDB` instance to `UserResponse`.

    Parameters
    ----------
    db_user : UserDB
        Database user entity.

    Returns
    -------
    UserResponse
        Public view without the password hash.
    """
    return UserResponse(
        id=db_user.uuid,
        username=db_user.username,
        profile_picture=BlobReference.of(PROFILE_PICTURES, db_user.profile_picture),
        role=db_user.role,
        created_at=db_user.created_at,
        updated_at=db_user.updated_at,
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=RegisterResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new account",
    description="Create an account from multipart form data with an optional profile picture.",
    responses={
        400: {
            "description": "Username taken",
            "content": {"application/json": {"example": {"detail": "Username is already taken"}}},
        },
        403: {
            "description": "Administrator self-registration disabled",
            "content": {
                "application/json": {
                    "example": {"detail": "Administrator accounts cannot be self-registered"},
                },
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="users_register",
)
@timed("/users/register")
@limiter.limit("10/hour")
async def register(
    request: Request,
    response: Response,
    username: Annotated[str, Form(min_length=3, max_length=50, pattern=USERNAME_PATTERN)],
    password: Annotated[str, Form(min_length=1, max_length=128)],
    service: AccountServiceDep,
    role: Annotated[Role, Form()] = Role.STANDARD,
    profile_picture: Annotated[UploadFile | None, File(alias="profilePicture")] = None,
) -> RegisterResponse:
    """
    Register a new account.

    Parameters
    ----------
    request : Request
        Current request context (used by the rate limiter).
    response : Response
        Response object for middleware/decorators.
    username : str
        Unique username.
    password : str
        Plaintext password; only its hash is stored.
    service : AccountService
        Account lifecycle service.
    role : Role
        Requested role, ``standard`` by default.
    profile_picture : UploadFile | None
        Optional profile picture.

    Returns
    -------
    RegisterResponse
        Confirmation message and the created account.
    """
    db_user = await service.register(
        username=username,
        password=password,
        role=role,
        profile_picture=profile_picture,
    )
    return RegisterResponse(user=db_user_to_response(db_user))


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=LoginResponse,
    summary="Log in",
    description="Verify credentials and issue a session token.",
    responses={
        401: {
            "description": "Invalid credentials",
            "content": {
                "application/json": {"example": {"detail": "Invalid username or password"}},
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="users_login",
)
@timed("/users/login")
@limiter.limit("10/minute")
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    service: AccountServiceDep,
) -> LoginResponse:
    """
    Authenticate and return a session token with the account id and role.

    Parameters
    ----------
    request : Request
        Current request context (used by the rate limiter).
    response : Response
        Response object for middleware/decorators.
    credentials : LoginRequest
        Username and password.
    service : AccountService
        Account lifecycle service.

    Returns
    -------
    LoginResponse
        Token, account id and role.
    """
    return await service.authenticate(
        credentials.username,
        credentials.password.get_secret_value(),
    )


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[UserResponse],
    summary="List accounts",
    responses={
        404: {
            "description": "No accounts",
            "content": {"application/json": {"example": {"detail": "No users found"}}},
        },
    },
    operation_id="users_list",
)
@timed("/users")
async def list_users(
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> list[UserResponse]:
    """
    List every account.

    Returns
    -------
    list[UserResponse]
        All accounts without password hashes.
    """
    return [db_user_to_response(db_user) for db_user in await service.list_accounts()]


@router.get(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserResponse,
    summary="Get an account",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="users_get",
)
@timed("/users/{user_id}")
async def get_user(
    user_id: UUID,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> UserResponse:
    """
    Get an account by ID.

    Parameters
    ----------
    user_id : UUID
        Account identifier.
    current_user : UserDB
        Authenticated account.
    service : AccountService
        Account lifecycle service.

    Returns
    -------
    UserResponse
        The account without its password hash.
    """
    return db_user_to_response(await service.get_account(user_id))


@router.patch(
    "/{user_id}/username",
    response_class=ORJSONResponse,
    response_model=UserMessageResponse,
    summary="Change username",
    responses={
        400: {
            "description": "Username taken",
            "content": {"application/json": {"example": {"detail": "Username is already taken"}}},
        },
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="users_change_username",
)
@timed("/users/{user_id}/username")
async def change_username(
    user_id: UUID,
    payload: UsernameUpdate,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> UserMessageResponse:
    """
    Rename an account.

    Parameters
    ----------
    user_id : UUID
        Account identifier.
    payload : UsernameUpdate
        New username.
    current_user : UserDB
        Authenticated account; must own the account or be an administrator.
    service : AccountService
        Account lifecycle service.

    Returns
    -------
    UserMessageResponse
        Confirmation message and the updated account.
    """
    check_owner_or_admin(user_id, current_user)
    db_user = await service.change_username(user_id, payload.username)
    return UserMessageResponse(
        message="Username updated successfully",
        user=db_user_to_response(db_user),
    )


@router.patch(
    "/{user_id}/password",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Change password",
    responses={
        401: {
            "description": "Wrong current password",
            "content": {"application/json": {"example": {"detail": "Invalid current password"}}},
        },
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="users_change_password",
)
@timed("/users/{user_id}/password")
async def change_password(
    user_id: UUID,
    payload: PasswordUpdate,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    """
    Replace the account password after checking the current one.

    Parameters
    ----------
    user_id : UUID
        Account identifier.
    payload : PasswordUpdate
        Current and new password.
    current_user : UserDB
        Authenticated account; must own the account or be an administrator.
    service : AccountService
        Account lifecycle service.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    check_owner_or_admin(user_id, current_user)
    await service.change_password(
        user_id,
        payload.current_password.get_secret_value(),
        payload.new_password.get_secret_value(),
    )
    return MessageResponse(message="Password updated successfully")


@router.patch(
    "/{user_id}/picture",
    response_class=ORJSONResponse,
    response_model=UserMessageResponse,
    summary="Change profile picture",
    responses={
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        413: {"description": "Image too large"},
        415: {"description": "Unsupported image type"},
    },
    operation_id="users_change_picture",
)
@timed("/users/{user_id}/picture")
async def change_profile_picture(
    user_id: UUID,
    profile_picture: Annotated[UploadFile, File(alias="profilePicture")],
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> UserMessageResponse:
    """
    Upload a new profile picture; the previous one is removed.

    Parameters
    ----------
    user_id : UUID
        Account identifier.
    profile_picture : UploadFile
        New image (JPEG, PNG or WebP).
    current_user : UserDB
        Authenticated account; must own the account or be an administrator.
    service : AccountService
        Account lifecycle service.

    Returns
    -------
    UserMessageResponse
        Confirmation message and the updated account.
    """
    check_owner_or_admin(user_id, current_user)
    db_user = await service.change_profile_picture(user_id, profile_picture)
    return UserMessageResponse(
        message="Profile picture updated successfully",
        user=db_user_to_response(db_user),
    )


@router.delete(
    "/{user_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete an account",
    description="Delete the account, its posts, its likes and their images.",
    responses={403: FORBIDDEN_RESPONSE, 404: NOT_FOUND_RESPONSE},
    operation_id="users_delete",
)
@timed("/users/{user_id}/delete")
async def delete_account(
    user_id: UUID,
    current_user: CurrentUserDep,
    service: AccountServiceDep,
) -> MessageResponse:
    """
    Delete an account with everything it owns.

    Parameters
    ----------
    user_id : UUID
        Account identifier.
    current_user : UserDB
        Authenticated account; must own the account or be an administrator.
    service : AccountService
        Account lifecycle service.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    check_owner_or_admin(user_id, current_user)
    await service.delete_account(user_id)
    return MessageResponse(message="Account deleted successfully")
