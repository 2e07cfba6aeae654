# quill/routes/post.py

"""
Post Routes.

Blog post endpoints: creation with an image, listing, editing, likes and
owner deletion.

Summary
-------
Endpoints include:
  - Create a post (multipart, image required)
  - List all posts, posts by author id and posts by username
  - Get a single post with its likers
  - Edit a post, optionally replacing its image
  - Like a post once per account
  - Delete an owned post and its image

Dependencies
------------
  - `PostServiceDep`: Post lifecycle service bound to the request session.
  - `CurrentUserDep`: Account resolved from the bearer token; required for
    every write.

Reads are public.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from quill.configs import POST_IMAGES
from quill.decorators.metrics import timed
from quill.dependencies import CurrentUserDep, PostServiceDep
from quill.managers.rate_limiter import limiter
from quill.repositories import PostWithAuthor
from quill.schemas import (
    AuthorSummary,
    BlobReference,
    LikeResponse,
    MessageResponse,
    PostDetailResponse,
    PostMessageResponse,
    PostResponse,
)
from quill.schemas.post import TITLE_MAX_LENGTH
from quill.services import PostDetail

router = APIRouter(prefix="/posts", tags=["📝 Posts"])

NOT_FOUND_RESPONSE = {
    "description": "Post not found",
    "content": {"application/json": {"example": {"detail": "Post not found"}}},
}
UNAUTHORIZED_RESPONSE = {
    "description": "Missing or invalid token",
    "content": {"application/json": {"example": {"detail": "Could not validate credentials"}}},
}


def post_to_response(row: PostWithAuthor) -> PostResponse:
    """
    Convert a post joined with its author to `PostResponse`.

    Parameters
    ----------
    row : PostWithAuthor
        Post record and its author's username.

    Returns
    -------
    PostResponse
        Response model with the image as a blob reference.
    """
    post = row.post
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        image=BlobReference.of(POST_IMAGES, post.image),
        author=AuthorSummary(id=post.author_id, username=row.author_username),
        likes_count=post.likes_count,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def detail_to_response(detail: PostDetail) -> PostDetailResponse:
    base = post_to_response(PostWithAuthor(detail.post, detail.author_username))
    return PostDetailResponse(
        **base.model_dump(),
        likes=[AuthorSummary(id=liker.user_id, username=liker.username) for liker in detail.likers],
    )


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=PostMessageResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a post",
    description="Create a post from multipart form data; the image is required.",
    responses={
        401: UNAUTHORIZED_RESPONSE,
        413: {"description": "Image too large"},
        415: {"description": "Unsupported image type"},
        429: {"description": "Rate limit exceeded"},
    },
    operation_id="posts_create",
)
@timed("/posts/create")
@limiter.limit("30/hour")
async def create_post(
    request: Request,
    response: Response,
    title: Annotated[str, Form(min_length=1, max_length=TITLE_MAX_LENGTH)],
    content: Annotated[str, Form(min_length=1)],
    image: Annotated[UploadFile, File()],
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> PostMessageResponse:
    """
    Create a post authored by the current account.

    Parameters
    ----------
    request : Request
        Current request context (used by the rate limiter).
    response : Response
        Response object for middleware/decorators.
    title : str
        Post title.
    content : str
        Post body.
    image : UploadFile
        Post image (JPEG, PNG or WebP).
    current_user : UserDB
        Authenticated author.
    service : PostService
        Post lifecycle service.

    Returns
    -------
    PostMessageResponse
        Confirmation message and the created post.
    """
    row = await service.create_post(
        author_id=current_user.uuid,
        title=title,
        content=content,
        image=image,
    )
    return PostMessageResponse(message="Post created successfully", post=post_to_response(row))


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[PostResponse],
    summary="List posts",
    description="List every post, newest first, with each author's username.",
    operation_id="posts_list",
)
@timed("/posts")
async def list_posts(service: PostServiceDep) -> list[PostResponse]:
    return [post_to_response(row) for row in await service.list_posts()]


@router.get(
    "/user/{user_id}",
    response_class=ORJSONResponse,
    response_model=list[PostResponse],
    summary="List posts by author id",
    operation_id="posts_list_by_author",
)
@timed("/posts/user/{user_id}")
async def list_posts_by_author(user_id: UUID, service: PostServiceDep) -> list[PostResponse]:
    """
    List the posts of one author.

    An unknown author yields an empty list.

    Parameters
    ----------
    user_id : UUID
        Author identifier.
    service : PostService
        Post lifecycle service.

    Returns
    -------
    list[PostResponse]
        The author's posts, newest first.
    """
    return [post_to_response(row) for row in await service.list_by_author(user_id)]


@router.get(
    "/by/{username}",
    response_class=ORJSONResponse,
    response_model=list[PostResponse],
    summary="List posts by username",
    responses={
        404: {
            "description": "User not found",
            "content": {"application/json": {"example": {"detail": "User not found"}}},
        },
    },
    operation_id="posts_list_by_username",
)
@timed("/posts/by/{username}")
async def list_posts_by_username(username: str, service: PostServiceDep) -> list[PostResponse]:
    """
    List the posts of the account called `username`.

    Parameters
    ----------
    username : str
        Author's username.
    service : PostService
        Post lifecycle service.

    Returns
    -------
    list[PostResponse]
        The author's posts, newest first.
    """
    return [post_to_response(row) for row in await service.list_by_username(username)]


@router.get(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostDetailResponse,
    summary="Get a post",
    responses={404: NOT_FOUND_RESPONSE},
    operation_id="posts_get",
)
@timed("/posts/{post_id}")
async def get_post(post_id: UUID, service: PostServiceDep) -> PostDetailResponse:
    """
    Get a post with its author and the accounts that liked it.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    service : PostService
        Post lifecycle service.

    Returns
    -------
    PostDetailResponse
        The post, its author and its likers.
    """
    return detail_to_response(await service.get_post(post_id))


@router.patch(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=PostMessageResponse,
    summary="Edit a post",
    description="Replace title and content; the image is replaced only when one is sent.",
    responses={401: UNAUTHORIZED_RESPONSE, 404: NOT_FOUND_RESPONSE},
    operation_id="posts_edit",
)
@timed("/posts/{post_id}/edit")
async def edit_post(
    post_id: UUID,
    title: Annotated[str, Form(min_length=1, max_length=TITLE_MAX_LENGTH)],
    content: Annotated[str, Form(min_length=1)],
    current_user: CurrentUserDep,
    service: PostServiceDep,
    image: Annotated[UploadFile | None, File()] = None,
) -> PostMessageResponse:
    """
    Edit a post owned by the current account.

    A post owned by someone else is reported as not found.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    title : str
        New title.
    content : str
        New body.
    current_user : UserDB
        Authenticated author.
    service : PostService
        Post lifecycle service.
    image : UploadFile | None
        Replacement image; the current one is kept when omitted.

    Returns
    -------
    PostMessageResponse
        Confirmation message and the updated post.
    """
    row = await service.edit_post(
        post_id=post_id,
        author_id=current_user.uuid,
        title=title,
        content=content,
        image=image,
    )
    return PostMessageResponse(message="Post updated successfully", post=post_to_response(row))


@router.post(
    "/{post_id}/like",
    response_class=ORJSONResponse,
    response_model=LikeResponse,
    summary="Like a post",
    responses={
        400: {
            "description": "Already liked",
            "content": {
                "application/json": {"example": {"detail": "You have already liked this post"}},
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="posts_like",
)
@timed("/posts/{post_id}/like")
async def like_post(
    post_id: UUID,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> LikeResponse:
    """
    Record a like from the current account.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    current_user : UserDB
        Authenticated account giving the like.
    service : PostService
        Post lifecycle service.

    Returns
    -------
    LikeResponse
        Confirmation message and the new like count.
    """
    db_post = await service.like_post(post_id, current_user.uuid)
    return LikeResponse(post_id=db_post.id, likes_count=db_post.likes_count)


@router.delete(
    "/{post_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete a post",
    responses={401: UNAUTHORIZED_RESPONSE, 404: NOT_FOUND_RESPONSE},
    operation_id="posts_delete",
)
@timed("/posts/{post_id}/delete")
async def delete_post(
    post_id: UUID,
    current_user: CurrentUserDep,
    service: PostServiceDep,
) -> MessageResponse:
    """
    Delete a post owned by the current account, along with its image.

    Parameters
    ----------
    post_id : UUID
        Post identifier.
    current_user : UserDB
        Authenticated author.
    service : PostService
        Post lifecycle service.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    await service.delete_post(post_id, current_user.uuid)
    return MessageResponse(message="Post deleted successfully")
