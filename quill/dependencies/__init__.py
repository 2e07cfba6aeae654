from quill.dependencies.dependencies import (
    AccountServiceDep,
    AdminServiceDep,
    CurrentUserDep,
    PostRepoDep,
    PostServiceDep,
    SessionDep,
    StorageDep,
    UserRepoDep,
    get_account_service,
    get_admin_service,
    get_current_user,
    get_post_repository,
    get_post_service,
    get_user_repository,
    oauth2_scheme,
)

__all__ = [
    "AccountServiceDep",
    "AdminServiceDep",
    "CurrentUserDep",
    "PostRepoDep",
    "PostServiceDep",
    "SessionDep",
    "StorageDep",
    "UserRepoDep",
    "get_account_service",
    "get_admin_service",
    "get_current_user",
    "get_post_repository",
    "get_post_service",
    "get_user_repository",
    "oauth2_scheme",
]
