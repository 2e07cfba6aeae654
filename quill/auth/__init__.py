from quill.auth.permissions import AdminUserDep, check_owner_or_admin, require_admin

__all__ = ["AdminUserDep", "check_owner_or_admin", "require_admin"]
