from quill.routes.admin import router as admin_router
from quill.routes.post import router as post_router
from quill.routes.user import router as user_router

__all__ = ["admin_router", "post_router", "user_router"]
