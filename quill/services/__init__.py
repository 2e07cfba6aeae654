from quill.services.account import AccountService
from quill.services.admin import AdminService
from quill.services.cleanup import BlobCleaner, BlobRef
from quill.services.images import ImageService
from quill.services.post import PostDetail, PostService

__all__ = [
    "AccountService",
    "AdminService",
    "BlobCleaner",
    "BlobRef",
    "ImageService",
    "PostDetail",
    "PostService",
]
