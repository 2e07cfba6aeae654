"""
Image upload service.

Validates uploaded images, normalises them with Pillow and hands the
result to the blob store.
"""

from asyncio import to_thread
from io import BytesIO

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from quill.configs.settings import settings
from quill.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    UnsupportedImageTypeError,
)
from quill.services.storage import BlobStore, get_storage_service

_BYTES_PER_MB = 1024 * 1024


class ImageService:
    """
    Service for storing one kind of uploaded image.

    Each instance writes to a single blob store folder and resizes images
    to that folder's maximum dimension.
    """

    def __init__(
        self,
        folder: str,
        max_dimension: int,
        storage: BlobStore | None = None,
    ) -> None:
        """
        Initialize the image service.

        Args:
            folder: Blob store folder the images are written to
            max_dimension: Longest allowed side in pixels
            storage: Optional blob store instance. If not provided,
                    the default blob store will be used.
        """
        self.folder = folder
        self.max_dimension = max_dimension
        self.storage = storage or get_storage_service()
        self.max_size_bytes = settings.IMAGE_MAX_SIZE_MB * _BYTES_PER_MB
        self.quality = settings.IMAGE_QUALITY
        self.allowed_types = settings.IMAGE_ALLOWED_TYPES

    def validate_content_type(self, content_type: str | None) -> None:
        """
        Validate the content type of the uploaded file.

        Raises:
            UnsupportedImageTypeError: If content type is not allowed
        """
        if not content_type or content_type not in self.allowed_types:
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.allowed_types,
            )

    def validate_file_size(self, file_data: bytes) -> None:
        """
        Validate the size of the uploaded file.

        Raises:
            ImageTooLargeError: If file exceeds maximum size
        """
        actual_size = len(file_data)
        if actual_size > self.max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.IMAGE_MAX_SIZE_MB,
                actual_size_mb=actual_size / _BYTES_PER_MB,
            )

    def validate_image_content(self, file_data: bytes) -> Image.Image:
        """
        Validate that the file is a decodable image.

        Raises:
            InvalidImageError: If file is not a valid image
        """
        try:
            img = Image.open(BytesIO(file_data))
            img.verify()
            # verify() leaves the image unusable, so open it again
            return Image.open(BytesIO(file_data))
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e

    def process_image(self, img: Image.Image) -> tuple[bytes, str]:
        """
        Resize to the folder's maximum dimension and re-encode as JPEG.

        Returns:
            tuple[bytes, str]: Processed image bytes and content type

        Raises:
            ImageProcessingError: If Pillow cannot re-encode the image
        """
        try:
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            if img.width > self.max_dimension or img.height > self.max_dimension:
                img.thumbnail((self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS)

            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=self.quality, optimize=True)
            return buffer.getvalue(), "image/jpeg"
        except (OSError, ValueError) as e:
            mssg = f"Failed to process image: {e!s}"
            raise ImageProcessingError(mssg) from e

    async def store(self, file: UploadFile) -> str:
        """
        Validate, process and store an uploaded image.

        Args:
            file: Uploaded file from FastAPI

        Returns:
            str: Filename of the stored blob

        Raises:
            UnsupportedImageTypeError: If file type is not allowed
            ImageTooLargeError: If file is too large
            InvalidImageError: If file is not a valid image
            ImageProcessingError: If processing fails
            StorageError: If the blob store cannot write the file
        """
        self.validate_content_type(file.content_type)
        file_data = await file.read()
        self.validate_file_size(file_data)
        img = await to_thread(self.validate_image_content, file_data)
        processed_data, content_type = await to_thread(self.process_image, img)
        return await self.storage.save(self.folder, processed_data, content_type)
