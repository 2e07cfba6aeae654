# tests/services/test_images.py
"""Tests for the image upload service."""

from collections.abc import Callable
from io import BytesIO
from pathlib import Path
from threading import get_ident

import pytest
from fastapi import UploadFile
from PIL import Image

from quill.configs import POST_IMAGES
from quill.errors import ImageTooLargeError, InvalidImageError, UnsupportedImageTypeError
from quill.services.images import ImageService
from quill.services.storage import LocalStorage


@pytest.fixture
def image_service(storage: LocalStorage) -> ImageService:
    return ImageService(folder=POST_IMAGES, max_dimension=100, storage=storage)


class TestValidation:
    def test_unsupported_type_rejected(self, image_service: ImageService) -> None:
        with pytest.raises(UnsupportedImageTypeError) as exc_info:
            image_service.validate_content_type("image/gif")
        assert exc_info.value.status_code == 415

    def test_missing_type_rejected(self, image_service: ImageService) -> None:
        with pytest.raises(UnsupportedImageTypeError):
            image_service.validate_content_type(None)

    def test_oversized_file_rejected(self, image_service: ImageService) -> None:
        image_service.max_size_bytes = 10
        with pytest.raises(ImageTooLargeError) as exc_info:
            image_service.validate_file_size(b"x" * 11)
        assert exc_info.value.status_code == 413

    def test_non_image_rejected(self, image_service: ImageService) -> None:
        with pytest.raises(InvalidImageError):
            image_service.validate_image_content(b"not a valid image content")


class TestProcessing:
    def test_large_image_is_downscaled(self, image_service: ImageService) -> None:
        data, content_type = image_service.process_image(Image.new("RGB", (400, 200)))

        assert content_type == "image/jpeg"
        with Image.open(BytesIO(data)) as result:
            assert max(result.size) == 100

    def test_transparent_image_converted(
        self,
        image_service: ImageService,
        valid_png_bytes: bytes,
    ) -> None:
        img = image_service.validate_image_content(valid_png_bytes)
        data, _ = image_service.process_image(img)
        with Image.open(BytesIO(data)) as result:
            assert result.format == "JPEG"


class TestStore:
    @pytest.mark.asyncio
    async def test_store_returns_filename(
        self,
        image_service: ImageService,
        make_upload: Callable[..., UploadFile],
        post_image_path: Callable[[str], Path],
    ) -> None:
        filename = await image_service.store(make_upload())
        assert post_image_path(filename).exists()

    @pytest.mark.asyncio
    async def test_invalid_upload_stores_nothing(
        self,
        image_service: ImageService,
        make_upload: Callable[..., UploadFile],
        storage: LocalStorage,
    ) -> None:
        with pytest.raises(InvalidImageError):
            await image_service.store(make_upload(data=b"garbage"))
        assert not (storage.uploads_dir / POST_IMAGES).exists()

    @pytest.mark.asyncio
    async def test_pillow_work_runs_off_the_event_loop(
        self,
        image_service: ImageService,
        make_upload: Callable[..., UploadFile],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        loop_thread = get_ident()
        seen: list[int] = []
        validate = image_service.validate_image_content
        process = image_service.process_image

        def tracked_validate(file_data: bytes) -> Image.Image:
            seen.append(get_ident())
            return validate(file_data)

        def tracked_process(img: Image.Image) -> tuple[bytes, str]:
            seen.append(get_ident())
            return process(img)

        monkeypatch.setattr(image_service, "validate_image_content", tracked_validate)
        monkeypatch.setattr(image_service, "process_image", tracked_process)

        await image_service.store(make_upload())

        assert len(seen) == 2
        assert loop_thread not in seen
