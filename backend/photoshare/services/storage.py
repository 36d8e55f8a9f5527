"""Storage service for handling uploaded photo files."""

import io
from abc import ABC, abstractmethod
from pathlib import Path
from uuid import uuid4

from PIL import Image, UnidentifiedImageError

from photoshare.core.config import settings
from photoshare.core.errors import Internal, InvalidArgument
from photoshare.core.logging import get_logger

logger = get_logger(__name__)

THUMB_PREFIX = "thumb_"


class StorageService(ABC):
    """Abstract base class for storage services."""

    @abstractmethod
    def save_upload(self, data: bytes, filename: str | None) -> str:
        """
        Normalize an uploaded image and store web + thumbnail versions.

        Returns:
            The stored file name (the only thing the caller records)
        """

    @abstractmethod
    def delete_photo_files(self, file_name: str) -> None:
        """Remove a stored photo and its thumbnail. Best-effort."""

    @abstractmethod
    def get_photo_url(self, file_name: str) -> str:
        """Get public URL for a stored photo."""

    @abstractmethod
    def get_thumbnail_url(self, file_name: str) -> str:
        """Get public URL for a stored photo's thumbnail."""


class LocalStorageService(StorageService):
    """Local filesystem storage service."""

    def __init__(
        self,
        base_dir: Path,
        max_width: int = 1920,
        thumbnail_max_width: int = 400,
    ) -> None:
        self.base_dir = base_dir
        self.max_width = max_width
        self.thumbnail_max_width = thumbnail_max_width

    def save_upload(self, data: bytes, filename: str | None) -> str:
        """Validate, resize and store an uploaded image."""
        if not data:
            raise InvalidArgument("No file uploaded")

        stem = Path(filename or "upload").stem or "upload"
        safe_stem = "".join(c for c in stem if c.isalnum() or c in "-_")[:64] or "upload"
        stored_name = f"{safe_stem}_{str(uuid4())[:8]}.jpg"

        try:
            web_image = process_image(data, max_width=self.max_width, quality=90)
            thumb_image = process_image(data, max_width=self.thumbnail_max_width, quality=80)
        except (UnidentifiedImageError, OSError) as e:
            logger.warning("Rejected upload", filename=filename, error=str(e))
            raise InvalidArgument("Uploaded file is not a readable image") from e

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            (self.base_dir / stored_name).write_bytes(web_image)
            (self.base_dir / f"{THUMB_PREFIX}{stored_name}").write_bytes(thumb_image)
        except OSError as e:
            logger.error("Failed to store upload", file_name=stored_name, error=str(e))
            raise Internal("Failed to store uploaded file") from e

        logger.info(
            "Saved photo",
            file_name=stored_name,
            original_size=len(data),
            web_size=len(web_image),
        )
        return stored_name

    def delete_photo_files(self, file_name: str) -> None:
        """Delete a photo and its thumbnail, logging instead of raising."""
        for path in (self.base_dir / file_name, self.base_dir / f"{THUMB_PREFIX}{file_name}"):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Failed to delete photo file", path=str(path), error=str(e))

    def get_photo_url(self, file_name: str) -> str:
        """Get URL for a photo (relative for flexibility)."""
        return f"/images/{file_name}"

    def get_thumbnail_url(self, file_name: str) -> str:
        return f"/images/{THUMB_PREFIX}{file_name}"


def process_image(
    image_data: bytes,
    max_width: int,
    quality: int = 85,
) -> bytes:
    """Process image - resize and optimize."""
    img = Image.open(io.BytesIO(image_data))

    # JPEG output needs RGB
    if img.mode != "RGB":
        img = img.convert("RGB")

    # Resize if needed
    if img.width > max_width:
        ratio = max_width / img.width
        new_height = max(1, int(img.height * ratio))
        img = img.resize((max_width, new_height), Image.Resampling.LANCZOS)

    # Save to bytes
    output = io.BytesIO()
    img.save(output, format="JPEG", quality=quality, optimize=True)
    return output.getvalue()


def get_storage_service() -> StorageService:
    """Get configured storage service."""
    return LocalStorageService(
        base_dir=settings.images_dir,
        max_width=settings.max_image_width,
        thumbnail_max_width=settings.thumbnail_max_width,
    )
