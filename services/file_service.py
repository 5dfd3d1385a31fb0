# services/file_service.py
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
from fastapi import UploadFile

from core.config import settings
from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class FileService:
    """Local-disk image storage; files are served back under /uploads."""

    def __init__(self, storage_path: Optional[str] = None):
        self.storage_path = Path(storage_path or settings.UPLOAD_DIR)
        self.max_file_size = settings.MAX_UPLOAD_SIZE
        self.allowed_mime_types = settings.ALLOWED_IMAGE_TYPES

    async def save_image(self, file: UploadFile, folder: str = "reports") -> str:
        """Validate and store an uploaded image, returning its public URL path."""

        # type
        mime_type = file.content_type or mimetypes.guess_type(file.filename or "")[0]
        if mime_type not in self.allowed_mime_types:
            raise ValidationError("Only image files are allowed")

        # size
        content = await file.read()
        if len(content) > self.max_file_size:
            raise ValidationError(
                f"File size exceeds limit: {self.max_file_size // (1024 * 1024)}MB"
            )
        if not content:
            raise ValidationError("Uploaded file is empty")

        extension = Path(file.filename or "").suffix.lower() or mimetypes.guess_extension(mime_type) or ""
        stored_name = f"image-{uuid.uuid4().hex}{extension}"

        target_dir = self.storage_path / folder
        target_dir.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(target_dir / stored_name, "wb") as f:
            await f.write(content)

        logger.info(f"Stored upload {stored_name} ({len(content)} bytes)")
        return f"/uploads/{folder}/{stored_name}"

    def delete_image(self, url: Optional[str]) -> None:
        """Remove a stored image; a missing file is ignored."""
        if not url or not url.startswith("/uploads/"):
            return

        root = self.storage_path.resolve()
        path = (root / url[len("/uploads/"):]).resolve()
        if path == root or not path.is_relative_to(root):
            logger.warning(f"Refusing to delete outside upload dir: {url}")
            return

        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug(f"Upload already gone: {path}")

    def delete_images(self, urls: Iterable[Optional[str]]) -> None:
        for url in urls:
            self.delete_image(url)
