import logging
import random
import time
from pathlib import Path
from typing import Optional

from learnhub.core.config import settings
from learnhub.core.constants import ALLOWED_IMAGE_TYPES
from learnhub.core.exceptions import NotFound, ValidationFailed
from learnhub.schemas.upload import UploadedFile

logger = logging.getLogger(__name__)


def build_stored_name(original_name: str) -> str:
    suffix = Path(original_name).suffix.lower()
    return f"file-{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}{suffix}"


class UploadService:
    """Stores uploaded images on local disk under ``UPLOAD_DIR``, served at ``/uploads``."""

    def __init__(self, upload_dir: Optional[str] = None):
        self._upload_dir = upload_dir

    @property
    def upload_dir(self) -> Path:
        return Path(self._upload_dir or settings.UPLOAD_DIR)

    def validate(self, filename: Optional[str], content_type: Optional[str], size: int):
        extension = Path(filename or "").suffix.lower().lstrip(".")
        if extension not in ALLOWED_IMAGE_TYPES:
            raise ValidationFailed(
                "Invalid file type. Allowed types: " + ", ".join(ALLOWED_IMAGE_TYPES),
                details={"filename": filename},
            )
        mime_main, _, mime_sub = (content_type or "").lower().partition("/")
        if mime_main != "image" or mime_sub not in ALLOWED_IMAGE_TYPES:
            raise ValidationFailed(
                "Invalid file type. Allowed types: " + ", ".join(ALLOWED_IMAGE_TYPES),
                details={"mimetype": content_type},
            )
        if size > settings.MAX_UPLOAD_SIZE:
            raise ValidationFailed(
                f"File is too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB.",
                details={"size": size},
            )

    def save(self, *, data: bytes, filename: Optional[str], content_type: Optional[str]) -> UploadedFile:
        self.validate(filename, content_type, len(data))

        stored_name = build_stored_name(filename)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / stored_name).write_bytes(data)
        logger.info(f"Stored upload {stored_name} ({len(data)} bytes)")

        return UploadedFile(
            url=f"/uploads/{stored_name}",
            filename=stored_name,
            size=len(data),
            mimetype=content_type,
        )

    def delete(self, filename: str) -> None:
        if not filename or "/" in filename or "\\" in filename or filename in (".", ".."):
            raise ValidationFailed("Invalid filename.")
        path = self.upload_dir / filename
        if not path.is_file():
            raise NotFound("File not found.")
        path.unlink()
        logger.info(f"Deleted upload {filename}")

upload_service = UploadService()
