"""
File upload utilities for listing images.
Validates uploaded images before they are handed to a storage backend.
"""

import io
import uuid
from typing import List, Optional, Sequence, Tuple
from PIL import Image, UnidentifiedImageError
from fastapi import UploadFile

from rental_api.config import get_settings
from rental_api.utils.exceptions import FileUploadError

settings = get_settings()


class FileValidator:
    """Utility class for image upload validation."""

    # Supported image formats and their extensions
    SUPPORTED_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/webp': ['.webp']
    }

    # MIME type -> PIL format name
    PIL_FORMATS = {
        'image/jpeg': 'jpeg',
        'image/png': 'png',
        'image/webp': 'webp'
    }

    @classmethod
    def validate_file_count(cls, count: int, max_files: Optional[int] = None) -> int:
        max_allowed = max_files or settings.max_upload_files
        if count > max_allowed:
            raise FileUploadError(f"A maximum of {max_allowed} images can be uploaded")
        return count

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        """
        Validate MIME type against the configured allow-list.

        Raises:
            FileUploadError: If MIME type is not supported
        """
        allowed = [t for t in settings.allowed_file_types if t in cls.SUPPORTED_FORMATS]
        if mime_type not in allowed:
            raise FileUploadError(
                f"Only image files are allowed ({', '.join(allowed)})"
            )
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Raises:
            FileUploadError: If the file is empty or exceeds the limit
        """
        if file_size <= 0:
            raise FileUploadError("Uploaded image is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            max_mb = max_allowed / (1024 * 1024)
            actual_mb = file_size / (1024 * 1024)
            raise FileUploadError(
                f"File size ({actual_mb:.1f}MB) exceeds maximum allowed size ({max_mb:.1f}MB)"
            )

        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes, mime_type: str) -> Tuple[int, int]:
        """
        Check the bytes really are an image of the declared type.

        Returns:
            Tuple of (width, height)
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
                width, height = img.size
                pil_format = img.format.lower() if img.format else ""
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise FileUploadError(f"Invalid image file: {str(e)}")

        if pil_format != cls.PIL_FORMATS.get(mime_type):
            raise FileUploadError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )

        return width, height

    @classmethod
    async def read_validated(cls, file: UploadFile) -> bytes:
        """
        Read and validate a single upload.

        Returns:
            Raw file content
        """
        mime_type = cls.validate_mime_type(file.content_type or "")

        await file.seek(0)
        content = await file.read()
        await file.seek(0)

        cls.validate_file_size(len(content))
        cls.validate_image_content(content, mime_type)
        return content

    @classmethod
    async def validate_uploads(cls, files: Sequence[UploadFile]) -> List[bytes]:
        """Validate a whole batch; nothing is stored unless every file passes."""
        cls.validate_file_count(len(files))
        return [await cls.read_validated(file) for file in files]


def generate_unique_filename(mime_type: str) -> str:
    """
    Generate a unique filename for a validated upload.
    The extension comes from the verified MIME type, never from the client filename.
    """
    extension = FileValidator.SUPPORTED_FORMATS[mime_type][0]
    return f"{uuid.uuid4().hex}{extension}"
