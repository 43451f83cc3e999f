"""
Image storage backends for listing uploads.
Local disk storage via aiofiles, or Cloudinary when credentials are configured.
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import aiofiles
import cloudinary
import cloudinary.exceptions
import cloudinary.uploader
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from rental_api.config import Settings, get_settings
from rental_api.utils.exceptions import FileUploadError
from rental_api.utils.file_utils import FileValidator, generate_unique_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredImage:
    """Descriptor of a stored upload: a filesystem path or URL plus the stored filename."""
    path: str
    filename: Optional[str] = None
    public_id: Optional[str] = None


class ImageStorage:
    """Base class for storage backends."""

    async def save(self, content: bytes, content_type: str) -> StoredImage:
        raise NotImplementedError

    async def remove(self, image: StoredImage) -> None:
        raise NotImplementedError

    async def discard(self, stored: Sequence[StoredImage]) -> None:
        """Remove images stored for a request that did not complete."""
        for image in stored:
            await self.remove(image)

        if stored:
            logger.info(f"Discarded {len(stored)} orphaned image(s)")

    async def store_uploads(self, files: Sequence[UploadFile]) -> List[StoredImage]:
        """
        Validate and store a batch of uploaded images.

        Raises:
            FileUploadError: If any file is rejected; nothing is stored in that case
        """
        if not files:
            return []

        contents = await FileValidator.validate_uploads(files)

        stored: List[StoredImage] = []
        try:
            for file, content in zip(files, contents):
                stored.append(await self.save(content, file.content_type))
        except FileUploadError:
            await self.discard(stored)
            raise

        logger.info(f"Stored {len(stored)} image(s) with {type(self).__name__}")
        return stored


class LocalImageStorage(ImageStorage):
    """Writes uploads below the configured upload directory, served at /uploads."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = Path(base_dir or get_settings().upload_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def save(self, content: bytes, content_type: str) -> StoredImage:
        filename = generate_unique_filename(content_type)
        file_path = self.base_dir / filename

        try:
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Failed to write upload {file_path}: {str(e)}")
            raise FileUploadError("Failed to save uploaded image")

        logger.debug(f"Saved upload to {file_path} ({len(content)} bytes)")
        return StoredImage(path=str(file_path), filename=filename)

    async def remove(self, image: StoredImage) -> None:
        if not image.filename:
            return

        file_path = self.base_dir / image.filename
        try:
            file_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove upload {file_path}: {str(e)}")


class CloudinaryImageStorage(ImageStorage):
    """Uploads to Cloudinary; the stored path is the secure delivery URL."""

    def __init__(self, config: Optional[Settings] = None):
        config = config or get_settings()
        self.folder = config.cloudinary_folder
        cloudinary.config(
            cloud_name=config.cloudinary_cloud_name,
            api_key=config.cloudinary_api_key,
            api_secret=config.cloudinary_api_secret,
            secure=True,
        )

    def _upload(self, content: bytes, public_id: str) -> dict:
        return cloudinary.uploader.upload(
            io.BytesIO(content),
            folder=self.folder,
            public_id=public_id,
            resource_type="image",
            allowed_formats=["jpg", "jpeg", "png", "webp"],
            transformation=[{"quality": "auto"}],
        )

    async def save(self, content: bytes, content_type: str) -> StoredImage:
        filename = generate_unique_filename(content_type)
        public_id = Path(filename).stem

        try:
            result = await run_in_threadpool(self._upload, content, public_id)
        except cloudinary.exceptions.Error as e:
            logger.error(f"Cloudinary upload failed: {str(e)}")
            raise FileUploadError("Failed to upload image")

        url = result.get("secure_url") or result.get("url") or ""
        return StoredImage(path=url, filename=filename, public_id=result.get("public_id"))

    async def remove(self, image: StoredImage) -> None:
        if not image.public_id:
            return

        try:
            await run_in_threadpool(cloudinary.uploader.destroy, image.public_id, resource_type="image")
        except cloudinary.exceptions.Error as e:
            logger.warning(f"Cloudinary delete of {image.public_id} failed: {str(e)}")


def get_image_storage() -> ImageStorage:
    """
    Storage backend selected by configuration.
    Used as a FastAPI dependency so tests can substitute a temporary directory.
    """
    config = get_settings()
    if config.cloudinary_configured:
        return CloudinaryImageStorage(config)

    logger.debug("Cloudinary not configured, storing uploads on local disk")
    return LocalImageStorage(config.upload_dir)
