# app/core/storage.py
import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from typing import List, Optional, Sequence

from fastapi import HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from app.config import bucket, ALLOWED_IMAGE_EXTENSIONS, MAX_IMAGE_BYTES

logger = logging.getLogger(__name__)


class UploadError(Exception):
    """Writing an object to storage failed."""


@dataclass
class ImageFile:
    filename: str
    data: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lower()

    @property
    def size(self) -> int:
        return len(self.data)


async def read_upload(upload: UploadFile) -> ImageFile:
    data = await upload.read()
    return ImageFile(filename=upload.filename or "", data=data, content_type=upload.content_type)


def check_image(image: ImageFile) -> Optional[str]:
    """Return an error message for an unacceptable image, else ``None``."""
    if image.extension not in ALLOWED_IMAGE_EXTENSIONS:
        return f"{image.filename}: only {', '.join(ALLOWED_IMAGE_EXTENSIONS)} images are accepted"
    if image.size > MAX_IMAGE_BYTES:
        return f"{image.filename}: images must be under {MAX_IMAGE_BYTES // (1024 * 1024)}MB"
    return None


def object_path(folder: str, filename: str) -> str:
    ext = os.path.splitext(filename)[1].lstrip(".").lower()
    return f"{folder}/{uuid.uuid4().hex}.{ext}"


class ImageUploader:
    """Writes image blobs to the Firebase Storage bucket and returns public URLs."""

    def __init__(self, storage_bucket):
        self.bucket = storage_bucket

    def upload(self, folder: str, image: ImageFile) -> str:
        path = object_path(folder, image.filename)
        try:
            blob = self.bucket.blob(path)
            blob.upload_from_string(image.data, content_type=image.content_type)  # synchronous
            blob.make_public()
        except Exception as e:
            raise UploadError(f"Failed to upload {image.filename}: {e}") from e
        logger.info("Uploaded %s", path)
        return blob.public_url

    async def upload_batch(self, folder: str, images: Sequence[ImageFile]) -> List[str]:
        # First failure propagates; blobs already written are left in place.
        return list(await asyncio.gather(*(run_in_threadpool(self.upload, folder, image) for image in images)))


def get_uploader() -> ImageUploader:
    if bucket is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Storage not initialized.")
    return ImageUploader(bucket)
