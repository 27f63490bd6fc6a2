"""Object storage for article images."""

import asyncio
import logging
import os
import time
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from newsdesk.config import settings
from newsdesk.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}
DEFAULT_CONTENT_TYPE = "image/jpeg"


class ObjectStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...


class S3ObjectStorage:
    """S3 bucket storage; boto3 calls run in a worker thread."""

    def __init__(
        self,
        bucket: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        timeout: float,
    ):
        self.bucket = bucket
        self.region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return all((self.bucket, self.region, self.access_key_id, self.secret_access_key))

    def _client(self):
        return boto3.client(
            "s3",
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
        )

    def _put_sync(self, key: str, data: bytes, content_type: str) -> None:
        self._client().put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        if not self.configured:
            raise StorageError("Object storage is not configured")

        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._put_sync, key, data, content_type),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise StorageError(f"Upload timed out after {self.timeout}s", key=key) from exc
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Upload failed: {exc}", key=key) from exc

        return f"https://{self.bucket}.s3.amazonaws.com/{key}"


def get_object_storage() -> ObjectStorage:
    """Dependency that provides storage built from settings."""
    return S3ObjectStorage(
        bucket=settings.aws_s3_bucket,
        region=settings.aws_region,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        timeout=settings.upload_timeout_seconds,
    )


def guess_content_type(filename: str) -> str:
    ext = os.path.splitext(filename)[1].lower()
    return CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def check_image_size(size: int, max_bytes: int | None = None) -> None:
    """Raise ``ValidationError`` when ``size`` exceeds the upload limit."""
    limit = max_bytes if max_bytes is not None else settings.upload_max_bytes
    if size > limit:
        raise ValidationError(
            f"Image exceeds the {limit // (1024 * 1024)}MB limit",
            field="image",
            size=size,
            max_bytes=limit,
        )


async def upload_image(
    storage: ObjectStorage,
    filename: str,
    data: bytes,
    content_type: str | None = None,
    max_bytes: int | None = None,
) -> dict[str, str]:
    """
    Upload an article image and return ``{"url", "path"}``.

    Args:
        storage: Destination storage
        filename: Client filename, used only for its extension
        data: Raw file contents
        content_type: Declared MIME type; inferred from the extension when absent
        max_bytes: Size limit, defaults to ``settings.upload_max_bytes``

    Raises:
        ValidationError: Empty file or over the size limit
        StorageError: Storage unavailable or the upload failed
    """
    if not data:
        raise ValidationError("Image file is empty", field="image")
    check_image_size(len(data), max_bytes)

    ext = os.path.splitext(filename or "")[1].lower()
    key = f"news/{time.time_ns()}{ext}"
    if not content_type or content_type == "application/octet-stream":
        content_type = guess_content_type(filename or "")

    url = await storage.put(key, data, content_type)
    logger.info("Uploaded image %s (%d bytes)", key, len(data))
    return {"url": url, "path": key}
