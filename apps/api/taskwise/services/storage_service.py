"""Object storage for uploaded images and task attachments (S3 or S3-compatible)."""

from __future__ import annotations

import logging
import time
from typing import BinaryIO

import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from taskwise.core.config import settings
from taskwise.services.errors import InvalidArgumentError, StorageError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 25 * 1024 * 1024  # 25 MB


# =============================================================================
# Client
# =============================================================================


def get_s3_client() -> BaseClient:
    """Build an S3 client from settings. Empty settings fall back to boto3 defaults."""
    endpoint_url = settings.S3_ENDPOINT_URL.rstrip("/") or None
    style = settings.S3_URL_STYLE.strip().lower()
    return boto3.client(
        "s3",
        region_name=settings.S3_REGION or None,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        endpoint_url=endpoint_url,
        config=Config(s3={"addressing_style": style}) if style in {"path", "virtual"} else None,
    )


# =============================================================================
# Operations
# =============================================================================


def build_object_key(filename: str) -> str:
    """Key objects by upload time so repeated names do not collide."""
    name = (filename or "").strip().replace("/", "_")
    if not name:
        raise InvalidArgumentError("File name is required")
    return f"{int(time.time() * 1000)}-{name}"


def presign(key: str, client: BaseClient | None = None) -> str:
    """Time-limited GET URL for a stored object."""
    s3 = client or get_s3_client()
    try:
        return s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.S3_BUCKET, "Key": key},
            ExpiresIn=settings.PRESIGNED_URL_TTL_SECONDS,
        )
    except (ClientError, BotoCoreError) as exc:
        logger.warning("Presign failed for key %s: %s", key, exc)
        raise StorageError("Could not generate a download URL") from exc


def upload(filename: str, file: BinaryIO, content_type: str | None = None) -> dict[str, str]:
    """
    Store an uploaded file and return its key with a presigned URL.

    Returns ``{"presigned_url": ..., "img_key": ...}``.
    """
    key = build_object_key(filename)
    s3 = get_s3_client()
    extra_args = {"ContentType": content_type} if content_type else None
    try:
        file.seek(0)
        s3.upload_fileobj(file, settings.S3_BUCKET, key, ExtraArgs=extra_args)
    except (ClientError, BotoCoreError) as exc:
        logger.warning("Upload failed for key %s: %s", key, exc)
        raise StorageError("Could not store the file") from exc

    logger.info("Stored object %s", key)
    return {"presigned_url": presign(key, client=s3), "img_key": key}
