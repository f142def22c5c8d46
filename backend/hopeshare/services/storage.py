"""S3 / R2 / MinIO object storage helpers.

Keys are always built server-side: ``validations/{user_id}/...`` for identity
documents, ``campaigns/{campaign_id}/...`` for campaign images and
``reports/{campaign_id}/...`` for rendered financial reports.
"""

import base64
import binascii
import logging
import os
import uuid
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from hopeshare.core.config import settings
from hopeshare.core.exceptions import InvalidInputError, StorageError

logger = logging.getLogger(__name__)

MAX_DOCUMENT_SIZE = 10 * 1024 * 1024  # 10 MB

PENDING_DELETES = "storage.pending_deletes"

ALLOWED_DOCUMENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/webp",
        "application/pdf",
    }
)

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

_minio_cred_warned = False


def _get_s3_client():  # type: ignore[no-untyped-def]
    global _minio_cred_warned  # noqa: PLW0603
    config_kwargs: dict = {"signature_version": "s3v4"}
    if settings.S3_ENDPOINT_URL:
        config_kwargs["s3"] = {"addressing_style": "path"}
    kwargs: dict = {
        "service_name": "s3",
        "region_name": settings.AWS_REGION,
        "config": Config(**config_kwargs),
    }
    if settings.S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY

    # Custom endpoint with what looks like an AWS key usually means leaked env vars
    if settings.S3_ENDPOINT_URL and not _minio_cred_warned:
        env_key = os.environ.get("AWS_ACCESS_KEY_ID", "")
        if env_key.startswith("AKIA") and not settings.AWS_ACCESS_KEY_ID:
            logger.warning(
                "S3_ENDPOINT_URL is set but AWS_ACCESS_KEY_ID comes from the "
                "environment and looks like a real AWS key (AKIA...). Uploads "
                "to R2/MinIO will be rejected."
            )
        _minio_cred_warned = True

    return boto3.client(**kwargs)


def public_url(key: str) -> str:
    """URL the stored object is served from."""
    if settings.S3_PUBLIC_URL:
        return f"{settings.S3_PUBLIC_URL.rstrip('/')}/{key}"
    if settings.S3_ENDPOINT_URL:
        return f"{settings.S3_ENDPOINT_URL.rstrip('/')}/{settings.S3_BUCKET}/{key}"
    return f"https://{settings.S3_BUCKET}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"


def build_key(prefix: str, file_name: str) -> str:
    """``{prefix}/{uuid}-{safe_name}``."""
    safe_name = quote(file_name.strip().replace(" ", "_"), safe="._-")
    return f"{prefix.strip('/')}/{uuid.uuid4()}-{safe_name}"


def decode_base64_document(payload: str) -> tuple[bytes, str | None]:
    """Decode a base64 payload, optionally wrapped as a data URL.

    Returns the raw bytes and the content type announced by the data URL
    (``None`` for bare base64).
    """
    content_type = None
    data = payload.strip()
    if data.startswith("data:"):
        header, _, data = data.partition(",")
        content_type = header[len("data:") :].split(";", 1)[0] or None

    try:
        raw = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidInputError("Document is not valid base64") from exc

    if not raw:
        raise InvalidInputError("Document is empty")
    if len(raw) > MAX_DOCUMENT_SIZE:
        raise InvalidInputError("Document exceeds the 10 MB limit")
    return raw, content_type


def upload_object(key: str, data: bytes, content_type: str) -> dict[str, str]:
    """Store ``data`` under ``key`` and return ``{"key", "url"}``."""
    client = _get_s3_client()
    try:
        client.put_object(
            Bucket=settings.S3_BUCKET,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.error("Upload of %s failed: %s", key, exc)
        raise StorageError(f"Upload of {key} failed") from exc
    return {"key": key, "url": public_url(key)}


def delete_object(key: str) -> None:
    client = _get_s3_client()
    try:
        client.delete_object(Bucket=settings.S3_BUCKET, Key=key)
    except (BotoCoreError, ClientError) as exc:
        logger.error("Delete of %s failed: %s", key, exc)
        raise StorageError(f"Delete of {key} failed") from exc


def delete_prefix(prefix: str) -> int:
    """Delete every object under ``prefix``. Returns how many were removed."""
    client = _get_s3_client()
    removed = 0
    try:
        paginator = client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=settings.S3_BUCKET, Prefix=prefix):
            keys = [{"Key": item["Key"]} for item in page.get("Contents", [])]
            if not keys:
                continue
            # list_objects_v2 pages hold at most 1000 keys, the delete_objects limit
            client.delete_objects(
                Bucket=settings.S3_BUCKET,
                Delete={"Objects": keys, "Quiet": True},
            )
            removed += len(keys)
    except (BotoCoreError, ClientError) as exc:
        logger.error("Delete of prefix %s failed: %s", prefix, exc)
        raise StorageError(f"Delete of prefix {prefix} failed") from exc
    logger.info("Deleted %d objects under %s", removed, prefix)
    return removed


# ---------------------------------------------------------------------------
# Async entry points (boto3 blocks, so calls go through the threadpool)
# ---------------------------------------------------------------------------


async def upload(key: str, data: bytes, content_type: str) -> dict[str, str]:
    return await run_in_threadpool(upload_object, key, data, content_type)


async def delete(key: str) -> None:
    await run_in_threadpool(delete_object, key)


def delete_after_commit(db: AsyncSession, key: str) -> None:
    """Schedule ``key`` for removal once the request's transaction commits."""
    db.info.setdefault(PENDING_DELETES, []).append((delete_object, key))


def delete_prefix_after_commit(db: AsyncSession, prefix: str) -> None:
    db.info.setdefault(PENDING_DELETES, []).append((delete_prefix, prefix))


def discard_pending_deletes(db: AsyncSession) -> None:
    db.info.pop(PENDING_DELETES, None)


async def run_pending_deletes(db: AsyncSession) -> None:
    """Run the deletions scheduled on ``db``. Failures leave an orphan object."""
    for func, target in db.info.pop(PENDING_DELETES, []):
        try:
            await run_in_threadpool(func, target)
        except StorageError:
            logger.warning("Stored object %s was not removed after commit", target)
