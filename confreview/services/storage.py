from __future__ import annotations

import uuid
from typing import BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from confreview.core.config import settings
from confreview.core.logging import get_logger

logger = get_logger(__name__)

PAPER_CONTENT_TYPES = frozenset({"application/pdf", "application/x-pdf"})
PAPER_KEY_PREFIX = "papers/"
DOWNLOAD_URL_TTL_SECONDS = 3600


def _get_s3_client():
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.s3_region,
        config=Config(signature_version="s3v4"),
    )


def ensure_bucket_exists(bucket: str) -> None:
    s3 = _get_s3_client()
    try:
        s3.head_bucket(Bucket=bucket)
    except ClientError:
        logger.info("bucket_created", bucket=bucket)
        s3.create_bucket(Bucket=bucket)


def build_object_key(original_name: str) -> str:
    flat_name = original_name.replace("/", "_").replace("\\", "_")
    return f"{PAPER_KEY_PREFIX}{uuid.uuid4()}-{flat_name}"


def upload_paper(fileobj: BinaryIO, original_name: str, content_type: str) -> str:
    """
    Загружает PDF статьи в MinIO и возвращает object_key.
    Этот ключ хранится в Submission.file_url.
    """
    bucket = settings.s3_bucket
    object_key = build_object_key(original_name)

    _get_s3_client().upload_fileobj(
        Fileobj=fileobj,
        Bucket=bucket,
        Key=object_key,
        ExtraArgs={"ContentType": content_type},
    )
    logger.info("paper_uploaded", bucket=bucket, object_key=object_key, content_type=content_type)
    return object_key


def paper_download_url(object_key: str, expires_in: int = DOWNLOAD_URL_TTL_SECONDS) -> str:
    # Только ключи, выданные upload_paper
    if not object_key.startswith(PAPER_KEY_PREFIX):
        raise ValueError(f"Not a paper object key: {object_key}")
    return _get_s3_client().generate_presigned_url(
        "get_object",
        Params={"Bucket": settings.s3_bucket, "Key": object_key},
        ExpiresIn=expires_in,
    )
