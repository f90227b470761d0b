import uuid

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from confreview.api.deps import get_current_user_id, get_db
from confreview.core.config import settings
from confreview.core.errors import InvalidArgument
from confreview.core.logging import get_logger
from confreview.schemas.file import BucketResponse, DownloadUrlResponse, UploadResponse
from confreview.services import submissions
from confreview.services.storage import (
    DOWNLOAD_URL_TTL_SECONDS,
    PAPER_CONTENT_TYPES,
    PAPER_KEY_PREFIX,
    ensure_bucket_exists,
    paper_download_url,
    upload_paper,
)

router = APIRouter(prefix="/files", tags=["files"])

logger = get_logger(__name__)


@router.post("/ensure-bucket", response_model=BucketResponse)
def ensure_bucket():
    try:
        ensure_bucket_exists(settings.s3_bucket)
        return {"ok": True, "bucket": settings.s3_bucket}
    except Exception as e:
        logger.error("ensure_bucket_failed", bucket=settings.s3_bucket, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/upload", response_model=UploadResponse)
def upload_file(file: UploadFile = File(...)):
    """
    Загрузка PDF статьи: FastAPI принимает файл и кладёт в MinIO.
    Возвращённый file_url передаётся в создание статьи или в ревизию.
    """
    content_type = file.content_type or "application/octet-stream"
    if content_type not in PAPER_CONTENT_TYPES:
        raise HTTPException(status_code=415, detail="Only PDF papers are accepted")

    try:
        ensure_bucket_exists(settings.s3_bucket)

        object_key = upload_paper(
            fileobj=file.file,
            original_name=file.filename or "paper.pdf",
            content_type=content_type,
        )
    except Exception as e:
        logger.error("paper_upload_failed", filename=file.filename, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "ok": True,
        "bucket": settings.s3_bucket,
        "object_key": object_key,
        "file_url": object_key,
        "original_name": file.filename or "paper.pdf",
        "content_type": content_type,
    }


@router.get("/download-url", response_model=DownloadUrlResponse)
def get_download_url(
    object_key: str = Query(...),
    db: Session = Depends(get_db),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Временная ссылка на PDF: только для тех, кто может открыть статью с этим file_url."""
    if not object_key.startswith(PAPER_KEY_PREFIX):
        raise InvalidArgument("Not a paper object key", field="object_key")
    submissions.require_paper_access(db, user_id, object_key)
    return {
        "object_key": object_key,
        "url": paper_download_url(object_key),
        "expires_in": DOWNLOAD_URL_TTL_SECONDS,
    }
