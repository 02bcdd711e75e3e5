import logging
import os
from typing import Any, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fileshare import crud, schemas
from fileshare.api import deps
from fileshare.core.config import settings
from fileshare.storage import Bucket, ObjectNotFound, StorageError
from fileshare.utils import share_utils
from fileshare.utils.captcha import VerificationStore

logger = logging.getLogger(__name__)

router = APIRouter()

CHUNK_SIZE = 1024 * 1024


def _get_upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def _site_origin(request: Request) -> str:
    return settings.SITE_URL or str(request.base_url)


@router.post("", response_model=schemas.UploadResult)
def upload_file(
        *,
        request: Request,
        db: Session = Depends(deps.get_db),
        bucket: Bucket = Depends(deps.get_bucket),
        file: UploadFile = File(...),
        download_limit: Optional[str] = Form(None),
        expiry_hours: Optional[str] = Form(None),
        captcha_id: str = Form(...),
) -> Any:
    """
    Store one file and create its share record.
    The blob is written first, then the row. A failed insert leaves the blob behind.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file selected")

    # Rejections happen before anything reaches the backend
    share_utils.validate_upload(file.filename, _get_upload_size(file))

    if not VerificationStore.is_verified(captcha_id):
        raise HTTPException(status_code=403, detail="Captcha verification required")

    final_download_limit = share_utils.clamp_download_limit(download_limit)
    final_expiry_hours = share_utils.clamp_expiry_hours(expiry_hours)

    share_id = share_utils.generate_share_id()
    storage_key = share_utils.storage_key_for(share_id, file.filename)

    try:
        size = bucket.upload(storage_key, file.file)
    except StorageError:
        logger.exception("Upload error: could not store %s", storage_key)
        raise HTTPException(status_code=500, detail="Upload failed")

    record_in = schemas.ShareRecordCreate(
        id=share_id,
        filename=file.filename,
        storage_path=storage_key,
        size=size,
        mime_type=file.content_type,
        download_limit=final_download_limit,
        expires_at=share_utils.expiry_from_now(final_expiry_hours),
    )
    try:
        record = crud.share.create(db, obj_in=record_in)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Upload error: could not insert share record %s", share_id)
        raise HTTPException(status_code=500, detail="Upload failed")

    # Spent only once the share record exists
    VerificationStore.delete(captcha_id)

    logger.info("Created share %s for %s (%d bytes)", record.id, record.filename, record.size)
    return {
        "id": record.id,
        "filename": record.filename,
        "download_url": share_utils.build_download_url(_site_origin(request), record.id),
        "download_limit": record.download_limit,
        "expiry_hours": final_expiry_hours,
        "expires_at": record.expires_at,
    }


@router.get("/{share_id}", response_model=schemas.ShareInfo)
def get_share_info(
        *,
        db: Session = Depends(deps.get_db),
        share_id: str,
) -> Any:
    """
    Get public share info.
    """
    record = share_utils.require_access(crud.share.get(db, id=share_id))
    return share_utils.build_share_info(record)


@router.post("/{share_id}/download")
def download_file(
        *,
        db: Session = Depends(deps.get_db),
        bucket: Bucket = Depends(deps.get_bucket),
        share_id: str,
) -> Any:
    """
    Stream the shared file and count the download.
    """
    record = share_utils.require_access(crud.share.get(db, id=share_id))

    try:
        file_path = bucket.download(record.storage_path)
    except ObjectNotFound:
        logger.warning("Share %s points at missing object %s", record.id, record.storage_path)
        raise HTTPException(status_code=404, detail="Physical file not found")
    except StorageError:
        logger.exception("Download error for share %s", record.id)
        raise HTTPException(status_code=500, detail="Download failed")

    file_size = os.path.getsize(file_path)

    try:
        record = crud.share.increment_download(db, record=record)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Download error: could not update counter for share %s", record.id)
        raise HTTPException(status_code=500, detail="Download failed")

    def iterfile():
        with open(file_path, mode="rb") as file_like:
            while chunk := file_like.read(CHUNK_SIZE):
                yield chunk

    # URL encode the filename to handle non-ASCII characters
    encoded_filename = quote(record.filename)

    return StreamingResponse(
        iterfile(),
        media_type=record.mime_type or "application/octet-stream",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{encoded_filename}",
            "Content-Length": str(file_size),
            "X-Download-Count": str(record.download_count),
            "X-Download-Limit": str(record.download_limit),
            "X-Downloads-Remaining": str(record.downloads_remaining),
        }
    )
