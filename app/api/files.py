"""
app/api/files.py

Purpose: File endpoints

- Multipart upload of up to MAX_FILES_PER_UPLOAD PDFs
- Listing, lookup, rename and soft delete of the caller's files
- Download of a stored binary
"""

from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse

from app.core.config import settings
from app.core.exceptions import ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.core.security import get_current_user
from app.models.file import to_public
from app.schemas.files import FileUpdateRequest
from app.schemas.response import ok
from app.services import file_service, storage_service
from utils.constants import (
    MSG_FILE_DELETED,
    MSG_FILE_NOT_FOUND,
    MSG_FILE_UPDATED,
    MSG_FILES_UPLOADED,
    MSG_NO_FILES,
    MSG_TOO_MANY_FILES,
    PDF_MIME_TYPE,
)

logger = get_logger(__name__)
router = APIRouter()


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """
    Stores each uploaded PDF as its own record. Parts that are not PDFs,
    exceed the size limit or cannot be parsed are skipped and listed under
    `skipped`.
    """
    parts = [part for part in (files or []) if part.filename]
    if not parts:
        raise ValidationError(MSG_NO_FILES)
    if len(parts) > settings.MAX_FILES_PER_UPLOAD:
        raise ValidationError(MSG_TOO_MANY_FILES.format(limit=settings.MAX_FILES_PER_UPLOAD))

    payload = []
    for part in parts:
        # Read one byte past the limit so oversize parts are detected without buffering them whole
        data = await part.read(settings.MAX_FILE_SIZE + 1)
        await part.close()
        payload.append((part.filename, part.content_type, data))

    with LogContext(user_id=str(user["_id"])):
        stored, skipped = await file_service.upload_files(user["_id"], payload)
        if skipped:
            logger.warning(f"Skipped {len(skipped)} of {len(parts)} uploaded file(s)")

    return ok(
        {"files": [to_public(file) for file in stored], "skipped": skipped},
        MSG_FILES_UPLOADED.format(count=len(stored)),
    )


@router.get("")
async def list_files(user: Dict[str, Any] = Depends(get_current_user)):
    files = await file_service.list_active_files(user["_id"])
    return ok({"count": len(files), "files": [to_public(file) for file in files]})


@router.get("/{file_id}")
async def get_file(file_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    file = await file_service.get_owned_file(user["_id"], file_id)
    return ok({"file": to_public(file)})


@router.get("/{file_id}/download")
async def download_file(file_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    file = await file_service.get_owned_file(user["_id"], file_id, active_only=True)
    if not storage_service.exists(file["stored_file_name"]):
        raise ResourceNotFoundError(MSG_FILE_NOT_FOUND)
    return FileResponse(
        storage_service.resolve_path(file["stored_file_name"]),
        media_type=file.get("mime_type", PDF_MIME_TYPE),
        filename=file["original_file_name"],
    )


@router.put("/{file_id}")
async def update_file(
    file_id: str,
    payload: FileUpdateRequest,
    user: Dict[str, Any] = Depends(get_current_user),
):
    file = await file_service.rename_file(user["_id"], file_id, payload.original_file_name)
    return ok({"file": to_public(file)}, MSG_FILE_UPDATED)


@router.delete("/{file_id}")
async def delete_file(file_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    await file_service.soft_delete_file(user["_id"], file_id)
    return ok(message=MSG_FILE_DELETED)
