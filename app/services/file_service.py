"""
app/services/file_service.py

Purpose: File record management

- Stores uploads (binary on disk, record in MongoDB)
- Creates derived file records for edit and merge results
- Ownership-scoped lookup, rename and soft delete
"""

from typing import Optional, Dict, Any, List, Tuple

from bson import ObjectId

from app.core.config import settings
from app.core.exceptions import PdfProcessingError, ResourceNotFoundError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_files_collection
from app.models.file import new_file_document
from app.services import pdf_service, storage_service
from utils.constants import (
    FILE_ACTIVE,
    FILE_DELETED,
    MSG_FILE_NOT_FOUND,
    MSG_FILE_TOO_LARGE,
    MSG_INVALID_PDF,
    MSG_ONLY_PDF,
    PDF_EXTENSION,
    PDF_MIME_TYPE,
)
from utils.time_utils import utc_now
from utils.validation_utils import has_pdf_signature, is_pdf_upload, parse_object_id, sanitize_filename

logger = get_logger(__name__)


class UploadRejected(Exception):
    """A single upload part that cannot be stored; the batch continues."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


async def get_owned_file(user_id: ObjectId, file_id: str, active_only: bool = False) -> Dict[str, Any]:
    """
    Loads a file owned by the user.

    Args:
        user_id: Caller id
        file_id: File id as received from the client
        active_only: Reject deleted/archived files as not found

    Raises:
        ResourceNotFoundError: Invalid id, absent, not owned, or inactive
    """
    object_id = parse_object_id(file_id)
    if object_id is None:
        raise ResourceNotFoundError(MSG_FILE_NOT_FOUND)

    query = {"_id": object_id, "user_id": user_id}
    if active_only:
        query["status"] = FILE_ACTIVE

    file = await get_files_collection().find_one(query)
    if not file:
        raise ResourceNotFoundError(MSG_FILE_NOT_FOUND)
    return file


async def list_active_files(user_id: ObjectId) -> List[Dict[str, Any]]:
    cursor = get_files_collection().find(
        {"user_id": user_id, "status": FILE_ACTIVE},
        sort=[("upload_timestamp", -1), ("_id", -1)],
    )
    return await cursor.to_list(length=None)


async def get_files_by_ids(file_ids: List[ObjectId]) -> Dict[ObjectId, Dict[str, Any]]:
    """
    Loads files by id regardless of status, keyed by id. Used to populate
    historical merge records whose files may since have been deleted.
    """
    if not file_ids:
        return {}
    cursor = get_files_collection().find({"_id": {"$in": list(set(file_ids))}})
    return {file["_id"]: file for file in await cursor.to_list(length=None)}


async def create_file_record(
    user_id: ObjectId,
    original_file_name: str,
    stored_file_name: str,
    data: bytes,
    metadata: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Inserts the record for a binary already written under stored_file_name.
    """
    document = new_file_document(
        user_id=user_id,
        original_file_name=original_file_name,
        stored_file_name=stored_file_name,
        file_url=storage_service.file_url(stored_file_name),
        file_size=len(data),
        metadata=metadata,
        mime_type=PDF_MIME_TYPE,
    )
    result = await get_files_collection().insert_one(document)
    document["_id"] = result.inserted_id
    return document


async def store_derived_file(
    user_id: ObjectId,
    original_file_name: str,
    prefix: str,
    data: bytes,
    metadata: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Writes a generated PDF (edit or merge result) and records it.
    The binary is removed again if the record cannot be created.
    """
    stored_name = storage_service.generate_stored_name(prefix)
    storage_service.write_bytes(stored_name, data)
    try:
        return await create_file_record(user_id, original_file_name, stored_name, data, metadata)
    except Exception:
        storage_service.remove_file(stored_name)
        raise


async def discard_file(file: Dict[str, Any]) -> None:
    """
    Removes a freshly created record and its binary. Used to roll back a
    derived file when a later step of the same request fails.
    """
    await get_files_collection().delete_one({"_id": file["_id"]})
    storage_service.remove_file(file["stored_file_name"])


async def store_upload(
    user_id: ObjectId,
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
) -> Dict[str, Any]:
    """
    Validates and stores one uploaded PDF. Identical content uploaded twice
    yields two independent records.

    Raises:
        UploadRejected: Not a PDF, too large, or unreadable
    """
    display_name = sanitize_filename(filename)

    if not is_pdf_upload(filename, content_type):
        raise UploadRejected(MSG_ONLY_PDF)
    if len(data) > settings.MAX_FILE_SIZE:
        raise UploadRejected(MSG_FILE_TOO_LARGE.format(limit=settings.MAX_FILE_SIZE))
    if not has_pdf_signature(data):
        raise UploadRejected(MSG_INVALID_PDF)

    stored_name = storage_service.generate_stored_name("", PDF_EXTENSION)
    storage_service.write_bytes(stored_name, data)

    try:
        metadata = pdf_service.read_pdf_metadata(data)
        file = await create_file_record(user_id, display_name, stored_name, data, metadata)
    except PdfProcessingError as e:
        storage_service.remove_file(stored_name)
        logger.warning(f"Uploaded file {display_name!r} rejected: {e.message}")
        raise UploadRejected(MSG_INVALID_PDF) from e
    except Exception:
        storage_service.remove_file(stored_name)
        raise

    with LogContext(user_id=str(user_id), file_id=str(file["_id"])):
        logger.info(f"Stored upload {display_name!r} ({len(data)} bytes)")
    return file


async def upload_files(
    user_id: ObjectId,
    parts: List[Tuple[Optional[str], Optional[str], bytes]],
) -> Tuple[List[Dict[str, Any]], List[Dict[str, str]]]:
    """
    Stores a batch of uploads. A failing part is skipped and reported; the
    rest of the batch is still stored.

    Args:
        parts: (filename, content_type, data) per uploaded part

    Returns:
        (stored file documents, skipped [{fileName, reason}])
    """
    stored, skipped = [], []
    for filename, content_type, data in parts:
        try:
            stored.append(await store_upload(user_id, filename, content_type, data))
        except UploadRejected as e:
            skipped.append({"fileName": sanitize_filename(filename), "reason": e.reason})
    return stored, skipped


async def rename_file(user_id: ObjectId, file_id: str, original_file_name: Optional[str]) -> Dict[str, Any]:
    """
    Renames a file. Blank names leave the record unchanged.
    """
    file = await get_owned_file(user_id, file_id)

    if original_file_name and original_file_name.strip():
        new_name = sanitize_filename(original_file_name)
        now = utc_now()
        await get_files_collection().update_one(
            {"_id": file["_id"]},
            {"$set": {"original_file_name": new_name, "updated_at": now}}
        )
        file["original_file_name"] = new_name
        file["updated_at"] = now

        with LogContext(user_id=str(user_id), file_id=str(file["_id"])):
            logger.info("File renamed")

    return file


async def soft_delete_file(user_id: ObjectId, file_id: str) -> Dict[str, Any]:
    """
    Marks a file deleted and removes its binary (best effort). The record
    stays so merge history that references it remains intact.
    """
    file = await get_owned_file(user_id, file_id)

    await get_files_collection().update_one(
        {"_id": file["_id"]},
        {"$set": {"status": FILE_DELETED, "updated_at": utc_now()}}
    )
    file["status"] = FILE_DELETED

    storage_service.remove_file(file["stored_file_name"])

    with LogContext(user_id=str(user_id), file_id=str(file["_id"])):
        logger.info("File soft-deleted")

    return file
