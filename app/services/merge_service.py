"""
app/services/merge_service.py

Purpose: Merge pipeline and merge history

- Validates the request before touching disk
- Concatenates the caller's files in the requested order
- Records the merged file and a completed merge operation
- History, lookup and annotations of merge operations
"""

from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from app.core.config import settings
from app.core.exceptions import PdfProcessingError, ResourceNotFoundError, ValidationError
from app.core.logging import get_logger, LogContext
from app.db.mongo import get_files_collection, get_merge_operations_collection
from app.models import merge_operation as merge_model
from app.services import file_service, pdf_service, storage_service
from utils.constants import (
    ANNOTATION_TYPES,
    FILE_ACTIVE,
    MERGED_FILE_PREFIX,
    MSG_INVALID_ANNOTATION,
    MSG_MERGE_FAILED,
    MSG_MERGE_FILE_NOT_ON_DISK,
    MSG_MERGE_FILES_MISSING,
    MSG_MERGE_MIN_FILES,
    MSG_MERGE_NAME_REQUIRED,
    MSG_MERGE_NOT_FOUND,
    PDF_EXTENSION,
)
from utils.time_utils import utc_now
from utils.validation_utils import parse_object_id

logger = get_logger(__name__)


def validate_merge_request(file_ids: Optional[List[str]], operation_name: Optional[str]) -> Tuple[List[ObjectId], str]:
    """
    Checks count and name rules.

    Returns:
        (parsed ids in request order, trimmed operation name)

    Raises:
        ValidationError: Fewer than two ids or a blank name
        ResourceNotFoundError: An id that cannot name any file
    """
    if not file_ids or len(file_ids) < 2:
        raise ValidationError(MSG_MERGE_MIN_FILES)

    name = (operation_name or "").strip()
    if not name:
        raise ValidationError(MSG_MERGE_NAME_REQUIRED)

    parsed = [parse_object_id(file_id) for file_id in file_ids]
    if any(object_id is None for object_id in parsed):
        raise ResourceNotFoundError(MSG_MERGE_FILES_MISSING)

    return parsed, name


async def merge_files(user_id: ObjectId, file_ids: Optional[List[str]], operation_name: Optional[str]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Merges the caller's active files, in request order, into a new file.

    Returns:
        (merge operation document, merged file document)

    Raises:
        ValidationError: Bad count or name (nothing is read or written)
        ResourceNotFoundError: Unknown/foreign/inactive file, or a binary
            missing on disk (nothing is written)
        PdfProcessingError: Generic processing failure (cause logged)
    """
    object_ids, name = validate_merge_request(file_ids, operation_name)

    cursor = get_files_collection().find({
        "_id": {"$in": list(set(object_ids))},
        "user_id": user_id,
        "status": FILE_ACTIVE,
    })
    files = {file["_id"]: file for file in await cursor.to_list(length=None)}

    if len(files) != len(set(object_ids)):
        raise ResourceNotFoundError(MSG_MERGE_FILES_MISSING)

    ordered = [files[object_id] for object_id in object_ids]

    with LogContext(user_id=str(user_id), operation="merge"):
        for file in ordered:
            if not storage_service.exists(file["stored_file_name"]):
                logger.warning(f"Source file {file['_id']} missing on disk")
                raise ResourceNotFoundError(
                    MSG_MERGE_FILE_NOT_ON_DISK.format(name=file["original_file_name"])
                )

        logger.info(f"Merging {len(ordered)} file(s) as {name!r}")

        try:
            sources = [storage_service.read_bytes(file["stored_file_name"]) for file in ordered]
            merged, metadata = pdf_service.merge_documents(sources)
            merged_file = await file_service.store_derived_file(
                user_id=user_id,
                original_file_name=f"{name}{PDF_EXTENSION}",
                prefix=MERGED_FILE_PREFIX,
                data=merged,
                metadata=metadata,
            )
        except (PdfProcessingError, OSError) as e:
            logger.error(f"PDF merge failed: {e}", exc_info=True)
            raise PdfProcessingError(MSG_MERGE_FAILED) from e

        operation = merge_model.new_merge_operation_document(
            user_id=user_id,
            operation_name=name,
            source_file_ids=object_ids,
            merged_file_id=merged_file["_id"],
            file_order=[file["original_file_name"] for file in ordered],
            total_pages=metadata["page_count"],
        )
        try:
            result = await get_merge_operations_collection().insert_one(operation)
        except Exception as e:
            logger.error(f"Recording merge operation failed: {e}", exc_info=True)
            await file_service.discard_file(merged_file)
            raise PdfProcessingError(MSG_MERGE_FAILED) from e
        operation["_id"] = result.inserted_id

        logger.info(
            f"Merge {operation['_id']} completed with {metadata['page_count']} page(s)",
            extra={"merge_id": str(operation["_id"])}
        )

    return operation, merged_file


async def populate(operations: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Wire form of merge operations with source and merged files resolved,
    whatever their current status.
    """
    file_ids = []
    for operation in operations:
        file_ids.extend(operation.get("source_file_ids", []))
        if operation.get("merged_file_id") is not None:
            file_ids.append(operation["merged_file_id"])

    files_by_id = await file_service.get_files_by_ids(file_ids)
    return [merge_model.to_public(operation, files_by_id) for operation in operations]


async def get_history(user_id: ObjectId, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    cursor = get_merge_operations_collection().find(
        {"user_id": user_id},
        sort=[("created_at", -1), ("_id", -1)],
        limit=limit or settings.MERGE_HISTORY_LIMIT,
    )
    return await cursor.to_list(length=None)


async def get_owned_operation(user_id: ObjectId, merge_id: str) -> Dict[str, Any]:
    """
    Raises:
        ResourceNotFoundError: Invalid id, absent or not owned
    """
    object_id = parse_object_id(merge_id)
    if object_id is None:
        raise ResourceNotFoundError(MSG_MERGE_NOT_FOUND)

    operation = await get_merge_operations_collection().find_one(
        {"_id": object_id, "user_id": user_id}
    )
    if not operation:
        raise ResourceNotFoundError(MSG_MERGE_NOT_FOUND)
    return operation


async def add_annotation(
    user_id: ObjectId,
    merge_id: str,
    annotation_type: Optional[str],
    content: Optional[str],
    position: Optional[Dict[str, Any]],
) -> Dict[str, Any]:
    """
    Appends an annotation to a merge operation.

    Raises:
        ResourceNotFoundError: Merge operation absent or not owned
        ValidationError: Unsupported annotation type
    """
    operation = await get_owned_operation(user_id, merge_id)

    if annotation_type not in ANNOTATION_TYPES:
        raise ValidationError(MSG_INVALID_ANNOTATION)

    annotation = merge_model.new_annotation(annotation_type, content, position)
    now = utc_now()
    await get_merge_operations_collection().update_one(
        {"_id": operation["_id"]},
        {
            "$push": {"annotations": annotation},
            "$set": {"updated_at": now},
        }
    )
    operation.setdefault("annotations", []).append(annotation)
    operation["updated_at"] = now

    with LogContext(user_id=str(user_id), merge_id=str(operation["_id"])):
        logger.info(f"Added {annotation_type} annotation")

    return operation
