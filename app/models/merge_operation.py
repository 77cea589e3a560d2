"""
app/models/merge_operation.py

Purpose: Merge operation document model

- Ordered source file references and the merged result
- Merge configuration (file order, total pages, compression level)
- Embedded annotations
"""

from typing import Dict, Any, List, Optional

from bson import ObjectId

from app.models import file as file_model
from utils.constants import COMPRESSION_NONE, MERGE_COMPLETED
from utils.time_utils import utc_now, to_iso


def new_merge_operation_document(
    user_id: ObjectId,
    operation_name: str,
    source_file_ids: List[ObjectId],
    merged_file_id: ObjectId,
    file_order: List[str],
    total_pages: int,
    compression_level: str = COMPRESSION_NONE,
    status: str = MERGE_COMPLETED,
) -> Dict[str, Any]:
    now = utc_now()
    return {
        "user_id": user_id,
        "operation_name": operation_name,
        "source_file_ids": list(source_file_ids),
        "merged_file_id": merged_file_id,
        "merge_configuration": {
            "file_order": list(file_order),
            "total_pages": total_pages,
            "compression_level": compression_level,
        },
        "annotations": [],
        "status": status,
        "error_message": None,
        "created_at": now,
        "updated_at": now,
    }


def new_annotation(annotation_type: str, content: Optional[str], position: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    position = position or {}
    return {
        "type": annotation_type,
        "content": content,
        "position": {
            "x": position.get("x"),
            "y": position.get("y"),
            "page": position.get("page"),
        },
        "created_at": utc_now(),
    }


def _annotation_to_public(annotation: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": annotation.get("type"),
        "content": annotation.get("content"),
        "position": annotation.get("position") or {},
        "createdAt": to_iso(annotation.get("created_at")),
    }


def to_public(
    operation: Dict[str, Any],
    files_by_id: Optional[Dict[ObjectId, Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Wire representation of a merge operation.

    When files_by_id is given, source and merged file references are
    populated with the file documents; ids missing from the map stay as
    plain id strings.
    """
    def ref(file_id):
        if files_by_id is not None and file_id in files_by_id:
            return file_model.to_public(files_by_id[file_id])
        return str(file_id) if file_id is not None else None

    configuration = operation.get("merge_configuration") or {}
    return {
        "id": str(operation["_id"]),
        "userId": str(operation["user_id"]),
        "operationName": operation.get("operation_name"),
        "sourceFileIds": [ref(file_id) for file_id in operation.get("source_file_ids", [])],
        "mergedFileId": ref(operation.get("merged_file_id")),
        "mergeConfiguration": {
            "fileOrder": configuration.get("file_order", []),
            "totalPages": configuration.get("total_pages", 0),
            "compressionLevel": configuration.get("compression_level", COMPRESSION_NONE),
        },
        "annotations": [_annotation_to_public(a) for a in operation.get("annotations", [])],
        "status": operation.get("status"),
        "errorMessage": operation.get("error_message"),
        "createdAt": to_iso(operation.get("created_at")),
        "updatedAt": to_iso(operation.get("updated_at")),
    }
