"""
app/models/file.py

Purpose: File document model

- Owner reference and display/stored names
- Storage URL, size and MIME type
- Page count and first-page dimensions
- Status (active/deleted/archived)
"""

from typing import Dict, Any, Optional

from bson import ObjectId

from utils.constants import FILE_ACTIVE, PDF_MIME_TYPE
from utils.time_utils import utc_now, to_iso


def new_file_document(
    user_id: ObjectId,
    original_file_name: str,
    stored_file_name: str,
    file_url: str,
    file_size: int,
    metadata: Dict[str, Any],
    mime_type: str = PDF_MIME_TYPE,
) -> Dict[str, Any]:
    """
    Builds a file document ready for insertion.

    Args:
        user_id: Owner id
        original_file_name: Display name
        stored_file_name: Unique on-disk name
        file_url: Relative URL the binary is served from
        file_size: Size in bytes
        metadata: page_count, width, height, version
        mime_type: Stored MIME type
    """
    now = utc_now()
    return {
        "user_id": user_id,
        "original_file_name": original_file_name,
        "stored_file_name": stored_file_name,
        "file_url": file_url,
        "file_size": file_size,
        "mime_type": mime_type,
        "upload_timestamp": now,
        "status": FILE_ACTIVE,
        "metadata": {
            "page_count": metadata.get("page_count", 0),
            "width": metadata.get("width"),
            "height": metadata.get("height"),
            "version": metadata.get("version"),
        },
        "created_at": now,
        "updated_at": now,
    }


def to_public(file: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if file is None:
        return None
    metadata = file.get("metadata") or {}
    return {
        "id": str(file["_id"]),
        "userId": str(file["user_id"]),
        "originalFileName": file.get("original_file_name"),
        "storedFileName": file.get("stored_file_name"),
        "fileUrl": file.get("file_url"),
        "fileSize": file.get("file_size"),
        "mimeType": file.get("mime_type", PDF_MIME_TYPE),
        "uploadTimestamp": to_iso(file.get("upload_timestamp")),
        "status": file.get("status", FILE_ACTIVE),
        "metadata": {
            "pageCount": metadata.get("page_count", 0),
            "width": metadata.get("width"),
            "height": metadata.get("height"),
            "version": metadata.get("version"),
        },
        "createdAt": to_iso(file.get("created_at")),
        "updatedAt": to_iso(file.get("updated_at")),
    }
