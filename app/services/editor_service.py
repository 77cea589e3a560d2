"""
app/services/editor_service.py

Purpose: Edit pipeline

- Resolves the caller's active source file
- Runs the operations through the PDF engine in memory
- Stores the result as a new derived file; the source is never modified
"""

from typing import Any, Dict, Sequence

from bson import ObjectId

from app.core.exceptions import PdfProcessingError
from app.core.logging import get_logger, LogContext
from app.services import file_service, pdf_service, storage_service
from utils.constants import EDITED_DISPLAY_PREFIX, EDITED_FILE_PREFIX, MSG_MODIFY_FAILED

logger = get_logger(__name__)


async def modify_file(user_id: ObjectId, file_id: str, operations: Sequence[Any]) -> Dict[str, Any]:
    """
    Applies edit operations to a stored PDF and records the result.

    Args:
        user_id: Caller id
        file_id: Source file id
        operations: Parsed edit operations, in client order

    Returns:
        The new file document

    Raises:
        ResourceNotFoundError: Source absent, not owned or not active
        ValidationError: Page index outside the document
        PdfProcessingError: Generic processing failure (cause logged)
    """
    source = await file_service.get_owned_file(user_id, file_id, active_only=True)

    with LogContext(user_id=str(user_id), file_id=str(source["_id"]), operation="modify"):
        logger.info(f"Applying {len(operations)} operation(s)")

        try:
            data = storage_service.read_bytes(source["stored_file_name"])
            edited, metadata = pdf_service.apply_operations(data, operations)
            file = await file_service.store_derived_file(
                user_id=user_id,
                original_file_name=f"{EDITED_DISPLAY_PREFIX}{source['original_file_name']}",
                prefix=EDITED_FILE_PREFIX,
                data=edited,
                metadata=metadata,
            )
        except (PdfProcessingError, OSError) as e:
            logger.error(f"PDF modification failed: {e}", exc_info=True)
            raise PdfProcessingError(MSG_MODIFY_FAILED) from e

        logger.info(
            f"Created edited file {file['_id']} with {metadata['page_count']} page(s)"
        )
        return file
