"""
app/api/editor.py

Purpose: Page-level editor endpoint

- Applies text, watermark, rotation, deletion and image operations
- Responds with the newly created derived file
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends, status

from app.core.security import get_current_user
from app.models.file import to_public
from app.schemas.editor import ModifyRequest
from app.schemas.response import ok
from app.services import editor_service
from utils.constants import MSG_PDF_MODIFIED

router = APIRouter()


@router.post("/{file_id}/modify", status_code=status.HTTP_201_CREATED)
async def modify_pdf(
    file_id: str,
    payload: ModifyRequest,
    user: Dict[str, Any] = Depends(get_current_user),
):
    file = await editor_service.modify_file(user["_id"], file_id, payload.operations)
    return ok({"file": to_public(file)}, MSG_PDF_MODIFIED)
