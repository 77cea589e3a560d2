"""
app/api/merge.py

Purpose: Merge endpoints

- Merge two or more files into a new one
- Merge history and details (file references populated)
- Annotations on merge operations
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends, status

from app.core.security import get_current_user
from app.models.file import to_public as file_to_public
from app.schemas.merge import AnnotationRequest, MergeRequest
from app.schemas.response import ok
from app.services import merge_service
from utils.constants import MSG_ANNOTATION_ADDED, MSG_MERGED

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def merge_pdfs(payload: MergeRequest, user: Dict[str, Any] = Depends(get_current_user)):
    operation, merged_file = await merge_service.merge_files(
        user["_id"], payload.file_ids, payload.operation_name
    )
    [populated] = await merge_service.populate([operation])
    return ok(
        {"mergeOperation": populated, "mergedFile": file_to_public(merged_file)},
        MSG_MERGED,
    )


# Declared before /{merge_id} so "history" is not taken for an id
@router.get("/history")
async def merge_history(user: Dict[str, Any] = Depends(get_current_user)):
    operations = await merge_service.get_history(user["_id"])
    populated = await merge_service.populate(operations)
    return ok({"count": len(populated), "operations": populated})


@router.get("/{merge_id}")
async def get_merge_operation(merge_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    operation = await merge_service.get_owned_operation(user["_id"], merge_id)
    [populated] = await merge_service.populate([operation])
    return ok({"operation": populated})


@router.post("/{merge_id}/annotate")
async def annotate_merge_operation(
    merge_id: str,
    payload: AnnotationRequest,
    user: Dict[str, Any] = Depends(get_current_user),
):
    operation = await merge_service.add_annotation(
        user["_id"],
        merge_id,
        payload.type,
        payload.content,
        payload.position.model_dump() if payload.position else None,
    )
    [populated] = await merge_service.populate([operation])
    return ok({"operation": populated}, MSG_ANNOTATION_ADDED)
