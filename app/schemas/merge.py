from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MergeRequest(BaseModel):
    """
    Merge payload. Count and name rules are enforced by the merge service
    so that their messages match the rest of the API.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_ids: Optional[List[str]] = None
    operation_name: Optional[str] = None


class AnnotationPosition(BaseModel):
    x: Optional[float] = None
    y: Optional[float] = None
    page: Optional[int] = None


class AnnotationRequest(BaseModel):
    type: Optional[str] = None
    content: Optional[str] = None
    position: Optional[AnnotationPosition] = Field(default=None)
