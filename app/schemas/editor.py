"""
app/schemas/editor.py

Purpose: Edit operation schemas

- One model per operation type, discriminated by `type`
- Entries with an unrecognized `type` are dropped before validation
- Wire fields are camelCase (pageIndex, imageBase64, ...)
"""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _Operation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AddTextOperation(_Operation):
    type: Literal["addText"]
    page_index: int = Field(..., ge=0)
    text: str
    x: float = 0
    y: float = 0
    size: Optional[float] = Field(default=None, gt=0)
    color: Optional[str] = None
    font_name: Optional[str] = None


class AddWatermarkOperation(_Operation):
    type: Literal["addWatermark"]
    text: str = Field(..., min_length=1)
    opacity: Optional[float] = Field(default=None, ge=0, le=1)


class RotatePageOperation(_Operation):
    type: Literal["rotatePage"]
    page_index: int = Field(..., ge=0)
    rotation: int

    @field_validator("rotation")
    @classmethod
    def check_right_angle(cls, v: int) -> int:
        if v % 90 != 0:
            raise ValueError("Rotation must be a multiple of 90 degrees")
        return v


class DeletePageOperation(_Operation):
    type: Literal["deletePage"]
    page_index: int = Field(..., ge=0)


class AddImageOperation(_Operation):
    type: Literal["addImage"]
    page_index: int = Field(..., ge=0)
    image_base64: str = Field(..., min_length=1)
    image_type: Optional[str] = None
    x: float = 0
    y: float = 0
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


EditOperation = Annotated[
    Union[
        AddTextOperation,
        AddWatermarkOperation,
        RotatePageOperation,
        DeletePageOperation,
        AddImageOperation,
    ],
    Field(discriminator="type"),
]

OPERATION_TYPES = ("addText", "addWatermark", "rotatePage", "deletePage", "addImage")


class ModifyRequest(BaseModel):
    operations: List[EditOperation] = Field(default_factory=list)

    @field_validator("operations", mode="before")
    @classmethod
    def drop_unknown_operations(cls, v):
        """Entries without a known `type` are ignored rather than rejected."""
        if not isinstance(v, list):
            return v
        return [
            op for op in v
            if isinstance(op, dict) and op.get("type") in OPERATION_TYPES
        ]

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "operations": [
                    {"type": "addText", "pageIndex": 0, "text": "Approved", "x": 50, "y": 700,
                     "size": 18, "color": "#cc0000", "fontName": "Helvetica-Bold"},
                    {"type": "rotatePage", "pageIndex": 1, "rotation": 90},
                    {"type": "deletePage", "pageIndex": 2}
                ]
            }
        }
    )
