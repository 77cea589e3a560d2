from pydantic import BaseModel
from typing import Optional, Any

class ErrorResponse(BaseModel):
    """
    Standard error response structure.
    """
    success: bool = False
    error: str
    code: str
    details: Optional[Any] = None

class SuccessResponse(BaseModel):
    """
    Standard success envelope.
    """
    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None


def ok(data: Any = None, message: Optional[str] = None) -> dict:
    """Builds a success envelope, omitting the message when not given."""
    body = SuccessResponse(data=data, message=message).model_dump()
    if message is None:
        body.pop("message")
    return body
