"""
app/schemas/auth.py

Purpose: Auth request schemas

- Registration and login payloads (camelCase on the wire)
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from utils.validation_utils import normalize_email, validate_email


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(_CamelModel):
    full_name: str = Field(..., min_length=2, max_length=100, description="Display name")
    email: str = Field(..., description="Login email, stored lowercased")
    password: str = Field(..., min_length=6, description="Plain password, hashed before storage")

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_full_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = normalize_email(v)
        if not validate_email(v):
            raise ValueError("Please provide a valid email")
        return v

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "fullName": "Jane Doe",
                "email": "jane@example.com",
                "password": "s3cret!"
            }
        }
    )


class LoginRequest(_CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = normalize_email(v)
        if not validate_email(v):
            raise ValueError("Please provide a valid email")
        return v
