"""
utils/validation_utils.py

Purpose: Input validation

- Email shape and normalization
- Document id parsing
- Uploaded file name and content checks
- Input sanitization
"""

import re
from pathlib import Path
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

PDF_MIME_TYPES = {"application/pdf", "application/x-pdf"}
PDF_SIGNATURE = b"%PDF-"


def normalize_email(email: str) -> str:
    """
    Lowercases and trims an email address.
    """
    return (email or "").strip().lower()


def validate_email(email: str) -> bool:
    """
    Validates the loose email shape used at registration.

    Args:
        email: Email address (already normalized)

    Returns:
        True if valid, False otherwise
    """
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email))


def parse_object_id(value: str) -> Optional[ObjectId]:
    """
    Parses a hex string into an ObjectId.

    Returns:
        ObjectId, or None when the value is not a valid id
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def is_pdf_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    """
    Accepts a part declared as a PDF either by MIME type or by extension.
    """
    if content_type and content_type.split(";")[0].strip().lower() in PDF_MIME_TYPES:
        return True
    return bool(filename) and Path(filename).suffix.lower() == ".pdf"


def has_pdf_signature(data: bytes) -> bool:
    """
    Checks the leading bytes for the PDF header. Some writers prepend junk,
    so the header is searched within the first kilobyte.
    """
    return PDF_SIGNATURE in data[:1024]


def sanitize_filename(filename: Optional[str], default: str = "document.pdf", max_length: int = 255) -> str:
    """
    Reduces a client supplied file name to a safe display name.

    Args:
        filename: Name from the multipart part or request body
        default: Fallback when nothing usable remains
        max_length: Maximum allowed length

    Returns:
        Display name without directories or control characters
    """
    if not filename:
        return default

    # Strip any directory component (both separators)
    name = filename.replace("\\", "/").split("/")[-1]

    # Remove control characters
    name = re.sub(r"[\x00-\x1f\x7f]", "", name)

    # Normalize whitespace
    name = " ".join(name.split())

    return name[:max_length].strip() or default
