"""
utils/time_utils.py

Purpose: Time helpers

- Current timestamps for stored documents
- Serialization of stored datetimes
"""

from datetime import datetime
from typing import Optional


def utc_now() -> datetime:
    """
    Returns the current UTC time, truncated to milliseconds to match what
    MongoDB stores.
    """
    now = datetime.utcnow()
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def to_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Formats a stored datetime for API responses.
    """
    if not dt:
        return None
    return dt.isoformat() + "Z" if dt.tzinfo is None else dt.isoformat()
