"""
app/models/user.py

Purpose: User document model

- Identity (full name, email) and credential hash
- Account status and subscription tier
- Public profile projection (never includes the hash)
"""

from typing import Dict, Any

from utils.constants import ACCOUNT_ACTIVE, SUBSCRIPTION_FREE
from utils.time_utils import utc_now, to_iso


def new_user_document(full_name: str, email: str, password_hash: str) -> Dict[str, Any]:
    """
    Builds a user document ready for insertion.
    """
    now = utc_now()
    return {
        "full_name": full_name,
        "email": email,
        "password_hash": password_hash,
        "profile_image": None,
        "account_status": ACCOUNT_ACTIVE,
        "subscription": SUBSCRIPTION_FREE,
        "created_at": now,
        "updated_at": now,
        "last_login": now,
    }


def to_public(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Public profile returned by the auth endpoints.
    """
    return {
        "id": str(user["_id"]),
        "fullName": user.get("full_name"),
        "email": user.get("email"),
        "profileImage": user.get("profile_image"),
        "subscription": user.get("subscription", SUBSCRIPTION_FREE),
        "accountStatus": user.get("account_status", ACCOUNT_ACTIVE),
        "createdAt": to_iso(user.get("created_at")),
        "lastLogin": to_iso(user.get("last_login")),
    }
