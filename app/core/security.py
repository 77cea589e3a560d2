"""
app/core/security.py

Purpose: Credentials and bearer tokens

- Salted password hashing (passlib)
- Signed, time-limited access tokens (itsdangerous)
- FastAPI dependency resolving the authenticated user
"""

from typing import Optional, Dict, Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger
from utils.constants import (
    ACCOUNT_ACTIVE,
    MSG_TOKEN_EXPIRED,
    MSG_TOKEN_INVALID,
    MSG_TOKEN_MISSING,
)
from utils.validation_utils import parse_object_id

logger = get_logger(__name__)

TOKEN_SALT = "pdfdesk-access"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Compares a candidate password with a stored hash. A missing or
    unrecognized hash never matches.
    """
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.SECRET_KEY, salt=TOKEN_SALT)


def create_access_token(user_id) -> str:
    """
    Issues a signed token carrying the user id. Lifetime is enforced on
    decode using TOKEN_EXPIRE_MINUTES.
    """
    return _serializer().dumps({"user_id": str(user_id)})


def decode_access_token(token: str, max_age: Optional[int] = None) -> str:
    """
    Verifies a token and returns the user id it carries.

    Args:
        token: Bearer token
        max_age: Lifetime in seconds; defaults to TOKEN_EXPIRE_MINUTES

    Raises:
        AuthenticationError: If the token is expired, tampered or malformed
    """
    if max_age is None:
        max_age = settings.TOKEN_EXPIRE_MINUTES * 60
    try:
        payload = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        raise AuthenticationError(MSG_TOKEN_EXPIRED)
    except BadSignature:
        raise AuthenticationError(MSG_TOKEN_INVALID)

    user_id = payload.get("user_id") if isinstance(payload, dict) else None
    if not user_id:
        raise AuthenticationError(MSG_TOKEN_INVALID)
    return user_id


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Resolves the user behind the `Authorization: Bearer <token>` header.

    Raises:
        AuthenticationError: Missing/invalid/expired token, unknown user or
            an account that is no longer active
    """
    from app.services.user_service import get_user_by_id

    if credentials is None or not credentials.credentials:
        raise AuthenticationError(MSG_TOKEN_MISSING)

    user_id = parse_object_id(decode_access_token(credentials.credentials))
    if user_id is None:
        raise AuthenticationError(MSG_TOKEN_INVALID)

    user = await get_user_by_id(user_id)
    if not user or user.get("account_status") != ACCOUNT_ACTIVE:
        raise AuthenticationError(MSG_TOKEN_INVALID)

    return user
