"""
app/services/user_service.py

Purpose: User data management

- Registration with hashed credentials
- Login with status and password checks
- User retrieval
"""

from typing import Optional, Dict, Any, Tuple

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from app.db.mongo import get_users_collection
from app.core.exceptions import AccountInactiveError, ConflictError, InvalidCredentialsError
from app.core.logging import get_logger, LogContext
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import new_user_document
from utils.constants import ACCOUNT_ACTIVE, MSG_EMAIL_TAKEN
from utils.time_utils import utc_now

logger = get_logger(__name__)


async def get_user_by_id(user_id: ObjectId) -> Optional[Dict[str, Any]]:
    users = get_users_collection()
    return await users.find_one({"_id": user_id})


async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    users = get_users_collection()
    return await users.find_one({"email": email})


async def register_user(full_name: str, email: str, password: str) -> Tuple[Dict[str, Any], str]:
    """
    Creates a user and issues a token.

    Args:
        full_name: Display name
        email: Normalized email
        password: Plain password

    Returns:
        (user document, bearer token)

    Raises:
        ConflictError: If the email is already registered
    """
    users = get_users_collection()

    if await users.find_one({"email": email}):
        logger.info("Registration rejected, email already registered")
        raise ConflictError(MSG_EMAIL_TAKEN)

    user = new_user_document(full_name, email, hash_password(password))
    try:
        result = await users.insert_one(user)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration
        raise ConflictError(MSG_EMAIL_TAKEN)

    user["_id"] = result.inserted_id

    with LogContext(user_id=str(result.inserted_id)):
        logger.info("New user registered")

    return user, create_access_token(result.inserted_id)


async def authenticate_user(email: str, password: str) -> Tuple[Dict[str, Any], str]:
    """
    Verifies credentials, records the login and issues a token.

    Unknown email and wrong password raise the same error so the response
    does not reveal whether the email exists.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        AccountInactiveError: Account suspended or deleted
    """
    users = get_users_collection()

    user = await users.find_one({"email": email})
    if not user:
        logger.info("Login failed, invalid credentials")
        raise InvalidCredentialsError()

    with LogContext(user_id=str(user["_id"])):
        if user.get("account_status") != ACCOUNT_ACTIVE:
            logger.warning("Login rejected, account not active")
            raise AccountInactiveError()

        if not verify_password(password, user.get("password_hash")):
            logger.info("Login failed, invalid credentials")
            raise InvalidCredentialsError()

        now = utc_now()
        await users.update_one(
            {"_id": user["_id"]},
            {"$set": {"last_login": now, "updated_at": now}}
        )
        user["last_login"] = now

        logger.info("User logged in")

    return user, create_access_token(user["_id"])
