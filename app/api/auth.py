"""
app/api/auth.py

Purpose: Authentication endpoints

- Register and log in, returning a bearer token and public profile
- Logout is client-side token discard
- Current user profile
"""

from typing import Dict, Any

from fastapi import APIRouter, Depends, status

from app.core.logging import get_logger
from app.core.security import get_current_user
from app.models.user import to_public
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.response import ok
from app.services import user_service
from utils.constants import MSG_LOGGED_IN, MSG_LOGGED_OUT, MSG_REGISTERED

logger = get_logger(__name__)
router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest):
    user, token = await user_service.register_user(
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
    )
    return ok({"token": token, "user": to_public(user)}, MSG_REGISTERED)


@router.post("/login")
async def login(payload: LoginRequest):
    user, token = await user_service.authenticate_user(payload.email, payload.password)
    return ok({"token": token, "user": to_public(user)}, MSG_LOGGED_IN)


@router.post("/logout")
async def logout():
    """
    Tokens are not revoked server side; the client discards its token.
    """
    return ok(message=MSG_LOGGED_OUT)


@router.get("/me")
async def me(user: Dict[str, Any] = Depends(get_current_user)):
    return ok({"user": to_public(user)})
