"""
Auth Routes

Username/password registration and cookie-session login.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict

from fitcoach.api.dependencies import (
    CurrentUserId,
    SessionStoreDep,
    get_session_id,
)
from fitcoach.config.settings import settings
from fitcoach.infrastructure.auth.passwords import hash_password, verify_password
from fitcoach.infrastructure.db.dependencies import UserRepoDep
from fitcoach.infrastructure.exceptions import (
    AuthError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)


logger = logging.getLogger(__name__)

router = APIRouter()

USERNAME_MIN_LENGTH = 3
PASSWORD_MIN_LENGTH = 6


# ============================================================================
# Request/Response Models
# ============================================================================

class RegisterRequest(BaseModel):
    """Fields are optional so missing values surface as a 400."""
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of an account (never includes the password hash)."""
    id: int
    username: str
    email: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


def _set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    users: UserRepoDep,
    store: SessionStoreDep,
):
    """
    Create an account and log it in.

    Raises 400 for missing or too-short fields and 409 if the username is taken.
    """
    if not body.username or not body.password:
        raise ValidationError("Missing required fields: username and password")
    username = body.username.strip()
    if len(username) < USERNAME_MIN_LENGTH:
        raise ValidationError(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(body.password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")

    if await users.get_by_username(username):
        raise DuplicateError("Username already exists", operation="insert", table="users")

    user = await users.create(
        username=username,
        password_hash=hash_password(body.password),
        email=body.email or None,
    )

    session_id = await store.create(user.id)
    _set_session_cookie(response, session_id)
    logger.info(f"Registered user {user.id}")
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    response: Response,
    users: UserRepoDep,
    store: SessionStoreDep,
):
    """Start a session. 400 for missing credentials, 401 for wrong ones."""
    if not body.username or not body.password:
        raise ValidationError("Missing credentials: username and password are required")

    user = await users.get_by_username(body.username.strip())
    if user is None or not verify_password(body.password, user.password_hash):
        raise AuthError("Invalid username or password")

    session_id = await store.create(user.id)
    _set_session_cookie(response, session_id)
    return user


@router.post("/logout")
async def logout(
    response: Response,
    store: SessionStoreDep,
    session_id: Optional[str] = Depends(get_session_id),
):
    """End the current session. Succeeds even when not logged in."""
    if session_id:
        await store.delete(session_id)
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True}


@router.get("/user", response_model=UserResponse)
async def get_current_user(user_id: CurrentUserId, users: UserRepoDep):
    """The logged-in user."""
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found", operation="select", table="users")
    return user
