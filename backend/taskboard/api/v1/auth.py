"""Authentication endpoints: registration, login and profile."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import Field
from sqlalchemy import select

from taskboard.db.session import DBSession
from taskboard.exceptions import AuthenticationError, NotFoundError, ValidationError
from taskboard.models.user import User
from taskboard.schemas import CamelModel, UserResponse
from taskboard.services.membership import find_user_by_email
from taskboard.services.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

router = APIRouter()
logger = structlog.get_logger()
security = HTTPBearer(auto_error=False)


class CredentialsRequest(CamelModel):
    """Email/password pair; emptiness is checked by the endpoint."""

    email: str | None = None
    password: str | None = None


class RegisterRequest(CredentialsRequest):
    name: str | None = Field(None, max_length=255)


class ProfileUpdate(CamelModel):
    name: str | None = Field(None, max_length=255)


class AuthResponse(CamelModel):
    user: UserResponse
    token: str


class MeResponse(CamelModel):
    user: UserResponse


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: DBSession,
) -> User:
    """Get the current authenticated user from JWT token."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_access_token(credentials.credentials)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationError("Invalid token")
    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]


def _require_credentials(payload: CredentialsRequest) -> tuple[str, str]:
    email = (payload.email or "").strip()
    if not email or not payload.password:
        raise ValidationError("Email and password are required")
    return email, payload.password


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: DBSession) -> dict:
    """Create an account and issue a token."""
    email, password = _require_credentials(payload)

    if await find_user_by_email(db, email) is not None:
        raise ValidationError("Email already in use")

    name = payload.name.strip() if payload.name else None
    user = User(email=email, password_hash=hash_password(password), name=name or None)
    db.add(user)
    await db.commit()

    logger.info("User registered", user_id=user.id)
    return {"user": user, "token": create_access_token(user.id)}


@router.post("/login", response_model=AuthResponse)
async def login(payload: CredentialsRequest, db: DBSession) -> dict:
    """Exchange email and password for a token."""
    email, password = _require_credentials(payload)

    user = await find_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Login rejected", email=email)
        raise AuthenticationError("Invalid credentials")

    logger.info("User logged in", user_id=user.id)
    return {"user": user, "token": create_access_token(user.id)}


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: CurrentUser) -> dict:
    """Get current user information."""
    return {"user": current_user}


@router.put("/me", response_model=MeResponse)
async def update_me(payload: ProfileUpdate, current_user: CurrentUser, db: DBSession) -> dict:
    """Update the display name; blank clears it."""
    result = await db.execute(select(User).where(User.id == current_user.id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")

    user.name = payload.name.strip() if payload.name and payload.name.strip() else None
    await db.commit()

    logger.info("User profile updated", user_id=user.id)
    return {"user": user}
