"""
Authentication Routes

Endpoints:
- POST /auth/login - Exchange an email for a session token
- GET /auth/me - Get current user profile

Auth Flow:
1. Client POSTs {email, name?} to /auth/login
2. Backend finds the user by email, creating it on first login
3. Backend returns a JWT carrying the userId claim
4. Client sends 'Authorization: Bearer <token>' on every other request
"""

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from happiness.api.deps import CurrentUser, DbSession, create_access_token
from happiness.db.models import User
from happiness.schemas.auth import LoginRequest, LoginResponse, normalize_email
from happiness.schemas.user import UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_or_create_user(db: AsyncSession, email: str, name: str | None) -> User:
    """
    Find a user by email, creating it if absent.

    Two first logins racing on the same email both end up with the row
    that won the unique constraint.
    """
    user = await _get_user_by_email(db, email)
    if user is not None:
        return user

    user = User(email=email, name=name or None)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        existing = await _get_user_by_email(db, email)
        if existing is None:
            raise
        return existing

    await db.refresh(user)
    logger.info("Created user %s", user.id)
    return user


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: DbSession) -> LoginResponse:
    """
    Exchange an email for a session JWT.

    Flow:
    1. Normalize email (lower-case domain)
    2. Find or create user
    3. Return JWT plus the public user record
    """
    if not request.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email is required",
        )

    try:
        user = await get_or_create_user(db, normalize_email(request.email), request.name)
    except SQLAlchemyError:
        logger.exception("Login failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed",
        )

    return LoginResponse(
        token=create_access_token(user.id),
        user=UserRead.model_validate(user),
    )


@router.get("/me", response_model=UserRead)
async def get_me(current_user: CurrentUser) -> UserRead:
    """
    Get the current authenticated user's profile.

    Useful for verifying that a stored token is still valid.
    """
    return UserRead.model_validate(current_user)
