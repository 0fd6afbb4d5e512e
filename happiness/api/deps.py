"""
FastAPI Dependencies for Authentication.

Key patterns:
1. get_current_user: Extracts and validates JWT, returns User object
2. User-scoped queries: All data access takes user_id explicitly
3. No global "current user" state - always pass user explicitly

Security model:
- JWT presented in the Authorization header: 'Bearer <token>'
- Token payload carries a numeric 'userId' claim
- Every failure yields the same 401 response
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from happiness.config import get_settings
from happiness.db.models import User
from happiness.db.session import get_db

settings = get_settings()

USER_ID_CLAIM = "userId"


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: int) -> str:
    """
    Create a JWT access token for a user.

    Token payload contains:
    - userId: numeric user id
    - exp: expiration timestamp

    Security notes:
    - We do NOT store sensitive data in JWT (email, name, etc.)
    - Token is stateless; revocation requires token blocklist (not implemented)
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        USER_ID_CLAIM: user_id,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    user_id = payload.get(USER_ID_CLAIM)
    # bool is an int subclass; a True claim is not a user id
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    return user_id


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the bearer token from the Authorization header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise _credentials_exception()


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Validate JWT and return the current authenticated user.

    This is the primary authentication dependency. Use it in route handlers:

        @router.get("/entries")
        async def list_entries(user: CurrentUser):
            # user is guaranteed to be authenticated
            ...

    Raises 401 if:
    - Token is missing, invalid, or expired
    - User no longer exists in database
    """
    user_id = decode_access_token(token)
    if user_id is None:
        raise _credentials_exception()

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise _credentials_exception()

    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
