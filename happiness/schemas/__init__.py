"""Pydantic schemas for API request/response validation."""

from happiness.schemas.user import UserRead
from happiness.schemas.auth import LoginRequest, LoginResponse
from happiness.schemas.entries import (
    EntryCreate,
    EntryListResponse,
    EntryRead,
    EntrySubmitResponse,
)
from happiness.schemas.profile import ProfileResponse, ProfileUpdate, ProfileUpdateResponse

__all__ = [
    # User
    "UserRead",
    # Auth
    "LoginRequest",
    "LoginResponse",
    # Entries
    "EntryCreate",
    "EntryListResponse",
    "EntryRead",
    "EntrySubmitResponse",
    # Profile
    "ProfileResponse",
    "ProfileUpdate",
    "ProfileUpdateResponse",
]
