"""Authentication schemas."""

from typing import Any

from pydantic import Field, field_validator

from happiness.schemas.base import BaseSchema
from happiness.schemas.user import UserRead


def normalize_email(email: str) -> str:
    """Lower-case the domain part only; the local part stays as given."""
    local, sep, domain = email.rpartition("@")
    if not sep:
        return email
    return f"{local}@{domain.lower()}"


class LoginRequest(BaseSchema):
    """
    Request schema for email login.

    email is optional at the schema level so the route can answer a
    missing email with a 400 instead of a generic validation error.
    Any non-blank string is accepted as an email.
    """

    email: str | None = Field(None, max_length=255)
    name: str | None = Field(None, max_length=255)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginResponse(BaseSchema):
    """Response schema for successful authentication."""

    token: str
    user: UserRead
