"""User schemas."""

from happiness.schemas.base import BaseSchema, IDMixin


class UserRead(BaseSchema, IDMixin):
    """Public view of a user."""

    email: str
    name: str | None = None
