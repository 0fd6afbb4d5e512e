"""Pydantic schemas for the user profile and its context facts."""

from pydantic import BaseModel, RootModel

from happiness.schemas.user import UserRead


class ProfileUpdate(RootModel[dict[str, str | list[str]]]):
    """
    Replacement set of context facts.

    Each key maps to a single string or a list of strings. Numbers,
    booleans, nulls and nested objects are rejected rather than coerced.
    """

    def to_pairs(self) -> list[tuple[str, str]]:
        """Flatten into (key, value) pairs, preserving request order."""
        pairs: list[tuple[str, str]] = []
        for key, values in self.root.items():
            if isinstance(values, list):
                pairs.extend((key, value) for value in values)
            else:
                pairs.append((key, values))
        return pairs


class ProfileResponse(BaseModel):
    """User profile with context grouped by key."""

    user: UserRead
    context: dict[str, list[str]]


class ProfileUpdateResponse(BaseModel):
    """Acknowledgement of a profile update."""

    success: bool
    message: str
