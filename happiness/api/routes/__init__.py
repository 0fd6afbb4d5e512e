"""API routes package."""

from happiness.api.routes import auth, entries, profile

__all__ = [
    "auth",
    "entries",
    "profile",
]
