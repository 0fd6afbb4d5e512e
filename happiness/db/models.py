"""
SQLAlchemy 2.0 Models for the Happiness Assistant.

Uses modern declarative syntax with Mapped[] type annotations.
Column types are portable so the same models run on PostgreSQL and SQLite.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from happiness.db.base import Base


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Core user account.

    Created on first login by email. Never deleted by the API.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    entries: Mapped[list["Entry"]] = relationship(
        "Entry", back_populates="user", cascade="all, delete-orphan"
    )
    context_facts: Mapped[list["ContextFact"]] = relationship(
        "ContextFact", back_populates="user", cascade="all, delete-orphan"
    )


class Entry(Base):
    """
    A journal entry and the advice generated for it.

    The AI response is produced before the row is inserted, so rows are
    written once and never updated.
    """

    __tablename__ = "user_entries"
    __table_args__ = (
        Index("idx_user_entries_user_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    ai_response: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="entries")


class ContextFact(Base):
    """
    Key/value annotation about a user (e.g. goal: sleep better).

    A key may hold several values. The whole set is replaced on every
    profile update.
    """

    __tablename__ = "user_context"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    context_key: Mapped[str] = mapped_column(Text, nullable=False)
    context_value: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="context_facts")
