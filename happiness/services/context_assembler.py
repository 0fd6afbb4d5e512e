"""Builds the personal context block that precedes every recommendation prompt."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from happiness.config import get_settings
from happiness.db.models import ContextFact, Entry

settings = get_settings()

NO_CONTEXT_FALLBACK = "No specific context available"
NO_HISTORY_FALLBACK = "No previous conversations"


async def get_context_facts(db: AsyncSession, user_id: int) -> list[ContextFact]:
    """All context facts for a user, in insertion order."""
    result = await db.execute(
        select(ContextFact)
        .where(ContextFact.user_id == user_id)
        .order_by(ContextFact.id)
    )
    return list(result.scalars().all())


async def get_recent_entries(
    db: AsyncSession,
    user_id: int,
    limit: int | None = None,
    offset: int = 0,
) -> list[Entry]:
    """A user's entries, newest first. Ties on created_at fall back to id."""
    result = await db.execute(
        select(Entry)
        .where(Entry.user_id == user_id)
        .order_by(Entry.created_at.desc(), Entry.id.desc())
        .limit(limit if limit is not None else settings.context_history_limit)
        .offset(offset)
    )
    return list(result.scalars().all())


def render_facts(facts: Sequence[ContextFact]) -> str:
    return ", ".join(f"{fact.context_key}: {fact.context_value}" for fact in facts)


def render_history(entries: Sequence[Entry]) -> str:
    return "\n\n".join(f"User: {entry.content}\nAI: {entry.ai_response}" for entry in entries)


def render_context(facts: Sequence[ContextFact], entries: Sequence[Entry]) -> str:
    """
    Render facts and history into one text block.

    Entries are rendered in the order given (callers pass newest first).
    Empty inputs are replaced by fixed fallback sentences.
    """
    return (
        f"User Context: {render_facts(facts) or NO_CONTEXT_FALLBACK}\n\n"
        f"Recent conversation history:\n{render_history(entries) or NO_HISTORY_FALLBACK}"
    )


async def assemble_context(db: AsyncSession, user_id: int) -> str:
    """Load a user's facts and recent history and render them."""
    facts = await get_context_facts(db, user_id)
    entries = await get_recent_entries(db, user_id)
    return render_context(facts, entries)
