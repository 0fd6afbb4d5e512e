"""Entry submission: validate, build context, ask for advice, persist."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from happiness.db.models import Entry
from happiness.services.completion_client import CompletionClient
from happiness.services.context_assembler import assemble_context

logger = logging.getLogger(__name__)

PROMPT_PREAMBLE = (
    "You are a personal well-being assistant focused on helping people become happier."
)

PROMPT_INSTRUCTIONS = (
    "Please provide personalized, actionable advice to help this person improve their "
    "well-being and happiness. Be empathetic, specific, and solution-focused. Consider "
    "their unique circumstances and history."
)


class EmptyEntryError(ValueError):
    """Submitted entry has no content."""


@dataclass
class EntryResult:
    entry: Entry
    recommendation: str


def build_prompt(context: str, content: str) -> str:
    """Wrap the rendered context and the new entry in the fixed instructions."""
    return (
        f"{PROMPT_PREAMBLE}\n\n"
        f"{context}\n\n"
        f'Current user input: "{content}"\n\n'
        f"{PROMPT_INSTRUCTIONS}"
    )


async def submit_entry(
    db: AsyncSession,
    user_id: int,
    content: str | None,
    completion_client: CompletionClient,
) -> EntryResult:
    """
    Run the recommendation pipeline for an authenticated user.

    The entry row is the only write, and it happens after the completion
    succeeds, so any failure leaves the database untouched.

    Raises:
        EmptyEntryError: content is missing or blank
        CompletionError: the completion service failed
        SQLAlchemyError: a storage operation failed
    """
    if content is None or not content.strip():
        raise EmptyEntryError("Content is required")

    context = await assemble_context(db, user_id)
    prompt = build_prompt(context, content)

    recommendation = await completion_client.complete(prompt)

    entry = Entry(user_id=user_id, content=content, ai_response=recommendation)
    db.add(entry)
    await db.flush()
    await db.refresh(entry)

    logger.info("Stored entry %s for user %s", entry.id, user_id)
    return EntryResult(entry=entry, recommendation=recommendation)
