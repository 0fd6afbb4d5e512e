"""Profile routes: read the user and their context facts, replace the facts."""

import logging
from collections.abc import Sequence

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from happiness.api.deps import CurrentUser, DbSession
from happiness.db.models import ContextFact
from happiness.schemas.profile import ProfileResponse, ProfileUpdate, ProfileUpdateResponse
from happiness.schemas.user import UserRead
from happiness.services.context_assembler import get_context_facts

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


def group_context(facts: Sequence[ContextFact]) -> dict[str, list[str]]:
    """Group facts by key, keeping values in insertion order."""
    grouped: dict[str, list[str]] = {}
    for fact in facts:
        grouped.setdefault(fact.context_key, []).append(fact.context_value)
    return grouped


async def replace_context(
    db: AsyncSession, user_id: int, pairs: list[tuple[str, str]]
) -> list[ContextFact]:
    """
    Replace a user's whole context set.

    Delete and insert share the caller's transaction; nothing is visible
    until it commits.
    """
    await db.execute(delete(ContextFact).where(ContextFact.user_id == user_id))
    facts = [
        ContextFact(user_id=user_id, context_key=key, context_value=value)
        for key, value in pairs
    ]
    db.add_all(facts)
    await db.flush()
    return facts


@router.get("", response_model=ProfileResponse)
async def get_profile(current_user: CurrentUser, db: DbSession) -> ProfileResponse:
    """Get the current user and their context grouped by key."""
    try:
        facts = await get_context_facts(db, current_user.id)
    except SQLAlchemyError:
        logger.exception("Failed to fetch profile for user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch profile",
        )

    return ProfileResponse(
        user=UserRead.model_validate(current_user),
        context=group_context(facts),
    )


@router.put("", response_model=ProfileUpdateResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ProfileUpdateResponse:
    """
    Replace the current user's context facts.

    Body maps each key to a string or a list of strings:

        {"mood": ["happy", "calm"], "goal": "sleep"}
    """
    user_id = current_user.id
    try:
        facts = await replace_context(db, user_id, data.to_pairs())
        await db.commit()
    except SQLAlchemyError:
        # Rollback expires current_user; log the id read before it
        await db.rollback()
        logger.exception("Failed to update profile for user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile",
        )

    logger.info("Replaced context for user %s with %d facts", user_id, len(facts))
    return ProfileUpdateResponse(success=True, message="Profile updated successfully")
