"""Journal entry routes: submit for advice, browse history."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError

from happiness.api.deps import CurrentUser, DbSession
from happiness.schemas.entries import (
    EntryCreate,
    EntryListResponse,
    EntryRead,
    EntrySubmitResponse,
)
from happiness.services.completion_client import (
    CompletionClient,
    CompletionError,
    get_completion_client,
)
from happiness.services.context_assembler import get_recent_entries
from happiness.services.entry_pipeline import EmptyEntryError, submit_entry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])

RECOMMENDATION_FAILED = "Failed to generate recommendation"


@router.post("", response_model=EntrySubmitResponse)
async def create_entry(
    data: EntryCreate,
    current_user: CurrentUser,
    db: DbSession,
    completion_client: Annotated[CompletionClient, Depends(get_completion_client)],
) -> EntrySubmitResponse:
    """
    Submit an entry and get a personalized recommendation.

    The entry is stored only once the completion service has answered.
    """
    user_id = current_user.id
    try:
        result = await submit_entry(db, user_id, data.content, completion_client)
        await db.commit()
    except EmptyEntryError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (CompletionError, SQLAlchemyError):
        # Rollback expires current_user; log the id read before it
        await db.rollback()
        logger.exception("Entry pipeline failed for user %s", user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=RECOMMENDATION_FAILED,
        )

    return EntrySubmitResponse(
        entry=EntryRead.model_validate(result.entry),
        recommendation=result.recommendation,
    )


@router.get("", response_model=EntryListResponse)
async def list_entries(
    current_user: CurrentUser,
    db: DbSession,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> EntryListResponse:
    """List the current user's entries, newest first."""
    try:
        entries = await get_recent_entries(db, current_user.id, limit=limit, offset=offset)
    except SQLAlchemyError:
        logger.exception("Failed to fetch entries for user %s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch entries",
        )

    return EntryListResponse(entries=[EntryRead.model_validate(e) for e in entries])
