"""
Study progress endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session
from typing import Optional
from flashdeck.actions.progress import mark_card_learned_action
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser, get_optional_user, require_user
from flashdeck.schemas.progress import MarkCardLearnedRequest, MarkCardLearnedResponse, ProgressListResponse
from flashdeck.services.progress_service import get_learned_cards_count, get_user_card_progress

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=ProgressListResponse)
async def get_progress(
    deck_id: Optional[int] = None,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Get the caller's progress rows, optionally for one deck, most recently reviewed first."""
    current_user = require_user(current_user)
    return ProgressListResponse(
        progress=get_user_card_progress(session, current_user.id, deck_id=deck_id),
        learned_total=get_learned_cards_count(session, current_user.id)
    )


@router.post("/mark-learned", response_model=MarkCardLearnedResponse)
async def mark_card_learned(
    request: MarkCardLearnedRequest,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Mark a card learned (or not learned) for the caller."""
    return mark_card_learned_action(session, current_user, request)
