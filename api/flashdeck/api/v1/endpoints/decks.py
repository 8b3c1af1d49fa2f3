"""
Deck endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional
from flashdeck.actions.decks import create_deck_action, update_deck_action, delete_deck_action
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser, get_optional_user, require_user
from flashdeck.schemas.card import DeckPageResponse
from flashdeck.schemas.deck import CreateDeckRequest, DeckMutationResponse
from flashdeck.schemas.progress import StudyPageResponse
from flashdeck.services.page_service import get_deck_page, get_study_page

router = APIRouter(prefix="/decks", tags=["decks"])


@router.post("", response_model=DeckMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_deck(
    request: CreateDeckRequest,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Create a deck. Free plans are limited to a fixed number of decks."""
    return create_deck_action(session, current_user, request)


@router.get("/{deck_id}", response_model=DeckPageResponse)
async def get_deck(
    deck_id: int,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Get a deck with its cards, newest first."""
    return get_deck_page(session, require_user(current_user), deck_id)


@router.put("/{deck_id}", response_model=DeckMutationResponse)
async def update_deck(
    deck_id: int,
    request: CreateDeckRequest,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Update a deck's title and description."""
    return update_deck_action(session, current_user, {"deck_id": deck_id, **request.model_dump()})


@router.delete("/{deck_id}", response_model=DeckMutationResponse)
async def delete_deck(
    deck_id: int,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Delete a deck and all of its cards."""
    return delete_deck_action(session, current_user, {"deck_id": deck_id})


@router.get("/{deck_id}/study", response_model=StudyPageResponse)
async def get_study(
    deck_id: int,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Get everything a study session needs: cards in study order and the caller's progress."""
    return get_study_page(session, require_user(current_user), deck_id)
