"""
Card endpoints.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional
from flashdeck.actions.cards import create_card_action, update_card_action, delete_card_action
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser, get_optional_user
from flashdeck.schemas.card import CardContent, CardMutationResponse

router = APIRouter(tags=["cards"])


@router.post("/decks/{deck_id}/cards", response_model=CardMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_card(
    deck_id: int,
    request: CardContent,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Add a card to a deck."""
    return create_card_action(session, current_user, {"deck_id": deck_id, **request.model_dump()})


@router.put("/cards/{card_id}", response_model=CardMutationResponse)
async def update_card(
    card_id: int,
    request: CardContent,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Edit the front and back of a card."""
    return update_card_action(session, current_user, {"card_id": card_id, **request.model_dump()})


@router.delete("/cards/{card_id}", response_model=CardMutationResponse)
async def delete_card(
    card_id: int,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    session: Session = Depends(get_session)
):
    """Delete a card."""
    return delete_card_action(session, current_user, {"card_id": card_id})
