"""
Card actions.
"""
from typing import Optional, Union

from sqlmodel import Session

from flashdeck.actions.base import action_boundary
from flashdeck.core.cache import invalidate_deck_views
from flashdeck.core.security import CurrentUser, require_user
from flashdeck.schemas.card import (
    CardMutationResponse,
    CardResponse,
    CreateCardRequest,
    DeleteCardRequest,
    UpdateCardRequest,
)
from flashdeck.schemas.utils import parse_input
from flashdeck.services import card_service


def create_card_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[CreateCardRequest, dict]
) -> CardMutationResponse:
    """Add a card to one of the caller's decks."""
    current_user = require_user(current_user)
    request = parse_input(CreateCardRequest, data)

    with action_boundary(session, "Failed to create card"):
        card = card_service.create_card(
            session,
            request.deck_id,
            current_user.id,
            front=request.front,
            back=request.back
        )
        response = CardMutationResponse(card=CardResponse.model_validate(card))

    invalidate_deck_views(request.deck_id, include_dashboard=True)
    return response


def update_card_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[UpdateCardRequest, dict]
) -> CardMutationResponse:
    """Edit a card in one of the caller's decks."""
    current_user = require_user(current_user)
    request = parse_input(UpdateCardRequest, data)

    with action_boundary(session, "Failed to update card"):
        card = card_service.update_card(
            session,
            request.card_id,
            current_user.id,
            front=request.front,
            back=request.back
        )
        response = CardMutationResponse(card=CardResponse.model_validate(card))

    invalidate_deck_views(response.card.deck_id)
    return response


def delete_card_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[DeleteCardRequest, dict]
) -> CardMutationResponse:
    """Delete a card from one of the caller's decks."""
    current_user = require_user(current_user)
    request = parse_input(DeleteCardRequest, data)

    with action_boundary(session, "Failed to delete card"):
        card = card_service.delete_card(session, request.card_id, current_user.id)

    invalidate_deck_views(card.deck_id)
    return CardMutationResponse(card=card)
