"""
Deck actions.
"""
import logging
from typing import Optional, Union

from sqlmodel import Session

from flashdeck.actions.base import action_boundary
from flashdeck.core.cache import invalidate_deck_views, view_cache, dashboard_path
from flashdeck.core.security import CurrentUser, deck_limit_for, require_user
from flashdeck.schemas.deck import (
    CreateDeckRequest,
    DeckMutationResponse,
    DeckResponse,
    DeleteDeckRequest,
    UpdateDeckRequest,
)
from flashdeck.schemas.utils import parse_input
from flashdeck.services import deck_service

logger = logging.getLogger(__name__)


def create_deck_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[CreateDeckRequest, dict]
) -> DeckMutationResponse:
    """
    Create a deck for the caller.

    Callers without the unlimited-decks feature may own at most
    settings.free_deck_limit decks; the limit is a hard ceiling.
    """
    current_user = require_user(current_user)
    request = parse_input(CreateDeckRequest, data)

    with action_boundary(session, "Failed to create deck"):
        deck = deck_service.create_deck(
            session,
            current_user.id,
            title=request.title,
            description=request.description,
            limit=deck_limit_for(current_user)
        )
        response = DeckMutationResponse(deck=DeckResponse.model_validate(deck))

    view_cache.invalidate(dashboard_path())
    return response


def update_deck_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[UpdateDeckRequest, dict]
) -> DeckMutationResponse:
    """Update the title and description of one of the caller's decks."""
    current_user = require_user(current_user)
    request = parse_input(UpdateDeckRequest, data)

    with action_boundary(session, "Failed to update deck"):
        deck = deck_service.update_deck(
            session,
            request.deck_id,
            current_user.id,
            title=request.title,
            description=request.description
        )
        response = DeckMutationResponse(deck=DeckResponse.model_validate(deck))

    invalidate_deck_views(request.deck_id, include_dashboard=True)
    return response


def delete_deck_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[DeleteDeckRequest, dict]
) -> DeckMutationResponse:
    """Delete one of the caller's decks together with its cards."""
    current_user = require_user(current_user)
    request = parse_input(DeleteDeckRequest, data)

    with action_boundary(session, "Failed to delete deck"):
        deck, cards_deleted = deck_service.delete_deck(session, request.deck_id, current_user.id)

    invalidate_deck_views(request.deck_id, include_dashboard=True)
    return DeckMutationResponse(deck=deck, cards_deleted=cards_deleted)
