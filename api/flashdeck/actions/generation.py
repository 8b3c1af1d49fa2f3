"""
AI flashcard generation action.
"""
import logging
from typing import Optional, Union

from sqlmodel import Session

from flashdeck.actions.base import action_boundary
from flashdeck.core.cache import invalidate_deck_views
from flashdeck.core.exceptions import DescriptionRequiredError, EntitlementRequiredError
from flashdeck.core.security import CurrentUser, require_user
from flashdeck.models.enums import Feature
from flashdeck.schemas.card import CardResponse
from flashdeck.schemas.generation import GenerateFlashcardsRequest, GenerateFlashcardsResponse
from flashdeck.schemas.utils import parse_input
from flashdeck.services import card_service, deck_service
from flashdeck.services.generation_service import FlashcardGenerator, generate_flashcards

logger = logging.getLogger(__name__)


def generate_flashcards_with_ai_action(
    session: Session,
    current_user: Optional[CurrentUser],
    data: Union[GenerateFlashcardsRequest, dict],
    generator: Optional[FlashcardGenerator] = None
) -> GenerateFlashcardsResponse:
    """
    Generate cards for one of the caller's decks from its title and description.

    Preconditions, checked in order before the external service is called:
    authenticated caller, AI generation feature, valid input, deck owned by
    the caller, non-blank deck description. The generated cards are written
    in one transaction, so a failure at any point creates no cards.
    """
    current_user = require_user(current_user)
    if not current_user.has(Feature.AI_FLASHCARD_GENERATION):
        raise EntitlementRequiredError("AI flashcard generation requires a Pro plan")
    request = parse_input(GenerateFlashcardsRequest, data)

    deck = deck_service.require_deck(session, request.deck_id, current_user.id)
    title, description = deck.title, deck.description
    if not description or not description.strip():
        raise DescriptionRequiredError("Add a description to this deck before generating cards with AI")

    # No connection may stay checked out while the generator runs;
    # create_cards verifies ownership again before writing.
    session.rollback()

    cards, token_usage = generate_flashcards(
        title,
        description,
        request.count,
        generator=generator
    )

    with action_boundary(session, "Failed to save generated cards"):
        created = card_service.create_cards(
            session,
            request.deck_id,
            current_user.id,
            [(card.front, card.back) for card in cards]
        )
        response = GenerateFlashcardsResponse(
            cards=[CardResponse.model_validate(card) for card in created],
            count=len(created),
            token_usage=token_usage or None
        )

    logger.info(f"Generated {response.count} cards for deck {request.deck_id} (user {current_user.id})")
    invalidate_deck_views(request.deck_id, include_dashboard=True)
    return response
