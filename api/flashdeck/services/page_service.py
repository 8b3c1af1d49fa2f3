"""
Read views for the dashboard, deck and study pages.

Payloads are cached per (path, user) in the view cache and rebuilt after
any action invalidates them.
"""
import logging

from sqlmodel import Session

from flashdeck.core.cache import dashboard_path, deck_path, study_path, view_cache
from flashdeck.core.security import CurrentUser, deck_limit_for
from flashdeck.models.enums import Feature
from flashdeck.schemas.card import CardResponse, DeckPageResponse
from flashdeck.schemas.deck import DashboardResponse, DeckResponse
from flashdeck.schemas.progress import StudyPageResponse
from flashdeck.services import card_service, deck_service, progress_service
from flashdeck.services.study_session import calculate_progress_percentage

logger = logging.getLogger(__name__)


def get_dashboard(session: Session, current_user: CurrentUser) -> DashboardResponse:
    """The caller's decks plus how much of their plan's deck allowance is used."""
    def build() -> DashboardResponse:
        decks = deck_service.get_user_decks(session, current_user.id)
        limit = deck_limit_for(current_user)
        return DashboardResponse(
            decks=[DeckResponse.model_validate(deck) for deck in decks],
            decks_used=len(decks),
            deck_limit=limit,
            has_unlimited_decks=limit is None,
            at_deck_limit=limit is not None and len(decks) >= limit
        )

    return view_cache.get_or_build(dashboard_path(), current_user.id, build)


def get_deck_page(session: Session, current_user: CurrentUser, deck_id: int) -> DeckPageResponse:
    """A deck with its cards, newest first. Raises NotFoundOrDeniedError for foreign decks."""
    def build() -> DeckPageResponse:
        deck = deck_service.require_deck(session, deck_id, current_user.id)
        cards = card_service.get_cards_for_deck(session, deck_id, current_user.id)
        has_description = bool(deck.description and deck.description.strip())
        return DeckPageResponse(
            deck=DeckResponse.model_validate(deck),
            cards=[CardResponse.model_validate(card) for card in cards],
            card_count=len(cards),
            can_generate_with_ai=current_user.has(Feature.AI_FLASHCARD_GENERATION) and has_description
        )

    return view_cache.get_or_build(deck_path(deck_id), current_user.id, build)


def get_study_page(session: Session, current_user: CurrentUser, deck_id: int) -> StudyPageResponse:
    """Cards in study order (oldest first) with the caller's persisted progress for the deck."""
    def build() -> StudyPageResponse:
        deck = deck_service.require_deck(session, deck_id, current_user.id)
        cards = card_service.get_cards_for_deck(session, deck_id, current_user.id, newest_first=False)
        progress = progress_service.get_user_card_progress(session, current_user.id, deck_id=deck_id)
        learned_ids = [row.card_id for row in progress if row.is_learned]
        return StudyPageResponse(
            deck=DeckResponse.model_validate(deck),
            cards=[CardResponse.model_validate(card) for card in cards],
            progress=progress,
            learned_card_ids=learned_ids,
            learned_count=len(learned_ids),
            total_cards=len(cards),
            progress_percentage=calculate_progress_percentage(len(learned_ids), len(cards))
        )

    return view_cache.get_or_build(study_path(deck_id), current_user.id, build)
