"""
Ownership-scoped card queries.

Card access always joins through the owning deck; a card's stored deck_id is
never trusted on its own.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete
from sqlmodel import Session, select

from flashdeck.core.database import atomic
from flashdeck.core.exceptions import NotFoundOrDeniedError
from flashdeck.models import Card, Deck, UserProgress
from flashdeck.schemas.card import CardResponse
from flashdeck.services.deck_service import require_deck, touch_deck

logger = logging.getLogger(__name__)

CARD_NOT_FOUND = "Card not found or access denied"


def get_cards_for_deck(
    session: Session,
    deck_id: int,
    user_id: int,
    newest_first: bool = True
) -> List[Card]:
    """
    Get the cards of a deck owned by user_id.

    Returns an empty list when the deck is missing or owned by someone else.
    An empty result therefore does not mean the deck exists.
    """
    deck = session.exec(
        select(Deck.id).where(Deck.id == deck_id, Deck.user_id == user_id)
    ).first()
    if deck is None:
        return []

    order = Card.created_at.desc() if newest_first else Card.created_at.asc()
    tiebreak = Card.id.desc() if newest_first else Card.id.asc()
    statement = select(Card).where(Card.deck_id == deck_id).order_by(order, tiebreak)
    return list(session.exec(statement).all())


def get_card(session: Session, card_id: int, user_id: int) -> Optional[Card]:
    """Get a card by id if its deck is owned by user_id, else None."""
    statement = (
        select(Card)
        .join(Deck, Card.deck_id == Deck.id)
        .where(Card.id == card_id, Deck.user_id == user_id)
    )
    return session.exec(statement).first()


def require_card(session: Session, card_id: int, user_id: int) -> Card:
    """Get a card whose deck is owned by user_id or raise NotFoundOrDeniedError."""
    card = get_card(session, card_id, user_id)
    if not card:
        raise NotFoundOrDeniedError(CARD_NOT_FOUND)
    return card


def create_card(
    session: Session,
    deck_id: int,
    user_id: int,
    front: str,
    back: str
) -> Card:
    """Create one card in a deck owned by user_id."""
    return create_cards(session, deck_id, user_id, [(front, back)])[0]


def create_cards(
    session: Session,
    deck_id: int,
    user_id: int,
    pairs: Iterable[Tuple[str, str]]
) -> List[Card]:
    """
    Create several cards in a deck owned by user_id in one transaction.

    Either every card is written or none is.

    Raises:
        NotFoundOrDeniedError: If the deck does not exist or is not owned by user_id
    """
    deck = require_deck(session, deck_id, user_id)
    cards = [Card(deck_id=deck.id, front=front, back=back) for front, back in pairs]

    with atomic(session):
        session.add_all(cards)
        touch_deck(session, deck)

    for card in cards:
        session.refresh(card)
    logger.info(f"Created {len(cards)} cards in deck {deck_id} for user {user_id}")
    return cards


def update_card(
    session: Session,
    card_id: int,
    user_id: int,
    front: str,
    back: str
) -> Card:
    """Update the front and back of a card whose deck is owned by user_id."""
    card = require_card(session, card_id, user_id)
    card.front = front
    card.back = back
    card.updated_at = datetime.utcnow()
    session.add(card)
    session.commit()
    session.refresh(card)
    return card


def delete_card(session: Session, card_id: int, user_id: int) -> CardResponse:
    """Delete a card, and every progress row pointing at it, if its deck is owned by user_id."""
    card = require_card(session, card_id, user_id)
    snapshot = CardResponse.model_validate(card)

    with atomic(session):
        session.exec(delete(UserProgress).where(UserProgress.card_id == card_id))
        session.delete(card)

    logger.info(f"Deleted card {card_id} from deck {snapshot.deck_id} for user {user_id}")
    return snapshot
