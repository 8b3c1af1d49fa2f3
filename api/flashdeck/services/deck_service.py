"""
Ownership-scoped deck queries.

Every function takes the caller's user id and only ever returns or changes
decks owned by that user.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlmodel import Session, select

from flashdeck.core.database import atomic
from flashdeck.core.exceptions import NotFoundOrDeniedError, QuotaExceededError
from flashdeck.models import Card, Deck, User, UserProgress
from flashdeck.schemas.deck import DeckResponse

logger = logging.getLogger(__name__)

DECK_NOT_FOUND = "Deck not found or access denied"


def get_user_decks(session: Session, user_id: int) -> List[Deck]:
    """Get all decks owned by a user, most recently updated first."""
    statement = (
        select(Deck)
        .where(Deck.user_id == user_id)
        .order_by(Deck.updated_at.desc(), Deck.id.desc())
    )
    return list(session.exec(statement).all())


def count_user_decks(session: Session, user_id: int) -> int:
    """Count decks owned by a user."""
    return session.exec(
        select(func.count(Deck.id)).where(Deck.user_id == user_id)
    ).one()


def get_deck(session: Session, deck_id: int, user_id: int) -> Optional[Deck]:
    """Get a deck by id, or None if it does not exist or belongs to another user."""
    deck = session.exec(
        select(Deck).where(Deck.id == deck_id, Deck.user_id == user_id)
    ).first()
    return deck


def require_deck(session: Session, deck_id: int, user_id: int) -> Deck:
    """Get a deck owned by user_id or raise NotFoundOrDeniedError."""
    deck = get_deck(session, deck_id, user_id)
    if not deck:
        raise NotFoundOrDeniedError(DECK_NOT_FOUND)
    return deck


def lock_user(session: Session, user_id: int) -> None:
    """Lock the user row until the current transaction ends (no-op on SQLite)."""
    session.exec(select(User.id).where(User.id == user_id).with_for_update()).first()


def create_deck(
    session: Session,
    user_id: int,
    title: str,
    description: Optional[str] = None,
    limit: Optional[int] = None
) -> Deck:
    """
    Create a deck owned by user_id.

    With a limit, the user row is locked and the decks counted in the same
    transaction as the insert, so concurrent creates cannot exceed it.

    Raises:
        QuotaExceededError: If the user already owns `limit` decks
    """
    deck = Deck(user_id=user_id, title=title, description=description)
    with atomic(session):
        if limit is not None:
            lock_user(session, user_id)
            decks_used = count_user_decks(session, user_id)
            if decks_used >= limit:
                logger.info(f"User {user_id} hit the free deck limit ({decks_used}/{limit})")
                raise QuotaExceededError(
                    f"Free plan limited to {limit} decks. Upgrade to Pro for unlimited decks."
                )
        session.add(deck)
    session.refresh(deck)
    logger.info(f"Created deck {deck.id} for user {user_id}")
    return deck


def update_deck(
    session: Session,
    deck_id: int,
    user_id: int,
    title: str,
    description: Optional[str] = None
) -> Deck:
    """Update title and description of a deck owned by user_id."""
    deck = require_deck(session, deck_id, user_id)
    deck.title = title
    deck.description = description
    deck.updated_at = datetime.utcnow()
    session.add(deck)
    session.commit()
    session.refresh(deck)
    return deck


def touch_deck(session: Session, deck: Deck) -> None:
    """Bump a deck's updated_at; the caller commits."""
    deck.updated_at = datetime.utcnow()
    session.add(deck)


def delete_deck(session: Session, deck_id: int, user_id: int) -> Tuple[DeckResponse, int]:
    """
    Delete a deck with all of its cards and their progress rows.

    Ownership is verified first; the deletions then run in a single
    transaction so a failure leaves the deck and every card in place.

    Args:
        session: Database session
        deck_id: The deck to delete
        user_id: The caller, who must own the deck

    Returns:
        Tuple of (snapshot of the deleted deck, number of cards deleted)

    Raises:
        NotFoundOrDeniedError: If the deck does not exist or is not owned by user_id
    """
    deck = require_deck(session, deck_id, user_id)
    snapshot = DeckResponse.model_validate(deck)

    with atomic(session):
        deck_card_ids = select(Card.id).where(Card.deck_id == deck_id)
        cards_deleted = session.exec(select(func.count(Card.id)).where(Card.deck_id == deck_id)).one()
        session.exec(delete(UserProgress).where(UserProgress.card_id.in_(deck_card_ids)))
        session.exec(delete(Card).where(Card.deck_id == deck_id))
        session.delete(deck)

    logger.info(f"Deleted deck {deck_id} for user {user_id} with {cards_deleted} cards")
    return snapshot, cards_deleted
