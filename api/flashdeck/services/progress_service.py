"""
Study progress queries.

Progress rows are keyed by (user_id, card_id) and written with upsert
semantics: a second write for the same pair updates the existing row.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportCallIssue=false
# pyright: reportArgumentType=false
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from flashdeck.models import Card, Deck, UserProgress
from flashdeck.schemas.progress import CardProgressResponse
from flashdeck.services.card_service import require_card

logger = logging.getLogger(__name__)


def get_progress_for_card(session: Session, card_id: int, user_id: int) -> Optional[UserProgress]:
    """Get the progress row for (user, card), or None."""
    return session.exec(
        select(UserProgress).where(
            UserProgress.card_id == card_id,
            UserProgress.user_id == user_id
        )
    ).first()


def upsert_progress(
    session: Session,
    card_id: int,
    user_id: int,
    is_learned: bool,
    last_reviewed_at: Optional[datetime] = None
) -> UserProgress:
    """
    Insert or update the progress row for (user, card).

    If a concurrent writer inserts the row first, the unique constraint
    rejects our insert and the existing row is updated instead.
    """
    now = datetime.utcnow()
    progress = get_progress_for_card(session, card_id, user_id)
    if progress is None:
        progress = UserProgress(
            user_id=user_id,
            card_id=card_id,
            is_learned=is_learned,
            last_reviewed_at=last_reviewed_at
        )
        session.add(progress)
        try:
            session.commit()
            session.refresh(progress)
            return progress
        except IntegrityError:
            session.rollback()
            logger.info(f"Progress row for user {user_id} card {card_id} created concurrently, updating it")
            progress = get_progress_for_card(session, card_id, user_id)
            if progress is None:
                raise

    progress.is_learned = is_learned
    progress.last_reviewed_at = last_reviewed_at
    progress.updated_at = now
    session.add(progress)
    session.commit()
    session.refresh(progress)
    return progress


def mark_card_learned(
    session: Session,
    card_id: int,
    user_id: int,
    learned: bool = True
) -> UserProgress:
    """
    Record whether a user has learned a card, stamping last_reviewed_at.

    Raises:
        NotFoundOrDeniedError: If the card's deck is not owned by user_id
    """
    require_card(session, card_id, user_id)
    return upsert_progress(
        session,
        card_id,
        user_id,
        is_learned=learned,
        last_reviewed_at=datetime.utcnow()
    )


def get_learned_cards_count(session: Session, user_id: int) -> int:
    """Count cards a user has marked learned across all of their decks."""
    return session.exec(
        select(func.count(UserProgress.id))
        .join(Card, UserProgress.card_id == Card.id)
        .join(Deck, Card.deck_id == Deck.id)
        .where(
            UserProgress.user_id == user_id,
            UserProgress.is_learned == True,  # noqa: E712
            Deck.user_id == user_id
        )
    ).one()


def get_user_card_progress(
    session: Session,
    user_id: int,
    deck_id: Optional[int] = None
) -> List[CardProgressResponse]:
    """
    Get a user's progress rows joined with their cards, most recently reviewed first.

    Only cards in decks owned by user_id are included.

    Args:
        session: Database session
        user_id: The user whose progress to load
        deck_id: Optional deck to restrict the result to

    Returns:
        List of CardProgressResponse
    """
    statement = (
        select(UserProgress, Card)
        .join(Card, UserProgress.card_id == Card.id)
        .join(Deck, Card.deck_id == Deck.id)
        .where(UserProgress.user_id == user_id, Deck.user_id == user_id)
    )
    if deck_id is not None:
        statement = statement.where(Card.deck_id == deck_id)
    statement = statement.order_by(UserProgress.last_reviewed_at.desc(), UserProgress.id.desc())

    return [
        CardProgressResponse(
            card_id=card.id,
            deck_id=card.deck_id,
            is_learned=progress.is_learned,
            last_reviewed_at=progress.last_reviewed_at,
            front=card.front,
            back=card.back
        )
        for progress, card in session.exec(statement).all()
    ]
