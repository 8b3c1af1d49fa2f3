"""
Tests for learned-progress tracking.
"""
from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from flashdeck.actions.cards import create_card_action
from flashdeck.actions.decks import create_deck_action
from flashdeck.actions.progress import mark_card_learned_action
from flashdeck.core.exceptions import AuthenticationError, InvalidInputError, NotFoundOrDeniedError
from flashdeck.models import UserProgress
from flashdeck.services import progress_service


@pytest.fixture()
def card(session, alice):
    deck = create_deck_action(session, alice, {"title": "Spanish"}).deck
    return create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hello"}).card


def _rows(session, user_id, card_id):
    return session.exec(
        select(UserProgress).where(UserProgress.user_id == user_id, UserProgress.card_id == card_id)
    ).all()


def test_spanish_scenario(session, alice, card):
    before = datetime.utcnow() - timedelta(seconds=1)
    result = mark_card_learned_action(session, alice, {"card_id": card.id, "learned": True})

    assert result.success is True
    progress = progress_service.get_user_card_progress(session, alice.id, deck_id=card.deck_id)
    assert len(progress) == 1
    assert progress[0].card_id == card.id
    assert progress[0].is_learned is True
    assert progress[0].last_reviewed_at is not None
    assert progress[0].last_reviewed_at >= before


def test_learned_defaults_to_true(session, alice, card):
    result = mark_card_learned_action(session, alice, {"card_id": card.id})
    assert result.progress.is_learned is True


def test_toggle_on_then_off_leaves_single_row(session, alice, card):
    mark_card_learned_action(session, alice, {"card_id": card.id, "learned": True})
    mark_card_learned_action(session, alice, {"card_id": card.id, "learned": False})

    rows = _rows(session, alice.id, card.id)
    assert len(rows) == 1
    assert rows[0].is_learned is False


def test_repeated_upserts_never_duplicate(session, alice, card):
    for learned in (True, True, False, True):
        progress_service.mark_card_learned(session, card.id, alice.id, learned)
    rows = _rows(session, alice.id, card.id)
    assert len(rows) == 1
    assert rows[0].is_learned is True


def test_foreign_card_is_rejected(session, bob, card):
    with pytest.raises(NotFoundOrDeniedError):
        mark_card_learned_action(session, bob, {"card_id": card.id, "learned": True})
    assert _rows(session, bob.id, card.id) == []


def test_requires_identity(session, card):
    with pytest.raises(AuthenticationError):
        mark_card_learned_action(session, None, {"card_id": card.id})


def test_invalid_input(session, alice):
    with pytest.raises(InvalidInputError) as exc_info:
        mark_card_learned_action(session, alice, {"card_id": 0})
    assert exc_info.value.field == "card_id"


def test_learned_count_only_counts_learned(session, alice, card):
    deck_id = card.deck_id
    other = create_card_action(session, alice, {"deck_id": deck_id, "front": "Adiós", "back": "Bye"}).card
    progress_service.mark_card_learned(session, card.id, alice.id, True)
    progress_service.mark_card_learned(session, other.id, alice.id, False)

    assert progress_service.get_learned_cards_count(session, alice.id) == 1
    assert len(progress_service.get_user_card_progress(session, alice.id)) == 2


def test_progress_filtered_by_deck(session, alice, card):
    other_deck = create_deck_action(session, alice, {"title": "French"}).deck
    other = create_card_action(session, alice, {"deck_id": other_deck.id, "front": "Bonjour", "back": "Hello"}).card
    progress_service.mark_card_learned(session, card.id, alice.id, True)
    progress_service.mark_card_learned(session, other.id, alice.id, True)

    assert len(progress_service.get_user_card_progress(session, alice.id)) == 2
    only_french = progress_service.get_user_card_progress(session, alice.id, deck_id=other_deck.id)
    assert [row.card_id for row in only_french] == [other.id]
    assert only_french[0].front == "Bonjour"
