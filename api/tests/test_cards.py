"""
Tests for card queries and card actions.
"""
import pytest
from sqlmodel import select

from flashdeck.actions.cards import create_card_action, update_card_action, delete_card_action
from flashdeck.actions.decks import create_deck_action
from flashdeck.core.exceptions import AuthenticationError, InvalidInputError, NotFoundOrDeniedError
from flashdeck.models import UserProgress
from flashdeck.services import card_service, progress_service


@pytest.fixture()
def deck(session, alice):
    return create_deck_action(session, alice, {"title": "Spanish"}).deck


class TestCreateCard:
    def test_create_card_in_own_deck(self, session, alice, deck):
        result = create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hello"})
        assert result.success is True
        assert result.card.deck_id == deck.id
        assert (result.card.front, result.card.back) == ("Hola", "Hello")

    def test_sides_are_trimmed(self, session, alice, deck):
        card = create_card_action(session, alice, {"deck_id": deck.id, "front": "  Hola ", "back": "\tHello\n"}).card
        assert (card.front, card.back) == ("Hola", "Hello")

    @pytest.mark.parametrize("front, back, field", [
        ("", "Hello", "front"),
        ("   ", "Hello", "front"),
        ("Hola", "", "back"),
        ("Hola", " \n ", "back"),
        ("x" * 501, "Hello", "front"),
        ("Hola", "y" * 501, "back"),
    ])
    def test_invalid_sides_rejected(self, session, alice, deck, front, back, field):
        with pytest.raises(InvalidInputError) as exc_info:
            create_card_action(session, alice, {"deck_id": deck.id, "front": front, "back": back})
        assert exc_info.value.field == field
        assert card_service.get_cards_for_deck(session, deck.id, alice.id) == []

    def test_requires_identity(self, session, deck):
        with pytest.raises(AuthenticationError):
            create_card_action(session, None, {"deck_id": deck.id, "front": "a", "back": "b"})

    def test_cannot_add_to_foreign_deck(self, session, alice, bob, deck):
        with pytest.raises(NotFoundOrDeniedError):
            create_card_action(session, bob, {"deck_id": deck.id, "front": "a", "back": "b"})
        assert card_service.get_cards_for_deck(session, deck.id, alice.id) == []


class TestReadCards:
    def test_foreign_deck_lists_as_empty(self, session, alice, bob, deck):
        card_service.create_card(session, deck.id, alice.id, "a", "1")
        assert len(card_service.get_cards_for_deck(session, deck.id, alice.id)) == 1
        assert card_service.get_cards_for_deck(session, deck.id, bob.id) == []

    def test_order_newest_first_by_default(self, session, alice, deck):
        cards = card_service.create_cards(session, deck.id, alice.id, [("a", "1"), ("b", "2"), ("c", "3")])
        newest = card_service.get_cards_for_deck(session, deck.id, alice.id)
        oldest = card_service.get_cards_for_deck(session, deck.id, alice.id, newest_first=False)
        assert [card.id for card in oldest] == [card.id for card in cards]
        assert [card.id for card in newest] == list(reversed([card.id for card in cards]))

    def test_get_card_checks_deck_owner(self, session, alice, bob, deck):
        card = card_service.create_card(session, deck.id, alice.id, "a", "1")
        assert card_service.get_card(session, card.id, alice.id).id == card.id
        assert card_service.get_card(session, card.id, bob.id) is None


class TestUpdateCard:
    def test_update_own_card(self, session, alice, deck):
        card = create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hi"}).card
        result = update_card_action(session, alice, {"card_id": card.id, "front": "Hola", "back": "Hello"})
        assert result.card.back == "Hello"
        assert result.card.updated_at >= card.updated_at

    def test_foreign_card_is_not_found(self, session, alice, bob, deck):
        card = create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hi"}).card
        with pytest.raises(NotFoundOrDeniedError):
            update_card_action(session, bob, {"card_id": card.id, "front": "x", "back": "y"})
        assert card_service.get_card(session, card.id, alice.id).back == "Hi"


class TestDeleteCard:
    def test_delete_removes_card_and_its_progress(self, session, alice, deck):
        card = create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hello"}).card
        progress_service.mark_card_learned(session, card.id, alice.id, True)

        result = delete_card_action(session, alice, {"card_id": card.id})

        assert result.card.id == card.id
        assert card_service.get_card(session, card.id, alice.id) is None
        assert session.exec(select(UserProgress)).all() == []

    def test_foreign_card_is_not_deleted(self, session, alice, bob, deck):
        card = create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hello"}).card
        with pytest.raises(NotFoundOrDeniedError):
            delete_card_action(session, bob, {"card_id": card.id})
        assert card_service.get_card(session, card.id, alice.id) is not None

    def test_invalid_card_id(self, session, alice):
        with pytest.raises(InvalidInputError) as exc_info:
            delete_card_action(session, alice, {"card_id": -1})
        assert exc_info.value.field == "card_id"
