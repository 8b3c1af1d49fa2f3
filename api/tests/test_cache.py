from flashdeck.actions.cards import create_card_action
from flashdeck.actions.decks import create_deck_action
from flashdeck.core.cache import ViewCache, dashboard_path, deck_path, invalidate_deck_views, study_path, view_cache
from flashdeck.services import card_service, page_service


def test_get_or_build_builds_once():
    cache = ViewCache()
    calls = []

    def build():
        calls.append(1)
        return {"decks": []}

    assert cache.get_or_build(dashboard_path(), 1, build) == {"decks": []}
    cache.get_or_build(dashboard_path(), 1, build)
    assert len(calls) == 1


def test_entries_are_per_user():
    cache = ViewCache()
    cache.set(deck_path(5), 1, "alice view")
    assert cache.get(deck_path(5), 2) is None


def test_invalidate_drops_path_for_all_users():
    cache = ViewCache()
    cache.set(deck_path(5), 1, "a")
    cache.set(deck_path(5), 2, "b")
    cache.set(deck_path(6), 1, "c")

    cache.invalidate(deck_path(5))

    assert cache.get(deck_path(5), 1) is None
    assert cache.get(deck_path(5), 2) is None
    assert cache.get(deck_path(6), 1) == "c"


def test_invalidate_user():
    cache = ViewCache()
    cache.set(dashboard_path(), 1, "a")
    cache.set(dashboard_path(), 2, "b")
    cache.invalidate_user(1)
    assert cache.get(dashboard_path(), 1) is None
    assert cache.get(dashboard_path(), 2) == "b"


def test_invalidate_deck_views():
    view_cache.set(deck_path(3), 1, "page")
    view_cache.set(study_path(3), 1, "study")
    view_cache.set(dashboard_path(), 1, "dashboard")

    invalidate_deck_views(3)
    assert view_cache.get(deck_path(3), 1) is None
    assert view_cache.get(study_path(3), 1) is None
    assert view_cache.get(dashboard_path(), 1) == "dashboard"

    invalidate_deck_views(3, include_dashboard=True)
    assert view_cache.get(dashboard_path(), 1) is None


def test_view_invalidated_while_building_is_not_stored():
    cache = ViewCache()

    def build():
        cache.invalidate(deck_path(5))
        return "built before the change"

    assert cache.get_or_build(deck_path(5), 1, build) == "built before the change"
    assert cache.get(deck_path(5), 1) is None


def test_user_invalidated_while_building_is_not_stored():
    cache = ViewCache()

    def build():
        cache.invalidate_user(1)
        return "old plan"

    cache.get_or_build(dashboard_path(), 1, build)
    assert cache.get(dashboard_path(), 1) is None


def test_deck_page_reflects_card_created_during_build(session, alice, monkeypatch):
    deck = create_deck_action(session, alice, {"title": "Spanish"}).deck
    read_cards = card_service.get_cards_for_deck

    def read_then_add_card(*args, **kwargs):
        cards = read_cards(*args, **kwargs)
        monkeypatch.setattr(card_service, "get_cards_for_deck", read_cards)
        create_card_action(session, alice, {"deck_id": deck.id, "front": "Hola", "back": "Hello"})
        return cards

    monkeypatch.setattr(card_service, "get_cards_for_deck", read_then_add_card)

    assert page_service.get_deck_page(session, alice, deck.id).card_count == 0
    assert page_service.get_deck_page(session, alice, deck.id).card_count == 1
