"""
Tests for AI flashcard generation with a mocked generator.
"""
import pytest
import requests

from conftest import make_user

from flashdeck.actions.decks import create_deck_action, delete_deck_action
from flashdeck.actions.generation import generate_flashcards_with_ai_action
from flashdeck.core.exceptions import (
    DescriptionRequiredError,
    EntitlementRequiredError,
    GenerationFailedError,
    InvalidInputError,
    NotFoundOrDeniedError,
    OperationTimeoutError,
)
from flashdeck.models.enums import Plan
from flashdeck.services import card_service
from flashdeck.services import llm_service


def pairs(n):
    return [{"front": f"Question {i}", "back": f"Answer {i}"} for i in range(n)]


class FakeGenerator:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __call__(self, title, description, count):
        self.calls.append((title, description, count))
        if self.error:
            raise self.error
        return self.result, {"total_tokens": 42, "cost_usd": 0.0001}


@pytest.fixture()
def deck(session, pro_user):
    return create_deck_action(
        session, pro_user, {"title": "Spanish", "description": "Everyday Spanish greetings"}
    ).deck


def test_creates_one_card_per_generated_pair(session, pro_user, deck):
    generator = FakeGenerator({"cards": pairs(5)})
    result = generate_flashcards_with_ai_action(
        session, pro_user, {"deck_id": deck.id, "count": 5}, generator=generator
    )

    assert result.success is True
    assert result.count == 5
    assert len(result.cards) == 5
    assert all(card.deck_id == deck.id for card in result.cards)
    assert len(card_service.get_cards_for_deck(session, deck.id, pro_user.id)) == 5
    assert generator.calls == [("Spanish", "Everyday Spanish greetings", 5)]


def test_count_defaults_to_twenty(session, pro_user, deck):
    generator = FakeGenerator({"cards": pairs(20)})
    result = generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id}, generator=generator)
    assert generator.calls[0][2] == 20
    assert result.count == 20


def test_bare_list_output_is_accepted(session, pro_user, deck):
    generator = FakeGenerator(pairs(3))
    result = generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 3}, generator=generator)
    assert result.count == 3


def test_extra_cards_are_dropped(session, pro_user, deck):
    generator = FakeGenerator({"cards": pairs(8)})
    result = generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 5}, generator=generator)
    assert result.count == 5


def test_blank_description_is_rejected_before_calling_generator(session, pro_user):
    deck = create_deck_action(session, pro_user, {"title": "No description"}).deck
    generator = FakeGenerator({"cards": pairs(5)})
    with pytest.raises(DescriptionRequiredError):
        generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 5}, generator=generator)
    assert generator.calls == []
    assert card_service.get_cards_for_deck(session, deck.id, pro_user.id) == []


def test_free_plan_needs_entitlement(session, alice):
    deck = create_deck_action(session, alice, {"title": "Spanish", "description": "Greetings"}).deck
    generator = FakeGenerator({"cards": pairs(5)})
    with pytest.raises(EntitlementRequiredError):
        generate_flashcards_with_ai_action(session, alice, {"deck_id": deck.id, "count": 5}, generator=generator)
    assert generator.calls == []


def test_foreign_deck_is_not_found(session, pro_user, deck):

    other = make_user(session, "oscar", plan=Plan.PRO)
    generator = FakeGenerator({"cards": pairs(5)})
    with pytest.raises(NotFoundOrDeniedError):
        generate_flashcards_with_ai_action(session, other, {"deck_id": deck.id, "count": 5}, generator=generator)
    assert generator.calls == []


@pytest.mark.parametrize("count", [0, 51, -3])
def test_count_out_of_bounds(session, pro_user, deck, count):
    with pytest.raises(InvalidInputError) as exc_info:
        generate_flashcards_with_ai_action(
            session, pro_user, {"deck_id": deck.id, "count": count}, generator=FakeGenerator(pairs(1))
        )
    assert exc_info.value.field == "count"


@pytest.mark.parametrize("output", [
    {"cards": []},
    {"cards": pairs(4) + [{"front": "", "back": "x"}]},
    {"cards": pairs(4) + [{"front": "q", "back": "y" * 501}]},
    {"cards": pairs(4) + [{"front": "q"}]},
    {"cards": pairs(51)},
    {"unexpected": True},
    "not json at all",
])
def test_invalid_output_creates_no_cards(session, pro_user, deck, output):
    with pytest.raises(GenerationFailedError):
        generate_flashcards_with_ai_action(
            session, pro_user, {"deck_id": deck.id, "count": 5}, generator=FakeGenerator(output)
        )
    assert card_service.get_cards_for_deck(session, deck.id, pro_user.id) == []


def test_generator_crash_becomes_generation_failed(session, pro_user, deck):
    generator = FakeGenerator(error=RuntimeError("boom"))
    with pytest.raises(GenerationFailedError) as exc_info:
        generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 5}, generator=generator)
    assert "boom" not in str(exc_info.value)
    assert card_service.get_cards_for_deck(session, deck.id, pro_user.id) == []


def test_generator_timeout_is_reported(session, pro_user, deck):
    generator = FakeGenerator(error=OperationTimeoutError("AI generation timed out"))
    with pytest.raises(OperationTimeoutError):
        generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 5}, generator=generator)
    assert card_service.get_cards_for_deck(session, deck.id, pro_user.id) == []


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self.payload


def gemini_payload(text):
    return {
        "candidates": [{"content": {"parts": [{"text": text}]}}],
        "usageMetadata": {"promptTokenCount": 100, "candidatesTokenCount": 50, "totalTokenCount": 150},
    }


class TestCallGeminiApi:
    def test_parses_fenced_json_and_reports_usage(self, monkeypatch):
        captured = {}

        def fake_post(url, params=None, json=None, headers=None, timeout=None):
            captured.update(url=url, json=json, timeout=timeout)
            return FakeResponse(gemini_payload('```json\n{"cards": [{"front": "a", "back": "b"}]}\n```'))

        monkeypatch.setattr(llm_service.requests, "post", fake_post)
        data, usage = llm_service.call_gemini_api("prompt", response_schema={"type": "OBJECT"}, timeout=5)

        assert data == {"cards": [{"front": "a", "back": "b"}]}
        assert usage["total_tokens"] == 150
        assert usage["cost_usd"] > 0
        assert captured["timeout"] == 5
        assert captured["json"]["generationConfig"]["responseSchema"] == {"type": "OBJECT"}

    def test_timeout_maps_to_timeout_error(self, monkeypatch):
        def fake_post(*args, **kwargs):
            raise requests.exceptions.Timeout("read timed out")

        monkeypatch.setattr(llm_service.requests, "post", fake_post)
        with pytest.raises(OperationTimeoutError):
            llm_service.call_gemini_api("prompt")

    def test_http_error_maps_to_generation_failed(self, monkeypatch):
        monkeypatch.setattr(llm_service.requests, "post", lambda *a, **k: FakeResponse({}, status_code=500))
        with pytest.raises(GenerationFailedError):
            llm_service.call_gemini_api("prompt")

    def test_invalid_json_maps_to_generation_failed(self, monkeypatch):
        monkeypatch.setattr(llm_service.requests, "post", lambda *a, **k: FakeResponse(gemini_payload("not json")))
        with pytest.raises(GenerationFailedError):
            llm_service.call_gemini_api("prompt")

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.setattr(llm_service.settings, "google_gemini_api_key", "")
        with pytest.raises(GenerationFailedError):
            llm_service.call_gemini_api("prompt")


def test_no_transaction_is_open_while_generating(session, pro_user, deck):
    seen = []

    def generator(title, description, count):
        seen.append(session.in_transaction())
        return {"cards": pairs(count)}, {}

    result = generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 2}, generator=generator)
    assert seen == [False]
    assert result.count == 2


def test_deck_deleted_during_generation_creates_no_cards(session, pro_user, deck):
    def generator(title, description, count):
        delete_deck_action(session, pro_user, {"deck_id": deck.id})
        return {"cards": pairs(count)}, {}

    with pytest.raises(NotFoundOrDeniedError):
        generate_flashcards_with_ai_action(session, pro_user, {"deck_id": deck.id, "count": 2}, generator=generator)
