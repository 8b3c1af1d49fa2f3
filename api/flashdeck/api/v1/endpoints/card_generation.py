"""
Card generation endpoint.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional
from flashdeck.actions.generation import generate_flashcards_with_ai_action
from flashdeck.core.database import get_session
from flashdeck.core.security import CurrentUser, get_optional_user
from flashdeck.schemas.generation import GenerateFlashcardsBody, GenerateFlashcardsResponse
from flashdeck.services.generation_service import FlashcardGenerator

router = APIRouter(prefix="/decks", tags=["card-generation"])


def get_flashcard_generator() -> Optional[FlashcardGenerator]:
    """Dependency for the flashcard generator; None means the default Gemini generator."""
    return None


@router.post("/{deck_id}/generate", response_model=GenerateFlashcardsResponse, status_code=status.HTTP_201_CREATED)
def generate_cards_for_deck(
    deck_id: int,
    request: GenerateFlashcardsBody,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    generator: Optional[FlashcardGenerator] = Depends(get_flashcard_generator),
    session: Session = Depends(get_session)
):
    """
    Generate cards for a deck from its title and description using the LLM.

    Cards are written directly to the deck; a failed generation writes none.
    Declared sync so the blocking LLM call runs in the threadpool.
    """
    return generate_flashcards_with_ai_action(
        session,
        current_user,
        {"deck_id": deck_id, "count": request.count},
        generator=generator
    )
