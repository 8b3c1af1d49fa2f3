"""
AI flashcard generation schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from flashdeck.schemas.card import CardResponse

MAX_GENERATED_CARDS = 50
DEFAULT_GENERATED_CARDS = 20
MAX_CARD_SIDE_LENGTH = 500


class GenerateFlashcardsRequest(BaseModel):
    """Request schema for generating cards for a deck."""
    deck_id: int = Field(..., gt=0, description="Deck ID")
    count: int = Field(
        DEFAULT_GENERATED_CARDS,
        ge=1,
        le=MAX_GENERATED_CARDS,
        description="Number of cards to request (1-50)"
    )


class GeneratedCard(BaseModel):
    """One front/back pair returned by the generator."""
    front: str = Field(..., min_length=1, max_length=MAX_CARD_SIDE_LENGTH)
    back: str = Field(..., min_length=1, max_length=MAX_CARD_SIDE_LENGTH)

    @field_validator('front', 'back')
    @classmethod
    def validate_side(cls, v):
        """Validate a side is not blank."""
        if not v.strip():
            raise ValueError("card side cannot be empty")
        return v.strip()


class GeneratedFlashcards(BaseModel):
    """Pydantic model for the generator's structured output."""
    cards: List[GeneratedCard] = Field(..., min_length=1, max_length=MAX_GENERATED_CARDS)


class GenerateFlashcardsResponse(BaseModel):
    """Response schema for AI flashcard generation."""
    success: bool = True
    cards: List[CardResponse]
    count: int
    token_usage: Optional[dict] = Field(None, description="Token usage information from LLM call")


class GenerateFlashcardsBody(BaseModel):
    """Request body for the generation endpoint; bounds are checked by the action."""
    count: int = Field(DEFAULT_GENERATED_CARDS, description="Number of cards to request (1-50)")
