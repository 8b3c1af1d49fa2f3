"""
Card schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List
from datetime import datetime
from flashdeck.schemas.deck import DeckResponse
from flashdeck.schemas.utils import strip_required


class CardResponse(BaseModel):
    """Card response schema."""
    id: int
    deck_id: int
    front: str
    back: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CardContent(BaseModel):
    """Front/back pair shared by card create and update requests."""
    front: str = Field(..., min_length=1, max_length=500, description="Question/prompt side")
    back: str = Field(..., min_length=1, max_length=500, description="Answer side")

    @field_validator('front')
    @classmethod
    def validate_front(cls, v):
        """Validate front side is not blank."""
        return strip_required(v, "front")

    @field_validator('back')
    @classmethod
    def validate_back(cls, v):
        """Validate back side is not blank."""
        return strip_required(v, "back")


class CreateCardRequest(CardContent):
    """Request schema for creating a card."""
    deck_id: int = Field(..., gt=0, description="Deck ID")


class UpdateCardRequest(CardContent):
    """Request schema for updating a card."""
    card_id: int = Field(..., gt=0, description="Card ID")


class DeleteCardRequest(BaseModel):
    """Request schema for deleting a card."""
    card_id: int = Field(..., gt=0, description="Card ID")


class CardMutationResponse(BaseModel):
    """Response schema for card create/update/delete."""
    success: bool = True
    card: CardResponse


class DeckPageResponse(BaseModel):
    """Response schema for a deck page: the deck with its cards."""
    deck: DeckResponse
    cards: List[CardResponse]
    card_count: int
    can_generate_with_ai: bool
