"""
Deck schemas.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from flashdeck.schemas.utils import strip_required, strip_optional


class DeckResponse(BaseModel):
    """Deck response schema."""
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CreateDeckRequest(BaseModel):
    """Request schema for creating a deck."""
    title: str = Field(..., min_length=1, max_length=255, description="Deck title")
    description: Optional[str] = Field(None, max_length=1000, description="Optional deck description")

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        """Validate title is not blank."""
        return strip_required(v, "title")

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        """Blank descriptions are stored as null."""
        return strip_optional(v)


class UpdateDeckRequest(CreateDeckRequest):
    """Request schema for updating a deck."""
    deck_id: int = Field(..., gt=0, description="Deck ID")


class DeleteDeckRequest(BaseModel):
    """Request schema for deleting a deck."""
    deck_id: int = Field(..., gt=0, description="Deck ID")


class DeckMutationResponse(BaseModel):
    """Response schema for deck create/update/delete."""
    success: bool = True
    deck: DeckResponse
    cards_deleted: Optional[int] = None


class DashboardResponse(BaseModel):
    """Response schema for the dashboard: the caller's decks and plan usage."""
    decks: List[DeckResponse]
    decks_used: int
    deck_limit: Optional[int] = Field(None, description="Maximum decks on the caller's plan, null when unlimited")
    has_unlimited_decks: bool
    at_deck_limit: bool
