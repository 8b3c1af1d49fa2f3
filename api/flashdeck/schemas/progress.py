"""
Study progress schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from flashdeck.schemas.card import CardResponse
from flashdeck.schemas.deck import DeckResponse


class ProgressResponse(BaseModel):
    """UserProgress response schema."""
    id: int
    user_id: int
    card_id: int
    is_learned: bool
    last_reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CardProgressResponse(BaseModel):
    """Progress row joined with its card."""
    card_id: int
    deck_id: int
    is_learned: bool
    last_reviewed_at: Optional[datetime] = None
    front: str
    back: str


class MarkCardLearnedRequest(BaseModel):
    """Request schema for marking a card learned or not learned."""
    card_id: int = Field(..., gt=0, description="Card ID")
    learned: bool = Field(True, description="New learned state")


class MarkCardLearnedResponse(BaseModel):
    """Response schema for a learned toggle."""
    success: bool = True
    progress: ProgressResponse


class ProgressListResponse(BaseModel):
    """Response schema for the caller's progress rows."""
    progress: List[CardProgressResponse]
    learned_total: int


class StudyPageResponse(BaseModel):
    """Response schema for a study session: deck, cards in study order and the caller's progress."""
    deck: DeckResponse
    cards: List[CardResponse]
    progress: List[CardProgressResponse]
    learned_card_ids: List[int]
    learned_count: int
    total_cards: int
    progress_percentage: float
