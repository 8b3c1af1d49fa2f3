"""
Card model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

if TYPE_CHECKING:
    from flashdeck.models.deck import Deck


class Card(SQLModel, table=True):
    """Card table - a front/back question-answer pair in a deck."""
    __tablename__ = "card"

    id: Optional[int] = Field(default=None, primary_key=True)
    deck_id: int = Field(foreign_key="deck.id", index=True)
    front: str = Field(max_length=500)  # Question/prompt side (e.g., "Dog")
    back: str = Field(max_length=500)  # Answer side (e.g., "Anjing")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    deck: Optional["Deck"] = Relationship(back_populates="cards")
