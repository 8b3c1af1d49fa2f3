"""
UserProgress model.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime


class UserProgress(SQLModel, table=True):
    """UserProgress table - per-user learned flag for a card. One row per (user, card)."""
    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "card_id", name="uq_user_progress_user_card"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    card_id: int = Field(foreign_key="card.id", index=True)
    is_learned: bool = Field(default=False)
    last_reviewed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
