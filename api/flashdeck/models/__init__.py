"""
Models package - imports all models so they register with SQLModel metadata.
"""
# Import enums first
from flashdeck.models.enums import Plan, Feature

# Import all models
from flashdeck.models.user import User
from flashdeck.models.deck import Deck
from flashdeck.models.card import Card
from flashdeck.models.user_progress import UserProgress

__all__ = [
    'Plan',
    'Feature',
    'User',
    'Deck',
    'Card',
    'UserProgress',
]
