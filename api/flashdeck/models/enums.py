"""
Model enums.
"""
from enum import Enum


class Plan(str, Enum):
    """Subscription plan of a user."""
    FREE = "free"
    PRO = "pro"


class Feature(str, Enum):
    """Named entitlements resolved from a user's plan."""
    UNLIMITED_DECKS = "unlimited_decks"
    AI_FLASHCARD_GENERATION = "ai_flashcard_generation"
