"""
Service for generating LLM prompts.
"""
from typing import Optional

from flashdeck.schemas.generation import MAX_CARD_SIDE_LENGTH, MAX_GENERATED_CARDS


def generate_flashcards_system_instruction() -> str:
    """
    Generate the system instruction for flashcard generation.

    Returns:
        The system instruction string
    """
    return f"""You are a study assistant that writes flashcards.

Each flashcard has:
- "front": a question, term, or prompt
- "back": the answer, translation, or explanation

Rules:
1. Every card must be relevant to the deck described by the user
2. Cards must be factually accurate and self-contained
3. Do not repeat the same question twice
4. Keep "front" and "back" under {MAX_CARD_SIDE_LENGTH} characters each; neither may be empty
5. Always return valid JSON of the form {{"cards": [{{"front": "...", "back": "..."}}]}}"""


def generate_flashcards_user_prompt(title: str, description: Optional[str], count: int) -> str:
    """
    Generate the user prompt asking for `count` cards about a deck.

    Args:
        title: Deck title
        description: Deck description, the main signal about what to generate
        count: Number of cards requested

    Returns:
        The user prompt string
    """
    return f"""Generate exactly {count} flashcards for the following deck.

Deck title: {title}
Deck description: {(description or '').strip()}

Return {count} question/answer pairs that help someone study this topic."""


def flashcards_response_schema(count: int) -> dict:
    """Structured-output schema for a list of front/back pairs."""
    return {
        "type": "OBJECT",
        "properties": {
            "cards": {
                "type": "ARRAY",
                "minItems": 1,
                "maxItems": min(count, MAX_GENERATED_CARDS),
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "front": {"type": "STRING"},
                        "back": {"type": "STRING"},
                    },
                    "required": ["front", "back"],
                },
            },
        },
        "required": ["cards"],
    }
