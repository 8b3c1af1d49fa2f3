"""
AI flashcard generation adapter.

Asks the text-generation service for front/back pairs describing a deck and
validates the structured result before anything is persisted.
"""
import json
import logging
from typing import Callable, Optional, Tuple

from pydantic import ValidationError

from flashdeck.core.exceptions import GenerationFailedError, OperationTimeoutError
from flashdeck.schemas.generation import GeneratedCard, GeneratedFlashcards
from flashdeck.services.llm_service import call_gemini_api
from flashdeck.services.prompt_service import (
    flashcards_response_schema,
    generate_flashcards_system_instruction,
    generate_flashcards_user_prompt,
)

logger = logging.getLogger(__name__)

# (title, description, count) -> (raw structured output, token usage)
FlashcardGenerator = Callable[[str, Optional[str], int], Tuple[object, dict]]


def gemini_flashcard_generator(title: str, description: Optional[str], count: int) -> Tuple[object, dict]:
    """Request `count` flashcards about a deck from Gemini."""
    return call_gemini_api(
        prompt=generate_flashcards_user_prompt(title, description, count),
        system_instruction=generate_flashcards_system_instruction(),
        response_schema=flashcards_response_schema(count)
    )


def validate_generated_flashcards(llm_data: object) -> list[GeneratedCard]:
    """
    Validate the generator's output strictly.

    A bare list of pairs is accepted as well as {"cards": [...]}. Any pair
    outside the bounds invalidates the whole response.

    Raises:
        GenerationFailedError: If the output does not match the schema
    """
    if isinstance(llm_data, list):
        llm_data = {"cards": llm_data}
    try:
        return GeneratedFlashcards.model_validate(llm_data).cards
    except ValidationError as e:
        logger.error(f"Generated flashcards failed validation: {e.error_count()} errors")
        logger.error(f"LLM Output: {json.dumps(llm_data, ensure_ascii=False, default=str)[:2000]}")
        raise GenerationFailedError("AI generation returned cards in an invalid format") from e


def generate_flashcards(
    title: str,
    description: Optional[str],
    count: int,
    generator: Optional[FlashcardGenerator] = None
) -> Tuple[list[GeneratedCard], dict]:
    """
    Generate and validate up to `count` flashcards for a deck.

    Args:
        title: Deck title
        description: Deck description (must be non-blank; checked by the caller)
        count: Number of cards requested (1-50)
        generator: Optional generator to call instead of Gemini

    Returns:
        Tuple of (validated cards, token usage dict)

    Raises:
        GenerationFailedError: If the service fails or returns invalid data
        OperationTimeoutError: If the service does not answer in time
    """
    generator = generator or gemini_flashcard_generator

    logger.info(f"Requesting {count} flashcards for deck '{title}'")
    try:
        llm_data, token_usage = generator(title, description, count)
    except (GenerationFailedError, OperationTimeoutError):
        raise
    except Exception as e:
        logger.error(f"Flashcard generator failed: {type(e).__name__}: {str(e)}", exc_info=e)
        raise GenerationFailedError("Failed to generate flashcards") from e

    cards = validate_generated_flashcards(llm_data)
    if len(cards) > count:
        logger.info(f"Generator returned {len(cards)} cards for {count} requested, keeping the first {count}")
        cards = cards[:count]

    token_usage = token_usage or {}
    if token_usage:
        logger.info(
            f"Flashcard generation completed. Cards: {len(cards)}, "
            f"Tokens: {token_usage.get('total_tokens', 0)}, Cost: ${token_usage.get('cost_usd', 0.0):.6f}"
        )
    return cards, token_usage
