"""
Helper functions for LLM API calls.
"""
import requests
import json
import logging
from typing import Optional
from flashdeck.core.config import settings
from flashdeck.core.exceptions import GenerationFailedError, OperationTimeoutError

logger = logging.getLogger(__name__)


def calculate_gemini_cost(prompt_tokens: int, output_tokens: int, model_name: str = "gemini-2.5-flash") -> float:
    """
    Calculate cost for Gemini API call based on token usage.

    Pricing:
    - flash models: $0.075 per 1M input tokens, $0.30 per 1M output tokens
    - pro models: $0.125 per 1M input tokens, $0.50 per 1M output tokens

    Args:
        prompt_tokens: Number of input tokens
        output_tokens: Number of output tokens
        model_name: Name of the model used

    Returns:
        Cost in USD
    """
    if "pro" in model_name.lower():
        input_price_per_million = 0.125
        output_price_per_million = 0.50
    else:
        # Default to flash pricing
        input_price_per_million = 0.075
        output_price_per_million = 0.30

    input_cost = (prompt_tokens / 1_000_000) * input_price_per_million
    output_cost = (output_tokens / 1_000_000) * output_price_per_million

    return input_cost + output_cost


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block, if the model added one."""
    text = text.strip()
    if text.startswith('```'):
        lines = text.split('\n')
        text = '\n'.join(lines[1:])
        if text.rstrip().endswith('```'):
            text = text.rstrip()[:-3]
    return text.strip()


def call_gemini_api(
    prompt: str,
    system_instruction: Optional[str] = None,
    response_schema: Optional[dict] = None,
    timeout: Optional[float] = None
) -> tuple[dict, dict]:
    """
    Call Gemini API and parse its JSON answer.

    Args:
        prompt: The prompt to send to the LLM
        system_instruction: Optional system instruction to provide context
        response_schema: Optional JSON schema the structured output must follow
        timeout: Request timeout in seconds (defaults to settings.ai_request_timeout_seconds)

    Returns:
        Tuple of (parsed JSON response from the LLM, token usage dict with keys:
                  'prompt_tokens', 'output_tokens', 'total_tokens', 'cost_usd', 'model_name')

    Raises:
        OperationTimeoutError: If the API does not answer within the timeout
        GenerationFailedError: If the API call fails or the response is not valid JSON
    """
    api_key = settings.google_gemini_api_key
    if not api_key:
        logger.error("Google Gemini API key not configured")
        raise GenerationFailedError("AI generation is not configured")

    model_name = settings.gemini_model
    base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{model_name}:generateContent"

    generation_config = {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 8192,
        "responseMimeType": "application/json",
    }
    if response_schema:
        generation_config["responseSchema"] = response_schema

    payload = {
        "contents": [{
            "parts": [{
                "text": prompt
            }]
        }],
        "generationConfig": generation_config
    }

    # Add system instruction if provided
    if system_instruction:
        payload["systemInstruction"] = {
            "parts": [{
                "text": system_instruction
            }]
        }

    try:
        response = requests.post(
            base_url,
            params={"key": api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout or settings.ai_request_timeout_seconds
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout as e:
        logger.error(f"Gemini API request timed out: {str(e)}")
        raise OperationTimeoutError("AI generation timed out") from e
    except requests.exceptions.RequestException as e:
        error_msg = f"Gemini API request failed: {str(e)}"
        if getattr(e, 'response', None) is not None:
            error_msg += f" - Status: {e.response.status_code}"
        logger.error(error_msg)
        raise GenerationFailedError("AI generation service request failed") from e
    except ValueError as e:
        logger.error(f"Gemini API returned a non-JSON body: {str(e)}")
        raise GenerationFailedError("AI generation service returned an invalid response") from e

    # Extract token usage from usageMetadata
    usage_metadata = data.get('usageMetadata', {})
    prompt_tokens = usage_metadata.get('promptTokenCount', 0)
    output_tokens = usage_metadata.get('candidatesTokenCount', 0)
    total_tokens = usage_metadata.get('totalTokenCount', prompt_tokens + output_tokens)

    token_usage = {
        'prompt_tokens': prompt_tokens,
        'output_tokens': output_tokens,
        'total_tokens': total_tokens,
        'cost_usd': calculate_gemini_cost(prompt_tokens, output_tokens, model_name),
        'model_name': model_name
    }

    # Extract generated text
    candidates = data.get('candidates') or []
    if not candidates:
        logger.error("LLM response missing candidates")
        raise GenerationFailedError("AI generation returned no result")

    parts = candidates[0].get('content', {}).get('parts') or []
    text = parts[0].get('text', '') if parts else ''
    text = strip_code_fences(text)
    if not text:
        logger.error("LLM returned empty response")
        raise GenerationFailedError("AI generation returned no result")

    try:
        llm_data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse LLM JSON response: {e}")
        logger.error(f"Response text: {text[:500]}")
        raise GenerationFailedError("AI generation returned invalid JSON") from e

    return llm_data, token_usage
