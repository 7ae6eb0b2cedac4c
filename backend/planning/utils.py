"""Shared helpers for the LLM-backed planning features."""

import json
import logging

logger = logging.getLogger(__name__)

# LLM generation defaults
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TEMPERATURE_DETERMINISTIC = 0.2  # For orderings and other structured output


def parse_llm_json_response(response: str, context: str = "LLM response") -> dict | list:
    """Extract and parse JSON from an LLM response.

    Handles common LLM output patterns:
    - Direct JSON output
    - JSON wrapped in markdown code blocks (```json ... ```)

    Args:
        response: Raw LLM response text.
        context: Description for error logging (e.g., "task ordering").

    Returns:
        Parsed JSON as dict or list. Returns empty dict on parse failure.
    """
    text = response.strip()

    if text.startswith("```"):
        # Remove opening fence and optional language identifier
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.error("Failed to parse %s as JSON", context)
        logger.debug("Response was: %s", text[:500] if len(text) > 500 else text)
        return {}
