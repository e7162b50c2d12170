import json
import logging
from typing import Any, Dict

from ai.src.errors import InvalidResponseShapeError, MalformedResponseError

REQUIRED_LIST_FIELDS = ("celebrityItems", "budgetItems")


def _strip_code_fence(text: str) -> str:
    # Some models wrap JSON in ```json ... ``` even in JSON mode
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_comparison(text: str) -> Dict[str, Any]:
    """
    Parses the structured comparison returned by Gemini.

    Raises MalformedResponseError if the text is not JSON, and
    InvalidResponseShapeError if celebrityItems / budgetItems are missing or
    are not lists. Empty lists are accepted.
    """
    try:
        parsed = json.loads(_strip_code_fence(text or ""))
    except json.JSONDecodeError as e:
        logging.error(f"Failed to parse Gemini JSON response: {e}. Raw text: {text!r}")
        raise MalformedResponseError() from e

    if not isinstance(parsed, dict):
        logging.error(f"Gemini JSON response is not an object: {type(parsed).__name__}")
        raise InvalidResponseShapeError()

    for field_name in REQUIRED_LIST_FIELDS:
        if not isinstance(parsed.get(field_name), list):
            logging.error(f"Gemini JSON response has no '{field_name}' list")
            raise InvalidResponseShapeError()

    return parsed
