import logging
from typing import Any, Dict, Optional

from google import genai

from config import Config
from ai.src.errors import MissingCredentialError, classify_error
from ai.src.model_fallback import (
    Failure,
    FallbackOutcome,
    generate_content_with_fallback,
    ping_models,
)
from ai.src.prompts import ANALYZE_PROMPT, COMPARISON_PROMPT
from ai.src.response_parser import parse_comparison

NO_MODEL_AVAILABLE = "사용 가능한 모델이 없습니다."


def _build_client(api_key: str) -> genai.Client:
    # One client per request, nothing is shared between requests
    return genai.Client(api_key=api_key)


def analyze_image(
        instruction: str,
        image_bytes: bytes,
        mime_type: Optional[str] = None,
        structured_output: bool = False,
        api_key: Optional[str] = None
) -> FallbackOutcome:
    """
    Sends an image and an instruction to Gemini, falling back across models.

    Args:
        instruction: What the model should do with the image
        image_bytes: The uploaded image (already validated, non-empty)
        mime_type: Media type of the image (default: Config.DEFAULT_MIME_TYPE)
        structured_output: Ask for a JSON-only answer
        api_key: Gemini key, read from the environment when omitted

    Returns:
        The FallbackOutcome. When no key is configured the outcome fails with
        MissingCredentialError and no model is attempted.
    """
    api_key = api_key or Config.get_api_key()
    if not api_key:
        logging.error("Gemini API key is not configured.")
        return FallbackOutcome(failure=Failure(MissingCredentialError()))

    client = _build_client(api_key)
    return generate_content_with_fallback(
        client,
        instruction,
        image_bytes,
        mime_type or Config.DEFAULT_MIME_TYPE,
        structured_output=structured_output,
    )


def _require_text(outcome: FallbackOutcome) -> str:
    if not outcome.ok:
        raise classify_error(outcome.error, outcome.attempted_models)
    return outcome.text


def analyze_outfit(image_bytes: bytes, mime_type: Optional[str] = None) -> str:
    """Free-form analysis of the outfit: brands, estimated prices, budget picks."""
    logging.info("--- Sending outfit analysis request to Gemini... ---")
    outcome = analyze_image(ANALYZE_PROMPT, image_bytes, mime_type)
    return _require_text(outcome)


def generate_comparison(image_bytes: bytes, mime_type: Optional[str] = None) -> Dict[str, Any]:
    """Celebrity items vs budget alternatives, as a parsed JSON object."""
    logging.info("--- Sending comparison request to Gemini... ---")
    outcome = analyze_image(COMPARISON_PROMPT, image_bytes, mime_type, structured_output=True)
    comparison = parse_comparison(_require_text(outcome))

    logging.info(
        f"Comparison ready: {len(comparison['celebrityItems'])} celebrity items, "
        f"{len(comparison['budgetItems'])} budget items."
    )
    return comparison


def check_models(api_key: Optional[str] = None) -> Dict[str, Any]:
    """Pings the default model list and recommends the first model that answers."""
    api_key = api_key or Config.get_api_key()
    if not api_key:
        raise MissingCredentialError()

    results = ping_models(_build_client(api_key))
    recommendation = next((name for name, result in results.items() if result["available"]), NO_MODEL_AVAILABLE)

    return {
        "message": "모델 가용성 확인 완료",
        "results": results,
        "recommendation": recommendation,
    }
