"""
Model Fallback Helper Module

Tries a sequence of Gemini models for one image request until one of them
answers. The candidate list comes from the models endpoint when it is
reachable, otherwise from DEFAULT_FALLBACK_MODELS.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from google import genai
from google.genai import types

from ai.src.errors import BlockedResponseError
from ai.src.prompts import PING_PROMPT, comparison_schema

# Default fallback model sequence, newest/cheapest first
DEFAULT_FALLBACK_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.0-flash",
    "gemini-2.0-flash-lite",
    "gemini-1.5-flash",
]

# Discovery configuration
MODEL_NAME_HINTS = ("flash", "pro", "vision")
EXCLUDED_NAME_HINTS = ("embedding",)
MAX_DISCOVERED_MODELS = 5

NO_CANDIDATES_MESSAGE = "시도할 수 있는 모델이 없습니다."


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Failure:
    error: BaseException


class NoCandidatesError(Exception):
    """Raised in place of a model error when no model was tried at all."""


@dataclass
class FallbackOutcome:
    """
    Result of one fallback run.

    attempted_models lists every model that was called, in order. Exactly one
    of success / failure is set once the run is over.
    """

    attempted_models: List[str] = field(default_factory=list)
    success: Optional[Success] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.success is not None

    @property
    def text(self) -> Optional[str]:
        return self.success.text if self.success else None

    @property
    def error(self) -> Optional[BaseException]:
        return self.failure.error if self.failure else None


def discover_models(client: genai.Client) -> List[str]:
    """
    Lists the models available to the API key and keeps the ones that can
    handle an image prompt. May raise; callers decide what to fall back to.
    """
    names = []
    for model in client.models.list():
        name = (getattr(model, "name", None) or "").replace("models/", "")
        if not name or any(hint in name for hint in EXCLUDED_NAME_HINTS):
            continue

        actions = getattr(model, "supported_actions", None)
        if actions and "generateContent" not in actions:
            continue

        names.append(name)

    logging.info(f"🔎 Available models: {names}")

    return [name for name in names if any(hint in name for hint in MODEL_NAME_HINTS)][:MAX_DISCOVERED_MODELS]


def resolve_candidate_models(client: genai.Client) -> List[str]:
    """Returns the discovered models, or the static list if discovery gives nothing."""
    try:
        discovered = discover_models(client)
    except Exception as e:
        logging.warning(f"⚠️ Model discovery failed, using default model list: {e}")
        return get_fallback_models()

    if not discovered:
        logging.info("Model discovery returned no usable model, using default model list")
        return get_fallback_models()

    return discovered


def run_with_fallback(model_names: List[str], attempt: Callable[[str], str]) -> FallbackOutcome:
    """
    Calls attempt(model_name) for each model in order and stops at the first
    one that returns. Each model is tried once; empty names are skipped.
    """
    outcome = FallbackOutcome()

    for model_name in model_names:
        if not model_name:
            continue

        outcome.attempted_models.append(model_name)
        try:
            logging.info(f"📡 Using model: {model_name}")
            text = attempt(model_name)
        except Exception as e:
            logging.warning(f"⚠️ Model {model_name} failed: {e}")
            outcome.failure = Failure(e)
            continue

        if len(outcome.attempted_models) > 1:
            logging.info(f"✅ Successfully used fallback model: {model_name}")
        else:
            logging.info(f"✅ Model {model_name} succeeded")
        outcome.success = Success(text)
        outcome.failure = None
        return outcome

    if not outcome.attempted_models:
        outcome.failure = Failure(NoCandidatesError(NO_CANDIDATES_MESSAGE))

    logging.error(f"❌ All models exhausted ({', '.join(outcome.attempted_models)}). Last error: {outcome.error}")
    return outcome


def build_config(structured_output: bool) -> types.GenerateContentConfig:
    if structured_output:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=comparison_schema,
        )
    return types.GenerateContentConfig()


def extract_text(response: Any) -> str:
    """Returns the response text, raising BlockedResponseError when there is none."""
    text = response.text
    if text:
        return text

    reason = None
    feedback = getattr(response, "prompt_feedback", None)
    if feedback is not None and getattr(feedback, "block_reason", None):
        reason = feedback.block_reason
    elif getattr(response, "candidates", None):
        reason = getattr(response.candidates[0], "finish_reason", None)

    reason = getattr(reason, "value", reason)
    raise BlockedResponseError(str(reason) if reason else "EMPTY_RESPONSE")


def generate_content_with_fallback(
    client: genai.Client,
    instruction: str,
    image_bytes: bytes,
    mime_type: str,
    structured_output: bool = False,
    models: Optional[List[str]] = None,
) -> FallbackOutcome:
    """
    Sends the instruction and the image to the first model that answers.

    Args:
        client: The Gemini client built for this request
        instruction: The task description sent along with the image
        image_bytes: Raw bytes of the uploaded image
        mime_type: Media type of the image
        structured_output: Ask the model for a JSON document only
        models: Optional list of models to try (discovered when omitted)

    Returns:
        The FallbackOutcome of the run. Failures are returned, not raised.
    """
    contents = [
        instruction,
        types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
    ]
    config = build_config(structured_output)
    candidates = models if models is not None else resolve_candidate_models(client)

    def attempt(model_name: str) -> str:
        response = client.models.generate_content(
            model=model_name,
            contents=contents,
            config=config,
        )
        return extract_text(response)

    return run_with_fallback(candidates, attempt)


def ping_models(client: genai.Client, models: Optional[List[str]] = None) -> Dict[str, Dict[str, Any]]:
    """Sends a trivial prompt to every model and reports which ones answer."""
    results = {}
    for model_name in models or get_fallback_models():
        try:
            client.models.generate_content(model=model_name, contents=PING_PROMPT)
            results[model_name] = {"available": True}
        except Exception as e:
            logging.info(f"Model {model_name} unavailable: {e}")
            results[model_name] = {"available": False, "error": str(e) or "Unknown error"}
    return results


def get_fallback_models() -> List[str]:
    """Returns the list of fallback models."""
    return DEFAULT_FALLBACK_MODELS.copy()
