"""
Error taxonomy for the outfit analysis flow.

Every error carries the HTTP status and the user-facing (Korean) message the
Flask routes send back, so the routes only have to catch AnalysisError.
"""

from typing import Iterable, Optional

from google.genai import errors as genai_errors

# Substrings found in Gemini error messages, checked in this order
INVALID_KEY_MARKERS = ["API_KEY_INVALID", "API key not valid", "UNAUTHENTICATED", "401"]
QUOTA_MARKERS = ["QUOTA_EXCEEDED", "RESOURCE_EXHAUSTED", "429", "quota"]
SAFETY_MARKERS = ["SAFETY", "blocked"]
# Block / finish reasons reported by Gemini for filtered content
SAFETY_BLOCK_REASONS = ["SAFETY", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"]

INVALID_KEY_STATUSES = ("UNAUTHENTICATED", "PERMISSION_DENIED")
QUOTA_STATUSES = ("RESOURCE_EXHAUSTED",)

REMEDIATION_HINTS = (
    "가능한 해결 방법:\n"
    "1. Google AI Studio (https://aistudio.google.com/)에서 새 API 키 생성\n"
    "2. 결제 계정 연결 (일부 모델은 유료 계정 필요)\n"
    "3. 다른 지역에서 시도"
)


class AnalysisError(Exception):
    """Base class: an error that ends the current request."""

    status_code = 500
    user_message = "AI 분석 중 오류가 발생했습니다."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)


class MissingCredentialError(AnalysisError):
    status_code = 500
    user_message = "Gemini API 키가 설정되지 않았습니다. .env 파일을 확인해주세요."


class InvalidCredentialError(AnalysisError):
    status_code = 401
    user_message = "Gemini API 키가 유효하지 않습니다. API 키를 확인해주세요."


class QuotaExceededError(AnalysisError):
    status_code = 429
    user_message = "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요."


class ContentRejectedError(AnalysisError):
    status_code = 422
    user_message = "이미지가 안전 필터에 의해 차단되었습니다."


class UpstreamError(AnalysisError):
    """Any other Gemini failure. Keeps the raw message of the last attempt."""

    status_code = 502

    def __init__(self, message: str, attempted_models: Iterable[str] = ()):
        self.detail = message
        self.attempted_models = list(attempted_models)
        super().__init__(message)

    @property
    def user_message(self) -> str:  # type: ignore[override]
        if not self.attempted_models:
            return f"API 오류: {self.detail}"
        return (
            f"시도한 모델들 ({', '.join(self.attempted_models)}) 모두 실패했습니다.\n\n"
            f"{REMEDIATION_HINTS}\n\n"
            f"에러 상세: {self.detail}"
        )


class MalformedResponseError(AnalysisError):
    status_code = 502
    user_message = "AI 응답을 해석하는 데 실패했습니다."


class InvalidResponseShapeError(AnalysisError):
    status_code = 502
    user_message = "AI 응답 형식이 올바르지 않습니다."


class ImageRequiredError(AnalysisError):
    status_code = 400
    user_message = "이미지가 제공되지 않았습니다."


class InvalidImageError(AnalysisError):
    status_code = 400
    user_message = "이미지 파일을 읽을 수 없습니다."


class BlockedResponseError(Exception):
    """Raised for a model attempt whose response carries no text."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Response blocked ({reason})")


def _contains_any(text: str, markers: list[str]) -> bool:
    return any(marker.lower() in text.lower() for marker in markers)


def classify_error(error: Optional[BaseException], attempted_models: Iterable[str] = ()) -> AnalysisError:
    """
    Maps a raw exception from the Gemini SDK to the error taxonomy.

    Structured API error codes are checked first, then known substrings of the
    error message. Anything unrecognised becomes an UpstreamError.
    """
    attempted_models = list(attempted_models)

    if error is None:
        return UpstreamError("알 수 없는 오류", attempted_models)
    if isinstance(error, AnalysisError):
        return error
    if isinstance(error, BlockedResponseError):
        if _contains_any(error.reason, SAFETY_BLOCK_REASONS):
            return ContentRejectedError()
        return UpstreamError(str(error), attempted_models)

    if isinstance(error, genai_errors.APIError):
        if error.code in (401, 403) or error.status in INVALID_KEY_STATUSES:
            return InvalidCredentialError()
        if error.code == 429 or error.status in QUOTA_STATUSES:
            return QuotaExceededError()

    message = str(error)
    if _contains_any(message, INVALID_KEY_MARKERS):
        return InvalidCredentialError()
    if _contains_any(message, QUOTA_MARKERS):
        return QuotaExceededError()
    if _contains_any(message, SAFETY_MARKERS):
        return ContentRejectedError()

    return UpstreamError(message, attempted_models)
