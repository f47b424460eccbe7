import asyncio
import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from pydantic import ValidationError

from interview_copilot.core.constants import (
    FAILURE_SCORE,
    RAW_ANSWER_PREVIEW_CHARS,
    SUCCESS_SCORE,
    UNKNOWN_MODEL,
)
from interview_copilot.core.logging import log_event
from interview_copilot.core.models import CanonicalResponse


class ErrorKind(str, Enum):
    """Closed set of failure classes seen at the adapter boundary."""

    TIMEOUT = "timeout"
    CONNECTION_RESET = "connection_reset"
    CONNECTION_TIMEOUT = "connection_timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    AUTHENTICATION = "authentication"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN_PROVIDER = "unknown_provider"
    PARSE = "parse"
    UNKNOWN = "unknown"

    @property
    def is_retryable(self) -> bool:
        return self in _RETRYABLE_KINDS


_RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.TIMEOUT,
        ErrorKind.CONNECTION_RESET,
        ErrorKind.CONNECTION_TIMEOUT,
        ErrorKind.RATE_LIMITED,
        ErrorKind.SERVER_ERROR,
        ErrorKind.SERVICE_UNAVAILABLE,
    }
)

_STATUS_KINDS = {
    400: ErrorKind.INVALID_REQUEST,
    401: ErrorKind.AUTHENTICATION,
    403: ErrorKind.AUTHENTICATION,
    404: ErrorKind.INVALID_REQUEST,
    422: ErrorKind.INVALID_REQUEST,
    429: ErrorKind.RATE_LIMITED,
    500: ErrorKind.SERVER_ERROR,
    503: ErrorKind.SERVICE_UNAVAILABLE,
}


class ProviderError(Exception):
    """Base exception for provider operations."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ProviderConnectionError(ProviderError):
    """Raised when the backend cannot be reached."""

    kind = ErrorKind.CONNECTION_RESET


class ProviderResponseError(ProviderError):
    """Raised when the backend answers with an unusable response."""

    kind = ErrorKind.INVALID_REQUEST


class ProviderParseError(ProviderError):
    """Raised when a response cannot be parsed."""

    kind = ErrorKind.PARSE


class UnknownProviderError(ProviderError):
    kind = ErrorKind.UNKNOWN_PROVIDER

    def __init__(self, provider: str):
        super().__init__(f"Unknown provider: {provider}")
        self.provider = provider


def kind_for_status(status_code: int) -> ErrorKind:
    return _STATUS_KINDS.get(status_code, ErrorKind.UNKNOWN)


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map an exception to an ErrorKind by its type or HTTP status, never its message."""
    if isinstance(exc, ProviderError):
        return exc.kind
    if isinstance(exc, httpx.ConnectTimeout):
        return ErrorKind.CONNECTION_TIMEOUT
    if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, (ConnectionResetError, httpx.ReadError, httpx.RemoteProtocolError)):
        return ErrorKind.CONNECTION_RESET
    if isinstance(exc, httpx.HTTPStatusError):
        return kind_for_status(exc.response.status_code)

    # SDK errors expose the HTTP status as `status_code` (openai, anthropic, groq) or `code` (google-genai)
    for attr in ("status_code", "code"):
        status = getattr(exc, attr, None)
        if isinstance(status, int) and not isinstance(status, bool):
            return kind_for_status(status)
    return ErrorKind.UNKNOWN


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of one adapter call.

    Both variants carry a renderable CanonicalResponse; a failure additionally
    names its ErrorKind so the pipeline can decide whether to retry.
    """

    response: CanonicalResponse
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, response: CanonicalResponse) -> "ProviderResult":
        return cls(response=response)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, response: CanonicalResponse) -> "ProviderResult":
        return cls(response=response, error_kind=kind, error_message=message)


class FallbackFactory:
    """Factory for the fixed-shape responses used when no real answer is available."""

    EXPERIENCE_ANSWER = "I have several years of hands-on experience with this..."
    PROVIDER_FAILURE_ANSWER = (
        "I have extensive experience in this area. Let me share a specific example from my previous role..."
    )

    @staticmethod
    def provider_failure(provider: str, model: str, error: str) -> CanonicalResponse:
        """Answer returned by an adapter whose backend call raised."""
        return CanonicalResponse(
            answer=FallbackFactory.PROVIDER_FAILURE_ANSWER,
            provider=provider,
            model=model,
            error=error,
            score=FAILURE_SCORE,
            weaknesses=[f"Error processing request with {provider}"],
            suggestion=FallbackFactory.PROVIDER_FAILURE_ANSWER,
            next_question="Could you tell me more about your experience?",
        )

    @staticmethod
    def pipeline_failure(provider: str, model: str | None, error: str) -> CanonicalResponse:
        """Answer returned by the pipeline when no attempt produced a usable reply."""
        return CanonicalResponse(
            answer=(
                "I apologize, but I'm having trouble generating a response right now. "
                f"{error}. Please try again in a moment."
            ),
            provider=provider,
            model=model or UNKNOWN_MODEL,
            error=error,
            score=FAILURE_SCORE,
            weaknesses=[f"Error with {provider}: {error}"],
            suggestion="Please try your question again or switch to a different AI provider.",
            next_question="Could you rephrase your question?",
        )


_FENCE = re.compile(r"```(?:json)?\s*\n?|```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE.sub("", text).strip()


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def parse_interview_reply(text: str | None, provider: str, model: str) -> CanonicalResponse:
    """Turn a backend's text reply into a CanonicalResponse.

    A malformed reply still yields an answer: the raw text, truncated, with the
    structured lists left empty.
    """
    raw = text or ""
    try:
        data = json.loads(strip_code_fences(raw))
        if not isinstance(data, dict):
            raise ProviderParseError(f"Expected a JSON object, got {type(data).__name__}")
    except (json.JSONDecodeError, ProviderParseError) as e:
        log_event(
            "llm.parse_error",
            level=logging.WARNING,
            component="provider",
            provider=provider,
            model=model,
            error_type=type(e).__name__,
            error_msg=str(e),
            content_length=len(raw),
        )
        data = {"answer": raw[:RAW_ANSWER_PREVIEW_CHARS]}

    answer = data.get("answer")
    if not isinstance(answer, str) or not answer.strip():
        answer = FallbackFactory.EXPERIENCE_ANSWER

    experience = _string_list(data.get("experience_mentioned"))
    follow_ups = _string_list(data.get("follow_up_topics"))
    try:
        return CanonicalResponse(
            answer=answer,
            provider=provider,
            model=model,
            experience_mentioned=experience,
            key_technologies=_string_list(data.get("key_technologies")),
            follow_up_topics=follow_ups,
            score=SUCCESS_SCORE,
            strengths=experience or ["Demonstrated experience"],
            suggestion=answer,
            next_question=follow_ups[0] if follow_ups else "Tell me more about your experience.",
        )
    except ValidationError as e:
        raise ProviderParseError(f"Reply did not fit the response schema: {e}") from e
