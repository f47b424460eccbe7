import logging
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from interview_copilot.core.constants import (
    CACHE_TTL_SECONDS,
    MAX_CACHEABLE_LENGTH,
    MIN_CACHEABLE_LENGTH,
    TIME_SENSITIVE_TERMS,
)
from interview_copilot.core.hashing import hash_text
from interview_copilot.core.logging import log_event
from interview_copilot.core.models import CanonicalResponse

_TIME_SENSITIVE = re.compile(
    r"\b(?:" + "|".join(re.escape(term).replace(r"\ ", r"\s+") for term in TIME_SENSITIVE_TERMS) + r")\b",
    re.IGNORECASE,
)

_DEFAULT_PERSONA_KEY = "default"


def normalize_question(question: str) -> str:
    return question.strip().casefold()


@dataclass
class CacheEntry:
    key: str
    value: CanonicalResponse
    created_at: float
    ttl_seconds: int

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl_seconds


class ResponseCache:
    """Exact-match answer cache keyed by a fingerprint of the normalized question.

    Entries expire lazily: an expired entry is dropped when it is next looked up.
    Values are copied on the way in and out so callers never share state with the
    cache.
    """

    def __init__(self, ttl_seconds: int = CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def is_cacheable(question: str | None) -> bool:
        if not question or not isinstance(question, str):
            return False
        length = len(question.strip())
        if length < MIN_CACHEABLE_LENGTH or length > MAX_CACHEABLE_LENGTH:
            return False
        return _TIME_SENSITIVE.search(question) is None

    @staticmethod
    def fingerprint(question: str, provider: str, model: str | None, persona: str | None) -> str:
        parts = (
            normalize_question(question),
            provider,
            model or "",
            persona or _DEFAULT_PERSONA_KEY,
        )
        return hash_text("\x1f".join(parts))

    def get(
        self, question: str, provider: str, model: str | None, persona: str | None = None
    ) -> CanonicalResponse | None:
        key = self.fingerprint(question, provider, model, persona)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self.clock()):
                del self._entries[key]
                log_event("cache.expired", level=logging.DEBUG, component="cache", provider=provider, model=model)
                return None
            return entry.value.model_copy(deep=True)

    def set(
        self,
        question: str,
        response: CanonicalResponse,
        provider: str,
        model: str | None,
        persona: str | None = None,
    ) -> None:
        """Store an answer. Never raises: a failed write only costs a future cache miss."""
        try:
            key = self.fingerprint(question, provider, model, persona)
            entry = CacheEntry(
                key=key,
                value=response.model_copy(deep=True),
                created_at=self.clock(),
                ttl_seconds=self.ttl_seconds,
            )
            with self._lock:
                self._entries[key] = entry
        except Exception as e:
            log_event(
                "cache.store_failed",
                level=logging.WARNING,
                component="cache",
                provider=provider,
                model=model,
                error_type=type(e).__name__,
                error_msg=str(e),
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
