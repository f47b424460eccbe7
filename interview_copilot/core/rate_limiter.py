import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from interview_copilot.core.constants import (
    DEFAULT_RATE_LIMITS,
    HOUR_SECONDS,
    MINUTE_SECONDS,
    RATE_LIMIT_REASON,
)
from interview_copilot.core.logging import log_event
from interview_copilot.core.models import (
    RateLimitDecision,
    RateLimitStatus,
    RateLimitUsage,
    WindowUsage,
)


@dataclass(frozen=True)
class ProviderLimits:
    per_minute: int
    per_hour: int


@dataclass
class RateLimitWindow:
    """Per-provider counters for the current minute and hour windows."""

    count_per_minute: int
    count_per_hour: int
    window_start_minute: float
    window_start_hour: float

    @classmethod
    def starting_at(cls, now: float) -> "RateLimitWindow":
        return cls(0, 0, now, now)

    def expire(self, now: float) -> None:
        if now - self.window_start_minute > MINUTE_SECONDS:
            self.count_per_minute = 0
            self.window_start_minute = now
        if now - self.window_start_hour > HOUR_SECONDS:
            self.count_per_hour = 0
            self.window_start_hour = now

    def seconds_until_minute_reset(self, now: float) -> float:
        return MINUTE_SECONDS - (now - self.window_start_minute)

    def seconds_until_hour_reset(self, now: float) -> float:
        return HOUR_SECONDS - (now - self.window_start_hour)


class RateLimiter:
    """In-memory per-provider admission control.

    Each configured provider has two independent ceilings, requests per minute and
    requests per hour. Providers without configured limits are always admitted.
    """

    def __init__(
        self,
        limits: dict[str, ProviderLimits] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limits is None:
            limits = {name: ProviderLimits(*ceilings) for name, ceilings in DEFAULT_RATE_LIMITS.items()}
        self.limits = dict(limits)
        self.clock = clock
        self._windows: dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()

    def check(self, provider: str) -> RateLimitDecision:
        """Admit and count one request, or reject it with a retry hint."""
        limits = self.limits.get(provider)
        if limits is None:
            return RateLimitDecision(allowed=True)

        with self._lock:
            now = self.clock()
            window = self._windows.get(provider)
            if window is None:
                window = self._windows[provider] = RateLimitWindow.starting_at(now)
            window.expire(now)

            waits: list[float] = []
            if window.count_per_minute + 1 > limits.per_minute:
                waits.append(window.seconds_until_minute_reset(now))
            if window.count_per_hour + 1 > limits.per_hour:
                waits.append(window.seconds_until_hour_reset(now))

            if waits:
                # Hint at whichever blocking window reopens first
                retry_after = max(1, math.ceil(min(waits)))
                log_event(
                    "rate_limit.exceeded",
                    component="rate_limiter",
                    provider=provider,
                    used_per_minute=window.count_per_minute,
                    used_per_hour=window.count_per_hour,
                    retry_after_seconds=retry_after,
                )
                return RateLimitDecision(allowed=False, reason=RATE_LIMIT_REASON, retry_after_seconds=retry_after)

            window.count_per_minute += 1
            window.count_per_hour += 1
            return RateLimitDecision(allowed=True)

    def get_status(self, provider: str) -> RateLimitStatus | None:
        """Report usage without touching the counters; None for unconfigured providers."""
        limits = self.limits.get(provider)
        if limits is None:
            return None

        with self._lock:
            now = self.clock()
            used_minute = used_hour = 0
            window = self._windows.get(provider)
            if window is not None:
                if now - window.window_start_minute <= MINUTE_SECONDS:
                    used_minute = window.count_per_minute
                if now - window.window_start_hour <= HOUR_SECONDS:
                    used_hour = window.count_per_hour

        return RateLimitStatus(
            provider=provider,
            limits=RateLimitUsage(
                per_minute=_usage(used_minute, limits.per_minute),
                per_hour=_usage(used_hour, limits.per_hour),
            ),
        )

    def reset(self, provider: str) -> None:
        """Zero both windows for a provider; unknown providers are ignored."""
        with self._lock:
            window = self._windows.get(provider)
            if window is not None:
                now = self.clock()
                self._windows[provider] = RateLimitWindow.starting_at(now)
        log_event("rate_limit.reset", component="rate_limiter", provider=provider)

    def reset_all(self) -> None:
        with self._lock:
            self._windows.clear()


def _usage(used: int, limit: int) -> WindowUsage:
    return WindowUsage(used=used, remaining=max(0, limit - used), limit=limit)
