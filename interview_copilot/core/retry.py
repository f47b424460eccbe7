import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from interview_copilot.core.constants import (
    DEFAULT_MAX_RETRIES,
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_DELAY,
)
from interview_copilot.core.logging import log_event
from interview_copilot.providers.exceptions import ProviderResult

Sleeper = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff schedule: 1s, 2s, 4s, 8s, ... capped at `max_delay`."""

    max_retries: int = DEFAULT_MAX_RETRIES
    initial_delay: float = RETRY_INITIAL_DELAY
    max_delay: float = RETRY_MAX_DELAY
    multiplier: float = RETRY_BACKOFF_MULTIPLIER

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_number: int) -> float:
        """Delay in seconds before retry `retry_number` (0-based)."""
        return min(self.initial_delay * (self.multiplier**retry_number), self.max_delay)


async def call_with_retry(
    attempt: Callable[[], Awaitable[ProviderResult]],
    policy: RetryPolicy,
    sleep: Sleeper = asyncio.sleep,
    **log_fields,
) -> ProviderResult:
    """Run `attempt` until it succeeds, fails permanently, or retries run out.

    Only failures whose ErrorKind is retryable are attempted again. The last
    result is returned as-is; callers decide how to present a failure.
    """
    retries_left = policy.max_retries
    retry_number = 0
    while True:
        result = await attempt()
        if result.ok:
            if retry_number:
                log_event("retry.recovered", component="retry", retries=retry_number, **log_fields)
            return result

        kind = result.error_kind
        if not kind.is_retryable:
            log_event(
                "retry.non_retryable",
                level=logging.ERROR,
                component="retry",
                error_kind=kind.value,
                error_msg=result.error_message,
                **log_fields,
            )
            return result
        if retries_left == 0:
            log_event(
                "retry.exhausted",
                level=logging.ERROR,
                component="retry",
                error_kind=kind.value,
                error_msg=result.error_message,
                attempts=retry_number + 1,
                **log_fields,
            )
            return result

        delay = policy.delay_for(retry_number)
        log_event(
            "retry.scheduled",
            level=logging.WARNING,
            component="retry",
            error_kind=kind.value,
            error_msg=result.error_message,
            delay_seconds=delay,
            retries_left=retries_left,
            **log_fields,
        )
        await sleep(delay)
        retries_left -= 1
        retry_number += 1
