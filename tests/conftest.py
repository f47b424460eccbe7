"""Shared fixtures: controllable time and pipelines wired to scripted adapters."""

import pytest

from interview_copilot.core.cache import ResponseCache
from interview_copilot.core.pipeline import ResponsePipeline
from interview_copilot.core.rate_limiter import ProviderLimits, RateLimiter
from interview_copilot.core.retry import RetryPolicy
from interview_copilot.providers.registry import ProviderRegistry
from tests.mocks.mock_provider import ScriptedAdapter


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(
        limits={"groq": ProviderLimits(per_minute=30, per_hour=500), "gemini": ProviderLimits(15, 300)},
        clock=clock,
    )


@pytest.fixture
def cache(clock):
    return ResponseCache(ttl_seconds=3600, clock=clock)


@pytest.fixture
def make_pipeline(rate_limiter, cache, sleeper):
    """Build a pipeline around the given adapters with instant backoff."""

    def _make(*adapters: ScriptedAdapter, **overrides) -> ResponsePipeline:
        registry = ProviderRegistry(list(adapters) or [ScriptedAdapter()])
        return ResponsePipeline(
            registry=registry,
            rate_limiter=overrides.get("rate_limiter", rate_limiter),
            cache=overrides.get("cache", cache),
            retry_policy=overrides.get("retry_policy", RetryPolicy()),
            attempt_timeout=overrides.get("attempt_timeout", 5.0),
            sleep=sleeper,
        )

    return _make
