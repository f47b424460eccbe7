"""Runtime configuration read from environment variables."""

import os

from interview_copilot.core.constants import (
    CACHE_TTL_SECONDS,
    DEFAULT_ATTEMPT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PROVIDER,
    DEFAULT_RATE_LIMITS,
    PROVIDER_ANTHROPIC,
    PROVIDER_GEMINI,
    PROVIDER_GROQ,
    PROVIDER_OPENAI,
    RETRY_BACKOFF_MULTIPLIER,
    RETRY_INITIAL_DELAY,
    RETRY_MAX_DELAY,
)
from interview_copilot.core.rate_limiter import ProviderLimits
from interview_copilot.core.retry import RetryPolicy

KNOWN_PROVIDERS = (PROVIDER_GROQ, PROVIDER_GEMINI, PROVIDER_OPENAI, PROVIDER_ANTHROPIC)


def _int_env(name: str, default: int, minimum: int, maximum: int) -> int:
    try:
        value = int(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default
    if value < minimum or value > maximum:
        return default
    return value


def _float_env(name: str, default: float, minimum: float, maximum: float) -> float:
    try:
        value = float(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default
    if value < minimum or value > maximum:
        return default
    return value


class CopilotConfig:
    """Settings consumed by the response pipeline.

    Bad values fall back to the defaults in `constants` instead of failing start-up.
    """

    def __init__(self):
        self.default_provider = (os.getenv("COPILOT_PROVIDER") or DEFAULT_PROVIDER).strip().lower()
        self.cache_ttl_seconds = _int_env("COPILOT_CACHE_TTL_SECONDS", CACHE_TTL_SECONDS, 1, 86400)
        self.max_retries = _int_env("COPILOT_MAX_RETRIES", DEFAULT_MAX_RETRIES, 0, 10)
        self.retry_initial_delay = _float_env("COPILOT_RETRY_INITIAL_DELAY", RETRY_INITIAL_DELAY, 0.0, 60.0)
        self.retry_max_delay = _float_env("COPILOT_RETRY_MAX_DELAY", RETRY_MAX_DELAY, 0.0, 300.0)
        self.retry_multiplier = _float_env("COPILOT_RETRY_MULTIPLIER", RETRY_BACKOFF_MULTIPLIER, 1.0, 10.0)
        self.attempt_timeout = _float_env("COPILOT_ATTEMPT_TIMEOUT", DEFAULT_ATTEMPT_TIMEOUT, 1.0, 600.0)
        self.rate_limits = self._load_rate_limits()

    def api_key(self, provider: str) -> str | None:
        return os.getenv(f"{provider.upper()}_API_KEY") or None

    def model_override(self, provider: str) -> str | None:
        return os.getenv(f"{provider.upper()}_MODEL") or None

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            initial_delay=self.retry_initial_delay,
            max_delay=self.retry_max_delay,
            multiplier=self.retry_multiplier,
        )

    def _load_rate_limits(self) -> dict[str, ProviderLimits]:
        limits: dict[str, ProviderLimits] = {}
        for provider in KNOWN_PROVIDERS:
            prefix = provider.upper()
            per_minute_default, per_hour_default = DEFAULT_RATE_LIMITS.get(provider, (0, 0))
            per_minute = _int_env(f"{prefix}_RATE_LIMIT_PER_MINUTE", per_minute_default, 1, 100_000)
            per_hour = _int_env(f"{prefix}_RATE_LIMIT_PER_HOUR", per_hour_default, 1, 1_000_000)
            # Unconfigured providers stay absent so the limiter fails open for them
            if per_minute and per_hour:
                limits[provider] = ProviderLimits(per_minute=per_minute, per_hour=per_hour)
        return limits
