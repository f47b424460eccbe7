import asyncio
import logging
import time

from interview_copilot.core.cache import ResponseCache
from interview_copilot.core.config import CopilotConfig
from interview_copilot.core.constants import DEFAULT_ATTEMPT_TIMEOUT, DEFAULT_ROLE_TYPE
from interview_copilot.core.logging import log_event, mask_text
from interview_copilot.core.models import CanonicalResponse, HistoryMessage, RetrievedContext
from interview_copilot.core.rate_limiter import RateLimiter
from interview_copilot.core.retry import RetryPolicy, Sleeper, call_with_retry
from interview_copilot.providers.exceptions import (
    FallbackFactory,
    ProviderResult,
    UnknownProviderError,
    classify_exception,
)
from interview_copilot.providers.registry import ProviderRegistry, build_default_registry


class ResponsePipeline:
    """Turns an interview question into a CanonicalResponse.

    Order per call: resolve the adapter, serve from cache when possible, admit
    through the rate limiter, then call the backend under the retry policy and
    cache the answer. Cache hits are served before the rate-limit check, so they
    never spend quota and stay available while a provider is throttled.

    `generate` never raises (task cancellation aside): every failure becomes a
    CanonicalResponse with `error` set.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        rate_limiter: RateLimiter | None = None,
        cache: ResponseCache | None = None,
        retry_policy: RetryPolicy | None = None,
        attempt_timeout: float | None = DEFAULT_ATTEMPT_TIMEOUT,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.registry = registry
        self.rate_limiter = rate_limiter or RateLimiter()
        self.cache = cache or ResponseCache()
        self.retry_policy = retry_policy or RetryPolicy()
        self.attempt_timeout = attempt_timeout
        self._sleep = sleep

    @classmethod
    def create(cls, config: CopilotConfig | None = None) -> "ResponsePipeline":
        config = config or CopilotConfig()
        return cls(
            registry=build_default_registry(config),
            rate_limiter=RateLimiter(limits=config.rate_limits),
            cache=ResponseCache(ttl_seconds=config.cache_ttl_seconds),
            retry_policy=config.retry_policy(),
            attempt_timeout=config.attempt_timeout,
        )

    async def generate(
        self,
        question: str,
        provider: str,
        model: str | None = None,
        history: list[HistoryMessage] | None = None,
        role_type: str = DEFAULT_ROLE_TYPE,
        context: RetrievedContext | None = None,
        persona: str | None = None,
    ) -> CanonicalResponse:
        start = time.perf_counter()
        log_event(
            "pipeline.start",
            component="pipeline",
            provider=provider,
            model=model or "default",
            question=mask_text(question or ""),
            question_len=len(question or ""),
        )
        try:
            return await self._generate(question, provider, model, history, role_type, context, persona, start)
        except Exception as e:
            log_event(
                "pipeline.failed",
                level=logging.ERROR,
                component="pipeline",
                provider=provider,
                model=model,
                error_type=type(e).__name__,
                error_msg=str(e),
                elapsed_ms=_elapsed_ms(start),
            )
            return FallbackFactory.pipeline_failure(provider, model, str(e) or type(e).__name__)

    async def _generate(
        self,
        question: str,
        provider: str,
        model: str | None,
        history: list[HistoryMessage] | None,
        role_type: str,
        context: RetrievedContext | None,
        persona: str | None,
        start: float,
    ) -> CanonicalResponse:
        if provider not in self.registry:
            log_event("pipeline.unknown_provider", level=logging.WARNING, component="pipeline", provider=provider)
            return FallbackFactory.pipeline_failure(provider, model, str(UnknownProviderError(provider)))

        adapter = self.registry.get(provider)
        resolved_model = adapter.resolve_model(model)
        cacheable = self.cache.is_cacheable(question)

        if cacheable:
            cached = self.cache.get(question, provider, resolved_model, persona)
            if cached is not None:
                log_event(
                    "pipeline.cache_hit",
                    component="pipeline",
                    provider=provider,
                    model=resolved_model,
                    elapsed_ms=_elapsed_ms(start),
                )
                return cached

        decision = self.rate_limiter.check(provider)
        if not decision.allowed:
            log_event(
                "pipeline.rate_limited",
                level=logging.WARNING,
                component="pipeline",
                provider=provider,
                reason=decision.reason,
                retry_after_seconds=decision.retry_after_seconds,
            )
            message = f"{decision.reason}. Please wait {decision.retry_after_seconds} seconds and try again."
            return FallbackFactory.pipeline_failure(provider, resolved_model, message)

        async def attempt() -> ProviderResult:
            call = adapter.generate(question, resolved_model, history, role_type, context, persona)
            try:
                if self.attempt_timeout is None:
                    return await call
                return await asyncio.wait_for(call, timeout=self.attempt_timeout)
            except Exception as e:
                # Adapters capture backend errors themselves; this covers timeouts and adapter bugs
                return ProviderResult.failure(
                    classify_exception(e),
                    str(e) or type(e).__name__,
                    FallbackFactory.provider_failure(provider, resolved_model, str(e) or type(e).__name__),
                )

        result = await call_with_retry(
            attempt, self.retry_policy, sleep=self._sleep, provider=provider, model=resolved_model
        )

        if not result.ok:
            log_event(
                "pipeline.failed",
                level=logging.ERROR,
                component="pipeline",
                provider=provider,
                model=resolved_model,
                error_kind=result.error_kind.value,
                error_msg=result.error_message,
                elapsed_ms=_elapsed_ms(start),
            )
            return FallbackFactory.pipeline_failure(provider, resolved_model, result.error_message or "Unknown error")

        response = result.response
        if cacheable:
            self.cache.set(question, response, provider, resolved_model, persona)

        log_event(
            "pipeline.success",
            component="pipeline",
            provider=provider,
            model=response.model,
            answer_len=len(response.answer),
            elapsed_ms=_elapsed_ms(start),
        )
        return response

    async def validate_provider(self, provider: str, api_key: str) -> bool:
        """Probe a key for a provider; False for unknown providers or any failure."""
        if provider not in self.registry:
            log_event("pipeline.unknown_provider", level=logging.WARNING, component="pipeline", provider=provider)
            return False
        try:
            return await self.registry.get(provider).validate(api_key)
        except Exception as e:
            log_event(
                "llm.validate_failed",
                level=logging.WARNING,
                component="pipeline",
                provider=provider,
                error_type=type(e).__name__,
            )
            return False


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 3)
