import logging
from abc import ABC, abstractmethod
from typing import Any

from interview_copilot.core.catalog import default_model
from interview_copilot.core.constants import DEFAULT_ROLE_TYPE
from interview_copilot.core.logging import log_event, span
from interview_copilot.core.models import HistoryMessage, RetrievedContext
from interview_copilot.core.prompts import build_system_prompt, build_user_prompt

from .exceptions import (
    ErrorKind,
    FallbackFactory,
    ProviderResult,
    classify_exception,
    parse_interview_reply,
)


class ProviderAdapter(ABC):
    """One AI backend behind the uniform interview-answer interface.

    Subclasses implement `_complete` (one completion request, returning the reply
    text) and `_probe` (the cheapest request that proves a key works). Prompt
    construction, reply parsing and failure capture are shared here.
    """

    name: str = ""

    def __init__(self, api_key: str | None = None, default_model: str | None = None, client: Any = None):
        self.api_key = api_key
        self.default_model = default_model or _catalog_default(self.name)
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._create_client(self.api_key)
        return self._client

    def resolve_model(self, model: str | None) -> str:
        return model or self.default_model

    async def generate(
        self,
        question: str,
        model: str | None = None,
        history: list[HistoryMessage] | None = None,
        role_type: str = DEFAULT_ROLE_TYPE,
        context: RetrievedContext | None = None,
        persona: str | None = None,
    ) -> ProviderResult:
        """Ask the backend for an interview answer.

        Never raises for backend failures: they come back as a failure result
        carrying a fallback answer and the failure's ErrorKind.
        """
        resolved_model = self.resolve_model(model)
        system_prompt = build_system_prompt(role_type, persona)
        user_prompt = build_user_prompt(question, history, context)

        try:
            with span(
                "llm.generate",
                component="provider",
                provider=self.name,
                model=resolved_model,
                prompt_len=len(system_prompt) + len(user_prompt),
            ):
                text = await self._complete(system_prompt, user_prompt, resolved_model)
            return ProviderResult.success(parse_interview_reply(text, self.name, resolved_model))
        except Exception as e:
            kind = self.classify_error(e)
            log_event(
                "llm.provider_error",
                level=logging.ERROR,
                component="provider",
                provider=self.name,
                model=resolved_model,
                error_kind=kind.value,
                error_type=type(e).__name__,
                error_msg=str(e),
            )
            return ProviderResult.failure(
                kind, str(e), FallbackFactory.provider_failure(self.name, resolved_model, str(e))
            )

    async def validate(self, api_key: str) -> bool:
        """Check a key with a minimal request. Returns False on any failure."""
        try:
            await self._probe(api_key)
            return True
        except Exception as e:
            log_event(
                "llm.validate_failed",
                level=logging.WARNING,
                component="provider",
                provider=self.name,
                error_kind=self.classify_error(e).value,
                error_type=type(e).__name__,
            )
            return False

    def classify_error(self, exc: Exception) -> ErrorKind:
        return classify_exception(exc)

    @abstractmethod
    def _create_client(self, api_key: str | None) -> Any: ...

    @abstractmethod
    async def _complete(self, system_prompt: str, user_prompt: str, model: str) -> str: ...

    @abstractmethod
    async def _probe(self, api_key: str) -> None: ...


def _catalog_default(provider: str) -> str:
    model = default_model(provider)
    if model is None:
        raise ValueError(f"No default model known for provider '{provider}'")
    return model
