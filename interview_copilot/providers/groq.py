from typing import Any

import groq
from groq import AsyncGroq

from interview_copilot.core.constants import GENERATION_MAX_TOKENS, GENERATION_TEMPERATURE, PROVIDER_GROQ

from .base import ProviderAdapter
from .exceptions import ErrorKind

VALIDATION_MODEL = "llama-3.1-8b-instant"


class GroqAdapter(ProviderAdapter):
    name = PROVIDER_GROQ

    def _create_client(self, api_key: str | None) -> Any:
        return AsyncGroq(api_key=api_key)

    async def _complete(self, system_prompt: str, user_prompt: str, model: str) -> str:
        completion = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=GENERATION_TEMPERATURE,
            max_tokens=GENERATION_MAX_TOKENS,
            response_format={"type": "json_object"},
        )
        return completion.choices[0].message.content or ""

    async def _probe(self, api_key: str) -> None:
        async with AsyncGroq(api_key=api_key) as probe_client:
            await probe_client.chat.completions.create(
                model=VALIDATION_MODEL,
                messages=[{"role": "user", "content": "test"}],
                max_tokens=5,
            )

    def classify_error(self, exc: Exception) -> ErrorKind:
        if isinstance(exc, groq.APITimeoutError):
            return ErrorKind.TIMEOUT
        if isinstance(exc, groq.APIConnectionError):
            return ErrorKind.CONNECTION_RESET
        return super().classify_error(exc)
