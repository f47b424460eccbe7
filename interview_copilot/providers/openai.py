from typing import Any

import openai
from openai import AsyncOpenAI

from interview_copilot.core.constants import GENERATION_MAX_TOKENS, GENERATION_TEMPERATURE, PROVIDER_OPENAI
from interview_copilot.core.prompts import VALIDATION_PROMPT

from .base import ProviderAdapter
from .exceptions import ErrorKind


class OpenAIAdapter(ProviderAdapter):
    name = PROVIDER_OPENAI

    def _create_client(self, api_key: str | None) -> Any:
        return AsyncOpenAI(api_key=api_key)

    async def _complete(self, system_prompt: str, user_prompt: str, model: str) -> str:
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=user_prompt,
            temperature=GENERATION_TEMPERATURE,
            max_output_tokens=GENERATION_MAX_TOKENS,
        )
        return getattr(response, "output_text", "") or ""

    async def _probe(self, api_key: str) -> None:
        async with AsyncOpenAI(api_key=api_key) as probe_client:
            await probe_client.responses.create(model=self.default_model, input=VALIDATION_PROMPT, max_output_tokens=16)

    def classify_error(self, exc: Exception) -> ErrorKind:
        if isinstance(exc, openai.APITimeoutError):
            return ErrorKind.TIMEOUT
        if isinstance(exc, openai.APIConnectionError):
            return ErrorKind.CONNECTION_RESET
        return super().classify_error(exc)
