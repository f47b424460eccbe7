from typing import Any

import anthropic
from anthropic import AsyncAnthropic

from interview_copilot.core.constants import GENERATION_MAX_TOKENS, GENERATION_TEMPERATURE, PROVIDER_ANTHROPIC
from interview_copilot.core.prompts import VALIDATION_PROMPT

from .base import ProviderAdapter
from .exceptions import ErrorKind


def extract_text(response: Any) -> str:
    """Join the text blocks of a Messages API response."""
    content = ""
    for block in getattr(response, "content", None) or []:
        if getattr(block, "type", None) == "text":
            content += block.text
    return content


class AnthropicAdapter(ProviderAdapter):
    name = PROVIDER_ANTHROPIC

    def _create_client(self, api_key: str | None) -> Any:
        return AsyncAnthropic(api_key=api_key)

    async def _complete(self, system_prompt: str, user_prompt: str, model: str) -> str:
        response = await self.client.messages.create(
            model=model,
            max_tokens=GENERATION_MAX_TOKENS,
            temperature=GENERATION_TEMPERATURE,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return extract_text(response)

    async def _probe(self, api_key: str) -> None:
        async with AsyncAnthropic(api_key=api_key) as probe_client:
            await probe_client.messages.create(
                model=self.default_model,
                max_tokens=5,
                messages=[{"role": "user", "content": VALIDATION_PROMPT}],
            )

    def classify_error(self, exc: Exception) -> ErrorKind:
        if isinstance(exc, anthropic.APITimeoutError):
            return ErrorKind.TIMEOUT
        if isinstance(exc, anthropic.APIConnectionError):
            return ErrorKind.CONNECTION_RESET
        return super().classify_error(exc)
