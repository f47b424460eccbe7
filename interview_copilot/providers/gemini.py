from typing import Any

from google import genai
from google.genai import types

from interview_copilot.core.constants import GENERATION_MAX_TOKENS, GENERATION_TEMPERATURE, PROVIDER_GEMINI
from interview_copilot.core.prompts import VALIDATION_PROMPT

from .base import ProviderAdapter


class GeminiAdapter(ProviderAdapter):
    """Gemini takes one combined prompt; the system instruction leads it."""

    name = PROVIDER_GEMINI

    def _create_client(self, api_key: str | None) -> Any:
        return genai.Client(api_key=api_key)

    async def _complete(self, system_prompt: str, user_prompt: str, model: str) -> str:
        full_prompt = f"{system_prompt}\n\n{user_prompt}"
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=full_prompt,
            config=types.GenerateContentConfig(
                temperature=GENERATION_TEMPERATURE,
                max_output_tokens=GENERATION_MAX_TOKENS,
                response_mime_type="application/json",
            ),
        )
        return response.text or ""

    async def _probe(self, api_key: str) -> None:
        probe_client = genai.Client(api_key=api_key)
        try:
            await probe_client.aio.models.generate_content(model=self.default_model, contents=VALIDATION_PROMPT)
        finally:
            await probe_client.aio.aclose()
