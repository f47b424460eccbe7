import importlib
from typing import TYPE_CHECKING

from interview_copilot.core.constants import (
    PROVIDER_ANTHROPIC,
    PROVIDER_GEMINI,
    PROVIDER_GROQ,
    PROVIDER_OPENAI,
)

from .base import ProviderAdapter
from .exceptions import UnknownProviderError

if TYPE_CHECKING:
    from interview_copilot.core.config import CopilotConfig

# provider id -> (module, adapter class); modules are imported on first use
ADAPTER_CLASSES = {
    PROVIDER_GROQ: ("interview_copilot.providers.groq", "GroqAdapter"),
    PROVIDER_GEMINI: ("interview_copilot.providers.gemini", "GeminiAdapter"),
    PROVIDER_OPENAI: ("interview_copilot.providers.openai", "OpenAIAdapter"),
    PROVIDER_ANTHROPIC: ("interview_copilot.providers.anthropic", "AnthropicAdapter"),
}


class ProviderRegistry:
    """Adapters keyed by provider id. Adding a backend means registering an adapter."""

    def __init__(self, adapters: list[ProviderAdapter] | None = None):
        self._adapters: dict[str, ProviderAdapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: ProviderAdapter) -> None:
        if not adapter.name:
            raise ValueError(f"{type(adapter).__name__} has no provider name")
        self._adapters[adapter.name] = adapter

    def get(self, provider: str) -> ProviderAdapter:
        adapter = self._adapters.get(provider)
        if adapter is None:
            raise UnknownProviderError(provider)
        return adapter

    def names(self) -> list[str]:
        return sorted(self._adapters)

    def __contains__(self, provider: object) -> bool:
        return provider in self._adapters


def load_adapter_class(provider: str) -> type[ProviderAdapter]:
    if provider not in ADAPTER_CLASSES:
        raise UnknownProviderError(provider)
    module_name, class_name = ADAPTER_CLASSES[provider]
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


def build_default_registry(config: "CopilotConfig") -> ProviderRegistry:
    registry = ProviderRegistry()
    for provider in ADAPTER_CLASSES:
        adapter_cls = load_adapter_class(provider)
        registry.register(
            adapter_cls(api_key=config.api_key(provider), default_model=config.model_override(provider))
        )
    return registry
