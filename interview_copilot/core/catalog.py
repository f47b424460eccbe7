"""Static catalog of the models each provider offers."""

from .constants import PROVIDER_ANTHROPIC, PROVIDER_GEMINI, PROVIDER_GROQ, PROVIDER_OPENAI
from .models import ModelInfo

MODELS: dict[str, list[ModelInfo]] = {
    PROVIDER_GROQ: [
        ModelInfo(
            id="llama-3.3-70b-versatile",
            name="Llama 3.3 70B Versatile",
            description="Best for technical interviews, system design, and behavioral questions",
            strengths=["General Technical", "System Design", "Behavioral", "Code Review"],
            max_tokens=8000,
            speed="Fast",
            provider=PROVIDER_GROQ,
        ),
        ModelInfo(
            id="mixtral-8x7b-32768",
            name="Mixtral 8x7B (Long Context)",
            description="Excellent for complex scenarios with long context (32k tokens)",
            strengths=["Long Context", "Complex Scenarios", "Detailed Examples", "Architecture"],
            max_tokens=32768,
            speed="Fast",
            provider=PROVIDER_GROQ,
        ),
        ModelInfo(
            id="llama-3.1-8b-instant",
            name="Llama 3.1 8B Instant",
            description="Ultra-fast responses for simple questions and quick practice",
            strengths=["Speed", "Simple Questions", "Quick Practice", "Rapid Iteration"],
            max_tokens=8000,
            speed="Ultra Fast",
            provider=PROVIDER_GROQ,
        ),
    ],
    PROVIDER_GEMINI: [
        ModelInfo(
            id="gemini-2.0-flash-exp",
            name="Gemini 2.0 Flash (Experimental)",
            description="Google's latest model with advanced reasoning and multimodal support",
            strengths=["Advanced Reasoning", "Code Generation", "Multimodal", "Latest Tech"],
            max_tokens=8000,
            speed="Very Fast",
            provider=PROVIDER_GEMINI,
        ),
    ],
    PROVIDER_OPENAI: [
        ModelInfo(
            id="gpt-4o-mini",
            name="GPT-4o mini",
            description="Inexpensive general-purpose model with reliable JSON output",
            strengths=["General Technical", "Behavioral", "Structured Output"],
            max_tokens=16384,
            speed="Very Fast",
            provider=PROVIDER_OPENAI,
        ),
    ],
    PROVIDER_ANTHROPIC: [
        ModelInfo(
            id="claude-3-5-haiku-20241022",
            name="Claude 3.5 Haiku",
            description="Fast model with strong reasoning for follow-up heavy interviews",
            strengths=["Reasoning", "Code Review", "Behavioral"],
            max_tokens=8192,
            speed="Fast",
            provider=PROVIDER_ANTHROPIC,
        ),
    ],
}


def get_available_models(provider: str) -> list[ModelInfo]:
    return list(MODELS.get(provider, []))


def get_all_models() -> dict[str, list[ModelInfo]]:
    return {provider: list(models) for provider, models in MODELS.items()}


def default_model(provider: str) -> str | None:
    models = MODELS.get(provider)
    return models[0].id if models else None
