"""AI backends behind a uniform interview-answer interface."""

from .base import ProviderAdapter
from .exceptions import (
    ErrorKind,
    FallbackFactory,
    ProviderError,
    ProviderResult,
    UnknownProviderError,
    classify_exception,
    parse_interview_reply,
)
from .registry import ProviderRegistry, build_default_registry

__all__ = [
    "ProviderAdapter",
    "ProviderRegistry",
    "build_default_registry",
    "ErrorKind",
    "FallbackFactory",
    "ProviderError",
    "ProviderResult",
    "UnknownProviderError",
    "classify_exception",
    "parse_interview_reply",
]
