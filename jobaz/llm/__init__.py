"""LLM providers used by the AI proofreading analyzer."""

from __future__ import annotations

from .provider import (
    LLMParseError,
    LLMProvider,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
    ProviderStatus,
)
from .service import LLMService

__all__ = [
    "LLMParseError",
    "LLMProvider",
    "LLMProviderConfigurationError",
    "LLMProviderError",
    "LLMQuotaError",
    "LLMService",
    "ProviderStatus",
]
