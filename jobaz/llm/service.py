from __future__ import annotations

import logging
from typing import Any, Sequence

from .provider import (
    LLMProvider,
    LLMProviderError,
    LLMQuotaError,
    ProviderReporter,
    ProviderStatus,
)

logger = logging.getLogger(__name__)


def log_provider_status(
    provider_name: str,
    status: ProviderStatus,
    error: Exception | None = None,
) -> None:
    """Default reporter: write each provider outcome to the log."""
    if status is ProviderStatus.SUCCESS:
        logger.debug("Provider %s succeeded", provider_name)
    elif status is ProviderStatus.QUOTA:
        logger.warning("Provider %s exhausted its quota: %s", provider_name, error)
    else:
        logger.error("Provider %s failed: %s", provider_name, error)


class LLMService:
    """Facade that routes LLM requests across a priority-ordered provider list.

    A provider reporting quota exhaustion hands over to the next one; any
    other provider error stops the chain and propagates.
    """

    def __init__(
        self,
        providers: Sequence[LLMProvider],
        *,
        reporter: ProviderReporter | None = log_provider_status,
    ) -> None:
        if not providers:
            raise ValueError("LLMService requires at least one provider")
        self._providers = list(providers)
        self._reporter = reporter

    def provider_order(self) -> list[str]:
        """Return the provider names in configured order."""

        return [provider.name for provider in self._providers]

    def health_check(self) -> list[tuple[str, bool]]:
        """Run the health check for every provider."""

        return [(provider.name, provider.health_check()) for provider in self._providers]

    def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool = False,
    ) -> Any:
        """Try each provider until one succeeds or all quotas are exhausted."""

        last_error: LLMQuotaError | None = None
        for provider in self._providers:
            try:
                value = provider.generate(user_prompts, filter_json=filter_json)
            except LLMQuotaError as exc:
                last_error = exc
                self._report(provider.name, ProviderStatus.QUOTA, exc)
                continue
            except LLMProviderError as exc:
                self._report(provider.name, ProviderStatus.FAILURE, exc)
                raise
            self._report(provider.name, ProviderStatus.SUCCESS)
            return value
        raise LLMQuotaError("All providers exceeded quota") from last_error

    def _report(
        self,
        provider_name: str,
        status: ProviderStatus,
        error: Exception | None = None,
    ) -> None:
        if self._reporter is None:
            return
        self._reporter(provider_name, status, error)
