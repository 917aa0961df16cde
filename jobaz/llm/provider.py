"""Provider contract and errors for the AI proofreading analyzer.

Every error carries the name of the provider that raised it, so a failure
surfaced by the CLI says which backend to look at. Only
:class:`LLMQuotaError` lets :class:`~jobaz.llm.service.LLMService` move on to
the next provider.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Callable, Protocol, Sequence

ProviderReporter = Callable[[str, "ProviderStatus", Exception | None], None]

# Completions and prompts are cut to this many characters in error messages.
_EXCERPT_CHARS = 2000


class ProviderStatus(str, Enum):
    """How a provider handled one proofreading request."""

    SUCCESS = "success"
    QUOTA = "quota"  # handed over to the next provider
    FAILURE = "failure"  # stopped the chain


class LLMProviderError(Exception):
    """A provider could not return a proofreading completion."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider

    def __str__(self) -> str:
        message = super().__str__()
        return f"[{self.provider}] {message}" if self.provider else message


class LLMQuotaError(LLMProviderError):
    """The provider is rate limited or out of quota; another may still answer."""


class LLMProviderConfigurationError(LLMProviderError):
    """The provider is missing credentials or settings."""


def _excerpt(text: str) -> str:
    if len(text) <= _EXCERPT_CHARS:
        return text
    return f"{text[:_EXCERPT_CHARS]}... [{len(text) - _EXCERPT_CHARS} more characters]"


class LLMParseError(LLMProviderError):
    """The completion holds no usable proofreading JSON.

    Keeps the completion and the prompt that produced it, so the message
    alone is enough to see what the model answered.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        response_text: str | None = None,
        prompts: list[str] | None = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.response_text = response_text
        self.prompts = prompts

    def __str__(self) -> str:
        lines = [super().__str__()]
        if self.response_text is not None:
            lines += ["Completion:", _excerpt(self.response_text)]
        if self.prompts:
            lines += ["Prompt:", _excerpt("\n".join(self.prompts))]
        return "\n".join(lines)


class LLMProvider(Protocol):
    """A backend that turns proofreading prompts into a completion."""

    name: str

    def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool = False,
    ) -> Any:
        """Return the completion, or its parsed JSON when ``filter_json`` is set."""
        ...

    def health_check(self) -> bool: ...


class ProviderFactory(Protocol):
    def __call__(
        self,
        *,
        system_prompt: str | Path,
        filter_json: bool,
        dotenv_path: str | Path | None,
    ) -> LLMProvider: ...


def load_system_prompt(system_prompt: str | Path) -> str:
    """Return the prompt text, reading it from disk when given a file path.

    Short single-line strings that name an existing file are treated as
    paths; anything else is used verbatim.
    """
    if not isinstance(system_prompt, (str, Path)):
        raise TypeError(f"system_prompt must be str or Path, got {type(system_prompt)}")
    looks_like_path = isinstance(system_prompt, Path) or (
        "\n" not in system_prompt and len(system_prompt) < 500
    )
    if looks_like_path:
        try:
            prompt_path = Path(system_prompt)
            if prompt_path.is_file():
                return prompt_path.read_text(encoding="utf-8")
        except (OSError, ValueError):
            pass
    return str(system_prompt)
