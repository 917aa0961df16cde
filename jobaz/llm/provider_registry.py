from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

from .gemini_llm import GeminiLLM
from .mistral_llm import MistralLLM
from .provider import LLMProvider, ProviderFactory


def _gemini_factory(
    *,
    system_prompt: str | Path,
    filter_json: bool,
    dotenv_path: str | Path | None,
) -> LLMProvider:
    return GeminiLLM(
        system_prompt=system_prompt,
        filter_json=filter_json,
        dotenv_path=dotenv_path,
    )


def _mistral_factory(
    *,
    system_prompt: str | Path,
    filter_json: bool,
    dotenv_path: str | Path | None,
) -> LLMProvider:
    return MistralLLM(
        system_prompt=system_prompt,
        filter_json=filter_json,
        dotenv_path=dotenv_path,
    )


_PROVIDER_FACTORIES: dict[str, ProviderFactory] = {
    "gemini": _gemini_factory,
    "mistral": _mistral_factory,
}


def available_providers() -> list[str]:
    return list(_PROVIDER_FACTORIES)


def _split_names(value: str | None) -> list[str]:
    if not value:
        return []
    return [chunk.strip().lower() for chunk in value.split(",") if chunk.strip()]


def resolve_provider_order(
    primary: str | None = None,
    fallbacks: Sequence[str] | None = None,
) -> list[str]:
    """Return de-duplicated provider names, honouring LLM_PRIMARY / LLM_FALLBACK.

    Explicit arguments win over the environment. With nothing configured every
    registered provider is used in registration order.
    """
    candidates = _split_names(primary) or _split_names(os.environ.get("LLM_PRIMARY"))
    if fallbacks:
        candidates.extend(name.strip().lower() for name in fallbacks if name.strip())
    else:
        candidates.extend(_split_names(os.environ.get("LLM_FALLBACK")))
    if not candidates:
        candidates = available_providers()

    order: list[str] = []
    for name in candidates:
        if name not in _PROVIDER_FACTORIES:
            raise ValueError(f"Unknown LLM provider '{name}'")
        if name not in order:
            order.append(name)
    return order


def create_provider_chain(
    *,
    system_prompt: str | Path,
    filter_json: bool = False,
    dotenv_path: str | Path | None = None,
    primary: str | None = None,
    fallbacks: Sequence[str] | None = None,
) -> list[LLMProvider]:
    """Return configured providers in priority order."""

    # Load .env first so LLM_PRIMARY / LLM_FALLBACK set there are visible.
    if dotenv_path is not None:
        load_dotenv(dotenv_path=str(dotenv_path), override=True)

    return [
        _PROVIDER_FACTORIES[name](
            system_prompt=system_prompt,
            filter_json=filter_json,
            dotenv_path=dotenv_path,
        )
        for name in resolve_provider_order(primary, fallbacks)
    ]
