from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobaz.llm.provider import (
    LLMParseError,
    LLMProviderError,
    LLMQuotaError,
    load_system_prompt,
)


def test_provider_name_prefixes_message() -> None:
    error = LLMQuotaError("rate limited", provider="gemini")

    assert isinstance(error, LLMProviderError)
    assert error.provider == "gemini"
    assert str(error) == "[gemini] rate limited"
    assert str(LLMProviderError("no provider")) == "no provider"


def test_parse_error_shows_completion_and_prompt() -> None:
    error = LLMParseError(
        "no JSON",
        provider="mistral",
        response_text="Looks fine to me!",
        prompts=["Proofread this", "Teh cat"],
    )

    assert str(error) == (
        "[mistral] no JSON\nCompletion:\nLooks fine to me!\nPrompt:\nProofread this\nTeh cat"
    )


def test_parse_error_truncates_long_completions() -> None:
    error = LLMParseError("no JSON", response_text="x" * 2500)

    message = str(error)

    assert "x" * 2000 + "... [500 more characters]" in message
    assert "x" * 2001 not in message


def test_load_system_prompt_reads_files(tmp_path: Path) -> None:
    prompt_file = tmp_path / "system.md"
    prompt_file.write_text("Flag typos.", encoding="utf-8")

    assert load_system_prompt(prompt_file) == "Flag typos."
    assert load_system_prompt(str(prompt_file)) == "Flag typos."
    assert load_system_prompt("Inline prompt") == "Inline prompt"
    with pytest.raises(TypeError):
        load_system_prompt(42)  # type: ignore[arg-type]
