from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, cast

import pytest
from mistralai import Mistral

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobaz.llm.mistral_llm import MistralLLM
from jobaz.llm.provider import (
    LLMParseError,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
)


class _DummyMessage:
    def __init__(self, content: Any) -> None:
        self.content = content


class _DummyChoice:
    def __init__(self, message: _DummyMessage) -> None:
        self.message = message
        self.finish_reason = "stop"


class _DummyResponse:
    def __init__(self, content: Any) -> None:
        self.choices = [_DummyChoice(_DummyMessage(content))]


class _DummyClient:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        class _Conversations:
            def __init__(self) -> None:
                self.calls: list[dict[str, object]] = []

            def start(self, **kwargs: object) -> Any:
                self.calls.append(kwargs)
                if error is not None:
                    raise error
                return response if response is not None else _DummyResponse("mock-response")

        class _Beta:
            def __init__(self) -> None:
                self.conversations = _Conversations()

        self.beta = _Beta()


class _StatusError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def test_generate_joins_prompts_and_sets_config(tmp_path: Path) -> None:
    system_prompt_path = tmp_path / "system.md"
    system_text = "## System\nFlag spelling mistakes."
    system_prompt_path.write_text(system_text, encoding="utf-8")
    client = _DummyClient()
    llm = MistralLLM(system_prompt=system_prompt_path, client=cast(Mistral, client))

    result = llm.generate(["Line one", "Line two"])

    assert result.choices[0].message.content == "mock-response"
    call = client.beta.conversations.calls[0]
    assert call["model"] == llm.MODEL
    assert call["instructions"] == system_text
    assert call["tools"] == []
    assert call["completion_args"] == {"temperature": 0.2}
    first_input = call["inputs"][0]
    assert getattr(first_input, "role") == "user"
    assert getattr(first_input, "content") == "Line one\nLine two"


def test_missing_api_key_is_a_configuration_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("MISTRAL_API_KEY", raising=False)
    empty_env = tmp_path / ".env"
    empty_env.write_text("", encoding="utf-8")

    with pytest.raises(LLMProviderConfigurationError, match="MISTRAL_API_KEY"):
        MistralLLM(system_prompt="System", dotenv_path=empty_env)


def test_api_key_is_passed_to_sdk(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MISTRAL_API_KEY", "env-test-key-123")
    captured: dict[str, object] = {}

    class FakeClient:
        def __init__(self, api_key: str | None = None, **kwargs: object) -> None:
            captured["api_key"] = api_key

    monkeypatch.setattr("jobaz.llm.mistral_llm.Mistral", FakeClient)

    MistralLLM(system_prompt="System")

    assert captured["api_key"] == "env-test-key-123"


def test_parses_conversation_outputs() -> None:
    response = SimpleNamespace(
        outputs=[SimpleNamespace(content='```json\n{"issues": [], "overall": {"score": 100}}\n```')]
    )
    llm = MistralLLM(system_prompt="System", client=cast(Mistral, _DummyClient(response)), filter_json=True)

    assert llm.generate(["Prompt"]) == {"issues": [], "overall": {"score": 100}}


def test_parses_dict_outputs_and_choices_fallback() -> None:
    dict_response = SimpleNamespace(outputs=[{"content": "[]"}])
    llm = MistralLLM(system_prompt="System", client=cast(Mistral, _DummyClient(dict_response)), filter_json=True)
    assert llm.generate(["Prompt"]) == []

    choices_response = _DummyResponse('{"issues": []}')
    llm = MistralLLM(system_prompt="System", client=cast(Mistral, _DummyClient(choices_response)), filter_json=True)
    assert llm.generate(["Prompt"]) == {"issues": []}


def test_non_string_content_raises_parse_error() -> None:
    llm = MistralLLM(
        system_prompt="System",
        client=cast(Mistral, _DummyClient(_DummyResponse(None))),
        filter_json=True,
    )

    with pytest.raises(LLMParseError) as exc_info:
        llm.generate(["Prompt"])

    assert exc_info.value.prompts == ["Prompt"]


def test_quota_error_is_mapped() -> None:
    client = _DummyClient(error=_StatusError("Too many requests", 429))
    llm = MistralLLM(system_prompt="System", client=cast(Mistral, client))

    with pytest.raises(LLMQuotaError) as exc_info:
        llm.generate(["Prompt"])

    assert str(exc_info.value) == "[mistral] rate limited"


def test_other_sdk_errors_become_provider_errors() -> None:
    client = _DummyClient(error=_StatusError("Server error", 500))
    llm = MistralLLM(system_prompt="System", client=cast(Mistral, client))

    with pytest.raises(LLMProviderError) as exc_info:
        llm.generate(["Prompt"])

    assert not isinstance(exc_info.value, LLMQuotaError)
