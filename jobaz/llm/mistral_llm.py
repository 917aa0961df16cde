from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Sequence, cast

from dotenv import load_dotenv
from mistralai import Mistral, models

from .json_utils import parse_json_response
from .provider import (
    LLMParseError,
    LLMProviderConfigurationError,
    LLMProviderError,
    LLMQuotaError,
    load_system_prompt,
)


class MistralLLM:
    """Mistral client using the ``beta.conversations.start`` API shape.

    ``MISTRAL_API_KEY`` must be set (directly or through ``.env``) unless a
    client is injected.
    """

    name = "mistral"
    MODEL = "mistral-medium-latest"
    TEMPERATURE = 0.2

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: Mistral | None = None,
        dotenv_path: str | Path | None = None,
        filter_json: bool = False,
    ) -> None:
        self._system_prompt = load_system_prompt(system_prompt)

        # Existing environment values take precedence over the .env file.
        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()

        if client is None:
            api_key = os.environ.get("MISTRAL_API_KEY")
            if not api_key:
                raise LLMProviderConfigurationError(
                    "MISTRAL_API_KEY is not set; add it to the environment or the .env file",
                    provider=self.name,
                )
            client = Mistral(api_key=api_key)
        self._client = client
        self._filter_json = filter_json

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def generate(
        self,
        user_prompts: Sequence[str],
        *,
        filter_json: bool | None = None,
    ) -> Any:
        if not user_prompts:
            raise ValueError("user_prompts must not be empty.")

        apply_filter = self._filter_json if filter_json is None else filter_json
        inputs = cast(
            models.ConversationInputs,
            [models.MessageInputEntry(role="user", content="\n".join(user_prompts))],
        )

        try:
            response = self._client.beta.conversations.start(
                inputs=inputs,
                instructions=self._system_prompt,
                model=self.MODEL,
                completion_args={"temperature": self.TEMPERATURE},
                tools=[],
            )
        except Exception as exc:
            if getattr(exc, "status_code", None) == 429:
                raise LLMQuotaError("rate limited", provider=self.name) from exc
            raise LLMProviderError(f"request failed: {exc}", provider=self.name) from exc

        if not apply_filter:
            return response
        return self._parse_response_json(response, prompts=list(user_prompts))

    def health_check(self) -> bool:
        return True

    def _parse_response_json(self, response: Any, prompts: list[str] | None = None) -> Any:
        """Parse JSON from ``response.outputs`` (conversations API) or ``choices``."""
        text: str | None = None

        for entry in getattr(response, "outputs", None) or []:
            content = entry.get("content") if isinstance(entry, dict) else getattr(entry, "content", None)
            if isinstance(content, str) and content.strip():
                text = content
                break

        if text is None and getattr(response, "choices", None):
            message = getattr(response.choices[0], "message", None)
            content = getattr(message, "content", None)
            if isinstance(content, str):
                text = content

        if text is None:
            raise LLMParseError(
                "completion has no text in `outputs` or `choices`",
                provider=self.name,
                response_text=str(response),
                prompts=prompts,
            )
        try:
            return parse_json_response(text)
        except (ValueError, json.JSONDecodeError) as exc:
            raise LLMParseError(
                str(exc), provider=self.name, response_text=text, prompts=prompts
            ) from exc
