from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Sequence

from dotenv import load_dotenv
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .json_utils import parse_json_response
from .provider import (
    LLMParseError,
    LLMProviderError,
    LLMQuotaError,
    load_system_prompt,
)

logger = logging.getLogger(__name__)


class GeminiLLM:
    """Gemini client that sends proofreading prompts with a fixed system instruction.

    Rate limiting is configured through the environment:
    ``GEMINI_MIN_REQUEST_INTERVAL`` (seconds between requests) and
    ``GEMINI_MAX_RETRIES`` (retries on HTTP 429 before giving up).
    """

    name = "gemini"
    MODEL = "gemini-2.5-flash"
    MAX_THINKING_BUDGET = 8192
    TEMPERATURE = 0.2

    def __init__(
        self,
        system_prompt: str | Path,
        *,
        client: genai.Client | None = None,
        dotenv_path: str | Path | None = None,
        filter_json: bool = False,
        min_request_interval: float | None = None,
        max_retries: int | None = None,
    ) -> None:
        self._system_prompt = load_system_prompt(system_prompt)

        if dotenv_path is not None:
            load_dotenv(dotenv_path=Path(dotenv_path))
        else:
            load_dotenv()
        self._client = client or genai.Client()
        self._filter_json = filter_json

        if min_request_interval is None:
            min_request_interval = _env_number("GEMINI_MIN_REQUEST_INTERVAL", 0.0, float)
        self._min_request_interval = max(0.0, min_request_interval)

        if max_retries is None:
            max_retries = _env_number("GEMINI_MAX_RETRIES", 0, int)
        self._max_retries = max(0, max_retries)

        self._last_request_time = 0.0

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
        contents = "\n".join(user_prompts)
        config = types.GenerateContentConfig(
            system_instruction=self._system_prompt,
            thinking_config=types.ThinkingConfig(thinking_budget=self.MAX_THINKING_BUDGET),
            temperature=self.TEMPERATURE,
        )

        attempt = 0
        while True:
            self._enforce_rate_limit()
            try:
                response = self._client.models.generate_content(
                    model=self.MODEL,
                    contents=contents,
                    config=config,
                )
            except genai_errors.APIError as exc:
                self._last_request_time = time.time()
                if exc.code != 429:
                    raise LLMProviderError(
                        f"request failed: {exc}", provider=self.name
                    ) from exc
                if attempt >= self._max_retries:
                    raise LLMQuotaError(
                        f"rate limited after {attempt + 1} attempt(s)", provider=self.name
                    ) from exc
                delay = self._backoff_delay(attempt)
                logger.warning(
                    "Gemini rate limited (attempt %d/%d); retrying in %.1fs",
                    attempt + 1,
                    self._max_retries + 1,
                    delay,
                )
                time.sleep(delay)
                attempt += 1
                continue
            self._last_request_time = time.time()
            break

        if not apply_filter:
            return response
        return self._parse_response_json(response, prompts=list(user_prompts))

    def health_check(self) -> bool:
        return True

    def _backoff_delay(self, attempt: int) -> float:
        base = self._min_request_interval or 0.1
        return base * (2**attempt)

    def _parse_response_json(self, response: Any, prompts: list[str] | None = None) -> Any:
        text = getattr(response, "text", None)
        if not isinstance(text, str):
            raise LLMParseError(
                "completion has no text to parse",
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

    def _enforce_rate_limit(self) -> None:
        if self._min_request_interval <= 0:
            return
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)


def _env_number(var_name: str, default: float, cast: type) -> float:
    try:
        return cast(os.environ.get(var_name, default))
    except ValueError:
        logger.warning("Ignoring invalid %s=%r", var_name, os.environ.get(var_name))
        return default
