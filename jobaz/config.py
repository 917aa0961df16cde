"""Runtime configuration for the proofreading command line.

Values come from keyword arguments, then environment variables (optionally
loaded from a ``.env`` file with python-dotenv), then defaults.

Environment Variables:
  JOBAZ_WRITING_MODE   general | academic | academic_research (default: general)
  JOBAZ_ANALYZER       rules | llm (default: rules)
  LLM_PRIMARY          Primary LLM provider for the llm analyzer
  JOBAZ_PAGE_SIZE      Characters per page for document stats (default: 3500)
  JOBAZ_MAX_ISSUES     Maximum issues returned per analysis (default: 50)
  JOBAZ_LOG_LEVEL      Logging level name (default: WARNING)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from jobaz.analysis.rules import DEFAULT_MAX_ISSUES
from jobaz.models import WritingMode
from jobaz.utils.document_stats import DEFAULT_PAGE_SIZE

ANALYZERS = ("rules", "llm")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = (os.environ.get(name) or default).strip()
    for choice in choices:
        if value.lower() == choice.lower():
            return choice
    raise ValueError(f"{name} must be one of {', '.join(choices)}, got {value!r}")


@dataclass
class ProofreaderConfiguration:
    """Settings shared by every proofreading command."""

    mode: WritingMode = WritingMode.GENERAL
    analyzer: str = "rules"
    llm_provider: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    max_issues: int = DEFAULT_MAX_ISSUES
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.mode = WritingMode(self.mode)
        if self.analyzer not in ANALYZERS:
            raise ValueError(f"analyzer must be one of {', '.join(ANALYZERS)}")
        for name in ("page_size", "max_issues"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)

    @classmethod
    def from_env(cls, dotenv_path: str | Path | None = None) -> "ProofreaderConfiguration":
        if dotenv_path is not None:
            load_dotenv(dotenv_path=str(dotenv_path), override=True)
        else:
            load_dotenv()

        mode = _env_choice("JOBAZ_WRITING_MODE", WritingMode.GENERAL.value, tuple(WritingMode.all_values()))
        return cls(
            mode=WritingMode(mode),
            analyzer=_env_choice("JOBAZ_ANALYZER", "rules", ANALYZERS),
            llm_provider=os.environ.get("LLM_PRIMARY") or None,
            page_size=_env_int("JOBAZ_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            max_issues=_env_int("JOBAZ_MAX_ISSUES", DEFAULT_MAX_ISSUES),
            log_level=_env_choice("JOBAZ_LOG_LEVEL", "WARNING", LOG_LEVELS),
        )
