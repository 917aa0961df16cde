from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobaz.config import ProofreaderConfiguration
from jobaz.models import WritingMode

_ENV_VARS = (
    "JOBAZ_WRITING_MODE",
    "JOBAZ_ANALYZER",
    "LLM_PRIMARY",
    "JOBAZ_PAGE_SIZE",
    "JOBAZ_MAX_ISSUES",
    "JOBAZ_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so monkeypatch restores whatever load_dotenv writes.
    for name in _ENV_VARS:
        monkeypatch.setenv(name, "")


def test_defaults() -> None:
    config = ProofreaderConfiguration.from_env()

    assert config.mode is WritingMode.GENERAL
    assert config.analyzer == "rules"
    assert config.llm_provider is None
    assert config.page_size == 3500
    assert config.max_issues == 50
    assert config.log_level == "WARNING"
    assert config.log_level_number == logging.WARNING


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JOBAZ_WRITING_MODE", "Academic_Research")
    monkeypatch.setenv("JOBAZ_ANALYZER", "LLM")
    monkeypatch.setenv("LLM_PRIMARY", "mistral")
    monkeypatch.setenv("JOBAZ_PAGE_SIZE", "1000")
    monkeypatch.setenv("JOBAZ_MAX_ISSUES", "10")
    monkeypatch.setenv("JOBAZ_LOG_LEVEL", "debug")

    config = ProofreaderConfiguration.from_env()

    assert config.mode is WritingMode.ACADEMIC_RESEARCH
    assert config.analyzer == "llm"
    assert config.llm_provider == "mistral"
    assert config.page_size == 1000
    assert config.max_issues == 10
    assert config.log_level == "DEBUG"


def test_reads_dotenv_file(tmp_path: Path) -> None:
    dotenv_path = tmp_path / ".env"
    dotenv_path.write_text("JOBAZ_WRITING_MODE=academic\nJOBAZ_PAGE_SIZE=2000\n", encoding="utf-8")

    config = ProofreaderConfiguration.from_env(dotenv_path)

    assert config.mode is WritingMode.ACADEMIC
    assert config.page_size == 2000


@pytest.mark.parametrize(
    "name,value",
    [
        ("JOBAZ_PAGE_SIZE", "big"),
        ("JOBAZ_PAGE_SIZE", "0"),
        ("JOBAZ_MAX_ISSUES", "-3"),
        ("JOBAZ_WRITING_MODE", "casual"),
        ("JOBAZ_ANALYZER", "magic"),
        ("JOBAZ_LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_name_the_variable(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        ProofreaderConfiguration.from_env()


def test_direct_construction_validates() -> None:
    assert ProofreaderConfiguration(mode="academic", log_level="info").log_level == "INFO"
    with pytest.raises(ValueError):
        ProofreaderConfiguration(analyzer="other")
    with pytest.raises(ValueError):
        ProofreaderConfiguration(mode="casual")


@pytest.mark.parametrize("field", ["page_size", "max_issues"])
@pytest.mark.parametrize("value", [0, -1])
def test_limits_must_be_positive(field: str, value: int) -> None:
    with pytest.raises(ValueError, match=field):
        ProofreaderConfiguration(**{field: value})


def test_replace_revalidates_limits() -> None:
    config = ProofreaderConfiguration()

    with pytest.raises(ValueError, match="max_issues"):
        dataclasses.replace(config, max_issues=-1)
