"""Enumerations shared by the proofreading models.

Values match the strings stored by the JobAZ front end and the
``proofreading_issues`` table, so they serialise unchanged to JSON.
"""

from __future__ import annotations

from enum import Enum


class IssueStatus(str, Enum):
    """Lifecycle of a single issue.

    ``OPEN`` moves to ``APPLIED`` or ``REJECTED`` on user action. Both are
    terminal.
    """

    OPEN = "open"
    APPLIED = "applied"
    REJECTED = "rejected"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class IssueCategory(str, Enum):
    """Kinds of issue an analyzer can report."""

    GRAMMAR = "grammar"
    SPELLING = "spelling"
    STYLE = "style"
    CLARITY = "clarity"
    CONSISTENCY = "consistency"
    ACADEMIC_TONE = "academic_tone"
    ACADEMIC_OBJECTIVITY = "academic_objectivity"
    ACADEMIC_HEDGING = "academic_hedging"
    ACADEMIC_CITATION = "academic_citation"
    ACADEMIC_LOGIC = "academic_logic"
    STRUCTURE = "structure"
    ACADEMIC_STYLE = "academic_style"
    METHODOLOGY = "methodology"
    EVIDENCE = "evidence"
    RESEARCH_QUALITY = "research_quality"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class Severity(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]


class WritingMode(str, Enum):
    """Analysis strictness.

    Values:
        GENERAL: everyday writing (CVs, cover letters, emails)
        ACADEMIC: undergraduate / university standard
        ACADEMIC_RESEARCH: research papers and PhD theses
    """

    GENERAL = "general"
    ACADEMIC = "academic"
    ACADEMIC_RESEARCH = "academic_research"

    @property
    def is_academic(self) -> bool:
        return self is not WritingMode.GENERAL

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]
