"""Output unit of the span reconciler."""

from __future__ import annotations

from dataclasses import dataclass

from .issue import ProofreadingIssue


@dataclass(frozen=True)
class Segment:
    """A contiguous slice of the source text.

    Attributes:
        text: The exact, unescaped substring of the source text
        issue: The issue highlighted by this slice, or None for plain text
    """

    text: str
    issue: ProofreadingIssue | None = None

    @property
    def is_highlighted(self) -> bool:
        return self.issue is not None
