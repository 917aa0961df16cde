"""Domain errors raised by the proofreading workflow."""

from __future__ import annotations


class ProofreadingError(Exception):
    """Base class for proofreading failures."""


class IssueAlreadyProcessedError(ProofreadingError, ValueError):
    """Raised when an applied or rejected issue is acted on again."""

    def __init__(self, issue_id: str, status: str) -> None:
        super().__init__(f"Issue {issue_id} has already been processed ({status})")
        self.issue_id = issue_id
        self.status = status


class ContentTooShortError(ProofreadingError, ValueError):
    """Raised when a document is too short to analyse."""

    def __init__(self, length: int, minimum: int) -> None:
        super().__init__(
            f"Content must be at least {minimum} characters long (got {length})"
        )
        self.length = length
        self.minimum = minimum
