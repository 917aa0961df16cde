"""Public model exports for the project.

Keep the :mod:`jobaz` namespace clean: tests and other modules should import
``from jobaz.models import ProofreadingIssue, IssueStatus``.
"""

from __future__ import annotations

from .enums import IssueCategory, IssueStatus, Severity, WritingMode
from .issue import ProofreadingIssue, issues_from_payload
from .segment import Segment

__all__ = [
    "IssueCategory",
    "IssueStatus",
    "ProofreadingIssue",
    "Segment",
    "Severity",
    "WritingMode",
    "issues_from_payload",
]
