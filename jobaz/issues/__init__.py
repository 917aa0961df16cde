"""Issue store actions: filtering, counting, applying and rejecting."""

from __future__ import annotations

from .actions import (
    AppliedIssue,
    apply_issue,
    apply_issue_with_stats,
    count_issues,
    filter_issues,
    reject_issue,
)

__all__ = [
    "AppliedIssue",
    "apply_issue",
    "apply_issue_with_stats",
    "count_issues",
    "filter_issues",
    "reject_issue",
]
