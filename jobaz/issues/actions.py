"""Apply and reject proofreading issues.

Both actions are pure: they return new values and never mutate the issue or
the text they were given. Persisting the result is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, NamedTuple

from jobaz.errors import IssueAlreadyProcessedError
from jobaz.models import IssueStatus, ProofreadingIssue
from jobaz.utils.document_stats import DEFAULT_PAGE_SIZE, DocumentStats, compute_document_stats

logger = logging.getLogger(__name__)

# How far either side of the stored range to look for the flagged text when
# the document has been edited since the analysis ran.
RELOCATE_WINDOW = 50

STATUS_FILTER_ALL = "all"


class AppliedIssue(NamedTuple):
    text: str
    issue: ProofreadingIssue


@dataclass(frozen=True)
class _Splice:
    start: int
    end: int


def _ensure_open(issue: ProofreadingIssue) -> None:
    if not issue.is_open:
        raise IssueAlreadyProcessedError(issue.issue_id, issue.status.value)


def _locate(text: str, issue: ProofreadingIssue) -> _Splice:
    """Work out which characters the suggestion should replace."""
    length = len(text)
    start = min(max(issue.start_index, 0), length)
    end = min(max(issue.end_index, start), length)
    original = issue.original_text
    if not original:
        return _Splice(start, end)

    actual = text[start:end]
    if original in actual or actual in original:
        return _Splice(start, end)

    search_start = max(0, start - RELOCATE_WINDOW)
    search_end = min(length, end + RELOCATE_WINDOW)
    found = text.find(original, search_start)
    if found != -1 and found < search_end:
        logger.info(
            "Issue %s: flagged text moved from %d to %d",
            issue.issue_id,
            start,
            found,
        )
        return _Splice(found, found + len(original))

    logger.warning(
        "Issue %s: flagged text %r not found near [%d, %d); using stored range",
        issue.issue_id,
        original,
        start,
        end,
    )
    return _Splice(start, end)


def apply_issue(text: str, issue: ProofreadingIssue) -> AppliedIssue:
    """Splice the issue's suggestion into ``text``.

    If the text at the stored range no longer matches ``original_text``
    (neither contains the other), the flagged text is searched for within
    ``RELOCATE_WINDOW`` characters of the range and replaced there instead.
    When it cannot be found the stored range is used as is.

    Raises:
        IssueAlreadyProcessedError: If the issue is not open.

    Returns:
        The updated text and a copy of the issue marked as applied.
    """
    _ensure_open(issue)
    splice = _locate(text, issue)
    updated = text[: splice.start] + issue.suggestion_text + text[splice.end :]
    return AppliedIssue(text=updated, issue=issue.with_status(IssueStatus.APPLIED))


def apply_issue_with_stats(
    text: str,
    issue: ProofreadingIssue,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> tuple[AppliedIssue, DocumentStats]:
    """Apply ``issue`` and recompute the document statistics for the new text."""
    applied = apply_issue(text, issue)
    return applied, compute_document_stats(applied.text, page_size=page_size)


def reject_issue(issue: ProofreadingIssue) -> ProofreadingIssue:
    """Return a copy of ``issue`` marked as rejected.

    Raises:
        IssueAlreadyProcessedError: If the issue is not open.
    """
    _ensure_open(issue)
    return issue.with_status(IssueStatus.REJECTED)


def filter_issues(
    issues: Iterable[ProofreadingIssue],
    status_filter: str | IssueStatus = STATUS_FILTER_ALL,
) -> list[ProofreadingIssue]:
    """Return the issues matching a status filter tab (``all`` keeps everything)."""
    if status_filter == STATUS_FILTER_ALL:
        return list(issues)
    status = IssueStatus(status_filter)
    return [issue for issue in issues if issue.status is status]


def count_issues(issues: Iterable[ProofreadingIssue]) -> dict[str, int]:
    """Count issues per status, plus an ``all`` total."""
    counts = {STATUS_FILTER_ALL: 0, **{value: 0 for value in IssueStatus.all_values()}}
    for issue in issues:
        counts[STATUS_FILTER_ALL] += 1
        counts[issue.status.value] += 1
    return counts
