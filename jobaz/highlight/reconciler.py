"""Reconcile candidate issue ranges into a clean segmentation of a text.

Analyzers produce issues whose ranges may overlap, nest, duplicate one
another, or fall outside the text entirely. Rendering needs the opposite: an
ordered list of segments that covers the text exactly once, each segment
either plain or tagged with a single issue.

The work is split in two:

1. :func:`clamp_spans` is the validation pre-pass. It drops issues that are
   not open and clamps every range into the text, discarding ranges that end
   up empty.
2. :func:`resolve_overlaps` and :func:`build_segments` are the core and only
   ever see valid spans.

Overlaps are resolved greedily: spans are ordered by start ascending, then by
end descending, and a span overlapping any already accepted span is dropped.
At a shared start the wider span therefore wins. This policy is observable to
users (it decides which suggestion is shown when two collide) and must be
preserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from jobaz.models import ProofreadingIssue, Segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Span:
    """A validated ``[start, end)`` range paired with the issue it came from."""

    start: int
    end: int
    issue: ProofreadingIssue


def ranges_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Return True when half-open ranges ``[a_start, a_end)`` and ``[b_start, b_end)`` intersect."""
    return a_start < b_end and b_start < a_end


def clamp_spans(text: str, issues: Iterable[ProofreadingIssue]) -> list[Span]:
    """Keep open issues and clamp their ranges into ``text``.

    The start is clamped to ``[0, len(text)]`` and the end to
    ``[start, len(text)]``. Issues whose clamped range is empty are dropped.
    """
    length = len(text)
    spans: list[Span] = []
    for issue in issues:
        if not issue.is_open:
            continue
        start = min(max(issue.start_index, 0), length)
        end = min(max(issue.end_index, start), length)
        if end <= start:
            logger.debug(
                "Dropping issue %s: range [%d, %d) is empty within text of length %d",
                issue.issue_id,
                issue.start_index,
                issue.end_index,
                length,
            )
            continue
        spans.append(Span(start=start, end=end, issue=issue))
    return spans


def resolve_overlaps(spans: Iterable[Span]) -> list[Span]:
    """Sort spans and greedily drop any that overlap an earlier accepted span.

    Sorting is by start ascending, then end descending. The result is sorted
    and pairwise disjoint.
    """
    ordered = sorted(spans, key=lambda span: (span.start, -span.end))
    accepted: list[Span] = []
    for candidate in ordered:
        if any(
            ranges_overlap(candidate.start, candidate.end, kept.start, kept.end)
            for kept in accepted
        ):
            logger.debug(
                "Dropping issue %s: [%d, %d) overlaps an accepted issue",
                candidate.issue.issue_id,
                candidate.start,
                candidate.end,
            )
            continue
        accepted.append(candidate)
    return accepted


def build_segments(text: str, spans: Sequence[Span]) -> list[Segment]:
    """Walk sorted, disjoint spans left to right and emit gapless segments."""
    segments: list[Segment] = []
    cursor = 0
    for span in spans:
        if span.start > cursor:
            segments.append(Segment(text=text[cursor : span.start]))
        segments.append(Segment(text=text[span.start : span.end], issue=span.issue))
        cursor = span.end
    if cursor < len(text):
        segments.append(Segment(text=text[cursor:]))
    return segments


def reconcile(text: str, issues: Iterable[ProofreadingIssue]) -> list[Segment]:
    """Split ``text`` into plain and highlighted segments.

    Args:
        text: The buffer being proofread
        issues: Candidate issues in any order. Non-open issues and ranges that
            are empty after clamping are ignored; they never raise.

    Returns:
        Segments whose texts concatenate back to ``text`` exactly. Tagged
        segments carry the caller's issue object unchanged. An empty ``text``
        yields an empty list.

    Example:
        >>> issue = ProofreadingIssue(start_index=0, end_index=3, category="spelling")
        >>> [s.text for s in reconcile("Teh cat sat.", [issue])]
        ['Teh', ' cat sat.']
    """
    if not text:
        return []
    spans = resolve_overlaps(clamp_spans(text, issues))
    return build_segments(text, spans)
