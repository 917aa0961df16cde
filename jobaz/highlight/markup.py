"""Render reconciled segments for display.

The reconciler returns raw text; escaping belongs here, at the point where
the text is embedded in markup.
"""

from __future__ import annotations

import html
from typing import Iterable, Sequence

from jobaz.models import ProofreadingIssue, Segment

from .reconciler import reconcile

MARK_CLASS = "pf-mark"


def _mark_open_tag(issue: ProofreadingIssue) -> str:
    category = issue.category.value
    issue_id = html.escape(issue.issue_id, quote=True)
    return (
        f'<mark class="{MARK_CLASS} {MARK_CLASS}--{category}" '
        f'data-issue-id="{issue_id}">'
    )


def render_markup(segments: Iterable[Segment]) -> str:
    """Return HTML for ``segments``, wrapping highlighted ones in ``<mark>``.

    All text is escaped (``& < > " '``) so arbitrary user content can be
    inserted into a page safely.
    """
    parts: list[str] = []
    for segment in segments:
        escaped = html.escape(segment.text, quote=True)
        if segment.is_highlighted:
            parts.append(f"{_mark_open_tag(segment.issue)}{escaped}</mark>")
        else:
            parts.append(escaped)
    return "".join(parts)


def highlight(text: str, issues: Sequence[ProofreadingIssue]) -> str:
    """Reconcile ``issues`` over ``text`` and render the result as HTML."""
    return render_markup(reconcile(text, issues))


def render_plain(segments: Iterable[Segment]) -> str:
    """Terminal rendering: ``[[text|category]]`` around highlighted segments."""
    parts: list[str] = []
    for segment in segments:
        if segment.is_highlighted:
            parts.append(f"[[{segment.text}|{segment.issue.category.value}]]")
        else:
            parts.append(segment.text)
    return "".join(parts)
