"""Issue highlighting: span reconciliation and markup rendering."""

from __future__ import annotations

from .markup import highlight, render_markup, render_plain
from .reconciler import (
    Span,
    build_segments,
    clamp_spans,
    ranges_overlap,
    reconcile,
    resolve_overlaps,
)

__all__ = [
    "Span",
    "build_segments",
    "clamp_spans",
    "highlight",
    "ranges_overlap",
    "reconcile",
    "render_markup",
    "render_plain",
    "resolve_overlaps",
]
