"""Text utilities shared across the proofreading workflow."""

from __future__ import annotations

from .document_stats import DocumentStats, compute_document_stats, estimate_reading_pages
from .offsets import index_to_utf16, utf16_to_index

__all__ = [
    "DocumentStats",
    "compute_document_stats",
    "estimate_reading_pages",
    "index_to_utf16",
    "utf16_to_index",
]
