"""Word, character and page counts for a proofreading document.

These are recomputed whenever the document content changes, most notably
after an issue's suggestion is spliced into the text.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

DEFAULT_PAGE_SIZE = 3500  # characters per page in the proofreading workspace
WORDS_PER_PAGE = 250


@dataclass(frozen=True)
class DocumentStats:
    word_count: int
    char_count: int
    page_count: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def count_words(text: str) -> int:
    return len(text.split())


def compute_document_stats(text: str, page_size: int = DEFAULT_PAGE_SIZE) -> DocumentStats:
    """Compute document statistics.

    Args:
        text: The document content
        page_size: Number of characters per page (must be positive)

    Returns:
        A DocumentStats instance. ``page_count`` is never less than 1.
    """
    if page_size <= 0:
        raise ValueError("page_size must be a positive integer")
    char_count = len(text)
    return DocumentStats(
        word_count=count_words(text),
        char_count=char_count,
        page_count=max(1, math.ceil(char_count / page_size)),
    )


def estimate_reading_pages(text: str, words_per_page: int = WORDS_PER_PAGE) -> int:
    """Estimate printed pages from the word count of an uploaded document."""
    if words_per_page <= 0:
        raise ValueError("words_per_page must be a positive integer")
    return max(1, math.ceil(count_words(text) / words_per_page))
