"""Conversion between UTF-16 code-unit offsets and Python string indices.

The browser reports character ranges in UTF-16 code units, while Python
indexes ``str`` by code point. The two only differ for characters outside the
Basic Multilingual Plane (emoji, some CJK extensions), which take two UTF-16
units but a single Python index.
"""

from __future__ import annotations


def _utf16_width(char: str) -> int:
    return 2 if ord(char) > 0xFFFF else 1


def utf16_to_index(text: str, offset: int) -> int:
    """Convert a UTF-16 offset into an index into ``text``.

    Negative offsets are returned unchanged so that callers clamping ranges
    still see them as out of bounds. Offsets past the end map to
    ``len(text)``. An offset pointing between the two halves of a surrogate
    pair rounds up to the next character.

    Example:
        >>> utf16_to_index("a\\U0001F600b", 3)
        2
    """
    if offset <= 0:
        return offset
    units = 0
    for index, char in enumerate(text):
        if units >= offset:
            return index
        units += _utf16_width(char)
    return len(text)


def index_to_utf16(text: str, index: int) -> int:
    """Convert an index into ``text`` into a UTF-16 offset."""
    if index <= 0:
        return index
    return sum(_utf16_width(char) for char in text[:index])
