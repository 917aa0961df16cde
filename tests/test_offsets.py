from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobaz.utils.offsets import index_to_utf16, utf16_to_index


@pytest.mark.parametrize(
    "offset,expected",
    [(0, 0), (1, 1), (2, 2), (3, 2), (4, 3), (10, 3), (-2, -2)],
)
def test_utf16_to_index_with_astral_character(offset: int, expected: int) -> None:
    # "a" + grinning face (two UTF-16 units) + "b"
    assert utf16_to_index("a\U0001F600b", offset) == expected


def test_ascii_offsets_are_unchanged() -> None:
    text = "plain ascii"

    assert [utf16_to_index(text, i) for i in range(len(text) + 1)] == list(range(len(text) + 1))


def test_index_to_utf16() -> None:
    text = "a\U0001F600b"

    assert index_to_utf16(text, 0) == 0
    assert index_to_utf16(text, 2) == 3
    assert index_to_utf16(text, 3) == 4
    assert index_to_utf16(text, -1) == -1


def test_conversions_are_inverse_on_character_boundaries() -> None:
    text = "\U0001F4A9 café \U0001F600!"

    for index in range(len(text) + 1):
        assert utf16_to_index(text, index_to_utf16(text, index)) == index
