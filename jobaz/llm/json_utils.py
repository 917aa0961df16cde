"""Extract and repair JSON from LLM completions.

Models often wrap the JSON they were asked for in commentary or Markdown code
fences, and occasionally emit trailing commas or unquoted keys. This module
finds the outermost object or array in a completion and repairs it before
parsing.
"""

from __future__ import annotations

import json
from typing import Any

from json_repair import repair_json


def parse_json_response(text: str) -> Any:
    """Parse the JSON object or array embedded in ``text``.

    Whichever of ``{`` or ``[`` appears first opens the fragment; the last
    matching closing delimiter ends it. The fragment is repaired with
    ``json_repair`` and then parsed.

    Raises:
        ValueError: If ``text`` is not a string or holds no JSON delimiters
        json.JSONDecodeError: If the repaired fragment still cannot be parsed

    Example:
        >>> parse_json_response('```json\\n{"issues": []}\\n```')
        {'issues': []}
    """
    if not isinstance(text, str):
        raise ValueError(f"Expected string input, got {type(text)}")

    candidates = [
        (index, closer)
        for index, closer in ((text.find("["), "]"), (text.find("{"), "}"))
        if index != -1
    ]
    if not candidates:
        raise ValueError("Response text does not contain JSON object or array delimiters.")

    # Arrays win a tie so that a bare list of issues is not mistaken for its first item.
    start, closer = min(candidates, key=lambda candidate: candidate[0])
    end = text.rfind(closer)
    if end <= start:
        raise ValueError("Response text does not contain matching JSON delimiters.")

    return json.loads(repair_json(text[start : end + 1]))
