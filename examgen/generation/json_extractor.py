"""
Isolate a JSON payload from raw provider text.

Models often wrap JSON in markdown fences or surround it with prose. The extractor
strips one leading/trailing fence, then returns the first balanced top-level
array or object. It does not guarantee valid JSON; the caller's json.loads decides.
"""

import re
from typing import Optional

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?```\s*$")


def strip_code_fences(text: str) -> str:
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned


def _find_start(text: str) -> int:
    candidates = [i for i in (text.find("["), text.find("{")) if i != -1]
    return min(candidates) if candidates else -1


def extract_json(raw: Optional[str]) -> Optional[str]:
    """
    Return the first balanced [...] / {...} block in `raw`, trimmed.

    - None/empty input → None
    - no bracket at all → the fence-stripped text, unchanged
    - unterminated structure → everything from the opening bracket to the end
    """
    if not raw:
        return None

    cleaned = strip_code_fences(raw)
    start = _find_start(cleaned)
    if start == -1:
        return cleaned.strip()

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(cleaned)):
        char = cleaned[i]

        if escape_next:
            escape_next = False
            continue
        if char == "\\":
            escape_next = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char in "[{":
            depth += 1
        elif char in "]}":
            depth -= 1
            if depth == 0:
                return cleaned[start:i + 1].strip()

    # Truncated / malformed: hand back the tail and let json.loads report it
    return cleaned[start:].strip()
