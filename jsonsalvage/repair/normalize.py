"""
Locate the JSON payload inside a free-form model response
"""

import re
from typing import Optional, Tuple

# Opening fences only count at the start of a line, not when quoted in prose
_JSON_FENCE = re.compile(r"^[ \t]*```json", re.IGNORECASE | re.MULTILINE)
# Opening fence plus its info string, e.g. ```python or a bare ```
_ANY_FENCE = re.compile(r"^[ \t]*```[A-Za-z0-9_+.-]*", re.MULTILINE)
_FENCE = "```"


def strip_code_fences(text: str) -> str:
    """Return the interior of the fenced block, or the trimmed text.

    A ```json fence wins over any other fence. The block runs to the last
    fence in the text, so backticks inside string values survive. A fence
    that is never closed (the generator was cut off) yields everything after
    the opening line.
    """
    cleaned = text.strip()

    match = _JSON_FENCE.search(cleaned) or _ANY_FENCE.search(cleaned)
    if match is None:
        return cleaned

    inner = cleaned[match.end() :]
    closing = inner.rfind(_FENCE)
    if closing != -1:
        inner = inner[:closing]
    return inner.strip()


def find_json_region(text: str) -> Optional[Tuple[int, int]]:
    """Return (first '{', last '}') when they form a non-empty range"""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return start, end


def normalize_response_text(text: str) -> str:
    """Strip fences and surrounding prose, keeping the outermost braces"""
    cleaned = strip_code_fences(text)

    region = find_json_region(cleaned)
    if region is None:
        return cleaned

    start, end = region
    return cleaned[start : end + 1]
