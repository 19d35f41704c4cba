"""
Character-level cleanup for JSON text emitted by a text generator

Two passes, both idempotent:
- a fixed table of problem characters is replaced or removed everywhere;
- control characters that appear literally inside string literals are
  escaped, since JSON strings cannot contain them raw.

Structural characters are never touched.
"""

from typing import Dict, Optional

from ..constants import PROBLEM_CHARACTERS

_CONTROL_ESCAPES = {
    "\n": "\\n",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def replace_problem_characters(
    text: str, table: Optional[Dict[str, str]] = None
) -> str:
    """Apply the problem-character table"""
    result = text
    for bad_char, replacement in (table or PROBLEM_CHARACTERS).items():
        result = result.replace(bad_char, replacement)
    return result


def escape_control_characters_in_strings(text: str) -> str:
    """Escape raw control characters found inside JSON string literals"""
    out: list[str] = []
    in_string = False
    escape = False

    for ch in text:
        if in_string:
            if escape:
                out.append(ch)
                escape = False
                continue
            if ch == "\\":
                out.append(ch)
                escape = True
                continue
            if ch == '"':
                in_string = False
                out.append(ch)
                continue
            if ch < " ":
                out.append(_CONTROL_ESCAPES.get(ch, f"\\u{ord(ch):04x}"))
                continue
            out.append(ch)
            continue

        if ch == '"':
            in_string = True
        out.append(ch)

    return "".join(out)


def sanitize_json_string(text: str) -> str:
    """Replace problem characters and escape raw control characters"""
    if not text:
        return ""
    return escape_control_characters_in_strings(replace_problem_characters(text))
