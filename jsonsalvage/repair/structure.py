"""
Best-effort fixes for JSON shape defects

The heuristics here are count based: quote parity and the difference between
opening and closing bracket counts. They can produce JSON that decodes but
means something different from what the generator intended; when the result
still does not decode the orchestrator simply moves on to the next stage.
"""

import re

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_CLOSERS = "}]"


def remove_trailing_commas(text: str) -> str:
    """Drop commas that sit directly before a closing bracket"""
    return _TRAILING_COMMA.sub(r"\1", text)


def count_unescaped_quotes(text: str) -> int:
    count = 0
    escape = False
    for ch in text:
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
        elif ch == '"':
            count += 1
    return count


def _closing_run_start(text: str, closers: str = _CLOSERS) -> int:
    """Index where the trailing run of closers (and whitespace) begins"""
    index = len(text)
    while index > 0 and (text[index - 1] in closers or text[index - 1].isspace()):
        index -= 1
    # Whitespace before the first closer belongs to the body, not the run
    while index < len(text) and text[index].isspace():
        index += 1
    return index


def _count_structural(text: str) -> dict[str, int]:
    """Raw bracket and brace counts; characters inside strings count too"""
    return {ch: text.count(ch) for ch in "{}[]"}


def close_unterminated_string(text: str) -> str:
    """Insert a closing quote when the unescaped quote count is odd.

    The generator is assumed to have been cut off mid-string, so the quote
    goes right before the trailing closing brackets, or at the very end when
    there are none.
    """
    if count_unescaped_quotes(text) % 2 == 0:
        return text
    index = _closing_run_start(text)
    return text[:index] + '"' + text[index:]


def balance_brackets(text: str) -> str:
    """Add missing ']' before the trailing braces and missing '}' at the end"""
    counts = _count_structural(text)

    missing_brackets = counts["["] - counts["]"]
    if missing_brackets > 0:
        index = _closing_run_start(text, closers="}")
        text = text[:index] + "]" * missing_brackets + text[index:]

    missing_braces = counts["{"] - counts["}"]
    if missing_braces > 0:
        text = text + "}" * missing_braces

    return text


def repair_json_structure(text: str) -> str:
    """Remove trailing commas, then balance quotes, brackets and braces.

    Trailing commas go first so the counts below see the final shape.
    """
    fixed = remove_trailing_commas(text)
    fixed = close_unterminated_string(fixed)
    return balance_brackets(fixed)
