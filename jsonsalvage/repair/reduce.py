"""
Last-resort reduction of long free-text fields

Long explanatory fields are where generators most often leave unescaped
quotes or get truncated. The reducer replaces the string value of each
configured field with ``null`` or a fixed sentinel, keeping the key and
everything around it.
"""

import json
import logging
import re
from typing import Iterable, Optional, Tuple

from ..constants import DEFAULT_NULL_FIELDS, DEFAULT_SENTINEL, DEFAULT_SENTINEL_FIELDS
from .types import ReductionRule

log = logging.getLogger(__name__)

_VALUE_TERMINATORS = ",}]"


def _field_pattern(field: str) -> re.Pattern:
    return re.compile(r'"' + re.escape(field) + r'"\s*:\s*"')


def _next_significant(text: str, index: int) -> str:
    while index < len(text) and text[index].isspace():
        index += 1
    return text[index] if index < len(text) else ""


def find_string_value_end(text: str, start: int) -> Optional[int]:
    """Index of the quote closing the string value that starts at ``start``.

    ``start`` is the first character after the opening quote. A quote only
    closes the value when the next non-space character is a terminator or
    the text ends, so unescaped quotes inside prose are skipped. Returns None
    for a value that runs to the end of the text.
    """
    escape = False
    for index in range(start, len(text)):
        ch = text[index]
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if ch != '"':
            continue
        following = _next_significant(text, index + 1)
        if not following or following in _VALUE_TERMINATORS:
            return index
    return None


def _replacement_literal(rule: ReductionRule) -> str:
    if rule.nullable:
        return "null"
    return json.dumps(rule.replacement)


def reduce_field(text: str, rule: ReductionRule) -> str:
    """Replace every string value of ``rule.field``"""
    pattern = _field_pattern(rule.field)
    literal = _replacement_literal(rule)
    out: list[str] = []
    position = 0
    replaced = 0

    while True:
        match = pattern.search(text, position)
        if match is None:
            break
        value_end = find_string_value_end(text, match.end())
        # Keep the key and colon, drop the opening quote and the value
        key_part = text[match.start() : match.end() - 1]
        out.append(text[position : match.start()])
        out.append(key_part + literal)
        replaced += 1
        if value_end is None:
            position = len(text)
            break
        position = value_end + 1

    if not replaced:
        return text

    out.append(text[position:])
    log.debug("Reduced %d value(s) of field '%s'", replaced, rule.field)
    return "".join(out)


def reduce_fragile_fields(text: str, rules: Iterable[ReductionRule]) -> str:
    """Apply each reduction rule in turn"""
    reduced = text
    for rule in rules:
        reduced = reduce_field(reduced, rule)
    return reduced


DEFAULT_REDUCTION_RULES: Tuple[ReductionRule, ...] = tuple(
    [ReductionRule(name) for name in DEFAULT_NULL_FIELDS]
    + [ReductionRule(name, DEFAULT_SENTINEL) for name in DEFAULT_SENTINEL_FIELDS]
)
