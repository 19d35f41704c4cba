"""
Repair stages and orchestrator for recovering JSON from model output
"""

from .normalize import find_json_region, normalize_response_text, strip_code_fences
from .pipeline import RobustJSONParser, build_stages, parse
from .reduce import DEFAULT_REDUCTION_RULES, reduce_field, reduce_fragile_fields
from .sanitize import (
    escape_control_characters_in_strings,
    replace_problem_characters,
    sanitize_json_string,
)
from .structure import (
    balance_brackets,
    close_unterminated_string,
    remove_trailing_commas,
    repair_json_structure,
)
from .types import FailureKind, ParseAttemptResult, ReductionRule, RepairStage

__all__ = [
    # Central interface
    "RobustJSONParser",
    "parse",
    "build_stages",
    # Result types
    "ParseAttemptResult",
    "FailureKind",
    "RepairStage",
    "ReductionRule",
    "DEFAULT_REDUCTION_RULES",
    # Individual stages
    "strip_code_fences",
    "find_json_region",
    "normalize_response_text",
    "replace_problem_characters",
    "escape_control_characters_in_strings",
    "sanitize_json_string",
    "remove_trailing_commas",
    "close_unterminated_string",
    "balance_brackets",
    "repair_json_structure",
    "reduce_field",
    "reduce_fragile_fields",
]
