"""
Repair pipeline types and result containers

This module defines the data structures shared by the repair stages and the
orchestrator: the per-call parse result, the failure taxonomy, the stage
descriptor and the reducer rules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..exceptions import UnrecoverableResponseError


class FailureKind(Enum):
    """Why a parse could not succeed"""

    EMPTY_INPUT = "empty_input"
    NO_JSON_REGION = "no_json_region"
    PARSE_FAILURE = "parse_failure"


@dataclass(frozen=True)
class RepairStage:
    """One pure text transformation in the fallback pipeline"""

    level: int
    name: str
    transform: Callable[[str], str]

    def apply(self, text: str) -> str:
        return self.transform(text)


@dataclass(frozen=True)
class ReductionRule:
    """Field whose string value the reducer may sacrifice.

    A ``replacement`` of None writes ``null``; a string writes that sentinel.
    """

    field: str
    replacement: Optional[str] = None

    @property
    def nullable(self) -> bool:
        return self.replacement is None


@dataclass
class ParseAttemptResult:
    """Outcome of one call to the parser"""

    success: bool
    data: Any = None
    error: Optional[str] = None
    attempt_level: Optional[int] = None
    failure_kind: Optional[FailureKind] = None

    @classmethod
    def succeeded(cls, data: Any, attempt_level: int) -> "ParseAttemptResult":
        return cls(success=True, data=data, attempt_level=attempt_level)

    @classmethod
    def failed(cls, error: str, failure_kind: FailureKind) -> "ParseAttemptResult":
        return cls(success=False, error=error, failure_kind=failure_kind)

    def unwrap(self) -> Any:
        """Return the parsed data or raise UnrecoverableResponseError"""
        if not self.success:
            raise UnrecoverableResponseError(
                self.error or "Response could not be parsed", self.failure_kind
            )
        return self.data

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "attempt_level": self.attempt_level,
            "failure_kind": self.failure_kind.value if self.failure_kind else None,
        }
