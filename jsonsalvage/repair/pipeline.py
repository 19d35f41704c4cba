"""
Multi-level JSON recovery for text returned by an AI completion service

Each level decodes a progressively more aggressive transformation of the
original text, and the first level that decodes wins:

1. direct      - the text as received
2. normalized  - fences and surrounding prose removed
3. sanitized   - problem characters replaced, raw control characters escaped
4. repaired    - trailing commas removed, quotes and brackets balanced
5. reduced     - fragile free-text fields sacrificed, then 3 and 4 reapplied

Every level starts again from the original text. Failures are returned as
data; nothing raised by a stage reaches the caller.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

from ..constants import (
    EMPTY_INPUT_MESSAGE,
    LEVEL_DIRECT,
    LEVEL_NORMALIZED,
    LEVEL_REDUCED,
    LEVEL_REPAIRED,
    LEVEL_SANITIZED,
)
from ..telemetry import TelemetryContext, TelemetryContextProtocol
from .normalize import find_json_region, normalize_response_text
from .reduce import DEFAULT_REDUCTION_RULES, reduce_fragile_fields
from .sanitize import sanitize_json_string
from .structure import repair_json_structure
from .types import FailureKind, ParseAttemptResult, ReductionRule, RepairStage

if TYPE_CHECKING:
    from ..config import ParserSettings

log = logging.getLogger(__name__)


def _identity(text: str) -> str:
    return text


def _sanitized(text: str) -> str:
    return sanitize_json_string(normalize_response_text(text))


def _repaired(text: str) -> str:
    return repair_json_structure(_sanitized(text))


def build_stages(rules: Iterable[ReductionRule]) -> List[RepairStage]:
    """Ordered repair stages; only the last one depends on the rules"""
    rules = tuple(rules)

    def _reduced(text: str) -> str:
        reduced = reduce_fragile_fields(normalize_response_text(text), rules)
        return repair_json_structure(sanitize_json_string(reduced))

    return [
        RepairStage(LEVEL_DIRECT, "direct", _identity),
        RepairStage(LEVEL_NORMALIZED, "normalized", normalize_response_text),
        RepairStage(LEVEL_SANITIZED, "sanitized", _sanitized),
        RepairStage(LEVEL_REPAIRED, "repaired", _repaired),
        RepairStage(LEVEL_REDUCED, "reduced", _reduced),
    ]


class RobustJSONParser:
    """Recovers a JSON value from free-form model output.

    The parser holds only immutable configuration, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        rules: Optional[Iterable[ReductionRule]] = None,
        telemetry: Optional[TelemetryContextProtocol] = None,
    ):
        self.rules: Tuple[ReductionRule, ...] = (
            tuple(rules) if rules is not None else DEFAULT_REDUCTION_RULES
        )
        self.stages = build_stages(self.rules)
        self.tele = telemetry if telemetry is not None else TelemetryContext()

    @classmethod
    def from_settings(
        cls, settings: "ParserSettings", *reporters
    ) -> "RobustJSONParser":
        """Build a parser whose reduction rules and telemetry follow settings"""
        return cls(
            rules=settings.reduction_rules(),
            telemetry=TelemetryContext(*reporters, enabled=settings.telemetry),
        )

    def parse(self, raw_text: Optional[str]) -> ParseAttemptResult:
        """Try each stage in order and return the first successful decode"""
        if not raw_text or not raw_text.strip():
            log.debug("Skipping parse: %s", EMPTY_INPUT_MESSAGE)
            return ParseAttemptResult.failed(
                EMPTY_INPUT_MESSAGE, FailureKind.EMPTY_INPUT
            )

        last_error = "Unknown parsing error"
        with self.tele("parse", input_length=len(raw_text)):
            for stage in self.stages:
                with self.tele(stage.name, level=stage.level):
                    data, error = self._attempt(stage, raw_text)

                if error is None:
                    self.tele.gauge("attempt_level", stage.level)
                    if stage.level > LEVEL_DIRECT:
                        log.info(
                            "JSON recovered at level %d (%s)", stage.level, stage.name
                        )
                    return ParseAttemptResult.succeeded(data, stage.level)

                last_error = error
                log.debug(
                    "Level %d (%s) failed: %s", stage.level, stage.name, error
                )

            self.tele.count("failures")

        failure_kind = (
            FailureKind.NO_JSON_REGION
            if find_json_region(normalize_response_text(raw_text)) is None
            else FailureKind.PARSE_FAILURE
        )
        log.warning(
            "All %d parsing attempts failed (%s): %s",
            len(self.stages),
            failure_kind.value,
            last_error,
        )
        return ParseAttemptResult.failed(last_error, failure_kind)

    @staticmethod
    def _attempt(stage: RepairStage, raw_text: str) -> Tuple[Any, Optional[str]]:
        try:
            return json.loads(stage.apply(raw_text)), None
        except (json.JSONDecodeError, ValueError, RecursionError) as e:
            return None, str(e) or type(e).__name__


def parse(
    raw_text: Optional[str], rules: Optional[Iterable[ReductionRule]] = None
) -> ParseAttemptResult:
    """One-shot parse with the default reduction rules or the given ones"""
    return RobustJSONParser(rules=rules).parse(raw_text)
