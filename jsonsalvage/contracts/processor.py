"""
Turns raw contract-analysis text from the AI service into validated results

The processor is the caller layer around the repair pipeline: it owns the
optional result cache, validates the recovered object against the analysis
schema, and converts every failure into a retryable, user-facing message.
Partial data is never returned.
"""

from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional

from ..cache import ResultCache, cache_key
from ..constants import USER_RETRY_MESSAGE
from ..repair.pipeline import RobustJSONParser
from ..schema import parse_as
from .models import ContractAnalysisResults

log = logging.getLogger(__name__)


@dataclass
class ProcessedAnalysis:
    """Outcome of processing one analysis response"""

    success: bool
    results: Optional[ContractAnalysisResults] = None
    error: Optional[str] = None
    detail: Optional[str] = None
    attempt_level: Optional[int] = None
    from_cache: bool = False

    @property
    def should_retry(self) -> bool:
        return not self.success

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "results": (
                self.results.model_dump(by_alias=True, mode="json")
                if self.results is not None
                else None
            ),
            "error": self.error,
            "detail": self.detail,
            "attempt_level": self.attempt_level,
            "from_cache": self.from_cache,
        }


class ContractAnalysisProcessor:
    """Recovers and validates contract analyses, with an optional cache"""

    def __init__(
        self,
        parser: Optional[RobustJSONParser] = None,
        cache: Optional[ResultCache] = None,
    ):
        self.parser = parser or RobustJSONParser()
        self.cache = cache

    def process(
        self, analysis_text: Optional[str], contract_text: Optional[str] = None
    ) -> ProcessedAnalysis:
        """
        Process the analysis the AI service returned for ``contract_text``

        Args:
            analysis_text: Raw text returned by the analysis endpoint
            contract_text: The contract that was analyzed; used as cache key

        Returns:
            ProcessedAnalysis with validated results or a retry message
        """
        key = (
            cache_key(contract_text)
            if contract_text and self.cache is not None
            else None
        )

        if key is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return ProcessedAnalysis(success=True, results=cached, from_cache=True)

        outcome = parse_as(analysis_text, ContractAnalysisResults, parser=self.parser)
        if not outcome.success:
            log.warning("Contract analysis could not be recovered: %s", outcome.error)
            return ProcessedAnalysis(
                success=False,
                error=USER_RETRY_MESSAGE,
                detail="; ".join(outcome.errors) or outcome.error,
                attempt_level=outcome.attempt_level,
            )

        log.debug("Contract analysis recovered at level %d", outcome.attempt_level)
        if key is not None:
            self.cache.set(key, outcome.data)

        return ProcessedAnalysis(
            success=True, results=outcome.data, attempt_level=outcome.attempt_level
        )
