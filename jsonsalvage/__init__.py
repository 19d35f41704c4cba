"""
Recover structured JSON from free-form AI model output
"""

import importlib.metadata
import logging

from .cache import ResultCache, cache_key
from .config import ParserSettings, get_settings
from .contracts import ContractAnalysisProcessor, validate_contract_text
from .exceptions import (
    ConfigurationError,
    JsonSalvageError,
    SchemaValidationError,
    UnrecoverableResponseError,
)
from .repair import (
    DEFAULT_REDUCTION_RULES,
    FailureKind,
    ParseAttemptResult,
    ReductionRule,
    RobustJSONParser,
    parse,
)
from .schema import SchemaParseResult, parse_as
from .telemetry import StageCounter, TelemetryContext

# Version handling
try:
    __version__ = importlib.metadata.version("jsonsalvage")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # fallback version

# Keep consuming apps without logging configuration quiet
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API
__all__ = [
    # Core
    "parse",
    "RobustJSONParser",
    "ParseAttemptResult",
    "FailureKind",
    "ReductionRule",
    "DEFAULT_REDUCTION_RULES",
    # Typed parsing
    "parse_as",
    "SchemaParseResult",
    # Configuration
    "ParserSettings",
    "get_settings",
    # Caller-side helpers
    "ResultCache",
    "cache_key",
    "ContractAnalysisProcessor",
    "validate_contract_text",
    "TelemetryContext",
    "StageCounter",
    # Exceptions
    "JsonSalvageError",
    "ConfigurationError",
    "UnrecoverableResponseError",
    "SchemaValidationError",
]
