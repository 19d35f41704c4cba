"""
Contract analysis models, input checks and response processing
"""

from .models import (
    CONTRACT_TYPE_DESCRIPTIONS,
    ComponentRating,
    ConcernArea,
    ContractAnalysisResults,
    ContractKeyTerm,
    ContractType,
    SeverityLevel,
)
from .processor import ContractAnalysisProcessor, ProcessedAnalysis
from .validation import ContractTextValidation, corruption_rate, validate_contract_text

__all__ = [
    "ContractAnalysisProcessor",
    "ProcessedAnalysis",
    "ContractAnalysisResults",
    "ComponentRating",
    "ConcernArea",
    "ContractKeyTerm",
    "ContractType",
    "SeverityLevel",
    "CONTRACT_TYPE_DESCRIPTIONS",
    "ContractTextValidation",
    "corruption_rate",
    "validate_contract_text",
]
