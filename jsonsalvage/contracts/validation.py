"""
Pre-submission checks for contract text
"""

from dataclasses import dataclass
from typing import Optional

from ..constants import (
    CONTRACT_MAX_LENGTH,
    CONTRACT_MIN_LENGTH,
    MAX_CORRUPTION_RATE,
    REPLACEMENT_CHARACTER,
)


@dataclass
class ContractTextValidation:
    """Whether contract text may be sent for analysis"""

    valid: bool
    error: Optional[str] = None


def corruption_rate(text: str) -> float:
    """Share of U+FFFD replacement characters in text"""
    if not text:
        return 0.0
    return text.count(REPLACEMENT_CHARACTER) / len(text)


def validate_contract_text(text: Optional[str]) -> ContractTextValidation:
    """Reject empty, too short, too long or visibly corrupted text"""
    if not text or not text.strip():
        return ContractTextValidation(False, "Contract text is empty")

    if len(text) < CONTRACT_MIN_LENGTH:
        return ContractTextValidation(
            False,
            f"Contract text is too short (minimum {CONTRACT_MIN_LENGTH} characters)",
        )

    if len(text) > CONTRACT_MAX_LENGTH:
        return ContractTextValidation(
            False,
            f"Contract text is too long (maximum {CONTRACT_MAX_LENGTH:,} characters)",
        )

    if corruption_rate(text) > MAX_CORRUPTION_RATE:
        return ContractTextValidation(
            False, "Contract appears to be corrupted or contains invalid characters"
        )

    return ContractTextValidation(True)
