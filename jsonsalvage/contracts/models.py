"""Contract analysis response models.

These mirror the JSON the contract-analysis prompt asks the model to
return. Field names follow the camelCase wire format through aliases;
Python code uses snake_case.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContractType(str, Enum):
    SYNC_REPRESENTATION = "Synchronization Representation Agreement"
    RECORD_LABEL = "Record Label Agreement"
    PRODUCTION_DEAL = "Production Deal"
    PUBLISHING = "Publishing Agreement"
    DISTRIBUTION = "Distribution Agreement"
    MANAGEMENT = "Management Agreement"
    PRODUCER = "Producer Agreement"
    WORK_FOR_HIRE = "Work For Hire Agreement"
    PERFORMANCE = "Performance Contract"
    UNKNOWN = "Unknown Contract Type"


class SeverityLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


CONTRACT_TYPE_DESCRIPTIONS = {
    ContractType.SYNC_REPRESENTATION: (
        "An agreement where a company represents an artist to secure "
        "synchronization placements in various media."
    ),
    ContractType.RECORD_LABEL: (
        "A contract between an artist and a record label for the creation and "
        "distribution of recordings."
    ),
    ContractType.PRODUCTION_DEAL: (
        "An agreement where a production company funds recording in exchange "
        "for ownership or licensing rights."
    ),
    ContractType.PUBLISHING: (
        "A contract covering ownership and administration of musical compositions."
    ),
    ContractType.DISTRIBUTION: (
        "An agreement focused solely on distributing music to various platforms."
    ),
    ContractType.MANAGEMENT: (
        "A contract where a manager represents an artist in exchange for a "
        "percentage of income."
    ),
    ContractType.PRODUCER: (
        "A contract between an artist and producer outlining compensation and "
        "rights for produced recordings."
    ),
    ContractType.WORK_FOR_HIRE: (
        "An agreement where creative services are provided for a flat fee with "
        "no retained rights."
    ),
    ContractType.PERFORMANCE: "A contract for live performances or appearances.",
    ContractType.UNKNOWN: "The contract type couldn't be definitively identified.",
}


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ComponentRating(_WireModel):
    name: str
    rating: float = Field(ge=0.0, le=1.0)
    details: str
    industry_comparison: Optional[str] = Field(default=None, alias="industryComparison")


class ConcernArea(_WireModel):
    title: str
    # The recovery pipeline may replace this with a sentinel, never null
    description: str
    suggestion: Optional[str] = None
    severity_level: SeverityLevel = Field(alias="severityLevel")
    clause_text: Optional[str] = Field(default=None, alias="clauseText")

    @field_validator("severity_level", mode="before")
    @classmethod
    def parse_severity(cls, v: Any) -> Any:
        if isinstance(v, str):
            normalized = v.strip().capitalize()
            if normalized in {level.value for level in SeverityLevel}:
                return normalized
        return v


class ContractKeyTerm(_WireModel):
    name: str
    value: str


class ContractAnalysisResults(_WireModel):
    """Top-level analysis returned for one contract"""

    contract_type: ContractType = Field(
        default=ContractType.UNKNOWN, alias="contractType"
    )
    overall_fairness: float = Field(ge=0.0, le=1.0, alias="overallFairness")
    summary: str
    component_ratings: list[ComponentRating] = Field(
        default_factory=list, alias="componentRatings"
    )
    concern_areas: list[ConcernArea] = Field(
        default_factory=list, alias="concernAreas"
    )
    key_terms: list[ContractKeyTerm] = Field(default_factory=list, alias="keyTerms")

    @field_validator("contract_type", mode="before")
    @classmethod
    def parse_contract_type(cls, v: Any) -> Any:
        if isinstance(v, ContractType):
            return v
        if isinstance(v, str):
            for contract_type in ContractType:
                if contract_type.value.lower() == v.strip().lower():
                    return contract_type
        return ContractType.UNKNOWN

    @property
    def contract_type_description(self) -> str:
        return CONTRACT_TYPE_DESCRIPTIONS[self.contract_type]

    @property
    def high_severity_concerns(self) -> list[ConcernArea]:
        return [c for c in self.concern_areas if c.severity_level is SeverityLevel.HIGH]
