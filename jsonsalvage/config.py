"""Parser settings using Pydantic.

Settings validate and coerce values from the environment (``JSONSALVAGE_``
prefix) or from keyword overrides, and build the reduction rules consumed by
the last repair stage.
"""

import logging
from typing import Any, Tuple

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL,
    DEFAULT_NULL_FIELDS,
    DEFAULT_SENTINEL,
    DEFAULT_SENTINEL_FIELDS,
)
from .exceptions import ConfigurationError
from .repair.types import ReductionRule

log = logging.getLogger(__name__)


class ParserSettings(BaseSettings):
    """Pydantic settings schema for the recovery pipeline.

    List fields accept a JSON array from the environment, e.g.
    ``JSONSALVAGE_NULL_FIELDS='["clauseText", "notes"]'``, or a
    comma-separated string when passed programmatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="JSONSALVAGE_",
        env_file=None,
        case_sensitive=False,
        extra="ignore",
    )

    sentinel: str = Field(
        default=DEFAULT_SENTINEL,
        description="Placeholder written over sacrificed non-nullable fields",
        min_length=1,
    )

    null_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NULL_FIELDS),
        description="Fields whose string values become null in the last stage",
    )

    sentinel_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SENTINEL_FIELDS),
        description="Fields whose string values become the sentinel",
    )

    cache_ttl_seconds: int = Field(
        default=DEFAULT_CACHE_TTL,
        description="Lifetime of cached parse results",
        ge=1,
    )

    cache_max_entries: int = Field(
        default=DEFAULT_CACHE_MAX_ENTRIES,
        description="Maximum number of cached parse results",
        ge=1,
    )

    telemetry: bool = Field(
        default=False,
        description="Report per-stage timings to registered reporters",
    )

    @field_validator("null_fields", "sentinel_fields", mode="before")
    @classmethod
    def split_field_names(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [name.strip() for name in v.split(",") if name.strip()]
        return v

    @model_validator(mode="after")
    def validate_disjoint_fields(self) -> "ParserSettings":
        overlap = set(self.null_fields) & set(self.sentinel_fields)
        if overlap:
            raise ValueError(
                f"Fields cannot be both nullable and sentinel: {', '.join(sorted(overlap))}"
            )
        return self

    def reduction_rules(self) -> Tuple[ReductionRule, ...]:
        """Rules for the reducer, null fields first"""
        rules = [ReductionRule(name) for name in self.null_fields]
        rules.extend(ReductionRule(name, self.sentinel) for name in self.sentinel_fields)
        return tuple(rules)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentinel": self.sentinel,
            "null_fields": list(self.null_fields),
            "sentinel_fields": list(self.sentinel_fields),
            "cache_ttl_seconds": self.cache_ttl_seconds,
            "cache_max_entries": self.cache_max_entries,
            "telemetry": self.telemetry,
        }


def get_settings(**overrides: Any) -> ParserSettings:
    """Resolve settings from the environment plus explicit overrides"""
    try:
        settings = ParserSettings(**overrides)
    except ValueError as e:
        raise ConfigurationError(f"Invalid parser settings: {e}") from e

    log.debug("Parser settings resolved: %s", settings.to_dict())
    return settings

