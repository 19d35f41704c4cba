"""
Typed validation of recovered JSON
"""

from dataclasses import dataclass, field
import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from .exceptions import SchemaValidationError
from .repair.pipeline import RobustJSONParser

log = logging.getLogger(__name__)


@dataclass
class SchemaParseResult:
    """Result of recovering JSON and validating it against a schema"""

    success: bool
    data: Any = None
    error: Optional[str] = None
    attempt_level: Optional[int] = None
    errors: List[str] = field(default_factory=list)


def validate_against_schema(data: Any, schema: Any) -> Any:
    """Validate data against a Pydantic model, a generic, or pass it through"""
    if schema is None:
        return data
    if hasattr(schema, "model_validate"):  # Pydantic model
        return schema.model_validate(data)
    elif hasattr(schema, "__origin__"):  # Generic types like list[SomeModel]
        return validate_generic_type(data, schema)
    else:
        return data


def validate_generic_type(data: Any, schema: Any) -> Any:
    """Handle list[Model], dict[str, Model] and other generic types"""
    origin = getattr(schema, "__origin__", None)
    args = getattr(schema, "__args__", ())

    if origin is list and args:
        if not isinstance(data, list):
            raise SchemaValidationError(f"Expected list, got {type(data).__name__}")
        item_schema = args[0]
        return [validate_against_schema(item, item_schema) for item in data]

    elif origin is dict and len(args) == 2:
        if not isinstance(data, dict):
            raise SchemaValidationError(f"Expected dict, got {type(data).__name__}")
        _, value_schema = args
        return {k: validate_against_schema(v, value_schema) for k, v in data.items()}

    return data


def parse_as(
    raw_text: Optional[str], schema: Any, parser: Optional[RobustJSONParser] = None
) -> SchemaParseResult:
    """Recover JSON from raw_text and validate it against schema"""
    parser = parser or RobustJSONParser()
    result = parser.parse(raw_text)

    if not result.success:
        return SchemaParseResult(
            success=False,
            error=result.error,
            errors=[result.error] if result.error else [],
        )

    try:
        validated = validate_against_schema(result.data, schema)
    except ValidationError as e:
        messages = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        log.warning("Recovered JSON did not match schema: %s", "; ".join(messages))
        return SchemaParseResult(
            success=False,
            error="Response JSON did not match the provided schema",
            attempt_level=result.attempt_level,
            errors=messages,
        )
    except SchemaValidationError as e:
        return SchemaParseResult(
            success=False,
            error=str(e),
            attempt_level=result.attempt_level,
            errors=[str(e)],
        )

    return SchemaParseResult(
        success=True, data=validated, attempt_level=result.attempt_level
    )
