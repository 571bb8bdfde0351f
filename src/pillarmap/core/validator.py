"""Validation of parse results before they become the canonical record."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pillarmap.core.errors import SchemaViolation
from pillarmap.schemas.roadmap import RoadmapData

REQUIRED_LIST_FIELDS = ("pillars", "timeframes")


def _format_validation_error(error: ValidationError) -> str:
    """
    Format a pydantic error as a field-by-field report.

    Args:
        error: Pydantic ValidationError raised while building RoadmapData

    Returns:
        Formatted error message
    """
    errors = error.errors()
    if not errors:
        return str(error)

    error_parts = ["Validation failed for RoadmapData:", ""]
    for err in errors:
        loc = " -> ".join(str(x) for x in err["loc"]) or "(root)"
        error_parts.append(f"Field: {loc}")
        error_parts.append(f"  Error: {err.get('msg', '')}")
        error_parts.append(f"  Type: {err['type']}")

        if err["type"] == "missing":
            error_parts.append(f"  Suggestion: Required field '{loc}' is missing.")

        input_value = err.get("input")
        if input_value is not None and err["type"] != "missing":
            input_str = str(input_value)
            if len(input_str) > 100:
                input_str = input_str[:97] + "..."
            error_parts.append(f"  Input value: {input_str}")
        error_parts.append("")

    return "\n".join(error_parts).rstrip()


def check_roadmap_shape(candidate: Any) -> None:
    """
    Confirm that ``pillars`` and ``timeframes`` are present and list-typed.

    Nested shapes are not inspected here.

    Raises:
        SchemaViolation: If the candidate is not a mapping or either field is
            absent or not a list
    """
    if not isinstance(candidate, Mapping):
        raise SchemaViolation(
            f"Parsed roadmap must be a JSON object, got {type(candidate).__name__}."
        )

    missing = [field for field in REQUIRED_LIST_FIELDS if field not in candidate]
    if missing:
        raise SchemaViolation(
            "Parsed JSON is missing key properties 'pillars' or 'timeframes' "
            f"(missing: {', '.join(missing)})."
        )

    for field in REQUIRED_LIST_FIELDS:
        if not isinstance(candidate[field], list):
            raise SchemaViolation(
                f"Parsed JSON property '{field}' must be a list, "
                f"got {type(candidate[field]).__name__}."
            )


def validate_roadmap(candidate: Any) -> RoadmapData:
    """
    Accept a parse result as canonical data.

    The shape check is a hard gate: there is no coercion and no correction
    retry. A candidate that passes it is then materialized into RoadmapData,
    which enforces the id uniqueness rules of the record.

    Args:
        candidate: Object decoded from the model's JSON response

    Returns:
        Validated RoadmapData

    Raises:
        SchemaViolation: If the candidate is not a valid roadmap
    """
    check_roadmap_shape(candidate)
    try:
        return RoadmapData.model_validate(dict(candidate))
    except ValidationError as e:
        raise SchemaViolation(_format_validation_error(e)) from e
