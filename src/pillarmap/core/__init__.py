"""Core roadmap engine: validation, editing, session state and model clients."""

from pillarmap.core.edit_resolver import apply_edit
from pillarmap.core.errors import (
    EmptySourceText,
    RoadmapError,
    SchemaViolation,
    StaleAddress,
    UpstreamFailure,
)
from pillarmap.core.validator import validate_roadmap

__all__ = [
    "EmptySourceText",
    "RoadmapError",
    "SchemaViolation",
    "StaleAddress",
    "UpstreamFailure",
    "apply_edit",
    "validate_roadmap",
]
