"""Roadmap schemas."""

from pillarmap.schemas.roadmap import (
    DeliverableGroup,
    Pillar,
    RoadmapData,
    Timeframe,
    roadmap_response_schema,
)

__all__ = [
    "DeliverableGroup",
    "Pillar",
    "RoadmapData",
    "Timeframe",
    "roadmap_response_schema",
]
