"""Canonical roadmap record produced by the parse step."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Pillar(BaseModel):
    """A named strategic category."""

    id: str = Field(description="A unique identifier for the pillar, starting with 'p' (e.g., 'p1', 'p2').")
    name: str = Field(description="The name of the strategic pillar.")


class DeliverableGroup(BaseModel):
    """One pillar's tasks within one timeframe."""

    model_config = ConfigDict(populate_by_name=True)

    pillar_id: str = Field(alias="pillarId", description="The ID of the pillar (e.g., 'p1', 'p2').")
    tasks: list[str] = Field(
        default_factory=list,
        description="An array of deliverable strings for the corresponding pillar.",
    )


class Timeframe(BaseModel):
    """A dated period of the roadmap."""

    id: str = Field(description="A unique identifier for the timeframe, starting with 't' (e.g., 't1', 't2').")
    date: str = Field(default="", description="The date range for the timeframe (e.g., '2025 - Q1 & Q2').")
    name: str = Field(default="", description="The descriptive name for the timeframe (e.g., 'FlowX Build-out').")
    deliverables: list[DeliverableGroup] = Field(
        default_factory=list,
        description=(
            "An array of objects, where each object links a pillar ID to a list of its "
            "tasks/deliverables for this timeframe."
        ),
    )

    @model_validator(mode="after")
    def _one_group_per_pillar(self) -> "Timeframe":
        seen: set[str] = set()
        for group in self.deliverables:
            if group.pillar_id in seen:
                raise ValueError(
                    f"timeframe '{self.id}' has more than one deliverable group for pillar '{group.pillar_id}'"
                )
            seen.add(group.pillar_id)
        return self

    def group_for(self, pillar_id: str) -> Optional[DeliverableGroup]:
        """Return the deliverable group for ``pillar_id``, if any."""
        for group in self.deliverables:
            if group.pillar_id == pillar_id:
                return group
        return None


class RoadmapData(BaseModel):
    """
    The canonical roadmap record.

    ``pillars`` and ``timeframes`` keep their display order. Task lists are
    kept verbatim because a task's position is part of its edit address.
    """

    title: str = Field(default="", description="The main title of the roadmap.")
    subtitle: str = Field(default="", description="The subtitle of the roadmap.")
    pillars: list[Pillar] = Field(default_factory=list, description="An array of strategic pillars.")
    timeframes: list[Timeframe] = Field(
        default_factory=list, description="An array of timeframes for the roadmap."
    )

    @model_validator(mode="after")
    def _unique_ids(self) -> "RoadmapData":
        pillar_ids = [p.id for p in self.pillars]
        duplicates = sorted({pid for pid in pillar_ids if pillar_ids.count(pid) > 1})
        if duplicates:
            raise ValueError(f"duplicate pillar ids: {', '.join(duplicates)}")

        timeframe_ids = [t.id for t in self.timeframes]
        duplicates = sorted({tid for tid in timeframe_ids if timeframe_ids.count(tid) > 1})
        if duplicates:
            raise ValueError(f"duplicate timeframe ids: {', '.join(duplicates)}")
        return self

    def find_timeframe(self, timeframe_id: str) -> Optional[Timeframe]:
        """Return the timeframe with ``timeframe_id``, if any."""
        for timeframe in self.timeframes:
            if timeframe.id == timeframe_id:
                return timeframe
        return None

    def to_wire(self) -> dict[str, Any]:
        """Dump using the external field names (``pillarId``)."""
        return self.model_dump(by_alias=True)


def roadmap_response_schema() -> dict[str, Any]:
    """
    Response schema handed to the text-understanding model.

    Uses the OpenAPI-style subset accepted by structured-output endpoints, so
    it is written out rather than derived from the pydantic models.
    """
    return {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING", "description": "The main title of the roadmap."},
            "subtitle": {"type": "STRING", "description": "The subtitle of the roadmap."},
            "pillars": {
                "type": "ARRAY",
                "description": "An array of strategic pillars.",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "id": {
                            "type": "STRING",
                            "description": "A unique identifier for the pillar, starting with 'p' (e.g., 'p1', 'p2').",
                        },
                        "name": {"type": "STRING", "description": "The name of the strategic pillar."},
                    },
                    "required": ["id", "name"],
                },
            },
            "timeframes": {
                "type": "ARRAY",
                "description": "An array of timeframes for the roadmap.",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "id": {
                            "type": "STRING",
                            "description": "A unique identifier for the timeframe, starting with 't' (e.g., 't1', 't2').",
                        },
                        "date": {
                            "type": "STRING",
                            "description": "The date range for the timeframe (e.g., '2025 - Q1 & Q2').",
                        },
                        "name": {
                            "type": "STRING",
                            "description": "The descriptive name for the timeframe (e.g., 'FlowX Build-out').",
                        },
                        "deliverables": {
                            "type": "ARRAY",
                            "description": (
                                "An array of objects, where each object links a pillar ID to a list "
                                "of its tasks/deliverables for this timeframe."
                            ),
                            "items": {
                                "type": "OBJECT",
                                "properties": {
                                    "pillarId": {
                                        "type": "STRING",
                                        "description": "The ID of the pillar (e.g., 'p1', 'p2').",
                                    },
                                    "tasks": {
                                        "type": "ARRAY",
                                        "description": "An array of deliverable strings for the corresponding pillar.",
                                        "items": {"type": "STRING"},
                                    },
                                },
                                "required": ["pillarId", "tasks"],
                            },
                        },
                    },
                    "required": ["id", "date", "name", "deliverables"],
                },
            },
        },
        "required": ["title", "subtitle", "pillars", "timeframes"],
    }
