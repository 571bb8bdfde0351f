"""Processing stages backed by external models."""

from pillarmap.stages.roadmap_parser import RoadmapParser

__all__ = ["RoadmapParser"]
