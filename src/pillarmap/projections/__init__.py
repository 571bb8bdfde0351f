"""Read-only views derived from the canonical roadmap record."""

from pillarmap.projections.index import build_group_index, iter_cells
from pillarmap.projections.palette import PILLAR_PALETTE, PillarColor, pillar_color
from pillarmap.projections.pillar_view import PillarView, project_pillars
from pillarmap.projections.timeline_view import TimelineView, project_timeline

__all__ = [
    "PILLAR_PALETTE",
    "PillarColor",
    "PillarView",
    "TimelineView",
    "build_group_index",
    "iter_cells",
    "pillar_color",
    "project_pillars",
    "project_timeline",
]
