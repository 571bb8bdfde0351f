"""Shared traversal behind the pillar and timeline views.

Both views walk the same ``(timeframe_id, pillar_id)`` index and apply the
same filter; they differ only in which axis is the outer loop.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal, Optional

from pillarmap.schemas.roadmap import Pillar, RoadmapData, Timeframe

Major = Literal["pillar", "timeframe"]
GroupIndex = dict[tuple[str, str], tuple[str, ...]]


@dataclass(frozen=True)
class Cell:
    """A non-empty deliverable group located by pillar and timeframe."""

    pillar_index: int
    pillar: Pillar
    timeframe: Timeframe
    tasks: tuple[str, ...]


def build_group_index(data: RoadmapData) -> GroupIndex:
    """
    Index non-empty deliverable groups by ``(timeframe_id, pillar_id)``.

    Empty task lists are left out, so a lookup miss covers both "no group"
    and "group with no tasks".
    """
    index: GroupIndex = {}
    for timeframe in data.timeframes:
        for group in timeframe.deliverables:
            key = (timeframe.id, group.pillar_id)
            # first group wins, matching a linear scan
            if group.tasks and key not in index:
                index[key] = tuple(group.tasks)
    return index


def iter_cells(
    data: RoadmapData,
    major: Major,
    index: Optional[GroupIndex] = None,
) -> Iterator[Cell]:
    """
    Yield every non-empty cell, grouped by ``major``.

    Pillars are always visited in pillar order and timeframes in timeframe
    order. Groups that reference an unknown pillar id are never reached.

    Args:
        data: Canonical roadmap record
        major: "pillar" for pillar-major order, "timeframe" for timeframe-major
        index: Prebuilt group index (built from ``data`` when omitted)
    """
    if index is None:
        index = build_group_index(data)

    pillars = list(enumerate(data.pillars))
    if major == "pillar":
        pairs = ((i, p, tf) for i, p in pillars for tf in data.timeframes)
    elif major == "timeframe":
        pairs = ((i, p, tf) for tf in data.timeframes for i, p in pillars)
    else:
        raise ValueError(f"Unknown major axis: {major}. Expected 'pillar' or 'timeframe'")

    for pillar_index, pillar, timeframe in pairs:
        tasks = index.get((timeframe.id, pillar.id))
        if tasks:
            yield Cell(pillar_index, pillar, timeframe, tasks)
