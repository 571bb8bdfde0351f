"""Pillar-major projection: each pillar with its tasks per timeframe."""

from dataclasses import dataclass

from pillarmap.projections.index import build_group_index, iter_cells
from pillarmap.projections.palette import PillarColor, pillar_color
from pillarmap.schemas.roadmap import Pillar, RoadmapData, Timeframe


@dataclass(frozen=True)
class PillarBlock:
    timeframe: Timeframe
    tasks: tuple[str, ...]


@dataclass(frozen=True)
class PillarColumn:
    pillar: Pillar
    color: PillarColor
    blocks: tuple[PillarBlock, ...]

    def tasks_for(self, timeframe_id: str) -> tuple[str, ...]:
        """Tasks shown under ``timeframe_id``; empty when there is no block."""
        for block in self.blocks:
            if block.timeframe.id == timeframe_id:
                return block.tasks
        return ()


@dataclass(frozen=True)
class PillarView:
    title: str
    subtitle: str
    columns: tuple[PillarColumn, ...]

    def column(self, pillar_id: str) -> PillarColumn:
        for column in self.columns:
            if column.pillar.id == pillar_id:
                return column
        raise KeyError(pillar_id)

    def cells(self) -> set[tuple[str, str, tuple[str, ...]]]:
        """Flatten to ``(pillar_id, timeframe_id, tasks)`` triples."""
        return {
            (column.pillar.id, block.timeframe.id, block.tasks)
            for column in self.columns
            for block in column.blocks
        }


def project_pillars(data: RoadmapData) -> PillarView:
    """
    Group tasks by pillar, then by timeframe.

    Every pillar gets a column, in pillar order. Within a column, blocks follow
    timeframe order; a timeframe with no tasks for the pillar produces no
    block at all.
    """
    blocks: dict[str, list[PillarBlock]] = {pillar.id: [] for pillar in data.pillars}
    for cell in iter_cells(data, "pillar", build_group_index(data)):
        blocks[cell.pillar.id].append(PillarBlock(cell.timeframe, cell.tasks))

    columns = tuple(
        PillarColumn(pillar, pillar_color(i), tuple(blocks[pillar.id]))
        for i, pillar in enumerate(data.pillars)
    )
    return PillarView(data.title, data.subtitle, columns)
