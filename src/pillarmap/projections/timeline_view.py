"""Timeframe-major projection laid out as horizontal columns."""

from dataclasses import dataclass
from typing import Literal

from pillarmap.projections.index import build_group_index, iter_cells
from pillarmap.projections.palette import PillarColor, pillar_color
from pillarmap.schemas.roadmap import Pillar, RoadmapData, Timeframe

COLUMN_WIDTH = 320
SCROLL_STEP = 300
# scroll positions within this distance of an edge count as being at the edge
SCROLL_TOLERANCE = 1


@dataclass(frozen=True)
class TimelineEntry:
    pillar: Pillar
    tasks: tuple[str, ...]
    color: PillarColor


@dataclass(frozen=True)
class TimelineColumn:
    timeframe: Timeframe
    entries: tuple[TimelineEntry, ...]
    x_offset: int


@dataclass(frozen=True)
class TimelineView:
    title: str
    subtitle: str
    columns: tuple[TimelineColumn, ...]
    column_width: int = COLUMN_WIDTH

    @property
    def total_width(self) -> int:
        return len(self.columns) * self.column_width

    def column(self, timeframe_id: str) -> TimelineColumn:
        for column in self.columns:
            if column.timeframe.id == timeframe_id:
                return column
        raise KeyError(timeframe_id)

    def cells(self) -> set[tuple[str, str, tuple[str, ...]]]:
        """Flatten to ``(pillar_id, timeframe_id, tasks)`` triples."""
        return {
            (entry.pillar.id, column.timeframe.id, entry.tasks)
            for column in self.columns
            for entry in column.entries
        }

    def scroll_state(self, scroll_left: float, viewport_width: float) -> tuple[bool, bool]:
        """
        Report whether the strip can scroll further left and right.

        Args:
            scroll_left: Current horizontal scroll position
            viewport_width: Visible width of the strip

        Returns:
            Tuple of (can_scroll_left, can_scroll_right)
        """
        can_scroll_left = scroll_left > SCROLL_TOLERANCE
        can_scroll_right = scroll_left < self.total_width - viewport_width - SCROLL_TOLERANCE
        return can_scroll_left, can_scroll_right

    def scroll_by(
        self,
        scroll_left: float,
        direction: Literal["left", "right"],
        viewport_width: float,
    ) -> float:
        """Return the scroll position after one step, clamped to the strip."""
        step = -SCROLL_STEP if direction == "left" else SCROLL_STEP
        max_left = max(0.0, self.total_width - viewport_width)
        return min(max(0.0, scroll_left + step), max_left)


def project_timeline(data: RoadmapData, column_width: int = COLUMN_WIDTH) -> TimelineView:
    """
    Group tasks by timeframe, then by pillar.

    Entries inside a column follow pillar order, not the order in which the
    timeframe lists its deliverables. Each entry carries the color of its
    pillar's position in the pillars list.
    """
    entries: dict[str, list[TimelineEntry]] = {tf.id: [] for tf in data.timeframes}
    for cell in iter_cells(data, "timeframe", build_group_index(data)):
        entries[cell.timeframe.id].append(
            TimelineEntry(cell.pillar, cell.tasks, pillar_color(cell.pillar_index))
        )

    columns = tuple(
        TimelineColumn(timeframe, tuple(entries[timeframe.id]), i * column_width)
        for i, timeframe in enumerate(data.timeframes)
    )
    return TimelineView(data.title, data.subtitle, columns, column_width)
