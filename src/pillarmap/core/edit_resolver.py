"""Path-addressed, copy-on-write edits of a single task string."""

from pillarmap.core.errors import StaleAddress
from pillarmap.core.logging import get_logger
from pillarmap.schemas.roadmap import DeliverableGroup, RoadmapData

logger = get_logger("pillarmap.edit_resolver")


def _write_task(
    data: RoadmapData,
    timeframe_id: str,
    pillar_id: str,
    task_index: int,
    new_text: str,
) -> None:
    """Apply the edit to ``data`` in place, raising StaleAddress on a miss."""
    timeframe = data.find_timeframe(timeframe_id)
    if timeframe is None:
        raise StaleAddress("timeframe not found", timeframe_id, pillar_id, task_index)

    group = timeframe.group_for(pillar_id)
    if group is None:
        group = DeliverableGroup(pillar_id=pillar_id, tasks=[])
        timeframe.deliverables.append(group)

    if not isinstance(task_index, int) or isinstance(task_index, bool):
        raise StaleAddress(
            f"task index must be an integer, got {type(task_index).__name__}",
            timeframe_id,
            pillar_id,
            task_index,
        )

    # tasks are never padded, so a new task cannot be created by index
    if not 0 <= task_index < len(group.tasks):
        raise StaleAddress(
            f"task index out of range ({len(group.tasks)} tasks)",
            timeframe_id,
            pillar_id,
            task_index,
        )
    group.tasks[task_index] = new_text


def apply_edit(
    current: RoadmapData,
    timeframe_id: str,
    pillar_id: str,
    task_index: int,
    new_text: str,
    strict: bool = False,
) -> RoadmapData:
    """
    Replace one task string and return the resulting record.

    ``current`` is never modified: the edit is made on a deep copy, and that
    copy is returned even when the address does not resolve. An unknown
    timeframe leaves the copy unchanged. An unknown pillar group is created
    empty and appended to the timeframe, after which the write itself is
    dropped because the index is out of range.

    Args:
        current: The record the edit was made against
        timeframe_id: Id of the timeframe holding the task
        pillar_id: Id of the pillar the task belongs to
        task_index: Position of the task in its group
        new_text: Replacement text
        strict: If True, raise StaleAddress instead of dropping the edit

    Returns:
        A new RoadmapData independent of ``current``

    Raises:
        StaleAddress: Only when ``strict`` is True and the address misses
    """
    updated = current.model_copy(deep=True)
    try:
        _write_task(updated, timeframe_id, pillar_id, task_index, new_text)
    except StaleAddress as e:
        if strict:
            raise
        logger.debug(
            "Edit dropped",
            timeframe_id=e.timeframe_id,
            pillar_id=e.pillar_id,
            task_index=e.task_index,
            reason=e.reason,
        )
    return updated
