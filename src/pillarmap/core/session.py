"""Session state: the one canonical roadmap record and the actions on it."""

from typing import Optional

from pillarmap.assembler.image_prompt import ImagePromptAssembler
from pillarmap.core.edit_resolver import apply_edit
from pillarmap.core.errors import EmptySourceText, RoadmapError
from pillarmap.core.logging import get_logger
from pillarmap.projections.pillar_view import PillarView, project_pillars
from pillarmap.projections.timeline_view import TimelineView, project_timeline
from pillarmap.schemas.roadmap import RoadmapData
from pillarmap.stages.roadmap_parser import RoadmapParser

logger = get_logger("pillarmap.session")

GENERATE_FAILED_MESSAGE = (
    "Failed to generate roadmap. The AI model may have returned an invalid data structure. "
    "Please check the input format or try again. Details: {details}"
)


class RoadmapSession:
    """
    Owns the canonical record for one user session.

    The record is only ever replaced, never mutated: a successful parse
    replaces it wholesale and every accepted edit swaps in the copy returned
    by the edit resolver. Failed parses leave the previous record in place.
    """

    def __init__(self, parser: RoadmapParser, data: Optional[RoadmapData] = None):
        """
        Initialize session.

        Args:
            parser: Parser used by ``generate``
            data: Optional initial record (e.g. loaded from disk)
        """
        self.parser = parser
        self.data: Optional[RoadmapData] = data
        self.source_text: str = ""
        self.error: Optional[str] = None
        self._assembler = ImagePromptAssembler()

    def generate(self, text: str) -> RoadmapData:
        """
        Parse ``text`` and make the result the canonical record.

        Raises:
            EmptySourceText: If the text is blank
            RoadmapError: If parsing fails; ``error`` holds the user-facing message
        """
        if not text.strip():
            self.error = str(EmptySourceText())
            raise EmptySourceText()

        self.error = None
        self.source_text = text
        try:
            data = self.parser.parse(text)
        except RoadmapError as e:
            self.error = GENERATE_FAILED_MESSAGE.format(details=e)
            raise

        self.data = data
        return data

    def on_edit(self, timeframe_id: str, pillar_id: str, task_index: int, new_text: str) -> None:
        """
        Commit one inline edit of a task.

        Surrounding whitespace is stripped and a blank result is ignored.
        Address misses are absorbed by the edit resolver.
        """
        if self.data is None:
            logger.debug("Edit ignored: no roadmap loaded")
            return
        text = new_text.strip()
        if not text:
            logger.debug("Edit ignored: blank text", timeframe_id=timeframe_id, pillar_id=pillar_id)
            return

        self.data = apply_edit(self.data, timeframe_id, pillar_id, task_index, text)
        logger.log_stage(
            "edit",
            "completed",
            timeframe_id=timeframe_id,
            pillar_id=pillar_id,
            task_index=task_index,
        )

    def reset(self) -> None:
        """Go back to the source text: drop the record and any error."""
        self.data = None
        self.error = None

    def try_again(self) -> None:
        """Clear the error; the source text is kept for another attempt."""
        self.error = None

    def _require_data(self) -> RoadmapData:
        if self.data is None:
            raise RuntimeError("No roadmap loaded. Generate one first.")
        return self.data

    def pillar_view(self) -> PillarView:
        return project_pillars(self._require_data())

    def timeline_view(self) -> TimelineView:
        return project_timeline(self._require_data())

    def image_prompt(self) -> str:
        return self._assembler.assemble_text(self._require_data())
