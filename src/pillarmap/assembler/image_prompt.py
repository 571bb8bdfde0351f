"""Image-generation prompt assembly from the canonical roadmap."""

from pathlib import Path

from pillarmap.projections.index import build_group_index, iter_cells
from pillarmap.projections.palette import pillar_color
from pillarmap.schemas.roadmap import RoadmapData, Timeframe


class ImagePromptAssembler:
    """Serializes a roadmap into the text prompt for an image model."""

    def __init__(self):
        """Initialize image prompt assembler."""
        self.template = self._load_template()

    def _load_template(self) -> str:
        """Load infographic prompt template from file."""
        template_path = Path(__file__).parent.parent / "templates" / "infographic_prompt.md"
        return template_path.read_text(encoding="utf-8")

    def assemble_text(self, data: RoadmapData) -> str:
        """
        Build the prompt text.

        Pillar, timeframe and task order follow the record exactly, so the
        same record always produces the same text.

        Args:
            data: Canonical roadmap record

        Returns:
            Formatted prompt text
        """
        return self.template.format(
            title=data.title.strip() or "Roadmap",
            subtitle=data.subtitle.strip() or "(none)",
            pillars=self._build_pillars(data),
            timeline=self._build_timeline(data),
        )

    def _build_pillars(self, data: RoadmapData) -> str:
        """Build strategic pillars section."""
        if not data.pillars:
            return "- (no pillars)"
        lines = []
        for i, pillar in enumerate(data.pillars):
            color = pillar_color(i)
            lines.append(f"{i + 1}. {pillar.name} (color: {color.name}, {color.hex})")
        return "\n".join(lines)

    def _build_timeline(self, data: RoadmapData) -> str:
        """Build timeline section."""
        if not data.timeframes:
            return "- (no timeframes)"

        cells_by_timeframe: dict[str, list] = {tf.id: [] for tf in data.timeframes}
        for cell in iter_cells(data, "timeframe", build_group_index(data)):
            cells_by_timeframe[cell.timeframe.id].append(cell)

        sections = []
        for timeframe in data.timeframes:
            lines = [f"## {self._timeframe_heading(timeframe)}"]
            cells = cells_by_timeframe[timeframe.id]
            if not cells:
                lines.append("- (no deliverables)")
            for cell in cells:
                lines.append(f"- {cell.pillar.name}:")
                for task in cell.tasks:
                    lines.append(f"  - {task}")
            sections.append("\n".join(lines))

        return "\n\n".join(sections)

    def _timeframe_heading(self, timeframe: Timeframe) -> str:
        parts = [part for part in (timeframe.date.strip(), timeframe.name.strip()) if part]
        return ": ".join(parts) or timeframe.id


def build_image_prompt(data: RoadmapData) -> str:
    """Shortcut for ``ImagePromptAssembler().assemble_text(data)``."""
    return ImagePromptAssembler().assemble_text(data)
