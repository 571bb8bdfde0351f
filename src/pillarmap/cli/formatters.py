"""Terminal rendering of roadmap views with rich."""

import sys

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pillarmap.projections.pillar_view import PillarView
from pillarmap.projections.timeline_view import TimelineView


def _task_lines(tasks: tuple[str, ...]) -> Text:
    text = Text()
    for i, task in enumerate(tasks):
        if i:
            text.append("\n")
        text.append("• ")
        text.append(task)
    return text


class OutputFormatter:
    """Formats CLI output with rich."""

    def __init__(self, force_color: bool = False):
        """Initialize formatter."""
        self.console = Console(force_terminal=force_color or None, file=sys.stdout)
        self.err_console = Console(force_terminal=force_color or None, file=sys.stderr)

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.console.print(f"[green]✓[/green] {escape(message)}", highlight=False)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.err_console.print(f"[red]✗[/red] {escape(message)}", highlight=False)

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", highlight=False)

    def _print_heading(self, title: str, subtitle: str) -> None:
        self.console.print(Text(title or "Roadmap", style="bold"), justify="center")
        if subtitle:
            self.console.print(Text(subtitle, style="dim"), justify="center")
        self.console.print()

    def print_pillar_view(self, view: PillarView) -> None:
        """Print one panel per pillar with its timeframe blocks."""
        self._print_heading(view.title, view.subtitle)
        for column in view.columns:
            parts = []
            for block in column.blocks:
                heading = Text(block.timeframe.name, style="bold")
                if block.timeframe.date:
                    heading.append(f" ({block.timeframe.date})", style="dim")
                parts.append(heading)
                parts.append(_task_lines(block.tasks))
                parts.append(Text(""))
            if not parts:
                parts.append(Text("No deliverables", style="dim"))

            self.console.print(
                Panel(
                    Group(*parts),
                    title=Text(f"● {column.pillar.name}", style=f"bold {column.color.rich_style}"),
                    title_align="left",
                    border_style=column.color.rich_style,
                )
            )

    def print_timeline_view(self, view: TimelineView) -> None:
        """Print a table with one column per timeframe."""
        self._print_heading(view.title, view.subtitle)
        table = Table(show_header=True, header_style="bold", show_lines=False, expand=True)
        cells = []
        for column in view.columns:
            header = Text(column.timeframe.date, style="dim")
            header.append(f"\n{column.timeframe.name}", style="bold")
            table.add_column(header, vertical="top")

            parts = []
            for entry in column.entries:
                parts.append(Text(f"● {entry.pillar.name}", style=f"bold {entry.color.rich_style}"))
                parts.append(_task_lines(entry.tasks))
            cells.append(Group(*parts) if parts else Text(""))

        if view.columns:
            table.add_row(*cells)
        self.console.print(table)
