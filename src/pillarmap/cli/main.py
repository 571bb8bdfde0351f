"""CLI interface for pillarmap."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from pillarmap.assembler.image_prompt import build_image_prompt
from pillarmap.cli.formatters import OutputFormatter
from pillarmap.core.config import Config
from pillarmap.core.edit_resolver import apply_edit
from pillarmap.core.errors import RoadmapError, StaleAddress
from pillarmap.core.llm_wrapper import wrap_client_with_logging
from pillarmap.core.logging import configure_logging
from pillarmap.core.provider_factory import SUPPORTED_PROVIDERS, create_client
from pillarmap.core.session import RoadmapSession
from pillarmap.core.validator import validate_roadmap
from pillarmap.projections.pillar_view import project_pillars
from pillarmap.projections.timeline_view import project_timeline
from pillarmap.schemas.roadmap import RoadmapData
from pillarmap.stages.roadmap_parser import RoadmapParser


def _load_roadmap(path: str, formatter: OutputFormatter) -> RoadmapData:
    """Read and validate a roadmap JSON file, exiting with status 1 on failure."""
    try:
        candidate = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        formatter.print_error(f"Could not read roadmap file {path}: {e}")
        sys.exit(1)
    try:
        return validate_roadmap(candidate)
    except RoadmapError as e:
        formatter.print_error(str(e))
        sys.exit(1)


def _write_roadmap(data: RoadmapData, path: Path) -> None:
    path.write_text(json.dumps(data.to_wire(), indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _read_source(input_source: str, formatter: OutputFormatter) -> str:
    if input_source == "-":
        return sys.stdin.read()
    input_path = Path(input_source)
    if not input_path.exists():
        formatter.print_error(f"Input file not found: {input_source}")
        sys.exit(1)
    return input_path.read_text(encoding="utf-8")


@click.group()
@click.version_option(package_name="pillarmap")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (default: WARNING)",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Path to log file (default: stderr only)",
)
@click.option(
    "--json-logging/--no-json-logging",
    default=None,
    help="Output logs in JSON format",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_file: Optional[str],
    log_level: Optional[str],
    log_file: Optional[str],
    json_logging: Optional[bool],
):
    """
    pillarmap - Turn a freeform roadmap into pillar and timeline views.

    Roadmap text is parsed by an AI model into a canonical JSON record. The
    record can then be shown grouped by strategic pillar or by timeframe,
    edited one deliverable at a time, and turned into an infographic prompt.

    Supported AI providers:
      - Google AI Gemini (requires API_KEY or GEMINI_API_KEY)
      - AI Gateway, OpenAI-compatible (requires AI_GATEWAY_URL and AI_GATEWAY_API_KEY)
    """
    config_obj = Config.load(
        {"log_level": log_level, "log_file": log_file, "json_logging": json_logging},
        config_file=Path(config_file) if config_file else None,
    )
    configure_logging(
        level=config_obj.log_level,
        json_output=bool(config_obj.json_logging),
        log_file=config_obj.log_file,
    )
    ctx.obj = config_obj


@main.command()
@click.argument("input_source", type=click.Path(exists=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Output JSON file (default: stdout)",
)
@click.option(
    "--provider",
    "-p",
    type=click.Choice(list(SUPPORTED_PROVIDERS), case_sensitive=False),
    default=None,
    help="AI provider (default: auto - gateway if configured, else gemini)",
)
@click.option("--model", "-m", default=None, help="Model name (default: gemini-2.5-pro)")
@click.option("--api-key", default=None, help="Gemini API key (or use API_KEY / GEMINI_API_KEY)")
@click.option("--gateway-url", default=None, help="AI gateway root URL (or use AI_GATEWAY_URL)")
@click.option("--gateway-api-key", default=None, help="AI gateway API key (or use AI_GATEWAY_API_KEY)")
@click.option("--timeout", type=int, default=None, help="Request timeout in seconds (default: 120)")
@click.option(
    "--view",
    type=click.Choice(["none", "pillar", "timeline"], case_sensitive=False),
    default="none",
    help="Also render the parsed roadmap (default: none)",
)
@click.pass_obj
def parse(
    config_obj: Config,
    input_source: str,
    output: Optional[str],
    provider: Optional[str],
    model: Optional[str],
    api_key: Optional[str],
    gateway_url: Optional[str],
    gateway_api_key: Optional[str],
    timeout: Optional[int],
    view: str,
):
    """
    Parse roadmap text into canonical roadmap JSON.

    INPUT_SOURCE can be a file path or '-' for stdin.

    Examples:

      # Parse a markdown roadmap with Gemini
      pillarmap parse roadmap.md -o roadmap.json --provider gemini

      # Parse from stdin through a gateway
      cat roadmap.md | pillarmap parse - --provider gateway
    """
    formatter = OutputFormatter()
    for key, value in {
        "provider": provider,
        "model": model,
        "api_key": api_key,
        "gateway_url": gateway_url,
        "gateway_api_key": gateway_api_key,
        "timeout": timeout,
    }.items():
        if value is not None:
            setattr(config_obj, key, value)

    text = _read_source(input_source, formatter)

    try:
        client = create_client(
            provider=config_obj.provider,
            model=config_obj.model_for(config_obj.resolved_provider()),
            temperature=config_obj.temperature,
            api_key=config_obj.api_key,
            gateway_url=config_obj.gateway_url,
            gateway_api_key=config_obj.gateway_api_key,
        )
    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    parser = RoadmapParser(wrap_client_with_logging(client), timeout=int(config_obj.timeout))
    session = RoadmapSession(parser)
    try:
        data = session.generate(text)
    except RoadmapError:
        formatter.print_error(session.error or "Failed to generate roadmap.")
        sys.exit(1)

    if output:
        _write_roadmap(data, Path(output))
        formatter.print_success(
            f"Parsed {len(data.pillars)} pillars and {len(data.timeframes)} timeframes into {output}"
        )
    else:
        click.echo(json.dumps(data.to_wire(), indent=2, ensure_ascii=False))

    if view == "pillar":
        formatter.print_pillar_view(session.pillar_view())
    elif view == "timeline":
        formatter.print_timeline_view(session.timeline_view())


@main.command()
@click.argument("roadmap", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--view",
    "-v",
    type=click.Choice(["pillar", "timeline"], case_sensitive=False),
    default="pillar",
    help="Group deliverables by pillar or by timeframe (default: pillar)",
)
@click.option("--color/--no-color", default=False, help="Force colored output")
def show(roadmap: str, view: str, color: bool):
    """Render a roadmap JSON file grouped by pillar or by timeframe."""
    formatter = OutputFormatter(force_color=color)
    data = _load_roadmap(roadmap, formatter)

    if view.lower() == "timeline":
        formatter.print_timeline_view(project_timeline(data))
    else:
        formatter.print_pillar_view(project_pillars(data))


@main.command()
@click.argument("roadmap", type=click.Path(exists=True, dir_okay=False))
@click.option("--timeframe", "-t", "timeframe_id", required=True, help="Timeframe id (e.g. t1)")
@click.option("--pillar", "-p", "pillar_id", required=True, help="Pillar id (e.g. p1)")
@click.option("--index", "-i", "task_index", type=int, required=True, help="Task position, starting at 0")
@click.option("--text", "new_text", required=True, help="Replacement text for the task")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Output JSON file (default: overwrite ROADMAP)",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail when the address does not resolve instead of dropping the edit",
)
def edit(
    roadmap: str,
    timeframe_id: str,
    pillar_id: str,
    task_index: int,
    new_text: str,
    output: Optional[str],
    strict: bool,
):
    """
    Replace one deliverable in a roadmap JSON file.

    Examples:

      pillarmap edit roadmap.json -t t1 -p p2 -i 0 --text "Security audit"
    """
    formatter = OutputFormatter()
    data = _load_roadmap(roadmap, formatter)

    text = new_text.strip()
    if not text:
        formatter.print_error("Replacement text is empty")
        sys.exit(1)

    try:
        updated = apply_edit(data, timeframe_id, pillar_id, task_index, text, strict=strict)
    except StaleAddress as e:
        formatter.print_error(str(e))
        sys.exit(1)

    output_path = Path(output) if output else Path(roadmap)
    _write_roadmap(updated, output_path)

    timeframe = updated.find_timeframe(timeframe_id)
    group = timeframe.group_for(pillar_id) if timeframe else None
    if group is None or not 0 <= task_index < len(group.tasks):
        formatter.print_warning(
            f"No task at {timeframe_id}/{pillar_id}[{task_index}]; the edit was dropped"
        )
    else:
        formatter.print_success(f"Updated {timeframe_id}/{pillar_id}[{task_index}] in {output_path}")


@main.command()
@click.argument("roadmap", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Output file (default: stdout)",
)
def prompt(roadmap: str, output: Optional[str]):
    """Build the infographic prompt for an image-generation model."""
    formatter = OutputFormatter()
    data = _load_roadmap(roadmap, formatter)
    text = build_image_prompt(data)

    if output:
        Path(output).write_text(text, encoding="utf-8")
        formatter.print_success(f"Prompt written to {output}")
    else:
        click.echo(text)


@main.command()
@click.argument("roadmap", type=click.Path(exists=True, dir_okay=False))
def validate(roadmap: str):
    """Check that a JSON file is a valid roadmap."""
    formatter = OutputFormatter()
    data = _load_roadmap(roadmap, formatter)
    tasks = sum(len(g.tasks) for tf in data.timeframes for g in tf.deliverables)
    formatter.print_success(
        f"Valid roadmap: {len(data.pillars)} pillars, {len(data.timeframes)} timeframes, {tasks} tasks"
    )


@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command("show")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["yaml", "json"], case_sensitive=False),
    default="yaml",
    help="Output format (default: yaml)",
)
@click.pass_obj
def config_show(config_obj: Config, format: str):
    """Show the effective configuration with secrets masked."""
    data = config_obj.to_dict(redact=True)
    data["resolved_provider"] = config_obj.resolved_provider()
    if format == "yaml":
        click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False).rstrip())
    else:
        click.echo(json.dumps(data, indent=2))


@config.command("export")
@click.argument("output", type=click.Path(dir_okay=False))
@click.option(
    "--format",
    "-f",
    type=click.Choice(["yaml", "json"], case_sensitive=False),
    default="yaml",
    help="Output format (default: yaml)",
)
@click.pass_obj
def config_export(config_obj: Config, output: str, format: str):
    """Export the effective configuration to a file."""
    output_path = Path(output)
    config_obj.save(output_path, format=format)
    click.echo(f"Configuration exported to: {output_path}")


if __name__ == "__main__":
    main()
