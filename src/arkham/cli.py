"""ARKHAM CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from arkham import __version__
from arkham.config import CONFIG_FILE_NAME, ExportConfigError, load_export_config
from arkham.export import ScenarioExporter, analyze_scenario, generate_scenario_text
from arkham.observability import (
    bind_scenario,
    close_file_logging,
    configure_logging,
    get_logger,
    trail_path,
)
from arkham.scenario import ScenarioLoadError, ScenarioSnapshot, load_scenario

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="arkham",
    help="ARKHAM: export branching scenario graphs as readable narrative text.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

# Global state for logging flags (set by callback, used by commands)
_verbose: int = 0
_log_enabled: bool = False


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_file: Annotated[
        bool,
        typer.Option(
            "--log",
            help="Append every event to <scenario>.export.jsonl beside the scenario file.",
        ),
    ] = False,
) -> None:
    """ARKHAM: export branching scenario graphs as readable narrative text."""
    global _verbose, _log_enabled
    _verbose = verbose
    _log_enabled = log_file

    # File logging is configured later, once the scenario location is known
    configure_logging(verbosity=verbose)


def _configure_file_logging(scenario_path: Path) -> None:
    """Tag events with the scenario and open its export trail if --log was set."""
    bind_scenario(scenario_path)
    if _log_enabled:
        configure_logging(verbosity=_verbose, trail=trail_path(scenario_path.resolve()))
        atexit.register(close_file_logging)


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _load(scenario: Path) -> ScenarioSnapshot:
    _configure_file_logging(scenario)
    try:
        return load_scenario(scenario)
    except ScenarioLoadError as e:
        raise _fail(str(e)) from e


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"ARKHAM v{__version__}")


@app.command()
def export(
    scenario: Annotated[
        Path,
        typer.Argument(help="Saved scenario JSON file."),
    ],
    style: Annotated[
        str | None,
        typer.Option(
            "--style",
            "-s",
            help="Output style: plain (text) or structured (markdown).",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory (default: from config, else ./export).",
        ),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Document title for the header banner."),
    ] = None,
    to_stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Print the export instead of writing a file."),
    ] = False,
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Export settings file."),
    ] = Path(CONFIG_FILE_NAME),
) -> None:
    """Export a scenario as narrative text."""
    try:
        export_config = load_export_config(config)
        resolved_style = export_config.resolve_style(style)
    except (ExportConfigError, ValueError) as e:
        raise _fail(str(e)) from e

    snapshot = _load(scenario)
    resolved_title = title or export_config.title

    if to_stdout:
        typer.echo(generate_scenario_text(snapshot, resolved_style, title=resolved_title))
        return

    exporter = ScenarioExporter(resolved_style, title=resolved_title)
    output_file = exporter.export(snapshot, output or export_config.output_dir)
    console.print(f"[green]✓[/green] Exported {len(snapshot.nodes)} nodes ({exporter.format_name})")
    console.print(f"  {escape(str(output_file))}")
    if _log_enabled:
        console.print(f"  Log: {escape(str(trail_path(scenario.resolve())))}")


@app.command()
def inspect(
    scenario: Annotated[
        Path,
        typer.Argument(help="Saved scenario JSON file."),
    ],
) -> None:
    """Show the section structure the exporter will use."""
    snapshot = _load(scenario)
    analysis = analyze_scenario(snapshot)
    nodes_by_id = {node.id: node for node in snapshot.nodes}

    summary = Table(title=f"Scenario: {escape(scenario.name)}")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Count", justify="right")
    summary.add_row("Nodes", str(len(snapshot.nodes)))
    summary.add_row("Edges", str(len(snapshot.edges)))
    summary.add_row("Variables", str(len(snapshot.variables)))
    summary.add_row("Start nodes", str(len(analysis.start_nodes)))
    summary.add_row("Merge points", str(len(analysis.merge_points)))
    summary.add_row("Dangling edges", str(len(analysis.dangling_edges)))

    console.print()
    console.print(summary)

    if analysis.start_nodes or analysis.merge_points:
        sections = Table(title="Section roots")
        sections.add_column("Node", style="cyan")
        sections.add_column("Label")
        sections.add_column("Kind", style="bold")
        sections.add_column("Indegree", justify="right", style="dim")
        for node_id in analysis.start_nodes:
            label = nodes_by_id[node_id].data.label
            kind = "[green]start[/green]"
            sections.add_row(escape(node_id), escape(label), kind, str(analysis.indegree[node_id]))
        for node_id in analysis.merge_points:
            if node_id in analysis.start_nodes:
                continue
            label = nodes_by_id[node_id].data.label
            kind = "[yellow]merge[/yellow]"
            sections.add_row(escape(node_id), escape(label), kind, str(analysis.indegree[node_id]))
        console.print()
        console.print(sections)

    if analysis.dangling_edges:
        dangling = Table(title="Dangling edges")
        dangling.add_column("Edge", style="cyan")
        dangling.add_column("Source")
        dangling.add_column("Missing target", style="red")
        for edge in analysis.dangling_edges:
            dangling.add_row(escape(edge.id), escape(edge.source), escape(edge.target))
        console.print()
        console.print(dangling)

    console.print()
    log.debug("scenario_inspected", scenario=str(scenario))


if __name__ == "__main__":
    app()
