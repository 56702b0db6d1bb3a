"""CLI interface for archviz using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from archviz import __description__, __version__
from archviz.config import ArchvizConfig, ExportFormat, LayoutStrategyName, load_config
from archviz.errors import ArchvizError
from archviz.export import get_exporter
from archviz.graph import AbstractionLevel, GraphModel, build_graph, load_snapshot
from archviz.layout import LayoutEngine

app = typer.Typer(
    name="archviz",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()
err_console = Console(stderr=True)

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"archviz version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """archviz - component graph layout and diagram export."""


def _setup_logging(config: ArchvizConfig) -> None:
    level_name = getattr(config.logging.level, "value", config.logging.level)
    level = LOG_LEVELS.get(level_name, logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s | %(message)s")


def _load(snapshot: Path, config_path: Optional[Path], strict_ids: bool = False,
          level: Optional[AbstractionLevel] = None) -> tuple[ArchvizConfig, GraphModel]:
    """Load configuration and build the graph, exiting with a message on failure."""
    try:
        config = load_config(config_path)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _setup_logging(config)

    try:
        graph = build_graph(load_snapshot(snapshot), strict_ids=strict_ids)
    except ArchvizError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if level is not None:
        graph.apply_abstraction_level(level)
    return config, graph


@app.command()
def render(
    snapshot: Annotated[
        Path,
        typer.Argument(help="Path to the analysis snapshot (JSON)")
    ],
    format: Annotated[
        ExportFormat,
        typer.Option("--format", "-f", help="Output format: plantuml, graphviz")
    ] = ExportFormat.PLANTUML,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", help="Output file path (default: stdout)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .archviz.json)")
    ] = None,
    level: Annotated[
        Optional[AbstractionLevel],
        typer.Option("--level", "-l", help="Abstraction level override: package, feature, layer, class")
    ] = None,
    direction: Annotated[
        Optional[str],
        typer.Option("--direction", "-d", help="Layout direction override: TB or LR")
    ] = None,
    aggregate: Annotated[
        Optional[bool],
        typer.Option("--aggregate/--no-aggregate", help="Show relationships hidden inside collapsed containers")
    ] = None,
    strict_ids: Annotated[
        bool,
        typer.Option("--strict-ids", help="Fail on duplicate node ids instead of replacing")
    ] = False,
) -> None:
    """Render a snapshot as PlantUML or Graphviz DOT text."""
    archviz_config, graph = _load(snapshot, config, strict_ids=strict_ids, level=level)

    if direction is not None:
        if direction.upper() not in ("TB", "LR"):
            err_console.print(f"[red]Error:[/red] Invalid direction '{direction}'. Must be one of: TB, LR")
            raise typer.Exit(1)
        graph.layout_hints.direction = direction.upper()
    if aggregate is not None:
        archviz_config.export.aggregate_edges = aggregate

    exporter = get_exporter(format, archviz_config.export)
    rendered = exporter.render(graph)

    if out:
        output_file = out.resolve()
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(rendered)
        stats = graph.stats()
        err_console.print(f"[green]Diagram written:[/green] {output_file}")
        err_console.print(f"[dim]{stats['visible_nodes']} of {stats['nodes']} nodes visible, "
                          f"{stats['visible_edges']} edges[/dim]")
    else:
        typer.echo(rendered, nl=False)


@app.command()
def layout(
    snapshot: Annotated[
        Path,
        typer.Argument(help="Path to the analysis snapshot (JSON)")
    ],
    strategy: Annotated[
        Optional[LayoutStrategyName],
        typer.Option("--strategy", "-s", help="Layout strategy (default: from configuration)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .archviz.json)")
    ] = None,
    level: Annotated[
        Optional[AbstractionLevel],
        typer.Option("--level", "-l", help="Abstraction level override: package, feature, layer, class")
    ] = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for force-directed layout")
    ] = None,
    json: Annotated[
        bool,
        typer.Option("--json", help="Print positions as JSON")
    ] = False,
) -> None:
    """Compute node positions for a snapshot."""
    archviz_config, graph = _load(snapshot, config, level=level)
    if seed is not None:
        archviz_config.layout.seed = seed

    engine = LayoutEngine(archviz_config)
    try:
        result = engine.run(graph, strategy.value if strategy else None)
    except ArchvizError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json:
        payload = {
            "strategy": result.strategy,
            "canvas": {"width": result.canvas.width, "height": result.canvas.height},
            "positions": {
                node_id: {"x": round(p.x, 2), "y": round(p.y, 2)}
                for node_id, p in result.positions.items()
            },
            "sentinels": {
                node_id: {"x": round(p.x, 2), "y": round(p.y, 2)}
                for node_id, p in result.sentinel_positions.items()
            },
        }
        typer.echo(jsonlib.dumps(payload, indent=2))
        return

    if result.is_empty:
        console.print("[dim]No visible nodes to lay out[/dim]")
        return

    table = Table(title=f"{result.strategy} layout ({result.canvas.width:.0f}x{result.canvas.height:.0f})")
    table.add_column("Node", style="cyan")
    table.add_column("Name")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    for node_id, position in result.positions.items():
        node = graph.get_node(node_id)
        table.add_row(node_id, node.display_name if node else "", f"{position.x:.1f}", f"{position.y:.1f}")
    for node_id, position in result.sentinel_positions.items():
        table.add_row(node_id, "[dim]sentinel[/dim]", f"{position.x:.1f}", f"{position.y:.1f}")
    console.print(table)


if __name__ == "__main__":
    app()
