"""Rowflow Command Line Interface.

Entry point for the rowflow CLI tool. Resolves rows and field summaries
from editor snapshot files, printing JSON on stdout. Logs go to stderr.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from rowflow import __version__
from rowflow.contracts import FilterNode, GraphSnapshot, JoinNode, SnapshotError
from rowflow.core.config import RowflowSettings, load_settings
from rowflow.core.dag import GraphValidationError, PipelineGraph

__all__ = [
    "app",
]

app = typer.Typer(
    name="rowflow",
    help="Rowflow: resolve the rows flowing through a visual pipeline graph.",
    no_args_is_help=True,
)


@dataclass
class _CLIState:
    """Per-invocation state shared from the callback to subcommands."""

    settings: RowflowSettings = field(default_factory=RowflowSettings)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rowflow version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


def _format_validation_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error with optional hint and details."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    console = Console(stderr=True)

    content = Text()
    content.append(message, style="white")

    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")

    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    panel = Panel(
        content,
        title=f"[red bold]{title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)


def _load_cli_settings(settings_path: Path) -> RowflowSettings:
    """Load settings, rendering failures as panels and exiting with status 1."""
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        _format_validation_error(
            title="File Not Found",
            message=f"Settings file does not exist: {settings_path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        # Must be before any ValueError handling: ValidationError inherits from it
        details = [f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()]
        _format_validation_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None


def _load_cli_snapshot(ctx: typer.Context, snapshot_path: Path) -> GraphSnapshot:
    """Load a snapshot using the invocation's settings."""
    from rowflow.core.snapshot import load_snapshot

    state: _CLIState = ctx.ensure_object(_CLIState)
    try:
        return load_snapshot(snapshot_path.expanduser(), state.settings.snapshot)
    except FileNotFoundError:
        _format_validation_error(
            title="File Not Found",
            message=f"Snapshot file does not exist: {snapshot_path}",
            hint="Export the graph from the editor as JSON or YAML.",
        )
        raise typer.Exit(1) from None
    except SnapshotError as e:
        _format_validation_error(
            title="Invalid Snapshot",
            message=str(e),
            hint="The file must contain an object with 'nodes' and 'edges' lists.",
        )
        raise typer.Exit(1) from None


def _require_node(snapshot: GraphSnapshot, node_id: str, expected: type | None = None) -> None:
    """Exit with an error panel if node_id is absent or of the wrong kind."""
    node = snapshot.node(node_id)
    if node is None:
        known = sorted(n.node_id for n in snapshot.nodes)
        _format_validation_error(
            title="Node Not Found",
            message=f"No node with id '{node_id}' in snapshot",
            details=known[:20] or None,
        )
        raise typer.Exit(1)
    if expected is not None and not isinstance(node, expected):
        _format_validation_error(
            title="Wrong Node Kind",
            message=f"Node '{node_id}' is a {node.kind} node",
        )
        raise typer.Exit(1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Rowflow: resolve the rows flowing through a visual pipeline graph."""
    from rowflow.core.logging import configure_logging

    # .env first so ROWFLOW_* overrides reach Dynaconf
    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )

    loaded = _load_cli_settings(settings.expanduser()) if settings is not None else RowflowSettings()
    ctx.obj = _CLIState(settings=loaded)

    log_level = "DEBUG" if verbose else loaded.logging.level
    configure_logging(json_output=json_logs or loaded.logging.json_output, level=log_level)


@app.command()
def resolve(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Editor snapshot (JSON or YAML)."),
    node_id: str = typer.Argument(..., help="Node whose incoming rows to resolve."),
) -> None:
    """Print the rows flowing into a node as JSON."""
    from rowflow.engine.resolver import resolve_rows

    graph = _load_cli_snapshot(ctx, snapshot)
    _require_node(graph, node_id)
    rows = resolve_rows(node_id, graph.nodes, graph.edges)
    _echo_json([row.to_dict() for row in rows])


@app.command("join-fields")
def join_fields(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Editor snapshot (JSON or YAML)."),
    node_id: str = typer.Argument(..., help="Join node to analyse."),
) -> None:
    """Print the fields on each side of a join node and the live match count."""
    from rowflow.engine.resolver import derive_join_fields

    graph = _load_cli_snapshot(ctx, snapshot)
    _require_node(graph, node_id, JoinNode)
    _echo_json(derive_join_fields(node_id, graph.nodes, graph.edges).to_dict())


@app.command("filter-fields")
def filter_fields(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Editor snapshot (JSON or YAML)."),
    node_id: str = typer.Argument(..., help="Filter node to analyse."),
) -> None:
    """Print the fields available to a filter node from upstream."""
    from rowflow.engine.resolver import derive_filter_fields

    graph = _load_cli_snapshot(ctx, snapshot)
    _require_node(graph, node_id, FilterNode)
    _echo_json(derive_filter_fields(node_id, graph.nodes, graph.edges))


@app.command()
def validate(
    ctx: typer.Context,
    snapshot: Path = typer.Argument(..., help="Editor snapshot (JSON or YAML)."),
) -> None:
    """Report wiring problems in a snapshot without resolving it.

    Warnings never fail the command; only unreadable snapshots and
    duplicate node ids do.
    """
    graph_snapshot = _load_cli_snapshot(ctx, snapshot)
    try:
        graph = PipelineGraph.from_snapshot(graph_snapshot)
    except GraphValidationError as e:
        _format_validation_error(
            title="Graph Validation Failed",
            message=str(e),
        )
        raise typer.Exit(1) from None

    warnings = graph.validate()
    typer.echo(f"{graph.node_count} nodes, {graph.edge_count} edges, {len(graph.sinks())} tables")
    if not warnings:
        typer.secho("No wiring problems found.", fg=typer.colors.GREEN)
        return
    for warning in warnings:
        typer.secho(f"[{warning.code}] {warning.message}", fg=typer.colors.YELLOW)


if __name__ == "__main__":
    app()
