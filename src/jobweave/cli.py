# src/jobweave/cli.py
"""Jobweave Command Line Interface.

Entry point for the jobweave CLI tool.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from jobweave import __version__
from jobweave.contracts import JobCatalogError, JobweaveError, ProgressForced, StarterForced
from jobweave.core.catalog import JobPool, load_job_pool
from jobweave.core.config import JobweaveSettings, load_settings
from jobweave.core.dag import Workflow, WorkflowLayout, WorkflowResolver, ensure_unique_ids
from jobweave.core.events import EventBus, EventRecorder

__all__ = ["app"]

app = typer.Typer(
    name="jobweave",
    help="Jobweave: wire job pools into layered dataflow workflows.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jobweave version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
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
    """Jobweave: wire job pools into layered dataflow workflows."""
    from jobweave.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")


def _format_validation_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted validation error with optional hint and details."""
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
        title=f"[red bold]❌ {title}[/]",
        border_style="red",
        padding=(0, 1),
    )
    console.print(panel)


def _load_settings_or_exit(settings: Path | None) -> JobweaveSettings:
    if settings is None:
        return JobweaveSettings()
    settings_path = settings.expanduser()
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
        details = [f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors()]
        _format_validation_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None


def _load_pool_or_exit(jobs: Path) -> JobPool:
    jobs_path = jobs.expanduser()
    try:
        return load_job_pool(jobs_path)
    except FileNotFoundError:
        _format_validation_error(
            title="File Not Found",
            message=f"Job pool file does not exist: {jobs_path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except JobCatalogError as e:
        _format_validation_error(
            title="Job Pool Error",
            message=str(e),
            hint="Each job needs an id (or name) plus input and output role lists.",
        )
        raise typer.Exit(1) from None


def _workflow_to_dict(workflow: Workflow, layout: WorkflowLayout) -> dict[str, Any]:
    return {
        "nodes": [
            {
                "id": node.node_id,
                "display_name": node.job.display_name,
                "synthetic": node.is_synthetic,
                "level": layout.levels[node.node_id],
                "position": layout.positions[node.node_id],
                "inputs": list(layout.input_order[node.node_id]),
                "outputs": list(node.job.outputs),
            }
            for node in workflow.nodes
        ],
        "edges": [{"from": edge.source, "to": edge.target, "data_flow": list(edge.data_flow)} for edge in workflow.edges],
        "external_inputs": workflow.external_inputs(),
    }


def _echo_workflow(index: int, workflow: Workflow, layout: WorkflowLayout) -> None:
    typer.echo(f"Workflow {index + 1}: {workflow.node_count} nodes, {workflow.edge_count} edges, {layout.level_count} levels")
    for level in range(layout.level_count):
        for node_id in layout.nodes_at_level(level):
            node = workflow.get_node(node_id)
            marker = " (synthetic)" if node.is_synthetic else ""
            inputs = ", ".join(layout.input_order[node_id]) or "-"
            outputs = ", ".join(node.job.outputs) or "-"
            typer.echo(f"  [L{level}] {node.job.display_name}{marker}: {inputs} -> {outputs}")
    for edge in workflow.edges:
        typer.echo(f"  {edge.source} -> {edge.target} [{', '.join(edge.data_flow)}]")


@app.command()
def resolve(
    jobs: Path = typer.Option(
        ...,
        "--jobs",
        "-j",
        help="Path to job pool YAML/JSON file.",
    ),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Print the resolved workflows as JSON.",
    ),
) -> None:
    """Wire a job pool into workflows and print their levels."""
    config = _load_settings_or_exit(settings)
    if settings is not None:
        from jobweave.core.logging import configure_logging

        configure_logging(json_output=config.log_json, level=config.log_level)

    pool = _load_pool_or_exit(jobs)

    bus = EventBus()
    recorder = EventRecorder(bus, StarterForced, ProgressForced)
    if not output_json:

        def _format_starter_forced(event: StarterForced) -> None:
            typer.secho(
                f"Warning: no starter job left; adopted '{event.job_id}' to break a dependency cycle.",
                fg=typer.colors.YELLOW,
                err=True,
            )

        bus.subscribe(StarterForced, _format_starter_forced)

    try:
        resolver = WorkflowResolver(config.resolver, registry=pool.registry, event_bus=bus)
        results = resolver.resolve_with_layout(pool.jobs)
    except JobweaveError as e:
        _format_validation_error(
            title="Resolution Failed",
            message=str(e),
            hint="Check job ids, role names and the producer policy.",
        )
        raise typer.Exit(1) from None

    if output_json:
        payload = {
            "workflows": [_workflow_to_dict(workflow, layout) for workflow, layout in results],
            "diagnostics": [{"event": type(event).__name__, **dataclasses.asdict(event)} for event in recorder.events],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    for index, (workflow, layout) in enumerate(results):
        _echo_workflow(index, workflow, layout)


@app.command()
def validate(
    jobs: Path = typer.Option(
        ...,
        "--jobs",
        "-j",
        help="Path to job pool YAML/JSON file.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Require every role to be declared under resource_types.",
    ),
) -> None:
    """Validate a job pool without resolving it."""
    pool = _load_pool_or_exit(jobs)

    try:
        ensure_unique_ids(pool.jobs)
    except JobweaveError as e:
        _format_validation_error(title="Job Pool Error", message=str(e), hint="Job ids must be unique.")
        raise typer.Exit(1) from None

    roles = {role for job in pool.jobs for role in (*job.inputs, *job.outputs)}
    undeclared = sorted(role for role in roles if not pool.registry.has(role))
    if strict and undeclared:
        _format_validation_error(
            title="Undeclared Roles",
            message=f"{len(undeclared)} role(s) are not declared under resource_types",
            details=undeclared,
            hint="Declare each role or drop --strict.",
        )
        raise typer.Exit(1)

    typer.echo("✅ Job pool valid!")
    typer.echo(f"  Jobs: {len(pool.jobs)}")
    typer.echo(f"  Roles: {len(roles)} ({len(undeclared)} undeclared)")
    typer.echo(f"  Resource types: {len(pool.registry)}")
