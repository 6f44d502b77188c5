"""Command line interface for browseflow workflows."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from browseflow.config import BrowseflowConfig, load_config
from browseflow.contracts import BaseStep, WorkflowResult
from browseflow.host import get_host
from browseflow.library import WorkflowDescriptor, get_library, load_workflow_file
from browseflow.library.models import step_by_id
from browseflow.propagation import propagate_schemas
from browseflow.runner import execute_workflow, missing_inputs

app = typer.Typer(help="CLI for browseflow workflows")

workflow_app = typer.Typer(help="Commands for managing and running workflows")

app.add_typer(workflow_app, name="workflow")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    """browseflow CLI entry point."""
    level = "DEBUG" if verbose else load_config().log_level
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")


def _resolve_workflow(source: str) -> WorkflowDescriptor:
    path = Path(source)
    if path.exists():
        return load_workflow_file(path)
    workflow = asyncio.run(get_library().get_workflow(source))
    if workflow is None:
        typer.echo("Workflow not found")
        raise typer.Exit(code=1)
    return workflow


async def _run(
    steps: List[BaseStep],
    backend: Optional[str],
    config: BrowseflowConfig,
    propagate: bool,
) -> WorkflowResult:
    host = get_host(backend, config=config)
    try:
        return await execute_workflow(
            steps,
            on_progress=typer.echo,
            host=host,
            config=config,
            propagate=propagate,
        )
    finally:
        await host.close()


@workflow_app.command("import")
def workflow_import(path: Path) -> None:
    """
    Store a workflow file (JSON or YAML) in the configured library.

    Example:
        browseflow workflow import ./summarize-page.yaml
    """
    if not path.exists():
        typer.secho("Specified path does not exist", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    workflow = load_workflow_file(path)
    asyncio.run(get_library().save_workflow(workflow))
    typer.echo(f"Imported {workflow.id} ({len(workflow.steps)} steps)")


@workflow_app.command("list")
def workflow_list() -> None:
    """
    List stored workflows.

    Example:
        browseflow workflow list
        # Output: summarize-page    Summarize page    4 steps
    """
    workflows = asyncio.run(get_library().list_workflows())
    if not workflows:
        typer.echo("No workflows found")
        return
    for wf in workflows:
        typer.echo(f"{wf.id}\t{wf.name}\t{wf.step_count} steps")


@workflow_app.command("show")
def workflow_show(workflow_id: str) -> None:
    """Show a stored workflow and its steps."""
    workflow = asyncio.run(get_library().get_workflow(workflow_id))
    if workflow is None:
        typer.echo("Workflow not found")
        raise typer.Exit(code=1)
    typer.echo(f"Workflow {workflow.id}: {workflow.name}")
    if workflow.description:
        typer.echo(workflow.description)
    for step in workflow.steps:
        typer.echo(f"- {step.id} [{step.kind}] {step.name or ''}".rstrip())


@workflow_app.command("plan")
def workflow_plan(source: str) -> None:
    """
    Print the executable sequence after output-format schemas are merged.

    SOURCE is a workflow file or the id of a stored workflow.
    """
    workflow = _resolve_workflow(source)
    executable = propagate_schemas(workflow.fresh_steps())
    for index, step in enumerate(executable, start=1):
        marker = ""
        if getattr(step.config, "json_schema", None) is not None:
            marker = " (schema merged)"
        typer.echo(f"{index}. {step.id} [{step.kind}]{marker}")


@workflow_app.command("run")
def workflow_run(
    source: str,
    inputs: Optional[List[str]] = typer.Option(
        None, "--input", "-i", help="Value for an input step as STEP_ID=VALUE"
    ),
    host: Optional[str] = typer.Option(None, help="Host backend (local or inmemory)"),
    page_url: Optional[str] = typer.Option(None, help="URL read by read-page steps"),
    propagate: bool = typer.Option(
        True,
        "--propagation/--no-propagation",
        help="Merge output-format schemas into generation steps",
    ),
) -> None:
    """
    Run a workflow and print its final output.

    Input steps without a value are prompted for before the run starts.

    Example:
        browseflow workflow run ./summarize-page.yaml --page-url https://example.com
        browseflow workflow run greet --input name="Ada"
    """
    workflow = _resolve_workflow(source)
    steps = workflow.fresh_steps()

    for item in inputs or []:
        step_id, sep, value = item.partition("=")
        step = step_by_id(steps, step_id)
        if not sep or step is None:
            typer.secho(f"Unknown input '{item}'", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        step.materialized_value = value

    for step in missing_inputs(steps):
        if step.kind == "text-input":
            step.materialized_value = typer.prompt(f"Input for {step.display_name}")

    config = load_config()
    if page_url:
        config.host.page_url = page_url

    result = asyncio.run(_run(steps, host, config, propagate))
    if not result.success:
        typer.secho(
            f"Workflow failed at step {result.failed_step_id}: {result.error}",
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    typer.echo(result.final_output if result.final_output is not None else "")
