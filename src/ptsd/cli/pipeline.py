"""
ptsd CLI - Pipeline commands.

gate-check and auto-track are meant to be called from editor/agent hooks
before and after a file write; validate, context and status report on the
whole project.
"""

import json

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ptsd.cli.common import is_agent, open_project
from ptsd.cli.errors import ExitCode, handle_errors
from ptsd.core.gate import check, track
from ptsd.core.pipeline.context import build_context
from ptsd.core.pipeline.models import ContextLineType
from ptsd.core.pipeline.validator import validate as run_validation
from ptsd.core.state.models import Severity
from ptsd.core.state.regression import detect_regressions

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

CONTEXT_STYLES = {
    ContextLineType.NEXT: "cyan",
    ContextLineType.BLOCKED: "red",
    ContextLineType.DONE: "green",
    ContextLineType.TASK: "yellow",
}


def gate_check(
    ctx: typer.Context,
    file: str = typer.Option(..., "--file", help="Path about to be written"),
) -> None:
    """
    Check whether a file may be written (exit 2 if denied).

    The denial reason is printed on stderr.

    Examples:
        ptsd gate-check --file .ptsd/bdd/auth.feature
    """
    project = open_project()
    agent = is_agent(ctx)
    with handle_errors(agent):
        result = check(project, file)

    if result.allowed:
        console.print("ok" if agent else "Gate check passed", markup=False, highlight=False)
        return

    err_console.print(result.reason, markup=False, highlight=False)
    raise typer.Exit(ExitCode.USER_ERROR)


def auto_track(
    ctx: typer.Context,
    file: str = typer.Option(..., "--file", help="Path that was written"),
) -> None:
    """
    Record the progress implied by a written file.

    Examples:
        ptsd auto-track --file internal/auth/auth_test.go
    """
    project = open_project()
    agent = is_agent(ctx)
    with handle_errors(agent):
        result = track(project, file)

    if result is None or not result.updated:
        if agent:
            console.print("ok no-op", markup=False, highlight=False)
        return

    tests = "written" if result.tests_written else "absent"
    prefix = "tracked:" if agent else "Updated"
    console.print(
        f"{prefix} {result.feature} stage={result.stage.value} tests={tests}",
        markup=False,
        highlight=False,
    )


def validate(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Run every pipeline check (exit 1 if any error is found).

    Examples:
        ptsd validate
        ptsd --agent validate
    """
    project = open_project()
    agent = is_agent(ctx)
    with handle_errors(agent):
        report = run_validation(project)

    if json_output:
        console.print(json.dumps(report.model_dump(mode="json"), indent=2))
    elif agent:
        for issue in report.issues:
            level = "err" if issue.fatal else "note"
            console.print(f"{level}:{issue.category} {issue}", markup=False, highlight=False)
        if report.passed:
            console.print("ok", markup=False, highlight=False)
    else:
        for issue in report.errors:
            console.print(f"[red]✗[/red] {issue}", highlight=False)
        for issue in report.notices:
            console.print(f"[dim]• {issue}[/dim]", highlight=False)
        if report.passed:
            console.print("[green]Validation passed[/green]")
        else:
            console.print(f"\n[red]{len(report.errors)} error(s)[/red]")

    if not report.passed:
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def context(ctx: typer.Context) -> None:
    """
    Show the next action for every tracked feature, then open tasks.

    Examples:
        ptsd context
        ptsd --agent context
    """
    project = open_project()
    agent = is_agent(ctx)
    with handle_errors(agent):
        lines = build_context(project)

    for line in lines:
        if agent:
            console.print(line.render(), markup=False, highlight=False)
        else:
            console.print(Text(line.render(), style=CONTEXT_STYLES[line.type]))


def status(ctx: typer.Context) -> None:
    """
    Show pipeline status for every feature.

    Runs the regression pass first, so edits made since the last command
    are reconciled and reported.
    """
    project = open_project()
    agent = is_agent(ctx)
    with handle_errors(agent):
        warnings = detect_regressions(project)
        features = project.registry.load()
        state = project.state.load()
        entries = project.review_status.load()

    for w in warnings:
        if agent:
            err_console.print(
                f"err:pipeline regression {w.feature}: {w.message}", markup=False, highlight=False
            )
        else:
            color = "red" if w.severity is Severity.ERROR else "yellow"
            err_console.print(f"[{color}]{w.severity.value}[/{color}] {w.feature}: {w.message}")

    if agent:
        for f in features:
            fs = state.features.get(f.id)
            entry = entries.get(f.id)
            stage = fs.stage.value if fs and fs.stage else "-"
            verdict = entry.verdict.value if entry else "pending"
            console.print(
                f"{f.id} status={f.status.value} stage={stage} review={verdict}",
                markup=False,
                highlight=False,
            )
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Feature")
    table.add_column("Status")
    table.add_column("Stage")
    table.add_column("Review")
    table.add_column("Tests")
    for f in features:
        fs = state.features.get(f.id)
        entry = entries.get(f.id)
        table.add_row(
            f.id,
            f.status.value,
            fs.stage.value if fs and fs.stage else "-",
            entry.verdict.value if entry else "pending",
            "written" if entry and entry.tests_written else "-",
        )
    console.print(table)
