"""
ptsd CLI - Feature registry commands.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from ptsd.cli.common import is_agent, open_project, parse_choice
from ptsd.cli.errors import handle_errors
from ptsd.core.pipeline.progress import show_feature, update_feature_status
from ptsd.core.registry.models import FeatureStatus

console = Console()
app = typer.Typer(
    name="feature",
    help="Register and inspect features",
    no_args_is_help=True,
)

STATUS_COLORS = {
    FeatureStatus.PLANNED: "dim",
    FeatureStatus.ACTIVE: "cyan",
    FeatureStatus.IN_PROGRESS: "yellow",
    FeatureStatus.DEFERRED: "magenta",
    FeatureStatus.IMPLEMENTED: "green",
}


@app.command()
def add(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature identifier (no spaces)"),
    title: str = typer.Argument("", help="Human-readable title"),
) -> None:
    """
    Register a new feature (status: planned).

    Examples:
        ptsd feature add auth "User authentication"
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        feature = project.registry.add(feature_id, title)

    if is_agent(ctx):
        console.print(f"ok {feature.id}", markup=False, highlight=False)
    else:
        console.print(f"[green]Added:[/green] {feature.id}")


@app.command(name="list")
def list_features(
    ctx: typer.Context,
    status: str | None = typer.Option(
        None,
        "--status",
        "-s",
        help="Filter by status: planned, active, in-progress, deferred, implemented",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List registered features.

    Examples:
        ptsd feature list
        ptsd feature list --status active
    """
    project = open_project()
    status_filter = parse_choice(FeatureStatus, status) if status else None
    with handle_errors(is_agent(ctx)):
        features = project.registry.list_features(status=status_filter)

    if json_output:
        console.print(json.dumps([f.model_dump(mode="json") for f in features], indent=2))
        return

    if is_agent(ctx):
        for f in features:
            console.print(f"{f.id} {f.status.value} {f.title}", markup=False, highlight=False)
        return

    if not features:
        console.print("[dim]No features registered.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID")
    table.add_column("Status", width=12)
    table.add_column("Title", overflow="fold")
    for f in features:
        color = STATUS_COLORS.get(f.status, "white")
        table.add_row(f.id, f"[{color}]{f.status.value}[/{color}]", f.title)

    console.print(table)
    console.print(f"\n[dim]Total: {len(features)} features[/dim]")


@app.command()
def show(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature to show"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show a feature with its artifact summary.

    Examples:
        ptsd feature show auth
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        detail = show_feature(project, feature_id)

    if json_output:
        console.print(json.dumps(detail.model_dump(mode="json"), indent=2))
        return

    anchor = f"line {detail.prd_anchor_line}" if detail.prd_anchor_line else "missing"
    if is_agent(ctx):
        console.print(
            f"{detail.id} status={detail.status.value} prd={anchor} "
            f"seed={'yes' if detail.seed_present else 'no'} "
            f"scenarios={detail.scenario_count} tests={detail.test_count}",
            markup=False,
            highlight=False,
        )
        return

    console.print(f"[bold]{detail.id}[/bold] {detail.title}")
    console.print(f"  Status:    {detail.status.value}")
    console.print(f"  PRD:       {anchor}")
    console.print(f"  Seed:      {'present' if detail.seed_present else 'missing'}")
    console.print(f"  Scenarios: {detail.scenario_count}")
    console.print(f"  Tests:     {detail.test_count}")


@app.command()
def status(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature to update"),
    new_status: str = typer.Argument(
        ..., help="planned, active, in-progress, deferred or implemented"
    ),
) -> None:
    """
    Change a feature's lifecycle status.

    Marking a feature implemented requires a passing impl review.

    Examples:
        ptsd feature status auth active
        ptsd feature status auth implemented
    """
    project = open_project()
    parsed = parse_choice(FeatureStatus, new_status)
    with handle_errors(is_agent(ctx)):
        feature = update_feature_status(project, feature_id, parsed)

    if is_agent(ctx):
        console.print(f"ok {feature.id} {feature.status.value}", markup=False, highlight=False)
    else:
        console.print(f"[green]Updated:[/green] {feature.id} -> {feature.status.value}")


@app.command()
def remove(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature to remove"),
) -> None:
    """
    Remove a feature from the registry.

    Pipeline state and artifacts on disk are left in place.
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        project.registry.remove(feature_id)

    if is_agent(ctx):
        console.print(f"ok {feature_id}", markup=False, highlight=False)
    else:
        console.print(f"[green]Removed:[/green] {feature_id}")
