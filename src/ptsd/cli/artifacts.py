"""
ptsd CLI - Artifact scaffolding and coverage commands (seed, bdd, test).
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from ptsd.cli.common import is_agent, open_project
from ptsd.cli.errors import handle_errors
from ptsd.core.pipeline.coverage import check_coverage
from ptsd.core.pipeline.models import CoverageStatus
from ptsd.core.pipeline.scaffold import add_bdd, init_seed, map_test

console = Console()

COVERAGE_COLORS = {
    CoverageStatus.COVERED: "green",
    CoverageStatus.PARTIAL: "yellow",
    CoverageStatus.NO_TESTS: "red",
}

seed_app = typer.Typer(name="seed", help="Manage seed manifests", no_args_is_help=True)
bdd_app = typer.Typer(name="bdd", help="Manage scenario files", no_args_is_help=True)
test_app = typer.Typer(
    name="test", help="Map scenarios to tests and report coverage", no_args_is_help=True
)


def _report(ctx: typer.Context, message: str, path: str) -> None:
    if is_agent(ctx):
        console.print(f"ok {path}", markup=False, highlight=False)
    else:
        console.print(f"[green]{message}:[/green] {path}", highlight=False)


@seed_app.command(name="init")
def seed_init(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Registered feature"),
) -> None:
    """
    Create .ptsd/seeds/<feature>/seed.yaml.
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        path = init_seed(project, feature_id)
    _report(ctx, "Created", project.layout.relative(path))


@bdd_app.command(name="add")
def bdd_add(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature with a seed"),
) -> None:
    """
    Create .ptsd/bdd/<feature>.feature (requires a seed).
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        path = add_bdd(project, feature_id)
    _report(ctx, "Created", project.layout.relative(path))


@test_app.command(name="map")
def test_map(
    ctx: typer.Context,
    bdd_file: str = typer.Argument(..., help="Scenario file (.ptsd/bdd/<id>.feature)"),
    test_file: str = typer.Argument(..., help="Test file covering the scenarios"),
) -> None:
    """
    Map a scenario file to a test file.

    Examples:
        ptsd test map .ptsd/bdd/auth.feature internal/auth/auth_test.go
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        feature_id = map_test(project, bdd_file, test_file)
    _report(ctx, f"Mapped for {feature_id}", f"{bdd_file}::{test_file}")


@test_app.command(name="coverage")
def test_coverage(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show how many scenarios of each scenario file have mapped tests.

    Examples:
        ptsd test coverage
        ptsd test coverage --json
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        entries = check_coverage(project)

    if json_output:
        console.print(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if is_agent(ctx):
        for e in entries:
            console.print(
                f"{e.feature} {e.status.value} scenarios={e.scenarios} tests={e.tests}",
                markup=False,
                highlight=False,
            )
        return

    if not entries:
        console.print("[dim]No tagged scenario files.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Feature")
    table.add_column("Scenario file", overflow="fold")
    table.add_column("Scenarios", justify="right")
    table.add_column("Tests", justify="right")
    table.add_column("Status", width=10)
    for e in entries:
        color = COVERAGE_COLORS[e.status]
        table.add_row(
            e.feature,
            e.bdd_file,
            str(e.scenarios),
            str(e.tests),
            f"[{color}]{e.status.value}[/{color}]",
        )

    console.print(table)
    covered = sum(1 for e in entries if e.status is CoverageStatus.COVERED)
    console.print(f"\n[dim]Covered: {covered}/{len(entries)} scenario files[/dim]")
