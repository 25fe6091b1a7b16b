"""
ptsd CLI - Pipeline state commands.
"""

import typer
from rich.console import Console

from ptsd.cli.common import is_agent, open_project
from ptsd.cli.errors import handle_errors
from ptsd.core.pipeline.progress import advance_stage, sync_state

console = Console()
app = typer.Typer(
    name="state",
    help="Capture fingerprints and advance feature stages",
    no_args_is_help=True,
)


@app.command()
def sync(ctx: typer.Context) -> None:
    """
    Record the current content of every artifact as the new baseline.
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        count = sync_state(project)

    if is_agent(ctx):
        console.print(f"ok synced={count}", markup=False, highlight=False)
    else:
        console.print(f"[green]Synced[/green] {count} feature(s)")


@app.command()
def advance(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature to advance"),
) -> None:
    """
    Move a feature to its next stage (requires a passing review).

    Examples:
        ptsd review record auth seed 8
        ptsd state advance auth
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        stage = advance_stage(project, feature_id)

    if is_agent(ctx):
        console.print(f"ok {feature_id} stage={stage.value}", markup=False, highlight=False)
    else:
        console.print(f"[green]Advanced:[/green] {feature_id} -> {stage.value}")
