"""
ptsd CLI - Review commands.
"""

import typer
from rich.console import Console

from ptsd.cli.common import is_agent, open_project
from ptsd.cli.errors import ExitCode, handle_errors
from ptsd.core.review.gate import ReviewGate

console = Console()
app = typer.Typer(
    name="review",
    help="Record review scores and check stage gates",
    no_args_is_help=True,
)


@app.command()
def record(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Reviewed feature"),
    stage: str = typer.Argument(..., help="Reviewed stage: prd, seed, bdd, tests, impl"),
    score: int = typer.Argument(..., help="Review score 0-10"),
) -> None:
    """
    Record a review score for a feature's stage.

    A score below review.min_score marks the review failed; with
    review.auto_redo enabled a redo task is queued.

    Examples:
        ptsd review record auth bdd 8
    """
    project = open_project()
    agent = is_agent(ctx)
    with handle_errors(agent):
        outcome = ReviewGate(project).record_review(feature_id, stage, score)

    verdict = "passed" if outcome.passed else "failed"
    if agent:
        line = f"ok {outcome.feature} {outcome.stage.value} score={outcome.score} {verdict}"
        if outcome.redo_task:
            line += f" task={outcome.redo_task.id}"
        console.print(line, markup=False, highlight=False)
        return

    color = "green" if outcome.passed else "red"
    console.print(
        f"Review {outcome.feature}/{outcome.stage.value}: "
        f"{outcome.score} (min {outcome.min_score}) [{color}]{verdict}[/{color}]"
    )
    if outcome.redo_task:
        console.print(f"[yellow]Queued:[/yellow] {outcome.redo_task.id} {outcome.redo_task.title}")


@app.command()
def gate(
    ctx: typer.Context,
    feature_id: str = typer.Argument(..., help="Feature to check"),
    stage: str = typer.Argument(..., help="Stage to check"),
) -> None:
    """
    Check whether a stage has a passing review (exit 1 if not).

    Examples:
        ptsd review gate auth bdd
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        passed = ReviewGate(project).check_gate(feature_id, stage)

    if is_agent(ctx):
        console.print("pass" if passed else "fail", markup=False, highlight=False)
    elif passed:
        console.print(f"[green]Gate passed:[/green] {feature_id}/{stage}")
    else:
        console.print(f"[red]Gate not passed:[/red] {feature_id}/{stage}")

    if not passed:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
