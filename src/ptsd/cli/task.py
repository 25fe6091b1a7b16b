"""
ptsd CLI - Task list commands.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from ptsd.cli.common import is_agent, open_project, parse_choice
from ptsd.cli.errors import handle_errors
from ptsd.core.tasks.models import Task, TaskPriority, TaskStatus

console = Console()
app = typer.Typer(
    name="task",
    help="Manage per-feature tasks",
    no_args_is_help=True,
)

STATUS_COLORS = {
    TaskStatus.TODO: "white",
    TaskStatus.WIP: "yellow",
    TaskStatus.DONE: "green",
}


def _print_tasks(tasks: list[Task], agent: bool) -> None:
    if agent:
        for t in tasks:
            console.print(
                f"{t.id} [{t.status.value}] {t.priority.value} {t.feature} {t.title}",
                markup=False,
                highlight=False,
            )
        return

    if not tasks:
        console.print("[dim]No tasks found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("P", width=2, justify="center")
    table.add_column("Status", width=6)
    table.add_column("Feature")
    table.add_column("Title", overflow="fold")
    for t in tasks:
        color = STATUS_COLORS.get(t.status, "white")
        table.add_row(
            t.id,
            t.priority.value,
            f"[{color}]{t.status.value}[/{color}]",
            t.feature,
            t.title,
        )
    console.print(table)
    console.print(f"\n[dim]Total: {len(tasks)} tasks[/dim]")


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Task title"),
    feature: str = typer.Option(..., "--feature", "-f", help="Feature the task belongs to"),
    priority: str = typer.Option("B", "--priority", "-p", help="Priority: A (urgent), B, C"),
) -> None:
    """
    Add a task for a registered feature.

    Examples:
        ptsd task add "Cover lockout scenario" --feature auth --priority A
    """
    project = open_project()
    parsed = parse_choice(TaskPriority, priority.upper())
    with handle_errors(is_agent(ctx)):
        task = project.tasks.add(feature, title, parsed)

    if is_agent(ctx):
        console.print(f"ok {task.id}", markup=False, highlight=False)
    else:
        console.print(f"[green]Created:[/green] {task.id}")


@app.command(name="list")
def list_tasks(
    ctx: typer.Context,
    feature: str | None = typer.Option(None, "--feature", "-f", help="Filter by feature"),
    status: str | None = typer.Option(
        None, "--status", "-s", help="Filter by status: TODO, WIP, DONE"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List tasks with optional filters.

    Examples:
        ptsd task list
        ptsd task list --feature auth --status TODO
    """
    project = open_project()
    status_filter = parse_choice(TaskStatus, status.upper()) if status else None
    with handle_errors(is_agent(ctx)):
        tasks = project.tasks.list_tasks(feature_id=feature, status=status_filter)

    if json_output:
        console.print(json.dumps([t.model_dump(mode="json") for t in tasks], indent=2))
        return
    _print_tasks(tasks, is_agent(ctx))


@app.command()
def update(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID to update"),
    status: str = typer.Option(..., "--status", "-s", help="New status: TODO, WIP, DONE"),
) -> None:
    """
    Change a task's status.

    Examples:
        ptsd task update T-3 --status WIP
    """
    project = open_project()
    parsed = parse_choice(TaskStatus, status.upper())
    with handle_errors(is_agent(ctx)):
        task = project.tasks.update(task_id, parsed)

    if is_agent(ctx):
        console.print(f"ok {task.id} {task.status.value}", markup=False, highlight=False)
    else:
        console.print(f"[green]Updated:[/green] {task.id} -> {task.status.value}")


@app.command(name="next")
def next_tasks(
    ctx: typer.Context,
    limit: int = typer.Option(0, "--limit", "-n", help="Maximum tasks to show (0 = all)"),
) -> None:
    """
    Show TODO tasks in priority order.

    Examples:
        ptsd task next --limit 1
    """
    project = open_project()
    with handle_errors(is_agent(ctx)):
        tasks = project.tasks.next_tasks(limit=limit)
    _print_tasks(tasks, is_agent(ctx))
