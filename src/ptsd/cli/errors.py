"""
Standardized error handling and exit codes for the ptsd CLI.

Core errors carry a category; each category maps to one exit code so
hooks and scripts can tell user mistakes from broken state.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum

import typer
from rich.console import Console

from ptsd.core.errors import PtsdError

console = Console(stderr=True, soft_wrap=True)


class ExitCode(IntEnum):
    """Standard exit codes for ptsd CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Validation failed, or a pipeline rule forbids the operation."""

    USER_ERROR = 2
    """Invalid input, or a write denied by gate-check."""

    CONFIG_ERROR = 3
    """Configuration cannot be loaded."""

    IO_ERROR = 4
    """A state file is present but unreadable or corrupt."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


_CATEGORY_EXIT_CODES: dict[str, ExitCode] = {
    "user": ExitCode.USER_ERROR,
    "validation": ExitCode.GENERAL_ERROR,
    "pipeline": ExitCode.GENERAL_ERROR,
    "config": ExitCode.CONFIG_ERROR,
    "io": ExitCode.IO_ERROR,
}


def exit_code_for(error: PtsdError) -> ExitCode:
    """Map a core error to its exit code."""
    return _CATEGORY_EXIT_CODES.get(error.category, ExitCode.GENERAL_ERROR)


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Feature not found: auth",
        ...     solution="ptsd feature list  # to see registered features",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}", highlight=False)

    if reason:
        console.print(f"[dim]{reason}[/dim]", highlight=False)

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}", highlight=False)


def print_not_project_root_error() -> None:
    """Print error when not in a ptsd project directory."""
    print_error(
        "Not in a ptsd project directory",
        reason="Could not find .ptsd/ or .git/",
        solution="mkdir .ptsd  # or cd to your project root",
    )


def print_invalid_option_error(option: str, valid_options: list[str]) -> None:
    """Print error when an invalid option value is provided."""
    valid_str = ", ".join(valid_options)
    print_error(
        f"Invalid option: {option}",
        reason=f"Valid options are: {valid_str}",
    )


@contextmanager
def handle_errors(agent: bool = False) -> Iterator[None]:
    """
    Turn core errors raised inside the block into a message and exit code.

    In agent mode the message is the terse ``err:<category> <message>``
    form; otherwise the standard error block is printed.
    """
    try:
        yield
    except PtsdError as e:
        if agent:
            console.print(str(e), markup=False, highlight=False)
        else:
            print_error(e.message, reason=f"{e.category} error")
        raise typer.Exit(exit_code_for(e)) from e


__all__ = [
    "ExitCode",
    "exit_code_for",
    "handle_errors",
    "print_error",
    "print_invalid_option_error",
    "print_not_project_root_error",
]
