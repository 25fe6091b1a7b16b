"""
Helpers shared by ptsd CLI commands.
"""

from enum import Enum
from typing import TypeVar

import typer

from ptsd.cli.errors import ExitCode, print_invalid_option_error, print_not_project_root_error
from ptsd.core.project import Project

E = TypeVar("E", bound=Enum)


def open_project() -> Project:
    """Open the project containing the working directory, or exit."""
    try:
        return Project.discover()
    except FileNotFoundError:
        print_not_project_root_error()
        raise typer.Exit(ExitCode.USER_ERROR)


def is_agent(ctx: typer.Context) -> bool:
    """Whether the global --agent flag was passed."""
    obj = ctx.find_root().obj
    return bool(obj and obj.get("agent"))


def parse_choice(enum_cls: type[E], value: str) -> E:
    """Parse an option value into an enum member, or exit with a usage error."""
    try:
        return enum_cls(value)
    except ValueError:
        print_invalid_option_error(value, [m.value for m in enum_cls])
        raise typer.Exit(ExitCode.USER_ERROR)
