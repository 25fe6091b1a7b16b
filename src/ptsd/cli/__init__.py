"""
ptsd CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from ptsd import __version__
from ptsd.cli import artifacts, feature, pipeline, review, state, task

# Help panel names for command grouping
PANEL_HOOKS = "Hook Commands"
PANEL_PIPELINE = "Pipeline"
PANEL_REGISTRY = "Features and Tasks"
PANEL_ARTIFACTS = "Scaffold Artifacts"

app = typer.Typer(
    name="ptsd",
    help="Pipeline state machine for PRD -> seed -> BDD -> tests -> impl",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    agent: bool = typer.Option(
        False,
        "--agent",
        help="Terse machine-oriented output for agents and hooks",
    ),
) -> None:
    """
    ptsd - keep features moving through the pipeline in order.

    Every feature goes through five stages: prd, seed, bdd, tests, impl.
    ptsd blocks writes whose prerequisites are missing, tracks progress as
    files are written, gates stages behind review scores and flags
    earlier-stage edits made after a feature moved on.

    Quick Start:
        ptsd feature add auth "User authentication"
        ptsd seed init auth
        ptsd bdd add auth
        ptsd context

    Hooks:
        ptsd gate-check --file <path>    # before a write
        ptsd auto-track --file <path>    # after a write
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    ctx.obj = {"debug": debug, "agent": agent}


# =============================================================================
# Hook Commands
# =============================================================================

app.command(name="gate-check", rich_help_panel=PANEL_HOOKS)(pipeline.gate_check)
app.command(name="auto-track", rich_help_panel=PANEL_HOOKS)(pipeline.auto_track)


# =============================================================================
# Pipeline
# =============================================================================

app.command(name="context", rich_help_panel=PANEL_PIPELINE)(pipeline.context)
app.command(name="status", rich_help_panel=PANEL_PIPELINE)(pipeline.status)
app.command(name="validate", rich_help_panel=PANEL_PIPELINE)(pipeline.validate)
app.add_typer(review.app, name="review", rich_help_panel=PANEL_PIPELINE)
app.add_typer(state.app, name="state", rich_help_panel=PANEL_PIPELINE)


# =============================================================================
# Features and Tasks
# =============================================================================

app.add_typer(feature.app, name="feature", rich_help_panel=PANEL_REGISTRY)
app.add_typer(task.app, name="task", rich_help_panel=PANEL_REGISTRY)


# =============================================================================
# Scaffold Artifacts
# =============================================================================

app.add_typer(artifacts.seed_app, name="seed", rich_help_panel=PANEL_ARTIFACTS)
app.add_typer(artifacts.bdd_app, name="bdd", rich_help_panel=PANEL_ARTIFACTS)
app.add_typer(artifacts.test_app, name="test", rich_help_panel=PANEL_ARTIFACTS)


@app.command()
def version() -> None:
    """Show ptsd version and exit."""
    console.print(f"ptsd version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
