"""
midiscope - Inspect and annotate Standard MIDI Files.

A modern CLI tool for looking inside .mid files byte by byte.
"""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from cli.commands.info import info
from cli.commands.diff import diff
from cli.commands.validate import validate
from cli.commands.dump import dump
from cli.commands.tracks import tracks
from midiscope import __version__

console = Console()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Main app
app = typer.Typer(
    name="midiscope",
    help="Inspect and annotate Standard MIDI Files.",
    add_completion=False,
    rich_markup_mode="rich",
)

# Add commands directly
app.command(name="info")(info)
app.command(name="dump")(dump)
app.command(name="tracks")(tracks)
app.command(name="validate")(validate)
app.command(name="diff")(diff)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]midiscope[/bold] version {__version__}")
    console.print("[dim]Standard MIDI File codec and inspector[/dim]")


def configure_logging(level: str) -> None:
    """Send library log records through rich."""
    level = level.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"Log level must be one of {', '.join(LOG_LEVELS)}, got {level}")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show decoding details"),
    log_level: str = typer.Option(
        "ERROR", "--log-level", envvar="MIDISCOPE_LOG_LEVEL", help="Library log level"
    ),
) -> None:
    """
    midiscope - Look inside Standard MIDI Files.

    Decodes header and track chunks, every channel, meta and SysEx event,
    and shows each one next to its bytes.

    [bold]Quick Start:[/bold]

        midiscope info song.mid          # Header and track overview
        midiscope dump song.mid          # Annotated hex dump

    [bold]Analysis Commands:[/bold]

        midiscope tracks song.mid        # Per-track event statistics
        midiscope validate song.mid      # Check file structure

    [bold]Utility Commands:[/bold]

        midiscope diff A.mid B.mid       # Compare two files event by event

    Use --help with any command for more details.
    """
    if version_flag:
        version()
        raise typer.Exit()

    configure_logging("DEBUG" if verbose else log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
