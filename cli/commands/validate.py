"""
Validate command - check MIDI file structure.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from midiscope.formats.smf.reader import SMFReader
from midiscope.models.midi_file import MidiFile

console = Console()
app = typer.Typer()


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: str  # "error", "warning"
    location: str
    kind: str
    message: str


@dataclass
class ValidationResult:
    """Result of validating a MIDI file."""

    filepath: str
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return len(self.errors) + len(self.warnings)


def validate_midi(midi: MidiFile, filepath: str) -> ValidationResult:
    """Turn decoding problems into a validation result."""
    warnings = [
        ValidationIssue("warning", location or "File", issue.kind, issue.message)
        for location, issue in midi.all_issues
    ]
    errors = []
    if midi.failure is not None:
        errors.append(
            ValidationIssue("error", "File", type(midi.failure).__name__, str(midi.failure))
        )
    return ValidationResult(
        filepath=filepath, valid=not errors, errors=errors, warnings=warnings
    )


def display_validation(result: ValidationResult) -> None:
    """Display validation result with Rich formatting."""
    if result.valid:
        status = "[bold green]VALID[/bold green]"
        border = "green"
    else:
        status = "[bold red]INVALID[/bold red]"
        border = "red"

    console.print(
        Panel(
            f"[bold]File:[/bold] {result.filepath}\n"
            f"[bold]Status:[/bold] {status}\n\n"
            f"Errors: [red]{len(result.errors)}[/red]  "
            f"Warnings: [yellow]{len(result.warnings)}[/yellow]",
            title="[bold]Validation Result[/bold]",
            border_style=border,
        )
    )

    if result.total_issues:
        table = Table(title="Issues", box=box.ROUNDED, show_header=True, header_style="bold cyan")
        table.add_column("Severity", width=8)
        table.add_column("Location", style="cyan")
        table.add_column("Kind", style="dim")
        table.add_column("Message")

        for issue in result.errors:
            table.add_row("[red]ERROR[/red]", issue.location, issue.kind, issue.message)

        for issue in result.warnings:
            table.add_row("[yellow]WARN[/yellow]", issue.location, issue.kind, issue.message)

        console.print(table)


@app.command()
def validate(
    file: Path = typer.Argument(..., help="MIDI file to validate"),
    strict: bool = typer.Option(False, "--strict", "-s", help="Treat warnings as errors"),
) -> None:
    """
    Validate a MIDI file's structure.

    Checks for:

    - Header chunk present and a known format
    - Declared track count matching the track chunks found
    - Track lengths matching their events
    - End Of Track at the end of every track
    - Events that cannot be decoded

    Examples:

        midiscope validate song.mid

        midiscope validate song.mid --strict
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    midi = SMFReader.read(file)
    result = validate_midi(midi, str(file))

    # In strict mode, treat warnings as errors
    if strict and result.warnings:
        result.valid = False

    display_validation(result)

    if not result.valid:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
