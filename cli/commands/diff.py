"""
Diff command - compare two MIDI files event by event.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from midiscope.formats.smf.reader import SMFReader
from midiscope.models.chunk import TrackChunk
from midiscope.models.midi_file import MidiFile

console = Console()
app = typer.Typer()


@dataclass
class DiffEntry:
    """A single difference between two files."""

    location: str
    description: str
    value_a: str
    value_b: str


@dataclass
class DiffResult:
    """Result of comparing two MIDI files."""

    file_a: str
    file_b: str
    identical: bool
    differences: List[DiffEntry]
    summary: str


class MidiDiffer:
    """Compare two decoded MIDI files."""

    def __init__(self, midi_a: MidiFile, midi_b: MidiFile, name_a: str, name_b: str):
        self.midi_a = midi_a
        self.midi_b = midi_b
        self.name_a = name_a
        self.name_b = name_b
        self.max_per_track = 20

    def diff(self) -> DiffResult:
        """Compare the two files and return differences."""
        differences: List[DiffEntry] = []

        if self.midi_a.to_bytes() == self.midi_b.to_bytes():
            return DiffResult(self.name_a, self.name_b, True, [], "Files are identical")

        header_a = self.midi_a.header
        header_b = self.midi_b.header
        comment_a = header_a.header_data.comment if header_a else "No header"
        comment_b = header_b.header_data.comment if header_b else "No header"
        if comment_a != comment_b:
            differences.append(DiffEntry("Header", "Header differs", comment_a, comment_b))

        tracks_a = self.midi_a.tracks
        tracks_b = self.midi_b.tracks
        if len(tracks_a) != len(tracks_b):
            differences.append(
                DiffEntry("File", "Track count differs", str(len(tracks_a)), str(len(tracks_b)))
            )

        for number, (track_a, track_b) in enumerate(zip(tracks_a, tracks_b), 1):
            differences.extend(self._diff_tracks(track_a, track_b, number))

        summary = f"{len(differences)} difference(s) found"
        return DiffResult(self.name_a, self.name_b, False, differences, summary)

    def _diff_tracks(
        self, track_a: TrackChunk, track_b: TrackChunk, number: int
    ) -> List[DiffEntry]:
        entries: List[DiffEntry] = []
        location = f"Track {number}"

        if len(track_a.events) != len(track_b.events):
            entries.append(
                DiffEntry(
                    location,
                    "Event count differs",
                    str(len(track_a.events)),
                    str(len(track_b.events)),
                )
            )

        for index, (event_a, event_b) in enumerate(zip(track_a.events, track_b.events)):
            if event_a.data == event_b.data:
                continue
            entries.append(
                DiffEntry(
                    f"{location} #{index}",
                    f"Event at tick {event_a.cumulative_time}",
                    event_a.get_comment(track_a),
                    event_b.get_comment(track_b),
                )
            )
            if len(entries) >= self.max_per_track:
                break
        return entries


def display_diff(result: DiffResult) -> None:
    """Display diff result with Rich formatting."""
    if result.identical:
        console.print(
            Panel(
                f"[green]Files are identical[/green]\n\n"
                f"File A: {result.file_a}\nFile B: {result.file_b}",
                title="[bold green]No Differences[/bold green]",
                border_style="green",
            )
        )
        return

    console.print(
        Panel(
            f"[bold]File A:[/bold] {result.file_a}\n"
            f"[bold]File B:[/bold] {result.file_b}\n\n"
            f"[yellow]{result.summary}[/yellow]",
            title="[bold red]Differences Found[/bold red]",
            border_style="red",
        )
    )

    table = Table(title="Differences", box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Location", style="cyan")
    table.add_column("Description")
    table.add_column("File A")
    table.add_column("File B")

    for entry in result.differences:
        table.add_row(entry.location, entry.description, entry.value_a, entry.value_b)

    console.print(table)


@app.command()
def diff(
    file_a: Path = typer.Argument(..., help="First MIDI file to compare"),
    file_b: Path = typer.Argument(..., help="Second MIDI file to compare"),
) -> None:
    """
    Compare two MIDI files and show differences.

    Compares header settings, track counts and every event, showing the
    annotated form of events that differ.

    Examples:

        midiscope diff original.mid edited.mid
    """
    for f in [file_a, file_b]:
        if not f.exists():
            console.print(f"[red]Error: File not found: {f}[/red]")
            raise typer.Exit(1)

    midi_a = SMFReader.read(file_a)
    midi_b = SMFReader.read(file_b)

    for path, midi in [(file_a, midi_a), (file_b, midi_b)]:
        if midi.failure is not None:
            console.print(f"[red]Decoding stopped in {path.name}: {midi.failure}[/red]")
            raise typer.Exit(1)

    differ = MidiDiffer(midi_a, midi_b, str(file_a), str(file_b))
    result = differ.diff()

    display_diff(result)

    if not result.identical:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
