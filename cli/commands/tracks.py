"""
Tracks command - per-track event statistics.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from cli.display.tables import display_track_table, track_statistics
from midiscope.formats.smf.reader import SMFReader
from midiscope.models.chunk import TrackChunk
from midiscope.models.key_signature import pitch_name

console = Console()
app = typer.Typer()


def display_track_detail(track: TrackChunk, number: int) -> None:
    """Display statistics for a single track."""
    stats = track_statistics(track)

    lowest = stats["lowest_note"]
    highest = stats["highest_note"]
    if lowest is None:
        note_range = "-"
    else:
        note_range = f"{lowest} ({pitch_name(lowest)}) - {highest} ({pitch_name(highest)})"

    content = f"""[bold]Name:[/bold] {stats["name"] or "N/A"}
[bold]Events:[/bold] {stats["events"]}
[bold]Channels:[/bold] {", ".join(str(c) for c in stats["channels"]) or "-"}
[bold]Note Range:[/bold] {note_range}
[bold]End Time:[/bold] {stats["end_time"]} ticks
[bold]Length:[/bold] {track.length} bytes"""

    console.print(
        Panel(
            content,
            title=f"[bold cyan]Track {number}[/bold cyan]",
            border_style="cyan",
            expand=False,
        )
    )

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold magenta")
    table.add_column("Event Type", style="cyan")
    table.add_column("Count", justify="right")
    for label, count in stats["types"].most_common():
        table.add_row(label, str(count))
    console.print(table)

    if track.issues:
        for issue in track.issues:
            console.print(f"[yellow]Warning:[/yellow] {issue}")


@app.command()
def tracks(
    file: Path = typer.Argument(..., help="MIDI file to analyze"),
    track: int = typer.Option(0, "--track", "-t", help="Show specific track (1-N), 0=all"),
    summary: bool = typer.Option(False, "--summary", "-s", help="Show summary table only"),
) -> None:
    """
    Display track statistics.

    Shows for each track:

    - Name, channels used and note range
    - Number of events of every type
    - Length in ticks and bytes

    Examples:

        midiscope tracks song.mid

        midiscope tracks song.mid --track 2

        midiscope tracks song.mid --summary
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    midi = SMFReader.read(file)
    all_tracks = midi.tracks

    if not all_tracks:
        console.print("[yellow]No tracks found[/yellow]")
        return

    if summary:
        display_track_table(midi)
        return

    if track:
        if not 1 <= track <= len(all_tracks):
            console.print(f"[red]Error: Track must be 1-{len(all_tracks)}, got {track}[/red]")
            raise typer.Exit(1)
        display_track_detail(all_tracks[track - 1], track)
        return

    for number, item in enumerate(all_tracks, 1):
        display_track_detail(item, number)


if __name__ == "__main__":
    app()
