"""
Dump command - annotated hex dump of a MIDI file.
"""

from pathlib import Path

import typer
from rich.console import Console

from cli.display.hex_view import display_annotated_dump
from midiscope.formats.smf.reader import SMFReader

console = Console()
app = typer.Typer()


@app.command()
def dump(
    file: Path = typer.Argument(..., help="MIDI file to dump"),
    track: int = typer.Option(0, "--track", "-t", help="Show only this track (1-N), 0=all"),
    no_hex: bool = typer.Option(False, "--no-hex", help="Hide the hex column"),
    no_comments: bool = typer.Option(False, "--no-comments", help="Hide the comment column"),
    lines: int = typer.Option(0, "--lines", "-n", help="Maximum lines to show (0=all)"),
) -> None:
    """
    Show an annotated hex dump of a MIDI file.

    Every chunk prefix and every event gets one line: its bytes on the
    left, a description on the right. Events are described as

        delta time | type | channel | data

    Examples:

        midiscope dump song.mid

        midiscope dump song.mid --track 2 --lines 40

        midiscope dump song.mid --no-hex
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    if no_hex and no_comments:
        console.print("[red]Error: Nothing to show with both --no-hex and --no-comments[/red]")
        raise typer.Exit(1)

    midi = SMFReader.read(file)

    if track:
        tracks = midi.tracks
        if not 1 <= track <= len(tracks):
            console.print(f"[red]Error: Track must be 1-{len(tracks)}, got {track}[/red]")
            raise typer.Exit(1)
        content = tracks[track - 1].streams.lines()
    else:
        content = midi.streams.lines()

    display_annotated_dump(
        content, show_hex=not no_hex, show_comments=not no_comments, max_lines=lines
    )

    if midi.failure is not None:
        console.print(f"[red]Decoding stopped: {midi.failure}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
