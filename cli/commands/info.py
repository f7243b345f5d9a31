"""
Info command - display MIDI file overview.
"""

from pathlib import Path

import typer
from rich.console import Console

from cli.display.tables import display_file_info
from midiscope.formats.smf.reader import SMFReader

console = Console()
app = typer.Typer()


@app.command()
def info(
    file: Path = typer.Argument(..., help="MIDI file to analyze (.mid)"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """
    Display MIDI file information.

    Shows the header (format, track count, timing division), one row per
    track (name, events, channels, length) and any problems found while
    reading.

    Examples:

        midiscope info song.mid           # Overview
        midiscope info song.mid --json    # JSON output
    """
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(data=SMFReader.get_file_info(file))
        return

    midi = SMFReader.read(file)
    display_file_info(midi, str(file), file.stat().st_size)


if __name__ == "__main__":
    app()
