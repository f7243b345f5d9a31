"""
Rich table displays for MIDI file information.
"""

from collections import Counter
from typing import Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from midiscope.models.chunk import TrackChunk
from midiscope.models.events import EventKind, MessageType
from midiscope.models.midi_file import MidiFile

console = Console()


def division_to_string(midi: MidiFile) -> str:
    """Describe the header's timing division."""
    header = midi.header
    if header is None:
        return "N/A"
    if header.is_smpte:
        return f"{header.frames_per_second} fps, {header.ticks_per_frame} ticks per frame"
    return f"{header.ticks_per_quarter_note} ticks per quarter-note"


def event_label(event) -> str:
    """Short label for an event type, used for statistics."""
    if event.kind is EventKind.CHANNEL:
        return event.DESCRIPTION
    if event.kind is EventKind.META:
        return event.NAME if event.META_TYPE is not None else f"Meta 0x{event.meta_type:02X}"
    return "SysEx escape" if event.escape else "SysEx message"


def track_statistics(track: TrackChunk) -> Dict[str, object]:
    """Collect counts and ranges for one track."""
    channels = sorted({channel for _, channel in track.channels.items()})
    notes: List[int] = [
        event.note
        for event in track.channel_events()
        if event.MESSAGE_TYPE in (MessageType.NOTE_ON, MessageType.NOTE_OFF)
    ]
    return {
        "name": track.name or "",
        "events": len(track.events),
        "channels": channels,
        "lowest_note": min(notes) if notes else None,
        "highest_note": max(notes) if notes else None,
        "end_time": track.end_time,
        "end_of_track": track.has_end_of_track,
        "types": Counter(event_label(event) for event in track.events),
    }


def display_file_info(midi: MidiFile, filepath: str, size: int) -> None:
    """Display header and track overview of a MIDI file."""
    header = midi.header
    if midi.failure is not None:
        status = "[red]Failed[/red]"
    elif midi.all_issues:
        status = "[yellow]Readable with issues[/yellow]"
    else:
        status = "[green]Valid[/green]"

    declared = header.number_of_tracks if header else "N/A"
    header_content = f"""[bold]File:[/bold] {filepath}
[bold]Format:[/bold] {midi.format if header else "N/A"}
[bold]Tracks:[/bold] {len(midi.tracks)} (declared: {declared})
[bold]Division:[/bold] {division_to_string(midi)}
[bold]Chunks:[/bold] {len(midi.chunks)}
[bold]File Size:[/bold] {size} bytes
[bold]Status:[/bold] {status}"""

    console.print(
        Panel(
            header_content,
            title="[bold blue]MIDI File Info[/bold blue]",
            border_style="blue",
            expand=False,
        )
    )

    if midi.tracks:
        display_track_table(midi)

    if midi.key_signatures:
        keys = ", ".join(
            f"{key.display_name} @ {time}" for time, key in midi.key_signatures.items()
        )
        console.print(f"[bold]Key signatures:[/bold] {keys}")

    if midi.error_text:
        console.print(
            Panel(midi.error_text, title="[bold yellow]Issues[/bold yellow]", border_style="yellow")
        )


def display_track_table(midi: MidiFile) -> None:
    """Display one summary row per track."""
    table = Table(title="Tracks", box=box.ROUNDED, show_header=True, header_style="bold green")
    table.add_column("#", style="dim", width=3)
    table.add_column("Name", style="cyan")
    table.add_column("Events", justify="right")
    table.add_column("Channels")
    table.add_column("End Time", justify="right")
    table.add_column("EOT", width=4)

    for number, track in enumerate(midi.tracks, 1):
        stats = track_statistics(track)
        channels = ", ".join(str(c) for c in stats["channels"]) or "-"
        eot = "[green]Yes[/green]" if stats["end_of_track"] else "[red]No[/red]"
        table.add_row(
            str(number),
            stats["name"],
            str(stats["events"]),
            channels,
            str(stats["end_time"]),
            eot,
        )

    console.print(table)
