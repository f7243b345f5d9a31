#!/usr/bin/env python3
"""
Example: Basic file analysis

Shows how to read a MIDI file and walk its header, tracks and events.
"""

import sys

sys.path.insert(0, "..")

from midiscope import SMFReader
from midiscope.models.events import EventKind, MetaType


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else "song.mid"
    midi = SMFReader.read(path)
    header = midi.header

    # Header
    print(f"Format: {midi.format}")
    print(f"Tracks: {len(midi.tracks)} (declared: {header.number_of_tracks if header else '-'})")
    if header is not None and header.is_smpte:
        print(f"Division: {header.frames_per_second} fps, {header.ticks_per_frame} ticks/frame")
    elif header is not None:
        print(f"Division: {header.ticks_per_quarter_note} ticks/quarter-note")
    print(f"Valid: {midi.valid}")
    print()

    # Tracks
    for number, track in enumerate(midi.tracks, 1):
        notes = [
            event for event in track.channel_events() if hasattr(event, "velocity")
        ]
        print(f"Track {number}: {track.name or '(unnamed)'}")
        print(f"  Events: {len(track.events)}, notes: {len(notes)}, ends at {track.end_time}")

        for event in track.events:
            if event.kind is EventKind.META and event.meta_type == MetaType.SET_TEMPO:
                print(f"  Tempo at {event.cumulative_time}: {event.beats_per_minute:.1f} BPM")
    print()

    # Key signatures (format 0 and 1 share one map)
    if midi.format != 2:
        for time, key in midi.key_signatures.items():
            print(f"Key at {time}: {key.display_name}")

    if midi.error_text:
        print()
        print("Problems:")
        print(midi.error_text)


if __name__ == "__main__":
    main()
