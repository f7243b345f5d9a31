#!/usr/bin/env python3
"""
Example: Edit a MIDI file programmatically

Shows how to change event fields, insert events and write the result.
Chunk lengths follow the edits; everything else stays byte for byte.
"""

import sys

sys.path.insert(0, "..")

from midiscope import SMFReader, SMFWriter
from midiscope.models.events import NoteOn, ProgramChange, SetTempo
from midiscope.models.midi_file import MidiFile


def change_tempo(input_file: str, output_file: str, bpm: float):
    """
    Replace every tempo change in the first track with one tempo.

    Args:
        input_file: Source .mid file
        output_file: Destination .mid file
        bpm: New tempo in beats per minute
    """
    midi = SMFReader.read(input_file, strict=True)
    conductor = midi.tracks[0]

    tempos = [event for event in conductor.events if isinstance(event, SetTempo)]
    for event in tempos:
        event.tempo = SetTempo.from_bpm(0, bpm).tempo
    if not tempos:
        conductor.insert_event(0, SetTempo.from_bpm(0, bpm))

    SMFWriter.write(midi, output_file)
    print(f"Tempo set to {bpm} BPM in {len(tempos) or 1} event(s)")
    print(f"Saved to: {output_file}")


def transpose(input_file: str, output_file: str, semitones: int):
    """Transpose every note outside the percussion channel."""
    midi = SMFReader.read(input_file, strict=True)

    for track in midi.tracks:
        for event in track.channel_events():
            if isinstance(event, NoteOn) and event.channel_in(track) != 9:
                event.note = max(0, min(127, event.note + semitones))
        track.refresh()

    SMFWriter.write(midi, output_file)
    print(f"Transposed by {semitones} semitones, saved to {output_file}")


def build_file(output_file: str):
    """Create a short file from scratch."""
    midi = MidiFile.create(format=0, ticks_per_quarter_note=480)
    track = midi.tracks[0]
    track.insert_event(0, SetTempo.from_bpm(0, 100))
    track.insert_event(1, ProgramChange(0, 0, 0))

    position = 2
    for note in (60, 64, 67):
        track.insert_event(position, NoteOn(0, 0, note, 96))
        track.insert_event(position + 1, NoteOn(480, None, note, 0))
        position += 2

    midi.refresh()
    SMFWriter.write(midi, output_file)
    print(midi.comments)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        build_file("arpeggio.mid")
    else:
        change_tempo(sys.argv[1], "tempo.mid", 90)
        transpose(sys.argv[1], "transposed.mid", 2)
