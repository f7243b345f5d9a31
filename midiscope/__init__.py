"""
midiscope - Standard MIDI File codec and inspector.

This library provides tools to:
- Decode .mid files into chunks, tracks and events
- Edit events in place and write byte-exact files back
- Produce an annotated hex dump with a comment for every event

Example usage:
    from midiscope import SMFReader, SMFWriter
    from midiscope.models.events import SetTempo

    midi = SMFReader.read("song.mid")
    print(midi.comments)

    track = midi.tracks[0]
    track.insert_event(0, SetTempo.from_bpm(0, 90))
    SMFWriter.write(midi, "slower.mid")
"""

__version__ = "0.1.0"
__author__ = "midiscope Contributors"

from midiscope.formats.smf.reader import SMFReader
from midiscope.formats.smf.writer import SMFWriter
from midiscope.models.chunk import HeaderChunk, TrackChunk, UnknownChunk
from midiscope.models.key_signature import KeySignature
from midiscope.models.midi_file import MidiFile
from midiscope.utils.validation import MidiError, ParseIssue

__all__ = [
    "SMFReader",
    "SMFWriter",
    "HeaderChunk",
    "TrackChunk",
    "UnknownChunk",
    "KeySignature",
    "MidiFile",
    "MidiError",
    "ParseIssue",
]
