"""In-memory model of Standard MIDI Files."""

from midiscope.models.chunk import (
    Chunk,
    ChunkInfo,
    HeaderChunk,
    HeaderData,
    TrackChunk,
    UnknownChunk,
)
from midiscope.models.item import MidiItem, RawItem
from midiscope.models.key_signature import KeySignature, pitch_name
from midiscope.models.midi_file import MidiFile
from midiscope.models.text_streams import TextStreams
from midiscope.models.time_map import TimeMap

__all__ = [
    "Chunk",
    "ChunkInfo",
    "HeaderChunk",
    "HeaderData",
    "TrackChunk",
    "UnknownChunk",
    "MidiItem",
    "RawItem",
    "KeySignature",
    "pitch_name",
    "MidiFile",
    "TextStreams",
    "TimeMap",
]
