"""Track events: channel, meta and SysEx."""

from midiscope.models.events.base import EventKind, MidiEvent, TrackContext
from midiscope.models.events.channel import (
    ChannelEvent,
    ChannelMode,
    ChannelPressure,
    ControlChange,
    MessageType,
    NoteOff,
    NoteOn,
    PitchBend,
    PolyKeyPressure,
    ProgramChange,
    channel_event_class,
    decode_channel_event,
)
from midiscope.models.events.meta import (
    CopyrightNotice,
    CuePoint,
    EndOfTrack,
    InstrumentName,
    KeySignatureEvent,
    Lyric,
    Marker,
    MetaEvent,
    MetaType,
    MidiChannelPrefix,
    SequenceNumber,
    SequenceTrackName,
    SequencerSpecific,
    SetTempo,
    SmpteOffset,
    TextEvent,
    TextMetaEvent,
    TimeSignature,
    decode_meta_event,
)
from midiscope.models.events.sysex import SysExEvent

__all__ = [
    "EventKind",
    "MidiEvent",
    "TrackContext",
    "ChannelEvent",
    "ChannelMode",
    "ChannelPressure",
    "ControlChange",
    "MessageType",
    "NoteOff",
    "NoteOn",
    "PitchBend",
    "PolyKeyPressure",
    "ProgramChange",
    "channel_event_class",
    "decode_channel_event",
    "CopyrightNotice",
    "CuePoint",
    "EndOfTrack",
    "InstrumentName",
    "KeySignatureEvent",
    "Lyric",
    "Marker",
    "MetaEvent",
    "MetaType",
    "MidiChannelPrefix",
    "SequenceNumber",
    "SequenceTrackName",
    "SequencerSpecific",
    "SetTempo",
    "SmpteOffset",
    "TextEvent",
    "TextMetaEvent",
    "TimeSignature",
    "decode_meta_event",
    "SysExEvent",
]
