"""
Meta events.

Layout: ``[delta time][FF][type][length as VLQ][data]``.

Types 0x00-0x07, 0x20, 0x2F, 0x51, 0x54, 0x58, 0x59 and 0x7F have a
dedicated class with typed fields. Any other type (0-127) is kept as a
generic ``MetaEvent`` whose data is shown as text.
"""

import logging
from enum import IntEnum
from typing import Dict, Optional, Type, Union

from midiscope.models.events.base import EventKind, MidiEvent, TYPE_COLUMN_WIDTH, TrackContext
from midiscope.models.key_signature import KeySignature
from midiscope.utils.codec import (
    encode_vlq,
    read_number,
    read_raw_text,
    read_text,
    read_vlq,
    text_to_bytes,
    write_number,
)
from midiscope.utils.validation import (
    InvalidInputError,
    MetaLengthTooShortError,
    MustUseTypedClassError,
    UnexpectedEndOfDataError,
    validate_number,
)

logger = logging.getLogger(__name__)

META_STATUS = 0xFF


class MetaType(IntEnum):
    """Meta event types with a dedicated class."""

    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT_NOTICE = 0x02
    SEQUENCE_TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    MIDI_CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F


def is_typed_meta_type(meta_type: int) -> bool:
    """True when a meta type must be represented by its dedicated class."""
    return meta_type < 8 or meta_type in MetaType._value2member_map_


class MetaEvent(MidiEvent):
    """
    Meta event of a type without a dedicated class.

    Args:
        delta_time: Ticks since the previous event
        meta_type: Type byte (0-127, not one of the typed kinds)
        payload: Event data

    Raises:
        MustUseTypedClassError: If meta_type has a dedicated class
        ValueOutOfRangeError: If meta_type is above 127
    """

    kind = EventKind.META
    META_TYPE: Optional[int] = None
    NAME = "Meta event"
    MIN_LENGTH = 0

    def __init__(self, delta_time: int, meta_type: int, payload: bytes = b""):
        _check_generic_type(meta_type)
        self._build(delta_time, meta_type, payload)

    def _build(self, delta_time: int, meta_type: int, payload: bytes) -> None:
        length = encode_vlq(len(payload))
        MidiEvent.__init__(self, delta_time, bytes([META_STATUS, meta_type]) + length + payload)
        self._length_size = len(length)

    @classmethod
    def decode(cls, data: Union[bytes, bytearray], index: int) -> "MetaEvent":
        """
        Decode a meta event.

        Args:
            data: Source bytes
            index: Offset of the delta time

        Returns:
            Decoded event

        Raises:
            UnexpectedEndOfDataError: If the event runs past the end of data
            MetaLengthTooShortError: If a typed event declares too little data
        """
        _, delta_size = read_vlq(data, index)
        type_index = index + delta_size + 1
        if type_index >= len(data):
            raise UnexpectedEndOfDataError(f"Meta event at offset {index} runs past end of data")

        length, length_size = read_vlq(data, type_index + 1)
        end = type_index + 1 + length_size + length
        if end > len(data):
            raise UnexpectedEndOfDataError(
                f"Meta event at offset {index} declares {length} data bytes, "
                f"only {len(data) - end + length} available"
            )

        event = cls.__new__(cls)
        event._load(data[index:end])
        event._length_size = length_size
        event._check()
        return event

    @classmethod
    def from_payload(cls, delta_time: int, payload: bytes) -> "MetaEvent":
        """
        Create a typed meta event from its raw data.

        Raises:
            MetaLengthTooShortError: If payload is shorter than the type needs
        """
        if cls.META_TYPE is None:
            raise MustUseTypedClassError("Generic meta events need an explicit type")
        event = cls.__new__(cls)
        event._build(delta_time, cls.META_TYPE, bytes(payload))
        event._check()
        return event

    def _check(self) -> None:
        if self.META_TYPE is None:
            _check_generic_type(self.meta_type)
            return
        if self.meta_type != self.META_TYPE:
            raise InvalidInputError(
                f"{self.NAME} must have type 0x{self.META_TYPE:02X}, got 0x{self.meta_type:02X}"
            )
        if self.length < self.MIN_LENGTH:
            raise MetaLengthTooShortError(self.NAME, self.MIN_LENGTH, self.length)

    @property
    def meta_type(self) -> int:
        return self._buffer[self._delta_size + 1]

    @property
    def length(self) -> int:
        """Declared number of data bytes."""
        value, _ = read_vlq(self._buffer, self._delta_size + 2)
        return value

    @property
    def _payload_index(self) -> int:
        return self._delta_size + 2 + self._length_size

    @property
    def payload(self) -> bytes:
        return bytes(self._buffer[self._payload_index :])

    @payload.setter
    def payload(self, value: bytes) -> None:
        if self.META_TYPE is not None:
            raise InvalidInputError(f"{self.NAME} data is set through its fields")
        self._set_payload(bytes(value))

    def _set_payload(self, payload: bytes) -> None:
        """Replace the data, rewriting the length in front of it."""
        if len(payload) < self.MIN_LENGTH:
            raise MetaLengthTooShortError(self.NAME, self.MIN_LENGTH, len(payload))
        start = self._payload_index
        self._splice(start, len(self._buffer) - start, payload)
        length = encode_vlq(len(payload))
        self._splice(self._delta_size + 2, self._length_size, length)
        self._length_size = len(length)

    def _read(self, offset: int, width: int) -> int:
        return read_number(self._buffer, width, self._payload_index + offset)

    def _write(self, offset: int, width: int, value: int) -> None:
        write_number(value, width, self._buffer, self._payload_index + offset)

    @property
    def type_comment(self) -> str:
        label = self.NAME if self.META_TYPE is not None else f"Meta 0x{self.meta_type:02X}"
        return f"{label:<{TYPE_COLUMN_WIDTH}}"

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f'"{read_text(self._buffer, self.length, self._payload_index)}"'


def _check_generic_type(meta_type: int) -> None:
    validate_number(meta_type, 0, 127, "Meta event type")
    if is_typed_meta_type(meta_type):
        raise MustUseTypedClassError(
            f"Meta event type 0x{meta_type:02X} must use its dedicated class"
        )


class SequenceNumber(MetaEvent):
    META_TYPE = MetaType.SEQUENCE_NUMBER
    NAME = "Sequence number"
    MIN_LENGTH = 2

    def __init__(self, delta_time: int = 0, number: int = 0):
        validate_number(number, 0, 0xFFFF, "Sequence number")
        self._build(delta_time, self.META_TYPE, number.to_bytes(2, "big"))

    @property
    def number(self) -> int:
        return self._read(0, 2)

    @number.setter
    def number(self, value: int) -> None:
        validate_number(value, 0, 0xFFFF, "Sequence number")
        self._write(0, 2, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return str(self.number)


class TextMetaEvent(MetaEvent):
    """Base for the meta events that carry free text."""

    def __init__(self, delta_time: int = 0, text: str = ""):
        _check_text(text)
        self._build(delta_time, self.META_TYPE, text_to_bytes(text))

    @property
    def text(self) -> str:
        return read_raw_text(self._buffer, self.length, self._payload_index)

    @text.setter
    def text(self, value: str) -> None:
        _check_text(value)
        self._set_payload(text_to_bytes(value))

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f'"{read_text(self._buffer, self.length, self._payload_index)}"'


def _check_text(text: str) -> None:
    if not isinstance(text, str):
        raise InvalidInputError(f"Text must be a string, got {text!r}")


class TextEvent(TextMetaEvent):
    META_TYPE = MetaType.TEXT
    NAME = "Text event"


class CopyrightNotice(TextMetaEvent):
    META_TYPE = MetaType.COPYRIGHT_NOTICE
    NAME = "Copyright notice"


class SequenceTrackName(TextMetaEvent):
    META_TYPE = MetaType.SEQUENCE_TRACK_NAME
    NAME = "Sequence/track name"


class InstrumentName(TextMetaEvent):
    META_TYPE = MetaType.INSTRUMENT_NAME
    NAME = "Instrument name"


class Lyric(TextMetaEvent):
    META_TYPE = MetaType.LYRIC
    NAME = "Lyric"


class Marker(TextMetaEvent):
    META_TYPE = MetaType.MARKER
    NAME = "Marker"


class CuePoint(TextMetaEvent):
    META_TYPE = MetaType.CUE_POINT
    NAME = "Cue point"


class MidiChannelPrefix(MetaEvent):
    META_TYPE = MetaType.MIDI_CHANNEL_PREFIX
    NAME = "MIDI channel prefix"
    MIN_LENGTH = 1

    def __init__(self, delta_time: int = 0, channel: int = 0):
        validate_number(channel, 0, 15, "Channel")
        self._build(delta_time, self.META_TYPE, bytes([channel]))

    @property
    def channel(self) -> int:
        return self._read(0, 1)

    @channel.setter
    def channel(self, value: int) -> None:
        validate_number(value, 0, 15, "Channel")
        self._write(0, 1, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return str(self.channel)


class EndOfTrack(MetaEvent):
    META_TYPE = MetaType.END_OF_TRACK
    NAME = "End of track"

    def __init__(self, delta_time: int = 0):
        self._build(delta_time, self.META_TYPE, b"")

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return ""


class SetTempo(MetaEvent):
    """Tempo in microseconds per quarter-note (500000 is 120 BPM)."""

    META_TYPE = MetaType.SET_TEMPO
    NAME = "Set tempo"
    MIN_LENGTH = 3
    MAX_TEMPO = 0xFFFFFF

    def __init__(self, delta_time: int = 0, tempo: int = 500000):
        validate_number(tempo, 0, self.MAX_TEMPO, "Tempo")
        self._build(delta_time, self.META_TYPE, tempo.to_bytes(3, "big"))

    @classmethod
    def from_bpm(cls, delta_time: int, bpm: float) -> "SetTempo":
        """Create a tempo event from beats per minute."""
        if bpm <= 0:
            raise InvalidInputError(f"Beats per minute must be positive, got {bpm}")
        return cls(delta_time, round(60000000 / bpm))

    @property
    def tempo(self) -> int:
        return self._read(0, 3)

    @tempo.setter
    def tempo(self, value: int) -> None:
        validate_number(value, 0, self.MAX_TEMPO, "Tempo")
        self._write(0, 3, value)

    @property
    def beats_per_minute(self) -> Optional[float]:
        tempo = self.tempo
        return 60000000 / tempo if tempo else None

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        tempo = self.tempo
        if not tempo:
            return "0 microseconds per quarter-note"
        return (
            f"{tempo} microseconds per quarter-note "
            f"({60000000 // tempo} beats per minute)"
        )


class SmpteOffset(MetaEvent):
    """Start time of the track as hours, minutes, seconds, frames, 1/100 frames."""

    META_TYPE = MetaType.SMPTE_OFFSET
    NAME = "SMPTE offset"
    MIN_LENGTH = 5
    FIELDS = (
        ("hours", "Hours", 23),
        ("minutes", "Minutes", 59),
        ("seconds", "Seconds", 59),
        ("frames", "Frames", 29),
        ("fractional_frames", "Fractional frames", 99),
    )

    def __init__(
        self,
        delta_time: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        frames: int = 0,
        fractional_frames: int = 0,
    ):
        values = (hours, minutes, seconds, frames, fractional_frames)
        for (_, label, maximum), value in zip(self.FIELDS, values):
            validate_number(value, 0, maximum, label)
        self._build(delta_time, self.META_TYPE, bytes(values))

    def _set_field(self, position: int, value: int) -> None:
        _, label, maximum = self.FIELDS[position]
        validate_number(value, 0, maximum, label)
        self._write(position, 1, value)

    @property
    def hours(self) -> int:
        return self._read(0, 1)

    @hours.setter
    def hours(self, value: int) -> None:
        self._set_field(0, value)

    @property
    def minutes(self) -> int:
        return self._read(1, 1)

    @minutes.setter
    def minutes(self, value: int) -> None:
        self._set_field(1, value)

    @property
    def seconds(self) -> int:
        return self._read(2, 1)

    @seconds.setter
    def seconds(self, value: int) -> None:
        self._set_field(2, value)

    @property
    def frames(self) -> int:
        return self._read(3, 1)

    @frames.setter
    def frames(self, value: int) -> None:
        self._set_field(3, value)

    @property
    def fractional_frames(self) -> int:
        return self._read(4, 1)

    @fractional_frames.setter
    def fractional_frames(self, value: int) -> None:
        self._set_field(4, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return (
            f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}:"
            f"{self.frames:02d}.{self.fractional_frames:02d}"
        )


class TimeSignature(MetaEvent):
    """
    Time signature.

    ``denominator`` is stored as a power of two: 2 means a quarter-note beat.
    """

    META_TYPE = MetaType.TIME_SIGNATURE
    NAME = "Time signature"
    MIN_LENGTH = 4
    LABELS = ("Numerator", "Denominator", "Clocks per click", "32nd-notes per quarter-note")

    def __init__(
        self,
        delta_time: int = 0,
        numerator: int = 4,
        denominator: int = 2,
        clocks_per_click: int = 24,
        notes_per_quarter: int = 8,
    ):
        values = (numerator, denominator, clocks_per_click, notes_per_quarter)
        for label, value in zip(self.LABELS, values):
            validate_number(value, 0, 255, label)
        self._build(delta_time, self.META_TYPE, bytes(values))

    def _set_field(self, position: int, value: int) -> None:
        validate_number(value, 0, 255, self.LABELS[position])
        self._write(position, 1, value)

    @property
    def numerator(self) -> int:
        return self._read(0, 1)

    @numerator.setter
    def numerator(self, value: int) -> None:
        self._set_field(0, value)

    @property
    def denominator(self) -> int:
        return self._read(1, 1)

    @denominator.setter
    def denominator(self, value: int) -> None:
        self._set_field(1, value)

    @property
    def clocks_per_click(self) -> int:
        return self._read(2, 1)

    @clocks_per_click.setter
    def clocks_per_click(self, value: int) -> None:
        self._set_field(2, value)

    @property
    def notes_per_quarter(self) -> int:
        return self._read(3, 1)

    @notes_per_quarter.setter
    def notes_per_quarter(self, value: int) -> None:
        self._set_field(3, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return (
            f"{self.numerator}/2^{self.denominator} time, "
            f"{self.clocks_per_click} MIDI clocks per click, "
            f"{self.notes_per_quarter} 32nd-notes per quarter-note"
        )


class KeySignatureEvent(MetaEvent):
    META_TYPE = MetaType.KEY_SIGNATURE
    NAME = "Key signature"
    MIN_LENGTH = 2

    def __init__(self, delta_time: int = 0, key: KeySignature = KeySignature.C_MAJOR):
        raw = _check_key(key)
        self._build(delta_time, self.META_TYPE, raw.to_bytes(2, "big"))

    @property
    def raw_key(self) -> int:
        """The two data bytes as one unsigned value."""
        return self._read(0, 2)

    @property
    def key(self) -> Optional[KeySignature]:
        """Key signature, or None when the data is not a legal key."""
        raw = self.raw_key
        return KeySignature(raw) if KeySignature.is_valid(raw) else None

    @key.setter
    def key(self, value: KeySignature) -> None:
        self._write(0, 2, _check_key(value))

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        key = self.key
        if key is None:
            return f"Unknown key signature (0x{self.raw_key:04X})"
        return key.display_name


def _check_key(key: Union[KeySignature, int]) -> int:
    if isinstance(key, bool) or not isinstance(key, int) or not KeySignature.is_valid(int(key)):
        raise InvalidInputError(f"Not a key signature: {key!r}")
    return int(key)


class SequencerSpecific(MetaEvent):
    META_TYPE = MetaType.SEQUENCER_SPECIFIC
    NAME = "Sequencer specific"

    def __init__(self, delta_time: int = 0, payload: bytes = b""):
        self._build(delta_time, self.META_TYPE, bytes(payload))

    @property
    def payload(self) -> bytes:
        return bytes(self._buffer[self._payload_index :])

    @payload.setter
    def payload(self, value: bytes) -> None:
        self._set_payload(bytes(value))


META_EVENT_TYPES: Dict[int, Type[MetaEvent]] = {
    MetaType.SEQUENCE_NUMBER: SequenceNumber,
    MetaType.TEXT: TextEvent,
    MetaType.COPYRIGHT_NOTICE: CopyrightNotice,
    MetaType.SEQUENCE_TRACK_NAME: SequenceTrackName,
    MetaType.INSTRUMENT_NAME: InstrumentName,
    MetaType.LYRIC: Lyric,
    MetaType.MARKER: Marker,
    MetaType.CUE_POINT: CuePoint,
    MetaType.MIDI_CHANNEL_PREFIX: MidiChannelPrefix,
    MetaType.END_OF_TRACK: EndOfTrack,
    MetaType.SET_TEMPO: SetTempo,
    MetaType.SMPTE_OFFSET: SmpteOffset,
    MetaType.TIME_SIGNATURE: TimeSignature,
    MetaType.KEY_SIGNATURE: KeySignatureEvent,
    MetaType.SEQUENCER_SPECIFIC: SequencerSpecific,
}


def decode_meta_event(data: Union[bytes, bytearray], index: int) -> MetaEvent:
    """
    Decode a meta event with the class for its type.

    Args:
        data: Source bytes
        index: Offset of the delta time

    Returns:
        Typed event, or a generic ``MetaEvent`` for other types
    """
    _, delta_size = read_vlq(data, index)
    type_index = index + delta_size + 1
    if type_index >= len(data):
        raise UnexpectedEndOfDataError(f"Meta event at offset {index} runs past end of data")

    event_class = META_EVENT_TYPES.get(data[type_index], MetaEvent)
    logger.debug("%s (0x%02X) at offset %d", event_class.NAME, data[type_index], index)
    return event_class.decode(data, index)
