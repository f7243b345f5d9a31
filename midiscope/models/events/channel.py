"""
Channel voice and channel mode events.

Layout: ``[delta time][status][data 1][data 2]``. The status byte carries
the message type in its high nibble and the channel in its low nibble.
A running-status event leaves the status byte out and reuses the one of
the previous channel event in the track.

Example:
    event = NoteOn(0, 9, 38, 100)         # 00 99 26 64
    follow = NoteOn(96, None, 38, 0)      # 60 26 00 (running status)
"""

import logging
from enum import IntEnum
from typing import Dict, Optional, Tuple, Type, Union

from midiscope.models.events.base import (
    DELTA_COLUMN_WIDTH,
    TYPE_COLUMN_WIDTH,
    EventKind,
    MidiEvent,
    TrackContext,
)
from midiscope.models.key_signature import pitch_name
from midiscope.utils.codec import read_vlq
from midiscope.utils.gm_names import (
    PERCUSSION_CHANNEL,
    get_controller_name,
    get_mode_name,
    get_percussion_name,
    get_program_name,
)
from midiscope.utils.validation import (
    InvalidStatusByteError,
    RunningStatusChannelLockedError,
    UnexpectedEndOfDataError,
    validate_channel,
    validate_number,
)

logger = logging.getLogger(__name__)

FIRST_MODE_CONTROLLER = 120


class MessageType(IntEnum):
    """Channel message types (status byte with channel 0)."""

    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    POLY_KEY_PRESSURE = 0xA0
    CONTROL_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_PRESSURE = 0xD0
    PITCH_BEND = 0xE0


class ChannelEvent(MidiEvent):
    """
    Base class for channel events.

    Subclasses declare their message type, the number of data bytes and a
    label plus legal range for each data byte.
    """

    kind = EventKind.CHANNEL
    MESSAGE_TYPE: MessageType
    DESCRIPTION = "Channel event"
    FIELDS: Tuple[Tuple[str, int, int], ...] = ()

    def __init__(self, delta_time: int, channel: Optional[int], *values: int):
        if len(values) != len(self.FIELDS):
            raise TypeError(
                f"{type(self).__name__} takes {len(self.FIELDS)} data values, got {len(values)}"
            )
        for (label, minimum, maximum), value in zip(self.FIELDS, values):
            validate_number(value, minimum, maximum, label)

        if channel is None:
            body = bytes(values)
        else:
            validate_channel(channel)
            body = bytes([self.MESSAGE_TYPE | channel]) + bytes(values)

        super().__init__(delta_time, body)
        self._running_status = channel is None

    @classmethod
    def decode(
        cls, data: Union[bytes, bytearray], index: int, running_status: bool = False
    ) -> "ChannelEvent":
        """
        Decode a channel event.

        Args:
            data: Source bytes
            index: Offset of the delta time
            running_status: True when the event has no status byte

        Returns:
            Decoded event

        Raises:
            UnexpectedEndOfDataError: If the event runs past the end of data
            ValueOutOfRangeError: If a data byte is outside its range
        """
        _, delta_size = read_vlq(data, index)
        end = index + delta_size + (0 if running_status else 1) + len(cls.FIELDS)
        if end > len(data):
            raise UnexpectedEndOfDataError(
                f"{cls.DESCRIPTION} at offset {index} runs past end of data"
            )

        event = cls.__new__(cls)
        event._load(data[index:end])
        event._running_status = running_status
        for position, (label, minimum, maximum) in enumerate(cls.FIELDS):
            validate_number(event._get(position), minimum, maximum, label)
        return event

    @property
    def running_status(self) -> bool:
        """True when this event has no status byte of its own."""
        return self._running_status

    @property
    def message_type(self) -> Optional[MessageType]:
        """Message type, or None for a running-status event."""
        if self._running_status:
            return None
        return self.MESSAGE_TYPE

    @property
    def channel(self) -> Optional[int]:
        """Channel 0-15, or None for a running-status event."""
        if self._running_status:
            return None
        return self._buffer[self._delta_size] & 0x0F

    @channel.setter
    def channel(self, value: int) -> None:
        if self._running_status:
            raise RunningStatusChannelLockedError()
        validate_channel(value)
        self._buffer[self._delta_size] = self.MESSAGE_TYPE | value

    def channel_in(self, context: Optional[TrackContext] = None) -> Optional[int]:
        """Channel of this event, resolving running status through the track."""
        if not self._running_status:
            return self.channel
        if context is None:
            return None
        return context.channel_at(self.cumulative_time)

    @property
    def _data_index(self) -> int:
        return self._delta_size + (0 if self._running_status else 1)

    def _get(self, position: int) -> int:
        return self._buffer[self._data_index + position]

    def _set(self, position: int, value: int) -> None:
        label, minimum, maximum = self.FIELDS[position]
        validate_number(value, minimum, maximum, label)
        self._buffer[self._data_index + position] = value

    @property
    def values(self) -> Tuple[int, ...]:
        """Data bytes of the event."""
        return tuple(self._get(i) for i in range(len(self.FIELDS)))

    @property
    def hex(self) -> str:
        text = super().hex
        if self._running_status:
            return text[:DELTA_COLUMN_WIDTH] + "   " + text[DELTA_COLUMN_WIDTH:]
        return text

    @property
    def type_comment(self) -> str:
        if self._running_status:
            return " " * TYPE_COLUMN_WIDTH
        return f"{self.DESCRIPTION:<17} | {self.channel:>2}"

    def note_name(self, note: int, context: Optional[TrackContext] = None) -> str:
        """
        Name of a note for this event's channel and key signature.

        On the percussion channel, notes with a GM drum sound return the
        drum name instead of a pitch.
        """
        if self.channel_in(context) == PERCUSSION_CHANNEL:
            drum = get_percussion_name(note)
            if drum:
                return drum
        key = context.key_signature_at(self.cumulative_time) if context else None
        return pitch_name(note, key)


class _NoteEvent(ChannelEvent):
    FIELDS = (("Note number", 0, 127), ("Velocity", 0, 127))

    def __init__(self, delta_time: int, channel: Optional[int], note: int, velocity: int):
        super().__init__(delta_time, channel, note, velocity)

    @property
    def note(self) -> int:
        return self._get(0)

    @note.setter
    def note(self, value: int) -> None:
        self._set(0, value)

    @property
    def velocity(self) -> int:
        return self._get(1)

    @velocity.setter
    def velocity(self, value: int) -> None:
        self._set(1, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return (
            f"Note number {self.note} ({self.note_name(self.note, context)}), "
            f"velocity {self.velocity}"
        )


class NoteOff(_NoteEvent):
    MESSAGE_TYPE = MessageType.NOTE_OFF
    DESCRIPTION = "Note off"


class NoteOn(_NoteEvent):
    MESSAGE_TYPE = MessageType.NOTE_ON
    DESCRIPTION = "Note on"


class PolyKeyPressure(ChannelEvent):
    MESSAGE_TYPE = MessageType.POLY_KEY_PRESSURE
    DESCRIPTION = "Poly key pressure"
    FIELDS = (("Note number", 0, 127), ("Pressure", 0, 127))

    def __init__(self, delta_time: int, channel: Optional[int], note: int, pressure: int):
        super().__init__(delta_time, channel, note, pressure)

    @property
    def note(self) -> int:
        return self._get(0)

    @note.setter
    def note(self, value: int) -> None:
        self._set(0, value)

    @property
    def pressure(self) -> int:
        return self._get(1)

    @pressure.setter
    def pressure(self, value: int) -> None:
        self._set(1, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return (
            f"Note number {self.note} ({self.note_name(self.note, context)}), "
            f"pressure value {self.pressure}"
        )


class ControlChange(ChannelEvent):
    """Control change for controllers 0-119."""

    MESSAGE_TYPE = MessageType.CONTROL_CHANGE
    DESCRIPTION = "Control change"
    FIELDS = (("Controller number", 0, FIRST_MODE_CONTROLLER - 1), ("Control value", 0, 127))

    def __init__(self, delta_time: int, channel: Optional[int], controller: int, value: int):
        super().__init__(delta_time, channel, controller, value)

    @property
    def controller(self) -> int:
        return self._get(0)

    @controller.setter
    def controller(self, value: int) -> None:
        self._set(0, value)

    @property
    def value(self) -> int:
        return self._get(1)

    @value.setter
    def value(self, value: int) -> None:
        self._set(1, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return (
            f"Controller number {self.controller} ({get_controller_name(self.controller)}), "
            f"control value {self.value}"
        )


class ChannelMode(ChannelEvent):
    """Channel mode message: a control change on controllers 120-127."""

    MESSAGE_TYPE = MessageType.CONTROL_CHANGE
    DESCRIPTION = "Channel mode"
    FIELDS = (("Mode number", FIRST_MODE_CONTROLLER, 127), ("Mode value", 0, 127))

    def __init__(self, delta_time: int, channel: Optional[int], mode: int, value: int = 0):
        super().__init__(delta_time, channel, mode, value)

    @property
    def mode(self) -> int:
        return self._get(0)

    @mode.setter
    def mode(self, value: int) -> None:
        self._set(0, value)

    @property
    def value(self) -> int:
        return self._get(1)

    @value.setter
    def value(self, value: int) -> None:
        self._set(1, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f"Mode {self.mode} ({get_mode_name(self.mode)}), value {self.value}"


class ProgramChange(ChannelEvent):
    MESSAGE_TYPE = MessageType.PROGRAM_CHANGE
    DESCRIPTION = "Program change"
    FIELDS = (("Program number", 0, 127),)

    def __init__(self, delta_time: int, channel: Optional[int], program: int):
        super().__init__(delta_time, channel, program)

    @property
    def program(self) -> int:
        return self._get(0)

    @program.setter
    def program(self, value: int) -> None:
        self._set(0, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f"Program number {self.program} ({get_program_name(self.program)})"


class ChannelPressure(ChannelEvent):
    MESSAGE_TYPE = MessageType.CHANNEL_PRESSURE
    DESCRIPTION = "Channel pressure"
    FIELDS = (("Pressure", 0, 127),)

    def __init__(self, delta_time: int, channel: Optional[int], pressure: int):
        super().__init__(delta_time, channel, pressure)

    @property
    def pressure(self) -> int:
        return self._get(0)

    @pressure.setter
    def pressure(self, value: int) -> None:
        self._set(0, value)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f"Pressure value {self.pressure}"


class PitchBend(ChannelEvent):
    """
    Pitch bend: a 14-bit value sent LSB first.

    ``value`` combines both bytes (0-16383, centre 8192).
    """

    MESSAGE_TYPE = MessageType.PITCH_BEND
    DESCRIPTION = "Pitch bend"
    FIELDS = (("LSB", 0, 127), ("MSB", 0, 127))
    CENTER = 0x2000

    def __init__(self, delta_time: int, channel: Optional[int], lsb: int, msb: int):
        super().__init__(delta_time, channel, lsb, msb)

    @classmethod
    def from_value(
        cls, delta_time: int, channel: Optional[int], value: int = CENTER
    ) -> "PitchBend":
        """Create a pitch bend from a 14-bit value."""
        validate_number(value, 0, 0x3FFF, "Pitch bend value")
        return cls(delta_time, channel, value & 0x7F, value >> 7)

    @property
    def lsb(self) -> int:
        return self._get(0)

    @lsb.setter
    def lsb(self, value: int) -> None:
        self._set(0, value)

    @property
    def msb(self) -> int:
        return self._get(1)

    @msb.setter
    def msb(self, value: int) -> None:
        self._set(1, value)

    @property
    def value(self) -> int:
        return (self.msb << 7) | self.lsb

    @value.setter
    def value(self, value: int) -> None:
        validate_number(value, 0, 0x3FFF, "Pitch bend value")
        self._set(0, value & 0x7F)
        self._set(1, value >> 7)

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f"LSB {self.lsb}, MSB {self.msb}"


CHANNEL_EVENT_TYPES: Dict[int, Type[ChannelEvent]] = {
    MessageType.NOTE_OFF: NoteOff,
    MessageType.NOTE_ON: NoteOn,
    MessageType.POLY_KEY_PRESSURE: PolyKeyPressure,
    MessageType.CONTROL_CHANGE: ControlChange,
    MessageType.PROGRAM_CHANGE: ProgramChange,
    MessageType.CHANNEL_PRESSURE: ChannelPressure,
    MessageType.PITCH_BEND: PitchBend,
}


def channel_event_class(message_type: int, first_data_byte: int) -> Type[ChannelEvent]:
    """
    Pick the event class for a message type.

    Control change messages on controllers 120-127 are channel mode messages.

    Raises:
        InvalidStatusByteError: If message_type is not a channel message
    """
    try:
        event_class = CHANNEL_EVENT_TYPES[message_type & 0xF0]
    except KeyError:
        raise InvalidStatusByteError(
            f"0x{message_type:02X} is not a channel message status"
        ) from None
    if event_class is ControlChange and first_data_byte >= FIRST_MODE_CONTROLLER:
        return ChannelMode
    return event_class


def decode_channel_event(
    data: Union[bytes, bytearray],
    index: int,
    message_type: int,
    running_status: bool = False,
) -> ChannelEvent:
    """
    Decode a channel event whose message type is already known.

    Args:
        data: Source bytes
        index: Offset of the delta time
        message_type: Status byte (channel bits ignored) in effect
        running_status: True when the event has no status byte

    Returns:
        Decoded event
    """
    _, delta_size = read_vlq(data, index)
    first = index + delta_size + (0 if running_status else 1)
    if first >= len(data):
        raise UnexpectedEndOfDataError(f"Channel event at offset {index} runs past end of data")

    event_class = channel_event_class(message_type, data[first])
    logger.debug(
        "%s at offset %d%s",
        event_class.DESCRIPTION,
        index,
        " (running status)" if running_status else "",
    )
    return event_class.decode(data, index, running_status)
