"""
System exclusive events.

Layout: ``[delta time][F0 or F7][length as VLQ][data]``. F0 starts a
message; F7 carries a continuation packet or an escaped sequence.
"""

from typing import Optional, Union

from midiscope.models.events.base import TYPE_COLUMN_WIDTH, EventKind, MidiEvent, TrackContext
from midiscope.utils.codec import encode_vlq, read_text, read_vlq
from midiscope.utils.validation import UnexpectedEndOfDataError

SYSEX_STATUS = 0xF0
ESCAPE_STATUS = 0xF7


class SysExEvent(MidiEvent):
    """
    A SysEx message or escape packet.

    Args:
        delta_time: Ticks since the previous event
        payload: Bytes following the length (usually ending in F7)
        escape: True for an F7 packet, False for an F0 message
    """

    kind = EventKind.SYSEX

    def __init__(self, delta_time: int = 0, payload: bytes = b"", escape: bool = False):
        status = ESCAPE_STATUS if escape else SYSEX_STATUS
        length = encode_vlq(len(payload))
        super().__init__(delta_time, bytes([status]) + length + bytes(payload))
        self._length_size = len(length)

    @classmethod
    def decode(cls, data: Union[bytes, bytearray], index: int) -> "SysExEvent":
        """
        Decode a SysEx event.

        Raises:
            UnexpectedEndOfDataError: If the event runs past the end of data
        """
        _, delta_size = read_vlq(data, index)
        length, length_size = read_vlq(data, index + delta_size + 1)
        end = index + delta_size + 1 + length_size + length
        if end > len(data):
            raise UnexpectedEndOfDataError(
                f"SysEx event at offset {index} declares {length} data bytes past end of data"
            )

        event = cls.__new__(cls)
        event._load(data[index:end])
        event._length_size = length_size
        return event

    @property
    def escape(self) -> bool:
        return self._buffer[self._delta_size] == ESCAPE_STATUS

    @escape.setter
    def escape(self, value: bool) -> None:
        self._buffer[self._delta_size] = ESCAPE_STATUS if value else SYSEX_STATUS

    @property
    def length(self) -> int:
        value, _ = read_vlq(self._buffer, self._delta_size + 1)
        return value

    @property
    def _payload_index(self) -> int:
        return self._delta_size + 1 + self._length_size

    @property
    def payload(self) -> bytes:
        return bytes(self._buffer[self._payload_index :])

    @payload.setter
    def payload(self, value: bytes) -> None:
        value = bytes(value)
        start = self._payload_index
        self._splice(start, len(self._buffer) - start, value)
        length = encode_vlq(len(value))
        self._splice(self._delta_size + 1, self._length_size, length)
        self._length_size = len(length)

    @property
    def type_comment(self) -> str:
        label = "SysEx escape" if self.escape else "SysEx message"
        return f"{label:<{TYPE_COLUMN_WIDTH}}"

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return f'({self.length} bytes) "{read_text(self._buffer, self.length, self._payload_index)}"'
