"""
Common behaviour of track events.

Every event starts with its delta time as a variable-length quantity.
The delta time can be rewritten at any time; the bytes after it shift
when its encoded size changes.
"""

from enum import Enum
from typing import Optional, Union

from midiscope.models.item import MidiItem
from midiscope.models.key_signature import KeySignature
from midiscope.utils.codec import MAX_VLQ, encode_vlq, format_hex, read_vlq
from midiscope.utils.validation import validate_number

DELTA_COLUMN_BYTES = 4
DELTA_COLUMN_WIDTH = DELTA_COLUMN_BYTES * 3
TYPE_COLUMN_WIDTH = 22


class EventKind(Enum):
    """Top-level event families in a track."""

    CHANNEL = "channel"
    META = "meta"
    SYSEX = "sysex"


class TrackContext:
    """
    Lookups an event needs from the track that holds it.

    Tracks implement this; events never keep a reference to their track,
    it is passed to the calls that need it.
    """

    def channel_at(self, time: int) -> Optional[int]:
        return None

    def key_signature_at(self, time: int) -> Optional[KeySignature]:
        return None


class MidiEvent(MidiItem):
    """
    Base class for all track events.

    Attributes:
        cumulative_time: Ticks from the start of the track, set by the
            track when the event is decoded or appended
    """

    kind: EventKind

    def __init__(self, delta_time: int, body: Union[bytes, bytearray]):
        delta = encode_vlq(delta_time)
        super().__init__(delta + bytes(body))
        self._delta_size = len(delta)
        self.cumulative_time = 0

    def _load(self, data: Union[bytes, bytearray]) -> None:
        """Take over an already encoded event (decode path)."""
        MidiItem.__init__(self, data)
        _, self._delta_size = read_vlq(self._buffer, 0)
        self.cumulative_time = 0

    @property
    def delta_time(self) -> int:
        """Ticks since the previous event in the track."""
        value, _ = read_vlq(self._buffer, 0)
        return value

    @delta_time.setter
    def delta_time(self, value: int) -> None:
        validate_number(value, 0, MAX_VLQ, "Delta time")
        encoded = encode_vlq(value)
        self._splice(0, self._delta_size, encoded)
        self._delta_size = len(encoded)

    @property
    def delta_size(self) -> int:
        return self._delta_size

    @property
    def hex(self) -> str:
        padding = " " * ((DELTA_COLUMN_BYTES - self._delta_size) * 3)
        return padding + format_hex(self._buffer)

    def get_comment(self, context: Optional[TrackContext] = None) -> str:
        return f"{self.delta_time:>9} | {self.type_comment} | {self.data_comment(context)}"

    @property
    def type_comment(self) -> str:
        return " " * TYPE_COLUMN_WIDTH

    def data_comment(self, context: Optional[TrackContext] = None) -> str:
        return ""
