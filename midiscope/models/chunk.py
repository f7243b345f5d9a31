"""
File chunks: header (MThd), track (MTrk) and chunks of unknown type.

Every chunk starts with an 8-byte prefix: a 4-character ASCII type and the
content length as a 32-bit big-endian number. The prefix is the first item
of the chunk; the content follows as further items.
"""

import logging
from typing import List, Optional, Tuple, Union

from midiscope.models.events.base import EventKind, MidiEvent, TrackContext
from midiscope.models.events.channel import ChannelEvent, decode_channel_event
from midiscope.models.events.meta import META_STATUS, EndOfTrack, MetaType, decode_meta_event
from midiscope.models.events.sysex import ESCAPE_STATUS, SYSEX_STATUS, SysExEvent
from midiscope.models.item import MidiItem, RawItem
from midiscope.models.key_signature import KeySignature
from midiscope.models.text_streams import TextStreams
from midiscope.models.time_map import TimeMap
from midiscope.utils.codec import (
    number_to_bytes,
    read_number,
    read_raw_text,
    read_text,
    read_vlq,
    text_to_bytes,
    write_number,
)
from midiscope.utils.validation import (
    BYTE_COUNT_MISMATCH,
    MISSING_END_OF_TRACK,
    UNKNOWN_FORMAT,
    InvalidInputError,
    InvalidStatusByteError,
    MustUseTypedClassError,
    ParseIssue,
    UnexpectedEndOfDataError,
    validate_number,
)

logger = logging.getLogger(__name__)

HEADER_TYPE = "MThd"
TRACK_TYPE = "MTrk"
CHUNK_PREFIX_SIZE = 8
HEADER_DATA_SIZE = 6
FORMATS = (0, 1, 2)
FRAME_RATES = (24, 25, 29, 30)
MAX_CHUNK_LENGTH = 0xFFFFFFFF


class ChunkInfo(MidiItem):
    """The 8-byte type and length prefix of a chunk."""

    def __init__(self, chunk_type: str, length: int = 0):
        _check_chunk_type(chunk_type)
        validate_number(length, 0, MAX_CHUNK_LENGTH, "Chunk length")
        super().__init__(text_to_bytes(chunk_type) + number_to_bytes(length, 4))

    @classmethod
    def decode(cls, data: Union[bytes, bytearray], index: int) -> "ChunkInfo":
        if index + CHUNK_PREFIX_SIZE > len(data):
            raise UnexpectedEndOfDataError(
                f"Chunk at offset {index} needs {CHUNK_PREFIX_SIZE} bytes for its type "
                f"and length, only {len(data) - index} left"
            )
        info = cls.__new__(cls)
        MidiItem.__init__(info, data[index : index + CHUNK_PREFIX_SIZE])
        return info

    @property
    def type(self) -> str:
        return read_raw_text(self._buffer, 4)

    @type.setter
    def type(self, value: str) -> None:
        _check_chunk_type(value)
        self._buffer[0:4] = text_to_bytes(value)

    @property
    def length(self) -> int:
        return read_number(self._buffer, 4, 4)

    @length.setter
    def length(self, value: int) -> None:
        validate_number(value, 0, MAX_CHUNK_LENGTH, "Chunk length")
        write_number(value, 4, self._buffer, 4)

    def get_comment(self, context=None) -> str:
        chunk_type = self.type
        if chunk_type == HEADER_TYPE:
            return f"Header chunk, {self.length} bytes"
        if chunk_type == TRACK_TYPE:
            return f"Track chunk, {self.length} bytes"
        return f'Unknown chunk type "{read_text(self._buffer, 4)}", {self.length} bytes'


def _check_chunk_type(chunk_type: str) -> None:
    if not isinstance(chunk_type, str) or len(chunk_type) != 4:
        raise InvalidInputError(f"Chunk type must be 4 characters, got {chunk_type!r}")
    if any(ord(char) > 0x7F for char in chunk_type):
        raise InvalidInputError(f"Chunk type must be ASCII, got {chunk_type!r}")


class Chunk:
    """
    Base class for chunks.

    Attributes:
        info: Type and length prefix (always the first item)
        items: Prefix followed by the chunk content
        issues: Non-fatal problems found while decoding
        streams: Hex and comment text for every item
    """

    def __init__(self, info: ChunkInfo):
        self.info = info
        self.items: List[MidiItem] = []
        self.issues: List[ParseIssue] = []
        self.streams = TextStreams()
        self._synced_size = info.length
        self._add_item(info)

    def _add_item(self, item: MidiItem) -> None:
        self.items.append(item)
        self.streams.add_line(item.hex, self._comment_for(item))

    def _comment_for(self, item: MidiItem) -> str:
        return item.get_comment()

    def _record(
        self,
        kind: str,
        message: str,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
    ) -> None:
        logger.warning("%s chunk: %s", self.type, message)
        self.issues.append(ParseIssue(kind, message, expected, actual))

    @property
    def type(self) -> str:
        return self.info.type

    @property
    def length(self) -> int:
        """Declared content length."""
        return self.info.length

    @property
    def content_size(self) -> int:
        """Bytes of content actually held."""
        return sum(item.size for item in self.items[1:])

    @property
    def size(self) -> int:
        return CHUNK_PREFIX_SIZE + self.content_size

    def sync_length(self) -> None:
        """
        Bring the declared length in line with content edits.

        The length moves by exactly as much as the content grew or shrank
        since the last sync, so a length that was wrong in the source file
        stays as wrong as it was.
        """
        size = self.content_size
        if size != self._synced_size:
            self.info.length = max(0, self.info.length + size - self._synced_size)
            self._synced_size = size

    def to_bytes(self) -> bytes:
        self.sync_length()
        return b"".join(item.data for item in self.items)

    def refresh(self) -> None:
        """Rebuild the text streams from the current items."""
        self.streams.clear()
        for item in self.items:
            self.streams.add_line(item.hex, self._comment_for(item))

    @property
    def hex(self) -> str:
        return self.streams.hex

    @property
    def comments(self) -> str:
        return self.streams.comments

    @property
    def line_count(self) -> int:
        return self.streams.line_count

    def get_index(self, line: int) -> Tuple[int, int]:
        return self.streams.get_index(line)

    @property
    def error_text(self) -> str:
        return "\n".join(str(issue) for issue in self.issues)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self.type!r}, length={self.length})"


class UnknownChunk(Chunk):
    """
    Chunk of a type other than MThd and MTrk, kept as opaque bytes.

    Raises:
        MustUseTypedClassError: If chunk_type is "MThd" or "MTrk"
    """

    def __init__(self, chunk_type: str, payload: bytes = b""):
        if chunk_type in (HEADER_TYPE, TRACK_TYPE):
            raise MustUseTypedClassError(f'Chunk type "{chunk_type}" must use its dedicated class')
        super().__init__(ChunkInfo(chunk_type, len(payload)))
        if payload:
            self._add_item(RawItem(payload))

    @classmethod
    def decode(cls, data: Union[bytes, bytearray], index: int) -> "UnknownChunk":
        info = ChunkInfo.decode(data, index)
        chunk = cls.__new__(cls)
        Chunk.__init__(chunk, info)

        start = index + CHUNK_PREFIX_SIZE
        available = max(0, min(info.length, len(data) - start))
        if available:
            chunk._add_item(RawItem(data[start : start + available]))
        if available < info.length:
            chunk._record(
                BYTE_COUNT_MISMATCH,
                f"Chunk declares {info.length} bytes, only {available} present",
                info.length,
                available,
            )
        chunk._synced_size = available
        return chunk

    @property
    def payload(self) -> bytes:
        return b"".join(item.data for item in self.items[1:])


class HeaderData(MidiItem):
    """
    The 6 content bytes of the header chunk.

    Division: bit 15 clear means ticks per quarter-note in bits 0-14;
    bit 15 set means the high byte is minus the SMPTE frame rate (two's
    complement) and the low byte is ticks per frame.
    """

    def __init__(self, format: int, number_of_tracks: int, division: int):
        validate_number(format, 0, 2, "Format")
        validate_number(number_of_tracks, 0, 0xFFFF, "Number of tracks")
        super().__init__(
            number_to_bytes(format, 2)
            + number_to_bytes(number_of_tracks, 2)
            + number_to_bytes(division, 2)
        )

    @classmethod
    def decode(cls, data: Union[bytes, bytearray], index: int) -> "HeaderData":
        if index + HEADER_DATA_SIZE > len(data):
            raise UnexpectedEndOfDataError(
                f"Header data at offset {index} needs {HEADER_DATA_SIZE} bytes"
            )
        header = cls.__new__(cls)
        MidiItem.__init__(header, data[index : index + HEADER_DATA_SIZE])
        return header

    @property
    def format(self) -> int:
        return read_number(self._buffer, 2, 0)

    @format.setter
    def format(self, value: int) -> None:
        validate_number(value, 0, 2, "Format")
        write_number(value, 2, self._buffer, 0)

    @property
    def number_of_tracks(self) -> int:
        return read_number(self._buffer, 2, 2)

    @number_of_tracks.setter
    def number_of_tracks(self, value: int) -> None:
        validate_number(value, 0, 0xFFFF, "Number of tracks")
        write_number(value, 2, self._buffer, 2)

    @property
    def division(self) -> int:
        return read_number(self._buffer, 2, 4)

    @property
    def is_smpte(self) -> bool:
        return bool(self._buffer[4] & 0x80)

    @property
    def ticks_per_quarter_note(self) -> Optional[int]:
        return None if self.is_smpte else self.division

    @ticks_per_quarter_note.setter
    def ticks_per_quarter_note(self, value: int) -> None:
        write_number(metrical_division(value), 2, self._buffer, 4)

    @property
    def frames_per_second(self) -> Optional[int]:
        return 256 - self._buffer[4] if self.is_smpte else None

    @frames_per_second.setter
    def frames_per_second(self, value: int) -> None:
        self._require_smpte("frames per second")
        write_number(smpte_division(value, self.ticks_per_frame), 2, self._buffer, 4)

    @property
    def ticks_per_frame(self) -> Optional[int]:
        return self._buffer[5] if self.is_smpte else None

    @ticks_per_frame.setter
    def ticks_per_frame(self, value: int) -> None:
        self._require_smpte("ticks per frame")
        write_number(smpte_division(self.frames_per_second, value), 2, self._buffer, 4)

    def set_smpte_division(self, frames_per_second: int, ticks_per_frame: int) -> None:
        """Switch to SMPTE time-code division."""
        write_number(smpte_division(frames_per_second, ticks_per_frame), 2, self._buffer, 4)

    def _require_smpte(self, name: str) -> None:
        if not self.is_smpte:
            raise InvalidInputError(
                f"Cannot set {name} with metrical division; use set_smpte_division()"
            )

    def get_comment(self, context=None) -> str:
        tracks = self.number_of_tracks
        text = f"Format {self.format}, {tracks} track{'' if tracks == 1 else 's'}, "
        if self.is_smpte:
            return text + (
                f"{self.frames_per_second} frames per second, "
                f"{self.ticks_per_frame} ticks per frame"
            )
        return text + f"{self.ticks_per_quarter_note} ticks per quarter-note"


def metrical_division(ticks_per_quarter_note: int) -> int:
    """Division word for ticks per quarter-note (0-32767)."""
    return validate_number(ticks_per_quarter_note, 0, 0x7FFF, "Ticks per quarter-note")


def smpte_division(frames_per_second: int, ticks_per_frame: int) -> int:
    """
    Division word for SMPTE time-code timing.

    Raises:
        InvalidInputError: If frames_per_second is not 24, 25, 29 or 30
    """
    if frames_per_second not in FRAME_RATES:
        raise InvalidInputError(
            f"Frames per second must be one of {', '.join(map(str, FRAME_RATES))}, "
            f"got {frames_per_second}"
        )
    validate_number(ticks_per_frame, 0, 255, "Ticks per frame")
    return ((256 - frames_per_second) << 8) | ticks_per_frame


def division_from(
    ticks_per_quarter_note: Optional[int] = None,
    frames_per_second: Optional[int] = None,
    ticks_per_frame: Optional[int] = None,
) -> int:
    """
    Division word from either metrical or SMPTE settings, never both.

    Raises:
        InvalidInputError: If both or neither timing modes are given
    """
    smpte = frames_per_second is not None or ticks_per_frame is not None
    if ticks_per_quarter_note is not None and smpte:
        raise InvalidInputError(
            "Use either ticks per quarter-note or frames per second with ticks per frame, not both"
        )
    if smpte:
        if frames_per_second is None or ticks_per_frame is None:
            raise InvalidInputError("SMPTE timing needs both frames per second and ticks per frame")
        return smpte_division(frames_per_second, ticks_per_frame)
    if ticks_per_quarter_note is None:
        raise InvalidInputError("Set ticks per quarter-note or SMPTE frames per second")
    return metrical_division(ticks_per_quarter_note)


class HeaderChunk(Chunk):
    """
    The MThd chunk.

    Args:
        format: 0 (one track), 1 (simultaneous tracks), 2 (independent tracks)
        number_of_tracks: Declared number of track chunks
        ticks_per_quarter_note: Metrical timing
        frames_per_second: SMPTE frame rate (24, 25, 29 or 30)
        ticks_per_frame: SMPTE subdivisions of a frame
    """

    def __init__(
        self,
        format: int = 1,
        number_of_tracks: int = 1,
        ticks_per_quarter_note: Optional[int] = None,
        frames_per_second: Optional[int] = None,
        ticks_per_frame: Optional[int] = None,
    ):
        division = division_from(ticks_per_quarter_note, frames_per_second, ticks_per_frame)
        super().__init__(ChunkInfo(HEADER_TYPE, HEADER_DATA_SIZE))
        self.header_data = HeaderData(format, number_of_tracks, division)
        self._add_item(self.header_data)

    @classmethod
    def decode(cls, data: Union[bytes, bytearray], index: int) -> "HeaderChunk":
        """
        Decode a header chunk.

        Raises:
            UnexpectedEndOfDataError: If the chunk holds fewer than 6 bytes
        """
        info = ChunkInfo.decode(data, index)
        if info.length < HEADER_DATA_SIZE:
            raise UnexpectedEndOfDataError(
                f"Header chunk must hold {HEADER_DATA_SIZE} bytes, declares {info.length}"
            )

        chunk = cls.__new__(cls)
        Chunk.__init__(chunk, info)
        start = index + CHUNK_PREFIX_SIZE
        chunk.header_data = HeaderData.decode(data, start)
        chunk._add_item(chunk.header_data)

        if chunk.header_data.format not in FORMATS:
            chunk._record(UNKNOWN_FORMAT, f"Unknown format {chunk.header_data.format}")

        extra = info.length - HEADER_DATA_SIZE
        if extra:
            extra_start = start + HEADER_DATA_SIZE
            available = max(0, min(extra, len(data) - extra_start))
            if available:
                chunk._add_item(RawItem(data[extra_start : extra_start + available]))
            if available < extra:
                chunk._record(
                    BYTE_COUNT_MISMATCH,
                    f"Chunk declares {info.length} bytes, only {HEADER_DATA_SIZE + available} "
                    f"present",
                    info.length,
                    HEADER_DATA_SIZE + available,
                )
            chunk._synced_size = HEADER_DATA_SIZE + available
        return chunk

    @property
    def format(self) -> int:
        return self.header_data.format

    @format.setter
    def format(self, value: int) -> None:
        self.header_data.format = value
        self.refresh()

    @property
    def number_of_tracks(self) -> int:
        return self.header_data.number_of_tracks

    @number_of_tracks.setter
    def number_of_tracks(self, value: int) -> None:
        self.header_data.number_of_tracks = value
        self.refresh()

    @property
    def is_smpte(self) -> bool:
        return self.header_data.is_smpte

    @property
    def ticks_per_quarter_note(self) -> Optional[int]:
        return self.header_data.ticks_per_quarter_note

    @ticks_per_quarter_note.setter
    def ticks_per_quarter_note(self, value: int) -> None:
        self.header_data.ticks_per_quarter_note = value
        self.refresh()

    @property
    def frames_per_second(self) -> Optional[int]:
        return self.header_data.frames_per_second

    @frames_per_second.setter
    def frames_per_second(self, value: int) -> None:
        self.header_data.frames_per_second = value
        self.refresh()

    @property
    def ticks_per_frame(self) -> Optional[int]:
        return self.header_data.ticks_per_frame

    @ticks_per_frame.setter
    def ticks_per_frame(self, value: int) -> None:
        self.header_data.ticks_per_frame = value
        self.refresh()

    def set_smpte_division(self, frames_per_second: int, ticks_per_frame: int) -> None:
        self.header_data.set_smpte_division(frames_per_second, ticks_per_frame)
        self.refresh()


class TrackChunk(Chunk, TrackContext):
    """
    The MTrk chunk: an ordered list of events.

    The track keeps two indices by cumulative time: the channel of every
    event that has a status byte (to resolve running status) and every
    key signature (to spell note names). For format 0 and 1 files the
    key-signature index is shared by all tracks of the file.

    Example:
        track = TrackChunk.create()
        track.insert_event(0, NoteOn(0, 0, 60, 100))
        track.insert_event(1, NoteOff(96, 0, 60, 0))
        data = track.to_bytes()
    """

    def __init__(self, key_signatures: Optional[TimeMap] = None):
        super().__init__(ChunkInfo(TRACK_TYPE, 0))
        self._setup(key_signatures)

    def _setup(self, key_signatures: Optional[TimeMap]) -> None:
        self.events: List[MidiEvent] = []
        self.channels = TimeMap()
        self.key_signatures = key_signatures if key_signatures is not None else TimeMap()
        self._own_keys: List[Tuple[int, KeySignature]] = []

    @classmethod
    def create(cls, key_signatures: Optional[TimeMap] = None) -> "TrackChunk":
        """Create a track holding only an End Of Track event."""
        track = cls(key_signatures)
        track.append_event(EndOfTrack())
        return track

    @classmethod
    def decode(
        cls,
        data: Union[bytes, bytearray],
        index: int,
        key_signatures: Optional[TimeMap] = None,
    ) -> "TrackChunk":
        """
        Decode a track chunk.

        A track whose events do not fill exactly its declared length, or
        that does not end with End Of Track, is still returned; the problem
        is recorded in ``issues``. An event running past the declared
        length is not decoded: its bytes up to that length are kept raw.

        Args:
            data: Source bytes
            index: Offset of the chunk prefix
            key_signatures: Shared key-signature index, or None for a
                track-local one

        Raises:
            MidiError: If an event cannot be decoded
        """
        info = ChunkInfo.decode(data, index)
        track = cls.__new__(cls)
        Chunk.__init__(track, info)
        track._setup(key_signatures)

        start = index + CHUNK_PREFIX_SIZE
        end = start + info.length
        position = start
        truncated = False
        overrun = None
        while position < end:
            if position >= len(data):
                truncated = True
                break
            event = track._decode_event(data, position)
            if position + event.size > end:
                # Bytes past the declared length belong to the next chunk
                overrun = position + event.size - start
                track._add_item(RawItem(data[position:end]))
                position = end
                break
            track._add_event(event)
            position += event.size

        decoded = position - start
        if overrun is not None:
            track._record(
                BYTE_COUNT_MISMATCH,
                f"Track declares {info.length} bytes, last event runs to {overrun}",
                info.length,
                overrun,
            )
        elif truncated:
            track._record(
                BYTE_COUNT_MISMATCH,
                f"Track declares {info.length} bytes, only {decoded} present",
                info.length,
                decoded,
            )
        elif decoded != info.length:
            track._record(
                BYTE_COUNT_MISMATCH,
                f"Track declares {info.length} bytes, events span {decoded}",
                info.length,
                decoded,
            )
        if not track.has_end_of_track:
            track._record(MISSING_END_OF_TRACK, "Track does not end with an End Of Track event")

        track._synced_size = track.content_size
        logger.debug("Decoded track at offset %d: %d events", index, len(track.events))
        return track

    def _decode_event(self, data: Union[bytes, bytearray], index: int) -> MidiEvent:
        _, delta_size = read_vlq(data, index)
        status_index = index + delta_size
        if status_index >= len(data):
            raise UnexpectedEndOfDataError(f"Event at offset {index} has no status or data byte")

        status = data[status_index]
        if status == META_STATUS:
            return decode_meta_event(data, index)
        if status in (SYSEX_STATUS, ESCAPE_STATUS):
            return SysExEvent.decode(data, index)
        if status & 0x80:
            if status >> 4 == 0xF:
                raise InvalidStatusByteError(
                    f"Status byte 0x{status:02X} at offset {status_index} is not valid in a track"
                )
            return decode_channel_event(data, index, status & 0xF0)

        # Data byte where a status byte was expected: running status
        message_type = self._running_message_type(len(self.events))
        if message_type is None:
            raise InvalidStatusByteError(
                f"Data byte 0x{status:02X} at offset {status_index} has no preceding status byte"
            )
        return decode_channel_event(data, index, message_type, running_status=True)

    def _running_message_type(self, position: int) -> Optional[int]:
        """
        Message type in effect before ``position``.

        Meta and SysEx events in between are skipped rather than cancelling
        running status, since many files rely on that.
        """
        for event in reversed(self.events[:position]):
            if event.kind is EventKind.CHANNEL:
                return event.MESSAGE_TYPE
        return None

    def _add_event(self, event: MidiEvent) -> None:
        previous = self.events[-1].cumulative_time if self.events else 0
        event.cumulative_time = previous + event.delta_time
        self.events.append(event)
        self._index_event(event)
        self._add_item(event)

    def _index_event(self, event: MidiEvent) -> None:
        if event.kind is EventKind.CHANNEL and not event.running_status:
            self.channels.add(event.cumulative_time, event.channel)
        elif event.kind is EventKind.META and event.meta_type == MetaType.KEY_SIGNATURE:
            key = event.key
            if key is not None:
                self.key_signatures.add(event.cumulative_time, key)
                self._own_keys.append((event.cumulative_time, key))

    def _comment_for(self, item: MidiItem) -> str:
        return item.get_comment(self)

    def _check_running_status(self, event: MidiEvent, position: int) -> None:
        if event.kind is not EventKind.CHANNEL or not event.running_status:
            return
        message_type = self._running_message_type(position)
        if message_type is None:
            raise InvalidStatusByteError(
                f"{event.DESCRIPTION} uses running status but no channel event precedes it"
            )
        if message_type != event.MESSAGE_TYPE:
            raise InvalidInputError(
                f"{event.DESCRIPTION} uses running status after a "
                f"0x{message_type:02X} message"
            )

    def _check_follower(self, position: int, message_type: Optional[int]) -> None:
        """Check that the running-status event after ``position`` still resolves."""
        for event in self.events[position:]:
            if event.kind is not EventKind.CHANNEL:
                continue
            if event.running_status and event.MESSAGE_TYPE != message_type:
                raise InvalidInputError(
                    f"{event.DESCRIPTION} at cumulative time {event.cumulative_time} "
                    f"relies on running status from the events before it"
                )
            return

    def append_event(self, event: MidiEvent) -> None:
        """
        Add an event at the end of the track.

        Raises:
            InvalidInputError: If event is not a track event, or uses running
                status after a different message type
            InvalidStatusByteError: If event uses running status with no
                channel event before it
        """
        if not isinstance(event, MidiEvent):
            raise InvalidInputError(f"Not a track event: {event!r}")
        self._check_running_status(event, len(self.events))
        self._add_event(event)
        self.sync_length()
        self.streams.replace_line(0, self.info.hex, self._comment_for(self.info))

    def insert_event(self, position: int, event: MidiEvent) -> None:
        """
        Insert an event before the event at ``position``.

        Cumulative times and indices of the whole track are rebuilt.
        """
        if not isinstance(event, MidiEvent):
            raise InvalidInputError(f"Not a track event: {event!r}")
        validate_number(position, 0, len(self.events), "Event position")
        self._check_running_status(event, position)
        if event.kind is EventKind.CHANNEL:
            self._check_follower(position, event.MESSAGE_TYPE)

        self.events.insert(position, event)
        self.items.insert(position + 1, event)
        self.sync_length()
        self.recompute_times()

    def remove_event(self, position: int) -> MidiEvent:
        """Remove and return the event at ``position``."""
        validate_number(position, 0, len(self.events) - 1, "Event position")
        event = self.events[position]
        if event.kind is EventKind.CHANNEL:
            self._check_follower(position + 1, self._running_message_type(position))

        del self.events[position]
        del self.items[position + 1]
        self.sync_length()
        self.recompute_times()
        return event

    def use_key_signatures(self, key_signatures: Optional[TimeMap]) -> None:
        """Switch to another key-signature index (shared or track-local)."""
        self.key_signatures = key_signatures if key_signatures is not None else TimeMap()
        self._own_keys = []

    def recompute_times(self) -> None:
        """
        Recompute cumulative times and rebuild both indices.

        Cumulative times are set when events are decoded or appended and do
        not follow later delta-time edits on their own.
        """
        self.channels.clear()
        for time, key in self._own_keys:
            self.key_signatures.remove(time, key)
        self._own_keys = []

        time = 0
        for event in self.events:
            time += event.delta_time
            event.cumulative_time = time
            self._index_event(event)
        self.refresh()

    def channel_at(self, time: int) -> Optional[int]:
        """Channel of the last event with a status byte at or before ``time``."""
        return self.channels.at(time)

    def key_signature_at(self, time: int) -> Optional[KeySignature]:
        """Key signature in effect at ``time``, or None before the first one."""
        return self.key_signatures.at(time)

    @property
    def has_end_of_track(self) -> bool:
        if not self.events:
            return False
        last = self.events[-1]
        return last.kind is EventKind.META and last.meta_type == MetaType.END_OF_TRACK

    @property
    def end_time(self) -> int:
        """Cumulative time of the last event."""
        return self.events[-1].cumulative_time if self.events else 0

    @property
    def name(self) -> Optional[str]:
        """Text of the first Sequence/Track Name event, if any."""
        for event in self.events:
            if event.kind is EventKind.META and event.meta_type == MetaType.SEQUENCE_TRACK_NAME:
                return event.text
        return None

    def channel_events(self) -> List[ChannelEvent]:
        return [event for event in self.events if event.kind is EventKind.CHANNEL]
