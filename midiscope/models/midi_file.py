"""
Whole Standard MIDI File model.
"""

import logging
from typing import List, Optional, Tuple, Union

from midiscope.models.chunk import (
    CHUNK_PREFIX_SIZE,
    HEADER_TYPE,
    TRACK_TYPE,
    Chunk,
    ChunkInfo,
    HeaderChunk,
    TrackChunk,
    UnknownChunk,
)
from midiscope.models.key_signature import KeySignature
from midiscope.models.text_streams import TextStreams
from midiscope.models.time_map import TimeMap
from midiscope.utils.validation import (
    MISSING_HEADER,
    TRACK_COUNT_MISMATCH,
    InvalidInputError,
    MidiError,
    ParseIssue,
    validate_number,
)

logger = logging.getLogger(__name__)

DEFAULT_TICKS_PER_QUARTER_NOTE = 96


class MidiFile:
    """
    A Standard MIDI File: one header chunk followed by track chunks.

    Files are built either from bytes with ``from_bytes`` or from scratch
    with ``create``. Decoding is best effort: problems that leave the rest
    of the file readable are collected in ``issues`` (and in each chunk's
    ``issues``), and a fatal error is stored in ``failure`` together with
    every chunk decoded before it.

    Example:
        midi = MidiFile.from_bytes(data)
        if midi.failure is None:
            print(midi.comments)
            midi.tracks[0].events[0].delta_time = 10
            data = midi.to_bytes()
    """

    def __init__(self):
        self.chunks: List[Chunk] = []
        self.issues: List[ParseIssue] = []
        self.failure: Optional[MidiError] = None
        self.key_signatures = TimeMap()
        self.streams = TextStreams()

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray], strict: bool = False) -> "MidiFile":
        """
        Decode a file.

        Args:
            data: Complete file contents
            strict: Raise fatal errors instead of storing them in ``failure``

        Returns:
            Decoded file

        Raises:
            MidiError: Only when strict is True
        """
        midi = cls()
        try:
            midi._decode(bytes(data))
        except MidiError as error:
            midi.failure = error
            logger.warning("Decoding failed: %s", error)
            if strict:
                raise
        return midi

    @classmethod
    def create(
        cls,
        format: int = 1,
        number_of_tracks: int = 1,
        ticks_per_quarter_note: Optional[int] = None,
        frames_per_second: Optional[int] = None,
        ticks_per_frame: Optional[int] = None,
    ) -> "MidiFile":
        """
        Create a new file whose tracks each hold an End Of Track event.

        Timing defaults to 96 ticks per quarter-note when neither
        ticks_per_quarter_note nor SMPTE settings are given.
        """
        smpte = frames_per_second is not None or ticks_per_frame is not None
        if ticks_per_quarter_note is None and not smpte:
            ticks_per_quarter_note = DEFAULT_TICKS_PER_QUARTER_NOTE

        midi = cls()
        midi.add_chunk(
            HeaderChunk(
                format,
                number_of_tracks,
                ticks_per_quarter_note=ticks_per_quarter_note,
                frames_per_second=frames_per_second,
                ticks_per_frame=ticks_per_frame,
            )
        )
        for _ in range(number_of_tracks):
            midi.add_chunk(TrackChunk.create(midi._shared_key_signatures()))
        return midi

    def _decode(self, data: bytes) -> None:
        if data[:4] != HEADER_TYPE.encode("ascii"):
            self._record(MISSING_HEADER, "File does not start with a header chunk")

        index = 0
        while index < len(data):
            info = ChunkInfo.decode(data, index)
            if info.type == HEADER_TYPE:
                chunk = HeaderChunk.decode(data, index)
            elif info.type == TRACK_TYPE:
                chunk = TrackChunk.decode(data, index, self._shared_key_signatures())
            else:
                chunk = UnknownChunk.decode(data, index)
            logger.debug("Chunk %r at offset %d, %d bytes", info.type, index, info.length)
            self.add_chunk(chunk)
            index += CHUNK_PREFIX_SIZE + info.length

        header = self.header
        if header is not None and header.number_of_tracks != len(self.tracks):
            self.issues.insert(
                0,
                ParseIssue(
                    TRACK_COUNT_MISMATCH,
                    f"Header declares {header.number_of_tracks} tracks, "
                    f"file contains {len(self.tracks)}",
                    header.number_of_tracks,
                    len(self.tracks),
                ),
            )
            logger.warning(self.issues[0].message)

    def _record(self, kind: str, message: str) -> None:
        logger.warning(message)
        self.issues.append(ParseIssue(kind, message))

    def _shared_key_signatures(self) -> Optional[TimeMap]:
        """File-wide key-signature index, or None when tracks keep their own."""
        return None if self.format == 2 else self.key_signatures

    def add_chunk(self, chunk: Chunk) -> None:
        """Append a chunk and its text lines."""
        self.chunks.append(chunk)
        if self.streams.line_count:
            self.streams.add_line("", "")
        self.streams.extend(chunk.streams)

    def add_track(self) -> TrackChunk:
        """
        Append a new track holding an End Of Track event.

        The header's track count goes up by one.
        """
        track = TrackChunk.create(self._shared_key_signatures())
        self.chunks.append(track)
        header = self.header
        if header is not None:
            header.number_of_tracks += 1
        self.refresh()
        return track

    @property
    def header(self) -> Optional[HeaderChunk]:
        for chunk in self.chunks:
            if isinstance(chunk, HeaderChunk):
                return chunk
        return None

    @property
    def tracks(self) -> List[TrackChunk]:
        return [chunk for chunk in self.chunks if isinstance(chunk, TrackChunk)]

    @property
    def format(self) -> Optional[int]:
        header = self.header
        return header.format if header is not None else None

    def key_signature_at(self, time: int, track: Optional[int] = None) -> Optional[KeySignature]:
        """
        Key signature in effect at ``time``.

        Format 2 tracks are independent, so a track number is needed there.

        Args:
            time: Cumulative time in ticks
            track: Zero-based track number (format 2 only)

        Raises:
            InvalidInputError: If a format 2 lookup has no track number
        """
        if self.format != 2:
            return self.key_signatures.at(time)
        if track is None:
            raise InvalidInputError("Format 2 key signatures are per track; give a track number")
        tracks = self.tracks
        validate_number(track, 0, len(tracks) - 1, "Track number")
        return tracks[track].key_signature_at(time)

    def to_bytes(self) -> bytes:
        """Encode the file exactly as currently held."""
        return b"".join(chunk.to_bytes() for chunk in self.chunks)

    def sync_lengths(self) -> None:
        for chunk in self.chunks:
            chunk.sync_length()

    def recompute_times(self) -> None:
        """
        Recompute cumulative times and all indices after edits.

        Also picks up a format change between format 2 and 0/1.
        """
        self.key_signatures.clear()
        for track in self.tracks:
            track.use_key_signatures(self._shared_key_signatures())
        for track in self.tracks:
            track.recompute_times()
        self.refresh()

    def refresh(self) -> None:
        """Rebuild the text streams of the file and of every chunk."""
        self.sync_lengths()
        self.streams.clear()
        for number, chunk in enumerate(self.chunks):
            chunk.refresh()
            if number:
                self.streams.add_line("", "")
            self.streams.extend(chunk.streams)

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
        """Character offsets of a line in the hex and comment streams."""
        return self.streams.get_index(line)

    @property
    def all_issues(self) -> List[Tuple[str, ParseIssue]]:
        """Every issue with the location it belongs to ("" for the file itself)."""
        found = [("", issue) for issue in self.issues]
        track_number = 0
        for number, chunk in enumerate(self.chunks, 1):
            if isinstance(chunk, TrackChunk):
                track_number += 1
                location = f"Chunk {number} (track {track_number})"
            else:
                location = f"Chunk {number}"
            found.extend((location, issue) for issue in chunk.issues)
        return found

    @property
    def error_text(self) -> str:
        """All recorded problems, one per line, fatal error last."""
        lines = [
            f"{location}: {issue}" if location else str(issue)
            for location, issue in self.all_issues
        ]
        if self.failure is not None:
            lines.append(f"Decoding failed: {self.failure}")
        return "\n".join(lines)

    @property
    def valid(self) -> bool:
        return self.failure is None and not self.all_issues

    def __repr__(self) -> str:
        return f"MidiFile(format={self.format}, chunks={len(self.chunks)})"
