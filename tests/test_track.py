"""Tests for track chunk decoding, editing and lookups."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midiscope.models.chunk import TrackChunk
from midiscope.models.events import (
    ChannelMode,
    EndOfTrack,
    NoteOff,
    NoteOn,
    ProgramChange,
)
from midiscope.models.key_signature import KeySignature
from midiscope.models.midi_file import MidiFile
from midiscope.utils.validation import (
    BYTE_COUNT_MISMATCH,
    MISSING_END_OF_TRACK,
    InvalidInputError,
    InvalidStatusByteError,
)

END_OF_TRACK = bytes([0x00, 0xFF, 0x2F, 0x00])


def make_chunk(chunk_type: bytes, content: bytes) -> bytes:
    return chunk_type + len(content).to_bytes(4, "big") + content


def decode_track(content: bytes) -> TrackChunk:
    return TrackChunk.decode(make_chunk(b"MTrk", content), 0)


class TestTrackDecoding:
    """Test cases for decoding MTrk chunks."""

    def test_running_status(self, running_status_track):
        """Test that data bytes continue the previous message type and channel."""
        track = decode_track(running_status_track)

        assert len(track.events) == 4
        first, second, third, _ = track.events
        assert all(isinstance(event, NoteOn) for event in (first, second, third))
        assert not first.running_status
        assert second.running_status and third.running_status
        assert [event.note for event in (first, second, third)] == [0x3C, 0x3E, 0x40]
        assert second.channel_in(track) == 3
        assert third.channel_in(track) == 3
        assert not track.issues

    def test_cumulative_times(self, running_status_track):
        """Test that cumulative times add up delta times."""
        track = decode_track(running_status_track)
        assert [event.cumulative_time for event in track.events] == [0, 16, 32, 32]
        assert track.end_time == 32

    def test_round_trip(self, running_status_track):
        """Test that decoding then encoding gives the same bytes."""
        data = make_chunk(b"MTrk", running_status_track)
        assert TrackChunk.decode(data, 0).to_bytes() == data

    def test_comment_lines(self, running_status_track):
        """Test one text line per item."""
        track = decode_track(running_status_track)
        lines = track.streams.lines()

        assert track.line_count == 5
        assert lines[0][1] == "Track chunk, 14 bytes"
        assert lines[1][0] == "         00 93 3C 40"
        assert lines[2][1] == f"{16:>9} | {' ' * 22} | Note number 62 (D 4), velocity 64"
        assert lines[4][1].startswith(f"{0:>9} | End of track")

    def test_running_status_skips_meta_events(self):
        """Test that meta events between channel events keep running status."""
        content = bytes(
            [0x00, 0x90, 0x3C, 0x40, 0x00, 0xFF, 0x01, 0x01, 0x41, 0x10, 0x3E, 0x40]
        ) + END_OF_TRACK
        track = decode_track(content)
        assert isinstance(track.events[2], NoteOn)
        assert track.events[2].running_status

    def test_running_status_channel_mode(self):
        """Test that a running control change on 120-127 is a channel mode message."""
        content = bytes([0x00, 0xB0, 0x07, 0x64, 0x00, 0x7B, 0x00]) + END_OF_TRACK
        track = decode_track(content)
        assert isinstance(track.events[1], ChannelMode)
        assert track.events[1].mode == 123

    def test_running_status_without_status(self):
        """Test a data byte with no channel event before it."""
        with pytest.raises(InvalidStatusByteError, match="no preceding status"):
            decode_track(bytes([0x00, 0x3C, 0x40]) + END_OF_TRACK)

    def test_system_status_rejected(self):
        """Test system common status bytes inside a track."""
        with pytest.raises(InvalidStatusByteError, match="0xF1"):
            decode_track(bytes([0x00, 0xF1, 0x00]) + END_OF_TRACK)

    def test_missing_end_of_track(self):
        """Test that a track without End Of Track is recorded."""
        track = decode_track(bytes([0x00, 0x90, 0x3C, 0x40]))
        assert [issue.kind for issue in track.issues] == [MISSING_END_OF_TRACK]
        assert not track.has_end_of_track

    def test_truncated_track(self, running_status_track):
        """Test a track declaring more bytes than the file holds."""
        data = b"MTrk" + (len(running_status_track) + 5).to_bytes(4, "big")
        data += running_status_track
        track = TrackChunk.decode(data, 0)

        assert track.issues[0].kind == BYTE_COUNT_MISMATCH
        assert track.issues[0].expected == len(running_status_track) + 5
        assert track.issues[0].actual == len(running_status_track)
        assert track.to_bytes() == data

    def test_events_overrun_length(self, running_status_track):
        """Test a last event running past the declared length."""
        declared = len(running_status_track) - 1
        data = b"MTrk" + declared.to_bytes(4, "big") + running_status_track
        track = TrackChunk.decode(data, 0)

        assert [issue.kind for issue in track.issues] == [
            BYTE_COUNT_MISMATCH,
            MISSING_END_OF_TRACK,
        ]
        assert track.issues[0].expected == declared
        assert track.issues[0].actual == len(running_status_track)
        assert len(track.events) == 3
        assert track.content_size == declared
        assert track.to_bytes() == data[:-1]

    def test_events_overrun_length_in_file(self, running_status_track):
        """Test that a file with an overrunning track writes back unchanged."""
        header = make_chunk(b"MThd", bytes([0x00, 0x01, 0x00, 0x02, 0x00, 0x60]))
        declared = len(running_status_track) - 1
        broken = b"MTrk" + declared.to_bytes(4, "big") + running_status_track
        data = header + broken + make_chunk(b"MTrk", END_OF_TRACK)
        midi = MidiFile.from_bytes(data)

        assert midi.failure is None
        assert len(midi.tracks[0].events) == 3
        assert midi.to_bytes() == data

    def test_key_signature_lookups(self):
        """Test that note names follow the key in effect."""
        content = bytes(
            [
                0x00, 0x90, 0x3D, 0x40,
                0x60, 0xFF, 0x59, 0x02, 0xFF, 0x00,  # F major at 96
                0x00, 0x90, 0x3D, 0x40,
            ]
        ) + END_OF_TRACK
        track = decode_track(content)

        assert track.key_signature_at(95) is None
        assert track.key_signature_at(96) is KeySignature.F_MAJOR
        assert "(C# 4)" in track.events[0].get_comment(track)
        assert "(Db 4)" in track.events[2].get_comment(track)

    def test_name(self):
        """Test the track name lookup."""
        content = bytes([0x00, 0xFF, 0x03, 0x04]) + b"Bass" + END_OF_TRACK
        assert decode_track(content).name == "Bass"
        assert decode_track(END_OF_TRACK).name is None


class TestTrackEditing:
    """Test cases for building and editing tracks."""

    def test_create(self):
        """Test a new track holding End Of Track."""
        track = TrackChunk.create()
        assert track.to_bytes() == b"MTrk\x00\x00\x00\x04" + END_OF_TRACK
        assert track.has_end_of_track

    def test_insert_events(self):
        """Test inserting before End Of Track."""
        track = TrackChunk.create()
        track.insert_event(0, NoteOn(0, 0, 60, 100))
        track.insert_event(1, NoteOff(96, 0, 60, 0))

        assert track.length == 12
        assert track.to_bytes() == (
            b"MTrk\x00\x00\x00\x0c"
            + bytes([0x00, 0x90, 0x3C, 0x64, 0x60, 0x80, 0x3C, 0x00])
            + END_OF_TRACK
        )
        assert [event.cumulative_time for event in track.events] == [0, 96, 96]
        assert track.line_count == 4

    def test_append_updates_prefix_line(self):
        """Test that the length comment follows appended events."""
        track = TrackChunk()
        track.append_event(NoteOn(0, 0, 60, 100))
        track.append_event(EndOfTrack())

        assert track.length == 8
        assert track.streams.lines()[0][1] == "Track chunk, 8 bytes"

    def test_append_running_status_needs_channel_event(self):
        """Test appending running status to an empty track."""
        track = TrackChunk()
        with pytest.raises(InvalidStatusByteError):
            track.append_event(NoteOn(0, None, 60, 1))

    def test_append_running_status_type_mismatch(self):
        """Test running status after a different message type."""
        track = TrackChunk()
        track.append_event(ProgramChange(0, 0, 1))
        with pytest.raises(InvalidInputError):
            track.append_event(NoteOn(0, None, 60, 1))

    def test_append_running_status(self):
        """Test appending a running-status continuation."""
        track = TrackChunk()
        track.append_event(NoteOn(0, 2, 60, 100))
        track.append_event(NoteOn(10, None, 60, 0))
        assert track.events[1].channel_in(track) == 2
        assert track.to_bytes()[8:] == bytes([0x00, 0x92, 0x3C, 0x64, 0x0A, 0x3C, 0x00])

    def test_append_rejects_non_events(self):
        """Test appending something that is not an event."""
        with pytest.raises(InvalidInputError):
            TrackChunk().append_event(b"\x00\x90\x3c\x40")

    def test_insert_breaking_running_status(self, running_status_track):
        """Test that a running-status event cannot lose its message type."""
        track = decode_track(running_status_track)
        with pytest.raises(InvalidInputError, match="running status"):
            track.insert_event(1, ProgramChange(0, 3, 5))
        assert len(track.events) == 4

    def test_remove_breaking_running_status(self, running_status_track):
        """Test that the status event of a running run cannot be removed."""
        track = decode_track(running_status_track)
        with pytest.raises(InvalidInputError):
            track.remove_event(0)

    def test_remove_event(self, running_status_track):
        """Test removing a running-status event."""
        track = decode_track(running_status_track)
        removed = track.remove_event(1)

        assert removed.note == 0x3E
        assert track.length == len(running_status_track) - 3
        assert [event.cumulative_time for event in track.events] == [0, 16, 16]

    def test_delta_edit_needs_recompute(self, running_status_track):
        """Test that cumulative times move only on recompute."""
        track = decode_track(running_status_track)
        track.events[0].delta_time = 200

        assert track.events[1].cumulative_time == 16
        track.recompute_times()
        assert [event.cumulative_time for event in track.events] == [200, 216, 232, 232]

    def test_delta_edit_updates_length(self, running_status_track):
        """Test that the chunk length follows a growing delta time."""
        track = decode_track(running_status_track)
        track.events[0].delta_time = 200

        data = track.to_bytes()
        assert data[4:8] == (len(running_status_track) + 1).to_bytes(4, "big")
        assert data[8:10] == bytes([0x81, 0x48])

    def test_recompute_moves_key_signatures(self):
        """Test that key signature times follow delta edits."""
        content = bytes([0x00, 0x90, 0x3D, 0x40, 0x60, 0xFF, 0x59, 0x02, 0xFF, 0x00])
        track = decode_track(content + END_OF_TRACK)
        track.events[1].delta_time = 10
        track.recompute_times()

        assert track.key_signature_at(9) is None
        assert track.key_signature_at(10) is KeySignature.F_MAJOR
        assert len(track.key_signatures) == 1

    def test_refresh_after_field_edit(self, running_status_track):
        """Test that comments are rebuilt on refresh."""
        track = decode_track(running_status_track)
        track.events[0].note = 61

        assert "Note number 61" not in track.comments
        track.refresh()
        assert "Note number 61 (C# 4)" in track.comments
