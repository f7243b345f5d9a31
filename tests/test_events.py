"""Tests for channel, meta and SysEx events."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midiscope.models.events import (
    ChannelMode,
    ControlChange,
    EndOfTrack,
    KeySignatureEvent,
    MetaEvent,
    NoteOff,
    NoteOn,
    PitchBend,
    ProgramChange,
    SequenceNumber,
    SequencerSpecific,
    SequenceTrackName,
    SetTempo,
    SmpteOffset,
    SysExEvent,
    TimeSignature,
    channel_event_class,
    decode_channel_event,
    decode_meta_event,
)
from midiscope.models.events.channel import MessageType
from midiscope.models.key_signature import KeySignature
from midiscope.utils.validation import (
    InvalidInputError,
    InvalidStatusByteError,
    MetaLengthTooShortError,
    MustUseTypedClassError,
    RunningStatusChannelLockedError,
    UnexpectedEndOfDataError,
    ValueOutOfRangeError,
)


class TestChannelEvents:
    """Test cases for channel voice and mode events."""

    def test_note_on_bytes(self):
        """Test encoding with a two-byte delta time."""
        event = NoteOn(200, 0, 60, 100)
        assert event.data == bytes([0x81, 0x48, 0x90, 0x3C, 0x64])
        assert event.delta_size == 2
        assert event.message_type is MessageType.NOTE_ON
        assert event.channel == 0
        assert event.values == (60, 100)

    def test_note_on_comment(self):
        """Test the three-column comment line."""
        event = NoteOn(0, 0, 60, 100)
        expected = f"{0:>9} | {'Note on':<17} | {0:>2} | Note number 60 (C 4), velocity 100"
        assert event.comment == expected

    def test_hex_is_right_aligned_on_delta(self):
        """Test that the delta column is padded to four bytes."""
        event = NoteOn(200, 0, 60, 100)
        assert event.hex == "      81 48 90 3C 64"

    def test_running_status_event(self):
        """Test an event built without a status byte."""
        event = NoteOn(0, None, 60, 100)
        assert event.data == bytes([0x00, 0x3C, 0x64])
        assert event.running_status
        assert event.channel is None
        assert event.message_type is None
        assert event.hex == " " * 9 + "00 " + "   " + "3C 64"
        assert event.type_comment == " " * 22

    def test_running_status_channel_locked(self):
        """Test that a running-status event cannot take a channel."""
        event = NoteOn(0, None, 60, 100)
        with pytest.raises(RunningStatusChannelLockedError):
            event.channel = 3

    def test_change_channel(self):
        """Test rewriting the status byte."""
        event = NoteOff(0, 0, 60, 0)
        event.channel = 15
        assert event.data == bytes([0x00, 0x8F, 0x3C, 0x00])

    def test_delta_time_resize(self):
        """Test that bytes after the delta time shift when it grows or shrinks."""
        event = NoteOn(0, 0, 60, 100)
        event.delta_time = 128
        assert event.data == bytes([0x81, 0x00, 0x90, 0x3C, 0x64])
        assert event.delta_size == 2
        assert event.note == 60

        event.delta_time = 5
        assert event.data == bytes([0x05, 0x90, 0x3C, 0x64])
        assert event.velocity == 100

    def test_delta_time_out_of_range(self):
        """Test delta times beyond the VLQ maximum."""
        event = NoteOn(0, 0, 60, 100)
        with pytest.raises(ValueOutOfRangeError, match="Delta time"):
            event.delta_time = 0x10000000

    def test_field_ranges(self):
        """Test that data bytes and channels are checked."""
        with pytest.raises(ValueOutOfRangeError, match="Velocity must be 0-127"):
            NoteOn(0, 0, 60, 128)
        with pytest.raises(ValueOutOfRangeError, match="Channel must be 0-15"):
            NoteOn(0, 16, 60, 100)

        event = NoteOn(0, 0, 60, 100)
        with pytest.raises(ValueOutOfRangeError):
            event.note = 200
        assert event.note == 60

    def test_control_change_excludes_mode_numbers(self):
        """Test that controllers 120-127 belong to ChannelMode."""
        with pytest.raises(ValueOutOfRangeError, match="Controller number must be 0-119"):
            ControlChange(0, 0, 120, 0)

        event = ChannelMode(0, 0, 123)
        assert event.data == bytes([0x00, 0xB0, 0x7B, 0x00])
        assert "All Notes Off" in event.comment

    def test_control_change_comment(self):
        """Test controller names."""
        assert "Channel Volume" in ControlChange(0, 0, 7, 100).comment
        assert "LSB" in ControlChange(0, 0, 39, 0).comment

    def test_program_change(self):
        """Test a single data byte event."""
        event = ProgramChange(0, 0, 24)
        assert event.data == bytes([0x00, 0xC0, 0x18])
        assert event.data_comment() == "Program number 24 (Acoustic Guitar (nylon))"

    def test_pitch_bend_value(self):
        """Test the 14-bit value helpers."""
        event = PitchBend.from_value(0, 0)
        assert event.data == bytes([0x00, 0xE0, 0x00, 0x40])
        assert event.value == PitchBend.CENTER

        event.value = 0x3FFF
        assert (event.lsb, event.msb) == (0x7F, 0x7F)
        with pytest.raises(ValueOutOfRangeError):
            event.value = 0x4000

    def test_percussion_names(self):
        """Test that channel 9 notes use drum names."""
        snare = NoteOn(0, 9, 38, 100)
        assert snare.note_name(38) == "Acoustic Snare"
        assert "Acoustic Snare" in snare.comment

        assert NoteOn(0, 0, 38, 100).note_name(38) == "D 2"

    def test_wrong_value_count(self):
        """Test the number of data values a class takes."""
        with pytest.raises(TypeError):
            ProgramChange(0, 0, 1, 2)


class TestChannelDecoding:
    """Test cases for decoding channel events."""

    def test_decode_with_status(self):
        """Test decoding an event with its own status byte."""
        event = decode_channel_event(bytes([0x00, 0x93, 0x3C, 0x40]), 0, 0x90)
        assert isinstance(event, NoteOn)
        assert event.channel == 3
        assert event.note == 60

    def test_decode_running_status(self):
        """Test decoding an event without a status byte."""
        data = bytes([0x00, 0x93, 0x3C, 0x40, 0x10, 0x3E, 0x40])
        event = decode_channel_event(data, 4, 0x90, running_status=True)
        assert event.running_status
        assert event.note == 0x3E
        assert event.delta_time == 0x10
        assert event.size == 3

    def test_control_change_dispatch(self):
        """Test that the first data byte picks ChannelMode."""
        assert channel_event_class(0xB0, 7) is ControlChange
        assert channel_event_class(0xB5, 121) is ChannelMode

    def test_invalid_status(self):
        """Test system message status bytes."""
        with pytest.raises(InvalidStatusByteError):
            channel_event_class(0xF0, 0)

    def test_truncated_event(self):
        """Test an event cut off by the end of data."""
        with pytest.raises(UnexpectedEndOfDataError):
            decode_channel_event(bytes([0x00, 0x90, 0x3C]), 0, 0x90)

    def test_data_byte_out_of_range(self):
        """Test a data byte with its top bit set."""
        with pytest.raises(ValueOutOfRangeError):
            decode_channel_event(bytes([0x00, 0x90, 0x3C, 0x80]), 0, 0x90)


class TestMetaEvents:
    """Test cases for meta events."""

    def test_set_tempo(self):
        """Test tempo encoding and BPM helpers."""
        event = SetTempo(0, 500000)
        assert event.data == bytes([0x00, 0xFF, 0x51, 0x03, 0x07, 0xA1, 0x20])
        assert event.beats_per_minute == 120.0
        assert event.data_comment() == (
            "500000 microseconds per quarter-note (120 beats per minute)"
        )
        assert SetTempo.from_bpm(0, 100).tempo == 600000

    def test_meta_comment_columns(self):
        """Test the meta type column."""
        event = SetTempo(0, 500000)
        assert event.comment.startswith(f"{0:>9} | {'Set tempo':<22} | 500000")

    def test_text_resize(self):
        """Test that the length VLQ follows the text size."""
        event = SequenceTrackName(0, "Hi")
        assert event.data == bytes([0x00, 0xFF, 0x03, 0x02, 0x48, 0x69])

        event.text = "x" * 200
        assert event.length == 200
        assert event.data[3:5] == bytes([0x81, 0x48])
        assert event.size == 205
        assert event.text == "x" * 200

        event.text = "A"
        assert event.data == bytes([0x00, 0xFF, 0x03, 0x01, 0x41])

    def test_end_of_track(self):
        """Test the End Of Track encoding."""
        assert EndOfTrack().data == bytes([0x00, 0xFF, 0x2F, 0x00])

    def test_sequence_number(self):
        """Test a 16-bit field."""
        event = SequenceNumber(0, 0x1234)
        assert event.data == bytes([0x00, 0xFF, 0x00, 0x02, 0x12, 0x34])
        event.number = 7
        assert event.data[-2:] == bytes([0x00, 0x07])

    def test_time_signature(self):
        """Test default fields and comment."""
        event = TimeSignature()
        assert event.data == bytes([0x00, 0xFF, 0x58, 0x04, 0x04, 0x02, 0x18, 0x08])
        assert event.data_comment() == (
            "4/2^2 time, 24 MIDI clocks per click, 8 32nd-notes per quarter-note"
        )

    def test_smpte_offset(self):
        """Test time-code fields."""
        event = SmpteOffset(0, 1, 2, 3, 4, 5)
        assert event.data_comment() == "01:02:03:04.05"
        with pytest.raises(ValueOutOfRangeError, match="Hours"):
            event.hours = 24

    def test_key_signature_event(self):
        """Test key encoding and validation."""
        event = KeySignatureEvent(0, KeySignature.B_FLAT_MAJOR)
        assert event.data == bytes([0x00, 0xFF, 0x59, 0x02, 0xFE, 0x00])
        assert event.key is KeySignature.B_FLAT_MAJOR
        assert event.data_comment() == "Bb major"

        with pytest.raises(InvalidInputError):
            event.key = 0x0002

    def test_unknown_key_signature(self):
        """Test decoding key data outside the 30 legal keys."""
        event = decode_meta_event(bytes([0x00, 0xFF, 0x59, 0x02, 0x08, 0x00]), 0)
        assert event.key is None
        assert event.data_comment() == "Unknown key signature (0x0800)"

    def test_generic_meta_event(self):
        """Test a meta type without a dedicated class."""
        event = MetaEvent(0, 0x21, b"\x00")
        assert event.type_comment == f"{'Meta 0x21':<22}"

        event.payload = b"\x01\x02"
        assert event.data == bytes([0x00, 0xFF, 0x21, 0x02, 0x01, 0x02])

    def test_generic_meta_event_rejects_typed_kinds(self):
        """Test that known and text types need their class."""
        with pytest.raises(MustUseTypedClassError):
            MetaEvent(0, 0x51)
        with pytest.raises(MustUseTypedClassError):
            MetaEvent(0, 0x05)
        with pytest.raises(ValueOutOfRangeError):
            MetaEvent(0, 0x80)

    def test_typed_payload_is_read_only(self):
        """Test that typed events are edited through their fields."""
        event = SetTempo()
        with pytest.raises(InvalidInputError):
            event.payload = b"\x01\x02\x03"

    def test_sequencer_specific_payload(self):
        """Test that sequencer data can be replaced."""
        event = SequencerSpecific(0, b"\x43\x10")
        event.payload = b"\x43\x10\x4C"
        assert event.data == bytes([0x00, 0xFF, 0x7F, 0x03, 0x43, 0x10, 0x4C])

    def test_length_too_short(self):
        """Test typed events declaring less data than they need."""
        with pytest.raises(MetaLengthTooShortError, match="Time signature"):
            TimeSignature.from_payload(0, b"\x04\x02\x18")
        with pytest.raises(MetaLengthTooShortError, match="Set tempo needs at least 3"):
            SetTempo.from_payload(0, b"\x07\xa1")
        with pytest.raises(MetaLengthTooShortError):
            decode_meta_event(bytes([0x00, 0xFF, 0x51, 0x02, 0x07, 0xA1]), 0)

    def test_longer_data_is_kept(self):
        """Test that extra data bytes survive and fields read the front."""
        data = bytes([0x00, 0xFF, 0x51, 0x04, 0x07, 0xA1, 0x20, 0x99])
        event = decode_meta_event(data, 0)
        assert isinstance(event, SetTempo)
        assert event.tempo == 500000
        assert event.data == data

    def test_declared_length_past_end(self):
        """Test a meta event whose data is cut off."""
        with pytest.raises(UnexpectedEndOfDataError):
            decode_meta_event(bytes([0x00, 0xFF, 0x01, 0x05, 0x41]), 0)


class TestSysExEvents:
    """Test cases for SysEx events."""

    def test_sysex_message(self):
        """Test an F0 message and its comment."""
        event = SysExEvent(0, bytes([0x7E, 0x7F, 0x09, 0x01, 0xF7]))
        assert event.data == bytes([0x00, 0xF0, 0x05, 0x7E, 0x7F, 0x09, 0x01, 0xF7])
        assert event.type_comment.rstrip() == "SysEx message"
        assert event.data_comment() == '(5 bytes) "~...."'

    def test_escape(self):
        """Test switching to an F7 packet."""
        event = SysExEvent(0, b"\xf8", escape=True)
        assert event.data == bytes([0x00, 0xF7, 0x01, 0xF8])
        event.escape = False
        assert event.data[1] == 0xF0

    def test_payload_resize(self):
        """Test that the length follows the payload."""
        event = SysExEvent(0, b"\x01")
        event.payload = bytes(130)
        assert event.length == 130
        assert event.data[2:4] == bytes([0x81, 0x02])
        assert event.size == 1 + 1 + 2 + 130
