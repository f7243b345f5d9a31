"""Tests for reading and writing .mid files on disk."""

import pytest
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from midiscope import SMFReader, SMFWriter
from midiscope.models.events import SetTempo
from midiscope.models.midi_file import MidiFile
from midiscope.utils.validation import InvalidStatusByteError


class TestSMFReader:
    """Test cases for SMFReader."""

    def test_read_file(self, tmp_path, rich_smf):
        """Test reading a file from disk."""
        path = tmp_path / "song.mid"
        path.write_bytes(rich_smf)

        midi = SMFReader.read(path)
        assert midi.valid
        assert len(midi.tracks) == 2

    def test_read_missing_file(self, tmp_path):
        """Test reading a path that does not exist."""
        with pytest.raises(FileNotFoundError):
            SMFReader.read(tmp_path / "missing.mid")

    def test_strict_read(self, tmp_path, smf_builder):
        """Test that strict reading raises decoding errors."""
        path = tmp_path / "bad.mid"
        path.write_bytes(smf_builder([bytes([0x00, 0xF1, 0x00])]))

        assert SMFReader.read(path).failure is not None
        with pytest.raises(InvalidStatusByteError):
            SMFReader.read(path, strict=True)

    def test_can_read(self, tmp_path, minimal_smf):
        """Test the header magic check."""
        good = tmp_path / "good.mid"
        good.write_bytes(minimal_smf)
        other = tmp_path / "other.bin"
        other.write_bytes(b"RIFF\x00\x00\x00\x00")

        assert SMFReader.can_read(good)
        assert not SMFReader.can_read(other)
        assert not SMFReader.can_read(tmp_path / "missing.mid")

    def test_get_file_info(self, tmp_path, rich_smf):
        """Test the summary dictionary."""
        path = tmp_path / "song.mid"
        path.write_bytes(rich_smf)

        info = SMFReader.get_file_info(path)
        assert info["filename"] == "song.mid"
        assert info["size"] == len(rich_smf)
        assert info["format"] == 1
        assert info["declared_tracks"] == 2
        assert info["tracks"] == 2
        assert info["chunks"] == 4
        assert info["events"] == 16
        assert info["division"] == "96 ticks/quarter-note"
        assert info["valid"] is True
        assert info["errors"] == ""


class TestSMFWriter:
    """Test cases for SMFWriter."""

    def test_write_creates_directories(self, tmp_path, minimal_smf):
        """Test writing into a directory that does not exist yet."""
        path = tmp_path / "out" / "empty.mid"
        SMFWriter.write(MidiFile.create(format=0), path)
        assert path.read_bytes() == minimal_smf

    def test_edit_and_write(self, tmp_path, rich_smf):
        """Test reading, editing and writing back."""
        source = tmp_path / "song.mid"
        source.write_bytes(rich_smf)
        midi = SMFReader.read(source)

        midi.tracks[0].insert_event(0, SetTempo.from_bpm(0, 90))
        target = tmp_path / "slower.mid"
        SMFWriter.write(midi, target)

        result = SMFReader.read(target)
        assert result.valid
        assert result.tracks[0].events[0].tempo == 666667
        assert len(target.read_bytes()) == len(rich_smf) + 7
