"""Test configuration and fixtures."""

import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

END_OF_TRACK = bytes([0x00, 0xFF, 0x2F, 0x00])


def make_chunk(chunk_type: bytes, content: bytes) -> bytes:
    """Build a chunk: type, 32-bit length, content."""
    return chunk_type + len(content).to_bytes(4, "big") + content


def make_smf(
    tracks: List[bytes],
    format: int = 1,
    division: int = 96,
    ntrks: Optional[int] = None,
) -> bytes:
    """Build a complete file from raw track contents."""
    ntrks = len(tracks) if ntrks is None else ntrks
    header = make_chunk(
        b"MThd",
        format.to_bytes(2, "big") + ntrks.to_bytes(2, "big") + division.to_bytes(2, "big"),
    )
    return header + b"".join(make_chunk(b"MTrk", track) for track in tracks)


@pytest.fixture
def smf_builder():
    """Return the file builder function."""
    return make_smf


@pytest.fixture
def chunk_builder():
    """Return the chunk builder function."""
    return make_chunk


@pytest.fixture
def minimal_smf():
    """Format 0 file with one track holding only End Of Track."""
    return make_smf([END_OF_TRACK], format=0)


@pytest.fixture
def running_status_track():
    """Track content: a Note On on channel 3 followed by two running-status notes."""
    return bytes(
        [
            0x00, 0x93, 0x3C, 0x40,  # Note on, channel 3, C 4
            0x10, 0x3E, 0x40,  # running status, D 4
            0x10, 0x40, 0x40,  # running status, E 4
        ]
    ) + END_OF_TRACK


@pytest.fixture
def rich_smf():
    """Format 1 file exercising most event kinds and an unknown chunk."""
    conductor = bytes(
        [
            0x00, 0xFF, 0x03, 0x05, 0x53, 0x6F, 0x6E, 0x67, 0x31,  # Track name "Song1"
            0x00, 0xFF, 0x51, 0x03, 0x07, 0xA1, 0x20,  # Set tempo 500000
            0x00, 0xFF, 0x58, 0x04, 0x04, 0x02, 0x18, 0x08,  # 4/4
            0x00, 0xFF, 0x59, 0x02, 0xFE, 0x00,  # Bb major
            0x00, 0xFF, 0x54, 0x05, 0x01, 0x00, 0x00, 0x00, 0x00,  # SMPTE offset
            0x00, 0xFF, 0x21, 0x01, 0x00,  # MIDI port (generic meta)
        ]
    ) + END_OF_TRACK
    music = bytes(
        [
            0x00, 0xF0, 0x05, 0x7E, 0x7F, 0x09, 0x01, 0xF7,  # GM System On
            0x00, 0xC0, 0x18,  # Program change, nylon guitar
            0x00, 0xB0, 0x07, 0x64,  # Channel volume
            0x00, 0x90, 0x3D, 0x50,  # Note on 61
            0x60, 0x3D, 0x00,  # running status note off by velocity 0
            0x10, 0xE0, 0x00, 0x40,  # Pitch bend centre
            0x00, 0x99, 0x26, 0x64,  # Snare on channel 9
            0x81, 0x40, 0x89, 0x26, 0x00,  # Snare off after 192 ticks
        ]
    ) + END_OF_TRACK
    return make_smf([conductor, music], format=1) + make_chunk(b"XFIH", b"\x01\x02\x03")
