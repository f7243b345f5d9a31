"""Utility functions for midiscope."""

from midiscope.utils.codec import (
    read_number,
    write_number,
    read_vlq,
    write_vlq,
    size_vlq,
    encode_vlq,
    read_text,
    write_text,
)
from midiscope.utils.validation import MidiError, ParseIssue, validate_number

__all__ = [
    "read_number",
    "write_number",
    "read_vlq",
    "write_vlq",
    "size_vlq",
    "encode_vlq",
    "read_text",
    "write_text",
    "MidiError",
    "ParseIssue",
    "validate_number",
]
