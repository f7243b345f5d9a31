"""
Standard MIDI File reader.

Reads .mid files into the MidiFile model.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from midiscope.models.chunk import HEADER_TYPE
from midiscope.models.midi_file import MidiFile

logger = logging.getLogger(__name__)


class SMFReader:
    """
    Reader for Standard MIDI Files.

    Example:
        midi = SMFReader.read("song.mid")
        print(f"Format {midi.format}, {len(midi.tracks)} tracks")
    """

    MAGIC = HEADER_TYPE.encode("ascii")

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._raw_data: bytes = b""

    @classmethod
    def read(cls, filepath: Union[str, Path], strict: bool = False) -> MidiFile:
        """
        Read a MIDI file.

        Args:
            filepath: Path to .mid file
            strict: Raise decoding errors instead of storing them on the result

        Returns:
            Decoded MidiFile
        """
        reader = cls(strict=strict)
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> MidiFile:
        """
        Parse a MIDI file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            self._raw_data = f.read()

        logger.debug("Read %d bytes from %s", len(self._raw_data), filepath)
        return self.parse_bytes(self._raw_data)

    def parse_bytes(self, data: bytes) -> MidiFile:
        """Parse MIDI data from bytes."""
        self._raw_data = data
        return MidiFile.from_bytes(data, strict=self.strict)

    @classmethod
    def can_read(cls, filepath: Union[str, Path]) -> bool:
        """Check whether a file starts with a MIDI header chunk."""
        filepath = Path(filepath)

        if not filepath.is_file():
            return False

        with open(filepath, "rb") as f:
            return f.read(4) == cls.MAGIC

    @classmethod
    def get_file_info(cls, filepath: Union[str, Path]) -> Dict[str, Any]:
        """
        Summarise a MIDI file without keeping the model.

        Returns:
            Dictionary with size, format, track counts, timing and problems
        """
        filepath = Path(filepath)
        data = filepath.read_bytes()
        midi = MidiFile.from_bytes(data)
        header = midi.header

        info: Dict[str, Any] = {
            "filename": filepath.name,
            "size": len(data),
            "format": midi.format,
            "declared_tracks": header.number_of_tracks if header else None,
            "tracks": len(midi.tracks),
            "chunks": len(midi.chunks),
            "valid": midi.valid,
        }

        division: Optional[str] = None
        if header is not None:
            if header.is_smpte:
                division = f"{header.frames_per_second} fps, {header.ticks_per_frame} ticks/frame"
            else:
                division = f"{header.ticks_per_quarter_note} ticks/quarter-note"
        info["division"] = division
        info["events"] = sum(len(track.events) for track in midi.tracks)
        info["errors"] = midi.error_text
        return info
