"""
Standard MIDI File writer.
"""

import logging
from pathlib import Path
from typing import Union

from midiscope.models.midi_file import MidiFile

logger = logging.getLogger(__name__)


class SMFWriter:
    """
    Writer for Standard MIDI Files.

    Example:
        midi = MidiFile.create(format=0)
        SMFWriter.write(midi, "empty.mid")
    """

    @classmethod
    def write(cls, midi: MidiFile, filepath: Union[str, Path]) -> None:
        """
        Write a MidiFile to disk.

        Args:
            midi: File to write
            filepath: Output file path
        """
        writer = cls()
        data = writer.to_bytes(midi)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "wb") as f:
            f.write(data)
        logger.debug("Wrote %d bytes to %s", len(data), filepath)

    def to_bytes(self, midi: MidiFile) -> bytes:
        """Encode a MidiFile, bringing chunk lengths up to date first."""
        return midi.to_bytes()
