"""Standard MIDI File format handlers."""

from midiscope.formats.smf.reader import SMFReader
from midiscope.formats.smf.writer import SMFWriter

__all__ = ["SMFReader", "SMFWriter"]
