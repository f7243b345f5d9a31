"""File format handlers."""

from midiscope.formats.smf import SMFReader, SMFWriter

__all__ = ["SMFReader", "SMFWriter"]
