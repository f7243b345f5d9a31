"""
Base unit of file content.

An item owns the exact bytes it occupies in the file and knows how to
describe itself as one line of hex dump plus one line of comment.
"""

from typing import Union

from midiscope.utils.codec import format_hex, read_text, splice


class MidiItem:
    """
    A run of bytes in a MIDI file with a human-readable description.

    Subclasses keep typed fields in sync with the buffer: every setter
    writes straight into ``_buffer``, so ``data`` is always the on-disk
    encoding of the current field values.
    """

    def __init__(self, data: Union[bytes, bytearray] = b""):
        self._buffer = bytearray(data)

    @property
    def data(self) -> bytes:
        """Encoded bytes of this item."""
        return bytes(self._buffer)

    @property
    def size(self) -> int:
        return len(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def hex(self) -> str:
        """Hex dump line for this item."""
        return format_hex(self._buffer)

    @property
    def comment(self) -> str:
        """Comment line for this item."""
        return self.get_comment()

    def get_comment(self, context=None) -> str:
        return f"Unrecognized data: {read_text(self._buffer, len(self._buffer))}"

    def _splice(self, index: int, remove: int, insert: bytes = b"") -> int:
        """
        Replace ``remove`` bytes at ``index`` with ``insert``.

        Returns:
            Change in item size
        """
        splice(self._buffer, index, remove, insert)
        return len(insert) - remove

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex})"


class RawItem(MidiItem):
    """Bytes with no known structure, kept verbatim."""

    pass
