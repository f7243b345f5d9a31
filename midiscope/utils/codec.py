"""
Byte-level helpers for Standard MIDI File data.

Numbers in SMF are big-endian. Delta times and lengths inside tracks use
variable-length quantities (VLQ): 7 bits per byte, most significant group
first, with bit 7 set on every byte except the last. A VLQ is at most
4 bytes long, so its largest value is 0x0FFFFFFF.

Example:
    0x00       -> 00
    0x7F       -> 7F
    0x80       -> 81 00
    0x0FFFFFFF -> FF FF FF 7F
"""

from typing import Tuple, Union

from midiscope.utils.validation import (
    InvalidVlqError,
    UnexpectedEndOfDataError,
    UnsupportedWidthError,
)

MAX_VLQ = 0x0FFFFFFF
MAX_VLQ_SIZE = 4

Buffer = Union[bytes, bytearray]


def read_number(data: Buffer, length: int, index: int = 0) -> int:
    """
    Read a big-endian unsigned number.

    Args:
        data: Source bytes
        length: Width in bytes (0-4)
        index: Offset of the first byte

    Returns:
        The decoded number

    Raises:
        UnsupportedWidthError: If length is greater than 4
        UnexpectedEndOfDataError: If the number runs past the end of data
    """
    if length > 4 or length < 0:
        raise UnsupportedWidthError(length)
    if index < 0 or index + length > len(data):
        raise UnexpectedEndOfDataError(
            f"Cannot read {length} bytes at offset {index}: only {len(data)} bytes available"
        )

    value = 0
    for byte in data[index : index + length]:
        value = (value << 8) | byte
    return value


def write_number(value: int, length: int, data: bytearray, index: int = 0) -> None:
    """
    Write a big-endian unsigned number into an existing buffer region.

    Bits that do not fit into ``length`` bytes are dropped.

    Raises:
        UnsupportedWidthError: If length is greater than 4
    """
    if length > 4 or length < 0:
        raise UnsupportedWidthError(length)

    for i in range(length - 1, -1, -1):
        data[index + i] = value & 0xFF
        value >>= 8


def number_to_bytes(value: int, length: int) -> bytes:
    """Return ``value`` as a big-endian number of ``length`` bytes."""
    buffer = bytearray(length)
    write_number(value, length, buffer)
    return bytes(buffer)


def read_vlq(data: Buffer, index: int = 0) -> Tuple[int, int]:
    """
    Decode a variable-length quantity.

    Args:
        data: Source bytes
        index: Offset of the first VLQ byte

    Returns:
        Tuple of (value, size in bytes)

    Raises:
        InvalidVlqError: If the fourth byte still has its continuation bit
            set, or the quantity runs past the end of data
    """
    value = 0
    for size in range(1, MAX_VLQ_SIZE + 1):
        position = index + size - 1
        if position >= len(data):
            raise InvalidVlqError(f"Variable-length quantity at offset {index} runs past end of data")
        byte = data[position]
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, size

    raise InvalidVlqError(f"Variable-length quantity at offset {index} is longer than 4 bytes")


def size_vlq(value: int) -> int:
    """
    Number of bytes ``write_vlq`` uses for ``value``.

    Raises:
        InvalidVlqError: If value is outside 0..0x0FFFFFFF
    """
    _check_vlq(value)
    size = 1
    while value >> (7 * size):
        size += 1
    return size


def write_vlq(value: int, data: bytearray, index: int = 0) -> int:
    """
    Encode a variable-length quantity into an existing buffer region.

    The caller must make room for ``size_vlq(value)`` bytes.

    Returns:
        Number of bytes written

    Raises:
        InvalidVlqError: If value is outside 0..0x0FFFFFFF
    """
    size = size_vlq(value)
    for i in range(size):
        group = (value >> (7 * (size - 1 - i))) & 0x7F
        data[index + i] = group | 0x80 if i < size - 1 else group
    return size


def encode_vlq(value: int) -> bytes:
    """Return the variable-length encoding of ``value``."""
    buffer = bytearray(size_vlq(value))
    write_vlq(value, buffer)
    return bytes(buffer)


def _check_vlq(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidVlqError(f"Variable-length quantity must be an integer, got {value!r}")
    if value < 0 or value > MAX_VLQ:
        raise InvalidVlqError(
            f"Variable-length quantity must be 0-{MAX_VLQ} (0x{MAX_VLQ:X}), got {value}"
        )


def read_text(data: Buffer, length: int, index: int = 0) -> str:
    """
    Read ASCII text for display.

    Bytes outside the printable ASCII range are shown as ``.``.
    """
    chunk = data[index : index + length]
    return "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)


def read_raw_text(data: Buffer, length: int, index: int = 0) -> str:
    """Read text keeping every byte as one character (latin-1)."""
    return bytes(data[index : index + length]).decode("latin-1")


def write_text(text: str, data: bytearray, index: int = 0) -> int:
    """
    Write text one byte per character, keeping the low 8 bits of each.

    Returns:
        Number of bytes written
    """
    for i, char in enumerate(text):
        data[index + i] = ord(char) & 0xFF
    return len(text)


def text_to_bytes(text: str) -> bytes:
    """Return ``text`` as bytes, one byte per character."""
    return bytes(ord(char) & 0xFF for char in text)


def splice(data: bytearray, index: int, remove: int, insert: Buffer = b"") -> None:
    """
    Replace ``remove`` bytes at ``index`` with ``insert``.

    Everything after the replaced range shifts to make room or close the gap.
    """
    data[index : index + remove] = insert


def format_hex(data: Buffer) -> str:
    """Format bytes as upper-case hex pairs separated by spaces."""
    return " ".join(f"{b:02X}" for b in data)
