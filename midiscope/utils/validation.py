"""
Error types and range validation for MIDI data.

Fatal problems are raised as ``MidiError`` subclasses. Problems that do not
stop a file from being read (a track shorter than declared, a missing
End Of Track, a wrong track count) are recorded as ``ParseIssue`` values on
the chunk or file instead.
"""

from dataclasses import dataclass
from typing import Optional


class MidiError(Exception):
    """Base class for all MIDI codec errors."""

    pass


class UnsupportedWidthError(MidiError):
    """Raised when a fixed-width number wider than 4 bytes is requested."""

    def __init__(self, length: int):
        super().__init__(f"Number width must be 0-4 bytes, got {length}")
        self.length = length


class InvalidVlqError(MidiError):
    """Raised for a malformed or out-of-range variable-length quantity."""

    pass


class ValueOutOfRangeError(MidiError):
    """Raised when a field value falls outside its legal range."""

    def __init__(self, label: str, minimum: int, maximum: int, value: int):
        super().__init__(f"{label} must be {minimum}-{maximum}, got {value}")
        self.label = label
        self.minimum = minimum
        self.maximum = maximum
        self.value = value


class InvalidInputError(MidiError):
    """Raised when a field value is of the wrong shape (not just out of range)."""

    pass


class MustUseTypedClassError(MidiError):
    """Raised when a generic chunk or meta event is built for a typed kind."""

    pass


class MetaLengthTooShortError(MidiError):
    """Raised when a meta event declares less data than its kind requires."""

    def __init__(self, name: str, minimum: int, length: int):
        super().__init__(f"{name} needs at least {minimum} data bytes, got {length}")
        self.name = name
        self.minimum = minimum
        self.length = length


class RunningStatusChannelLockedError(MidiError):
    """Raised when the channel of a running-status event is set directly."""

    def __init__(self):
        super().__init__(
            "Channel of a running status event cannot be changed; "
            "it follows the previous status byte in the track"
        )


class InvalidStatusByteError(MidiError):
    """Raised when a status byte cannot be resolved."""

    pass


class UnexpectedEndOfDataError(MidiError):
    """Raised when a read runs past the end of the available bytes."""

    pass


# Non-fatal issue kinds
BYTE_COUNT_MISMATCH = "ByteCountMismatch"
MISSING_END_OF_TRACK = "MissingEndOfTrack"
TRACK_COUNT_MISMATCH = "TrackCountMismatch"
MISSING_HEADER = "MissingHeader"
UNKNOWN_FORMAT = "UnknownFormat"


@dataclass
class ParseIssue:
    """A non-fatal problem found while decoding."""

    kind: str
    message: str
    expected: Optional[int] = None
    actual: Optional[int] = None

    def __str__(self) -> str:
        return self.message


def validate_number(value: int, minimum: int, maximum: int, label: str = "value") -> int:
    """
    Validate that a number lies in an inclusive range.

    Args:
        value: The value to validate
        minimum: Smallest legal value
        maximum: Largest legal value
        label: Name of the value for error messages

    Returns:
        The value, unchanged

    Raises:
        ValueOutOfRangeError: If value is outside [minimum, maximum]
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{label} must be an integer, got {value!r}")
    if not minimum <= value <= maximum:
        raise ValueOutOfRangeError(label, minimum, maximum, value)
    return value


def validate_data_byte(value: int, label: str = "value") -> int:
    """Validate a MIDI data byte (0-127)."""
    return validate_number(value, 0, 127, label)


def validate_channel(channel: int) -> int:
    """Validate a zero-based MIDI channel (0-15)."""
    return validate_number(channel, 0, 15, "Channel")
