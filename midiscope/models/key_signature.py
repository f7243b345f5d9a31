"""
Key signatures and key-aware pitch naming.

A key signature is stored in a Key Signature meta event as two bytes:
the number of sharps (positive) or flats (negative) as a signed byte,
then 0 for major or 1 for minor. ``KeySignature`` uses those two bytes
read as one unsigned big-endian value, so flat keys sort above 0xF900.
"""

from enum import IntEnum
from typing import Optional


class KeySignature(IntEnum):
    """The 30 legal key signatures, valued by their raw 2-byte encoding."""

    C_FLAT_MAJOR = 0xF900
    A_FLAT_MINOR = 0xF901
    G_FLAT_MAJOR = 0xFA00
    E_FLAT_MINOR = 0xFA01
    D_FLAT_MAJOR = 0xFB00
    B_FLAT_MINOR = 0xFB01
    A_FLAT_MAJOR = 0xFC00
    F_MINOR = 0xFC01
    E_FLAT_MAJOR = 0xFD00
    C_MINOR = 0xFD01
    B_FLAT_MAJOR = 0xFE00
    G_MINOR = 0xFE01
    F_MAJOR = 0xFF00
    D_MINOR = 0xFF01
    C_MAJOR = 0x0000
    A_MINOR = 0x0001
    G_MAJOR = 0x0100
    E_MINOR = 0x0101
    D_MAJOR = 0x0200
    B_MINOR = 0x0201
    A_MAJOR = 0x0300
    F_SHARP_MINOR = 0x0301
    E_MAJOR = 0x0400
    C_SHARP_MINOR = 0x0401
    B_MAJOR = 0x0500
    G_SHARP_MINOR = 0x0501
    F_SHARP_MAJOR = 0x0600
    D_SHARP_MINOR = 0x0601
    C_SHARP_MAJOR = 0x0700
    A_SHARP_MINOR = 0x0701

    @property
    def accidentals(self) -> int:
        """Sharps (positive) or flats (negative) in the signature."""
        count = self.value >> 8
        return count - 256 if count > 127 else count

    @property
    def is_minor(self) -> bool:
        return bool(self.value & 0x01)

    @property
    def display_name(self) -> str:
        """Name such as "Bb major" or "F# minor"."""
        parts = self.name.split("_")
        note = parts[0]
        if parts[1] == "FLAT":
            note += "b"
        elif parts[1] == "SHARP":
            note += "#"
        return f"{note} {parts[-1].lower()}"

    @classmethod
    def from_parts(cls, accidentals: int, minor: bool) -> "KeySignature":
        """
        Build a key signature from its sharps/flats count and mode.

        Raises:
            ValueError: If accidentals is outside -7..7
        """
        if not -7 <= accidentals <= 7:
            raise ValueError(f"Key signature needs -7..7 sharps/flats, got {accidentals}")
        return cls(((accidentals & 0xFF) << 8) | int(bool(minor)))

    @classmethod
    def is_valid(cls, raw: int) -> bool:
        return raw in cls._value2member_map_


def pitch_name(note: int, key: Optional[KeySignature] = None) -> str:
    """
    Spell a MIDI note number in the context of a key signature.

    Sharp keys spell black keys as sharps, flat keys as flats. Keys with
    many sharps or flats also use B#, E#, Cb and Fb. Octaves follow the
    convention where middle C (60) is C 4; octaves below 0 print as "-"
    and above 9 as "+".

    Args:
        note: MIDI note number (0-127)
        key: Key signature in effect, C major when None

    Returns:
        Name such as "C# 4" or "Bb 2"
    """
    k = int(key) if key is not None else int(KeySignature.C_MAJOR)
    octave = note // 12 - 1
    pitch_class = note % 12

    if pitch_class == 0:
        if 0x400 < k < 0xF900:
            name = "B#"
            octave -= 1
        else:
            name = "C"
    elif pitch_class == 1:
        name = "C#" if k > 0xFF00 or k < 0xF900 else "Db"
    elif pitch_class == 2:
        name = "D"
    elif pitch_class == 3:
        name = "D#" if 0x100 < k < 0xF900 else "Eb"
    elif pitch_class == 4:
        name = "Fb" if k in (0xF900, 0xF901) else "E"
    elif pitch_class == 5:
        name = "E#" if 0x300 < k < 0xF900 else "F"
    elif pitch_class == 6:
        name = "F#" if k > 0xFB01 or k < 0xF900 else "Gb"
    elif pitch_class == 7:
        name = "G"
    elif pitch_class == 8:
        name = "G#" if 0 < k < 0xF900 else "Ab"
    elif pitch_class == 9:
        name = "A"
    elif pitch_class == 10:
        name = "A#" if 0x200 < k < 0xF900 else "Bb"
    else:
        if 0xF900 <= k < 0xFB00:
            name = "Cb"
            octave += 1
        else:
            name = "B"

    if octave < 0:
        return f"{name} -"
    if octave > 9:
        return f"{name} +"
    return f"{name} {octave}"
