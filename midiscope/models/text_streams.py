"""
Hex dump and comment text streams with a line index.

Each logical line has a hex part and a comment part. The index records
where every line starts in both streams so a viewer can scroll the two
side by side.
"""

from typing import List, Tuple


class TextStreams:
    """Two parallel text streams built line by line."""

    def __init__(self):
        self._hex_lines: List[str] = []
        self._comment_lines: List[str] = []
        self._index: List[Tuple[int, int]] = []
        self._hex_length = 0
        self._comment_length = 0

    def add_line(self, hex_line: str, comment_line: str) -> None:
        """Append one line to both streams."""
        self._index.append((self._hex_length, self._comment_length))
        self._hex_lines.append(hex_line + "\n")
        self._comment_lines.append(comment_line + "\n")
        self._hex_length += len(hex_line) + 1
        self._comment_length += len(comment_line) + 1

    def extend(self, other: "TextStreams") -> None:
        """Append every line of ``other``, shifting its offsets."""
        for (hex_offset, comment_offset) in other._index:
            self._index.append(
                (hex_offset + self._hex_length, comment_offset + self._comment_length)
            )
        self._hex_lines.extend(other._hex_lines)
        self._comment_lines.extend(other._comment_lines)
        self._hex_length += other._hex_length
        self._comment_length += other._comment_length

    def replace_line(self, line: int, hex_line: str, comment_line: str) -> None:
        """Replace one line, shifting the offsets of the lines after it."""
        self.get_index(line)
        hex_shift = len(hex_line) + 1 - len(self._hex_lines[line])
        comment_shift = len(comment_line) + 1 - len(self._comment_lines[line])
        self._hex_lines[line] = hex_line + "\n"
        self._comment_lines[line] = comment_line + "\n"
        if hex_shift or comment_shift:
            for i in range(line + 1, len(self._index)):
                h, c = self._index[i]
                self._index[i] = (h + hex_shift, c + comment_shift)
            self._hex_length += hex_shift
            self._comment_length += comment_shift

    def clear(self) -> None:
        self._hex_lines.clear()
        self._comment_lines.clear()
        self._index.clear()
        self._hex_length = 0
        self._comment_length = 0

    @property
    def hex(self) -> str:
        return "".join(self._hex_lines)

    @property
    def comments(self) -> str:
        return "".join(self._comment_lines)

    @property
    def line_count(self) -> int:
        return len(self._index)

    def get_index(self, line: int) -> Tuple[int, int]:
        """
        Character offsets where a line starts.

        Args:
            line: Zero-based line number

        Returns:
            Tuple of (hex stream offset, comment stream offset)

        Raises:
            IndexError: If line is out of range
        """
        if not 0 <= line < len(self._index):
            raise IndexError(f"Line must be 0-{len(self._index) - 1}, got {line}")
        return self._index[line]

    def lines(self) -> List[Tuple[str, str]]:
        """All lines as (hex, comment) pairs without line endings."""
        return [
            (h[:-1], c[:-1]) for h, c in zip(self._hex_lines, self._comment_lines)
        ]
