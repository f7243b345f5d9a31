#!/usr/bin/env python3
"""
Example: Annotated hex dump

Shows how to print the hex and comment streams side by side, and how
to jump to a line through the line index.
"""

import sys

sys.path.insert(0, "..")

from midiscope import SMFReader


def main():
    path = sys.argv[1] if len(sys.argv) > 1 else "song.mid"
    midi = SMFReader.read(path)

    print(f"=== {path}: {midi.line_count} lines ===")
    print()

    for hex_line, comment in midi.streams.lines():
        print(f"{hex_line:<36} | {comment}" if hex_line else "")

    # Offsets into the two streams, as a text viewer would use them
    if midi.line_count > 3:
        hex_offset, comment_offset = midi.get_index(3)
        print()
        print(f"Line 3 starts at hex offset {hex_offset}, comment offset {comment_offset}")
        print(midi.comments[comment_offset:].splitlines()[0])


if __name__ == "__main__":
    main()
