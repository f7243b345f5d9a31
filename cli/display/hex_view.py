"""
Annotated hex dump display.
"""

from typing import List, Tuple

from rich.console import Console
from rich.text import Text

console = Console()

HEX_COLUMN_WIDTH = 36


def format_dump_line(hex_line: str, comment: str, show_hex: bool, show_comments: bool) -> Text:
    """
    Format one line of the annotated dump.

    Chunk prefix lines are highlighted; blank separator lines stay blank.
    """
    text = Text()
    if not hex_line and not comment:
        return text

    is_chunk_line = comment.startswith(("Header chunk", "Track chunk", "Unknown chunk"))
    hex_style = "bold bright_blue" if is_chunk_line else "white"
    comment_style = "bold bright_blue" if is_chunk_line else "cyan"

    if show_hex:
        text.append(f"{hex_line:<{HEX_COLUMN_WIDTH}}", style=hex_style)
        if show_comments:
            text.append(" | ", style="dim")
    if show_comments:
        text.append(comment, style=comment_style)
    return text


def display_annotated_dump(
    lines: List[Tuple[str, str]],
    show_hex: bool = True,
    show_comments: bool = True,
    max_lines: int = 0,
) -> None:
    """Print hex and comment lines side by side."""
    shown = lines if max_lines <= 0 else lines[:max_lines]
    for hex_line, comment in shown:
        console.print(
            format_dump_line(hex_line, comment, show_hex, show_comments),
            overflow="ignore",
            crop=False,
            no_wrap=True,
        )

    if len(lines) > len(shown):
        console.print(f"[dim]... {len(lines) - len(shown)} more lines ...[/dim]")
