"""
CLI display modules.
"""

from cli.display.tables import (
    display_file_info,
    display_track_table,
    track_statistics,
)
from cli.display.hex_view import display_annotated_dump

__all__ = [
    "display_file_info",
    "display_track_table",
    "track_statistics",
    "display_annotated_dump",
]
