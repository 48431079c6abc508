"""Text rendering of result trees and summary lines."""

from __future__ import annotations

from .tree import (
    display_name,
    format_size,
    format_summary,
    format_timestamp,
    format_window,
    iter_tree_lines,
    render_tree,
    write_tree,
)

__all__ = [
    "display_name",
    "format_size",
    "format_summary",
    "format_timestamp",
    "format_window",
    "iter_tree_lines",
    "render_tree",
    "write_tree",
]
