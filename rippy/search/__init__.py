"""Content search: pattern compilation, snippet windows, concurrent scanning."""

from __future__ import annotations

from .content import (
    FileOutcome,
    SearchEngine,
    SearchStats,
    compile_pattern,
    decode_text,
    extract_window,
    scan_file,
)

__all__ = [
    "FileOutcome",
    "SearchEngine",
    "SearchStats",
    "compile_pattern",
    "decode_text",
    "extract_window",
    "scan_file",
]
