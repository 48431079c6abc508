"""ANSI styling helpers and escape-aware text measurement.

Renderers build styled strings with ``style``; JSON export and width
calculations use ``strip_ansi`` and ``display_width`` so escape sequences
never count toward alignment.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
RESET = "\033[0m"
BOLD = "\033[1m"


def strip_ansi(text: str) -> str:
    """Remove every ANSI escape sequence from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns, and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Visible width of ``text`` ignoring escape sequences."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def style(text: str, color: str | None, bold: bool = False) -> str:
    """Wrap ``text`` in ``color`` (and bold) followed by a reset.

    ``None`` color without bold returns ``text`` unchanged, which is how
    grayscale palettes switch styling off.
    """
    if not text:
        return text
    prefix = (BOLD if bold else "") + (color or "")
    if not prefix:
        return text
    return f"{prefix}{text}{RESET}"
