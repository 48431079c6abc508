"""Error taxonomy shared by traversal, search, and export.

Fatal errors abort a run before any output is produced. Recoverable errors
are absorbed where they happen and surfaced as diagnostics only.
"""

from __future__ import annotations

from pathlib import Path


class RippyError(RuntimeError):
    """Base class for all rippy errors."""


class FatalConfigurationError(RippyError):
    """Invalid search pattern or unreadable/nonexistent root directory."""


class RecoverableEntryError(RippyError):
    """One entry could not be read; the run continues without it."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
        self.message = message


class ContentDecodeError(RecoverableEntryError):
    """File content is not decodable as text."""


class ExportIOError(RippyError):
    """Writing the structured export failed; the in-memory tree stays valid."""
