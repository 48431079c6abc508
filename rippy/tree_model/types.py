"""Tree entry datatypes shared by the walker, search, sorter and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EntryType(str, Enum):
    """Closed set of node kinds. ``DIRECTORY`` orders before ``FILE``."""

    DIRECTORY = "Directory"
    FILE = "File"


@dataclass(eq=False)
class Entry:
    """One filesystem object in the result tree.

    Directories own their ``children`` exclusively. ``size`` and
    ``last_modified`` on directories are aggregates filled in by
    ``tree_model.build.aggregate``, never read from the filesystem.
    ``stat_modified`` keeps the entry's own mtime so aggregates can be
    recomputed after pruning.
    """

    name: str
    path: Path
    entry_type: EntryType
    size: int = 0
    last_modified: float | None = None
    stat_modified: float | None = None
    window: str | None = None
    match_span: tuple[int, int] | None = None
    is_symlink: bool = False
    link_target: str | None = None
    omitted: int = 0
    children: list[Entry] = field(default_factory=list)

    @property
    def is_dir(self) -> bool:
        return self.entry_type is EntryType.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.entry_type is EntryType.FILE

    def __repr__(self) -> str:
        return f"Entry({self.entry_type.value}, {str(self.path)!r}, {len(self.children)} children)"


@dataclass(frozen=True)
class TreeCounts:
    """Directory and file totals over a finished tree, root excluded."""

    dirs: int = 0
    files: int = 0
