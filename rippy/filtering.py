"""Entry visibility: explicit ignores, ignore files, hidden policy, includes.

Checks run in a fixed order so precedence is predictable: an explicit ignore
pattern rejects first, then ignore-file rules, then the hidden-entry policy,
and include patterns (files only) last. A file matching both an ignore and an
include pattern is therefore always excluded.
"""

from __future__ import annotations

import fnmatch
import os
import re
import stat
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .config import RippyConfig
from .ignore_rules import FilterSet
from .tree_model.types import EntryType

_GLOB_CHARS = frozenset("*?[")


def split_pattern_list(values: Iterable[str]) -> tuple[str, ...]:
    """Flatten comma-separated pattern arguments, dropping empty items."""
    out: list[str] = []
    for value in values:
        for item in value.split(","):
            item = item.strip()
            if item:
                out.append(item)
    return tuple(out)


@dataclass(frozen=True)
class NamePattern:
    """One ``--ignore``/``--include`` pattern compiled for name/path matching."""

    raw: str
    literal: str
    regex: re.Pattern[str] | None = None
    ignore_case: bool = False

    @classmethod
    def compile(cls, raw: str, ignore_case: bool = False) -> NamePattern:
        literal = raw.replace("\\", "/").strip("/")
        if _GLOB_CHARS & set(literal):
            flags = re.IGNORECASE if ignore_case else 0
            regex = re.compile(fnmatch.translate(literal), flags)
            return cls(raw=raw, literal=literal, regex=regex, ignore_case=ignore_case)
        if ignore_case:
            literal = literal.casefold()
        return cls(raw=raw, literal=literal, ignore_case=ignore_case)

    def matches(self, name: str, relative: str) -> bool:
        """Glob: whole name or relative path. Plain: exact name or path segments."""
        if self.regex is not None:
            return self.regex.match(name) is not None or self.regex.match(relative) is not None
        if self.ignore_case:
            name = name.casefold()
            relative = relative.casefold()
        if name == self.literal:
            return True
        return f"/{self.literal}/" in f"/{relative}/"


def compile_name_patterns(patterns: Iterable[str], ignore_case: bool = False) -> tuple[NamePattern, ...]:
    return tuple(NamePattern.compile(raw, ignore_case) for raw in split_pattern_list(patterns))


def is_hidden(name: str, stat_result: os.stat_result | None = None) -> bool:
    """Dot-prefixed names, plus the hidden attribute where the platform has one."""
    if name.startswith("."):
        return True
    if stat_result is None:
        return False
    attributes = getattr(stat_result, "st_file_attributes", 0)
    return bool(attributes & getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0))


class FilterEngine:
    """Visibility decisions for one run, configured once from ``RippyConfig``."""

    def __init__(self, config: RippyConfig, root: Path | None = None) -> None:
        self._config = config
        self._root = root if root is not None else config.root_path
        self._ignore = compile_name_patterns(config.ignore_patterns, config.ignore_case)
        self._include = compile_name_patterns(config.include_patterns, config.ignore_case)

    @property
    def root(self) -> Path:
        return self._root

    def relative_posix(self, path: Path) -> str:
        try:
            return path.relative_to(self._root).as_posix()
        except ValueError:
            return path.as_posix()

    def is_visible(
        self,
        entry_path: Path,
        entry_type: EntryType,
        filter_set: FilterSet,
        *,
        name: str | None = None,
        stat_result: os.stat_result | None = None,
    ) -> bool:
        """Return whether ``entry_path`` should appear in the tree."""
        if entry_path == self._root:
            return True
        name = name if name is not None else entry_path.name
        relative = self.relative_posix(entry_path)
        is_dir = entry_type is EntryType.DIRECTORY

        if any(pattern.matches(name, relative) for pattern in self._ignore):
            return False
        if self._config.use_ignore_files and filter_set.is_ignored(entry_path, is_dir):
            return False
        if not self._config.show_all and is_hidden(name, stat_result):
            return False
        if is_dir or not self._include:
            return True
        return any(pattern.matches(name, relative) for pattern in self._include)
