"""Sequential, depth-bounded directory traversal.

The walker lists each directory with ``os.scandir`` in name order, asks the
``FilterEngine`` about every child, and yields flat pre-order ``Entry``
records that ``build.assemble`` turns into the result tree. Ignore-file
scoping depends on descent order, so traversal is never parallelized.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from ..config import RippyConfig
from ..errors import FatalConfigurationError, RecoverableEntryError
from ..filtering import FilterEngine
from ..ignore_rules import FilterSet
from .build import assemble
from .types import Entry, EntryType

logger = logging.getLogger(__name__)

DirIdentity = tuple[int, int]


def _identity(stat_result: os.stat_result) -> DirIdentity:
    return (int(stat_result.st_dev), int(stat_result.st_ino))


def _read_link(path: Path) -> str | None:
    try:
        return os.readlink(path)
    except OSError:
        return None


def _target_size(path: Path) -> int:
    """Content length behind a file symlink; 0 when the link is broken."""
    try:
        return int(os.stat(path).st_size)
    except OSError:
        return 0


class Walker:
    """Walk one root according to ``RippyConfig``.

    Per-entry failures are collected in ``errors`` and never abort the walk;
    only an unreadable root raises ``FatalConfigurationError``.
    """

    def __init__(self, config: RippyConfig, filter_engine: FilterEngine | None = None) -> None:
        self._config = config
        self._filters = filter_engine if filter_engine is not None else FilterEngine(config)
        self.errors: list[RecoverableEntryError] = []

    def walk(self, root: Path | None = None) -> Entry:
        """Return the unsorted, unsearched tree rooted at ``root``."""
        root_path = root if root is not None else self._config.root_path
        root_stat = self._stat_root(root_path)
        root_entry = Entry(
            name=str(root_path),
            path=root_path,
            entry_type=EntryType.DIRECTORY,
            last_modified=float(root_stat.st_mtime),
            stat_modified=float(root_stat.st_mtime),
        )
        return assemble(root_entry, self._iter_root(root_path, root_stat))

    def _stat_root(self, root_path: Path) -> os.stat_result:
        try:
            root_stat = os.stat(root_path)
        except OSError as exc:
            raise FatalConfigurationError(
                f"the directory provided, '{root_path}', does not exist or is not readable"
            ) from exc
        if not stat.S_ISDIR(root_stat.st_mode):
            raise FatalConfigurationError(f"the path provided, '{root_path}', is not a directory")
        return root_stat

    def _iter_root(self, root_path: Path, root_stat: os.stat_result) -> Iterator[Entry]:
        try:
            listing = self._list_directory(root_path)
        except OSError as exc:
            raise FatalConfigurationError(f"cannot read directory '{root_path}': {exc}") from exc
        filter_set = FilterSet().descend(root_path, self._config.use_ignore_files)
        yield from self._walk_listing(root_path, listing, 0, filter_set, frozenset({_identity(root_stat)}))

    def _record(self, path: Path, message: str) -> None:
        error = RecoverableEntryError(path, message)
        self.errors.append(error)
        logger.info("skipping %s", error)

    @staticmethod
    def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
        with os.scandir(directory) as iterator:
            return sorted(iterator, key=lambda item: item.name)

    def _walk_directory(
        self,
        directory: Path,
        depth: int,
        filter_set: FilterSet,
        ancestors: frozenset[DirIdentity],
    ) -> Iterator[Entry]:
        try:
            listing = self._list_directory(directory)
        except OSError as exc:
            self._record(directory, f"cannot read directory: {exc.strerror or exc}")
            return
        yield from self._walk_listing(directory, listing, depth, filter_set, ancestors)

    def _walk_listing(
        self,
        directory: Path,
        listing: list[os.DirEntry[str]],
        depth: int,
        filter_set: FilterSet,
        ancestors: frozenset[DirIdentity],
    ) -> Iterator[Entry]:
        max_depth = self._config.max_depth
        for dir_entry in listing:
            path = directory / dir_entry.name
            described = self._describe(dir_entry, path)
            if described is None:
                continue
            entry, stat_result = described
            if not self._filters.is_visible(
                path,
                entry.entry_type,
                filter_set,
                name=dir_entry.name,
                stat_result=stat_result,
            ):
                continue
            yield entry

            if not entry.is_dir:
                continue
            if entry.is_symlink and not self._config.follow_links:
                continue
            child_depth = depth + 1
            if max_depth is not None and child_depth > max_depth:
                continue
            identity = _identity(stat_result)
            if identity in ancestors:
                self._record(path, "symlink cycle detected, not descending")
                continue
            child_filters = filter_set.descend(path, self._config.use_ignore_files)
            yield from self._walk_directory(path, child_depth, child_filters, ancestors | {identity})

    def _describe(self, dir_entry: os.DirEntry[str], path: Path) -> tuple[Entry, os.stat_result] | None:
        """Stat one child and build its ``Entry``; ``None`` when it is skipped."""
        follow = self._config.follow_links
        try:
            is_symlink = dir_entry.is_symlink()
            stat_result = dir_entry.stat(follow_symlinks=follow)
        except OSError as exc:
            reason = "broken symlink" if follow and os.path.islink(path) else (exc.strerror or str(exc))
            self._record(path, reason)
            return None

        mode = stat_result.st_mode
        if stat.S_ISDIR(mode):
            entry_type = EntryType.DIRECTORY
        elif stat.S_ISREG(mode):
            entry_type = EntryType.FILE
        elif stat.S_ISLNK(mode):
            # Listed, never descended: the link's own metadata stands in.
            entry_type = EntryType.DIRECTORY if os.path.isdir(path) else EntryType.FILE
        else:
            logger.debug("ignoring special file %s", path)
            return None

        size = 0
        if entry_type is EntryType.FILE:
            size = int(stat_result.st_size) if stat.S_ISREG(mode) else _target_size(path)

        mtime = float(stat_result.st_mtime)
        entry = Entry(
            name=dir_entry.name,
            path=path,
            entry_type=entry_type,
            size=size,
            last_modified=mtime,
            stat_modified=mtime,
            is_symlink=is_symlink,
            link_target=_read_link(path) if is_symlink else None,
        )
        return entry, stat_result
