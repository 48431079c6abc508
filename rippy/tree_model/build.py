"""Tree assembly, pruning, aggregation and per-directory file caps."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from .types import Entry, EntryType, TreeCounts


def _ensure_directory(root: Entry, directories: dict[Path, Entry], path: Path) -> Entry:
    """Create any missing directory nodes between a known ancestor and ``path``."""
    missing: list[Path] = []
    current = path
    while current not in directories:
        if current.parent == current:
            raise ValueError(f"{path} is not inside {root.path}")
        missing.append(current)
        current = current.parent

    parent = directories[current]
    for dir_path in reversed(missing):
        node = Entry(name=dir_path.name, path=dir_path, entry_type=EntryType.DIRECTORY)
        parent.children.append(node)
        directories[dir_path] = node
        parent = node
    return parent


def assemble(root: Entry, entries: Iterable[Entry]) -> Entry:
    """Attach flat pre-order ``entries`` under their parents, starting at ``root``.

    Parents are looked up by path, so the result mirrors the filesystem
    hierarchy as discovered. A parent that was never emitted is synthesized.
    """
    directories: dict[Path, Entry] = {root.path: root}
    for entry in entries:
        parent = directories.get(entry.path.parent)
        if parent is None:
            parent = _ensure_directory(root, directories, entry.path.parent)
        parent.children.append(entry)
        if entry.is_dir:
            directories[entry.path] = entry
    return root


def aggregate(tree: Entry) -> Entry:
    """Recompute directory ``size``/``last_modified`` bottom-up in one pass."""
    if not tree.is_dir:
        tree.last_modified = tree.stat_modified
        return tree

    total = 0
    latest = tree.stat_modified
    for child in tree.children:
        aggregate(child)
        total += child.size
        if child.last_modified is not None and (latest is None or child.last_modified > latest):
            latest = child.last_modified
    tree.size = total
    tree.last_modified = latest
    return tree


def _retain(entry: Entry) -> bool:
    if not entry.is_dir:
        return entry.window is not None
    entry.children = [child for child in entry.children if _retain(child)]
    return bool(entry.children)


def prune(tree: Entry) -> Entry:
    """Drop non-matching files and directories without a matching descendant.

    The root is always kept, even when nothing matched.
    """
    tree.children = [child for child in tree.children if _retain(child)]
    return tree


def _has_file(entry: Entry) -> bool:
    if not entry.is_dir:
        return True
    entry.children = [child for child in entry.children if _has_file(child)]
    return bool(entry.children)


def drop_empty_directories(tree: Entry) -> Entry:
    """Remove directories that hold no file at any depth; the root is kept."""
    tree.children = [child for child in tree.children if _has_file(child)]
    return tree


def cap_files(tree: Entry, max_files: int | None) -> Entry:
    """Keep at most ``max_files`` files per directory, in current child order.

    Dropped files are counted in ``Entry.omitted`` for the "N more" marker.
    Directories are never dropped by the cap.
    """
    if max_files is None:
        return tree
    stack = [tree]
    while stack:
        node = stack.pop()
        kept: list[Entry] = []
        files_seen = 0
        for child in node.children:
            if child.is_dir:
                kept.append(child)
                stack.append(child)
                continue
            if files_seen < max_files:
                kept.append(child)
            files_seen += 1
        node.omitted = max(0, files_seen - max_files)
        node.children = kept
    return tree


def iter_entries(tree: Entry) -> Iterator[Entry]:
    """Yield every entry below ``tree`` in depth-first pre-order, root excluded."""
    for child in tree.children:
        yield child
        if child.is_dir:
            yield from iter_entries(child)


def iter_file_entries(tree: Entry) -> Iterator[Entry]:
    for entry in iter_entries(tree):
        if entry.is_file:
            yield entry


def count_tree(tree: Entry) -> TreeCounts:
    """Count directories and files below the root."""
    dirs = 0
    files = 0
    for entry in iter_entries(tree):
        if entry.is_dir:
            dirs += 1
        else:
            files += 1
    return TreeCounts(dirs=dirs, files=files)
