"""Result-tree model: entry types, traversal, assembly, pruning and sorting."""

from __future__ import annotations

from .build import (
    aggregate,
    assemble,
    cap_files,
    count_tree,
    drop_empty_directories,
    iter_entries,
    iter_file_entries,
    prune,
)
from .sorting import SortKey, parse_sort_key, sort_children, sort_tree
from .types import Entry, EntryType, TreeCounts

__all__ = [
    "Entry",
    "EntryType",
    "TreeCounts",
    "SortKey",
    "parse_sort_key",
    "sort_children",
    "sort_tree",
    "assemble",
    "aggregate",
    "prune",
    "drop_empty_directories",
    "cap_files",
    "count_tree",
    "iter_entries",
    "iter_file_entries",
]
