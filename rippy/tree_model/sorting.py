"""Recursive, stable sibling ordering for result trees.

Each ``SortKey`` maps to a pure primary-key function plus an optional
ascending tie-break. ``reverse`` flips only the primary key; Python's sort is
stable in both directions, so equal keys keep their prior relative order.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from .types import Entry, EntryType


class SortKey(str, Enum):
    NAME = "name"
    DATE = "date"
    SIZE = "size"
    TYPE = "type"


def _name_key(entry: Entry) -> str:
    return entry.name


def _date_key(entry: Entry) -> float:
    return entry.last_modified if entry.last_modified is not None else 0.0


def _size_key(entry: Entry) -> int:
    return entry.size


def _type_key(entry: Entry) -> int:
    return 0 if entry.entry_type is EntryType.DIRECTORY else 1


_KeyFunc = Callable[[Entry], object]

SORT_KEY_FUNCTIONS: dict[SortKey, tuple[_KeyFunc, _KeyFunc | None]] = {
    SortKey.NAME: (_name_key, None),
    SortKey.DATE: (_date_key, None),
    SortKey.SIZE: (_size_key, None),
    SortKey.TYPE: (_type_key, _name_key),
}


def parse_sort_key(value: str) -> SortKey:
    """Return the ``SortKey`` for a case-insensitive name like ``"Size"``."""
    try:
        return SortKey(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(key.value for key in SortKey)
        raise ValueError(f"unknown sort key {value!r} (expected one of: {choices})") from exc


def sort_children(children: list[Entry], key: SortKey, reverse: bool = False) -> None:
    """Sort one sibling list in place."""
    primary, tie_break = SORT_KEY_FUNCTIONS[key]
    if tie_break is not None:
        children.sort(key=tie_break)
    children.sort(key=primary, reverse=reverse)


def sort_tree(tree: Entry, key: SortKey = SortKey.NAME, reverse: bool = False) -> Entry:
    """Reorder children at every directory level, depth-first, and return ``tree``."""
    stack = [tree]
    while stack:
        node = stack.pop()
        if not node.children:
            continue
        sort_children(node.children, key, reverse)
        stack.extend(child for child in node.children if child.is_dir)
    return tree
