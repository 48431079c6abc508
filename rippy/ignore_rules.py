"""Directory-scoped ignore-file rules.

A ``FilterSet`` is an immutable snapshot of the ignore-file layers that apply
inside one directory. Descending into a directory that carries its own
ignore file produces a new snapshot with one more layer; otherwise the parent
snapshot is reused as-is, so snapshots can be shared without locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

IGNORE_FILE_NAMES = (".gitignore",)


@dataclass(frozen=True)
class IgnoreLayer:
    """Rules read from one ignore file, scoped to ``base`` and below."""

    base: Path
    spec: pathspec.PathSpec

    def decide(self, path: Path, is_dir: bool) -> bool | None:
        """Return ``True`` (ignored), ``False`` (re-included) or ``None``.

        The last matching pattern in the file wins, like git.
        """
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return None
        if not relative or relative == ".":
            return None
        candidate = f"{relative}/" if is_dir else relative
        decision: bool | None = None
        for pattern in self.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(candidate) is not None:
                decision = bool(pattern.include)
        return decision


def load_ignore_layer(directory: Path) -> IgnoreLayer | None:
    """Read the ignore file(s) in ``directory`` into one layer, if any exist."""
    lines: list[str] = []
    for file_name in IGNORE_FILE_NAMES:
        ignore_path = directory / file_name
        try:
            text = ignore_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.info("cannot read ignore file %s: %s", ignore_path, exc)
            continue
        lines.extend(text.splitlines())
    if not lines:
        return None
    spec = pathspec.PathSpec.from_lines("gitignore", lines)
    if not spec.patterns:
        return None
    return IgnoreLayer(base=directory, spec=spec)


@dataclass(frozen=True)
class FilterSet:
    """Ignore-file layers active in one directory, outermost first."""

    layers: tuple[IgnoreLayer, ...] = ()

    def descend(self, directory: Path, use_ignore_files: bool = True) -> FilterSet:
        """Return the snapshot that applies inside ``directory``."""
        if not use_ignore_files:
            return self
        layer = load_ignore_layer(directory)
        if layer is None:
            return self
        return FilterSet(self.layers + (layer,))

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        """Most specific layer with a decision wins."""
        for layer in reversed(self.layers):
            decision = layer.decide(path, is_dir)
            if decision is not None:
                return decision
        return False
