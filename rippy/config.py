"""Resolved run configuration plus persisted JSON defaults.

``RippyConfig`` is the single value threaded through every component call;
nothing reads ambient global flags. Persisted defaults live in a small JSON
object under the platform user-config directory. All access is defensive:
malformed or missing config falls back to built-in defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from platformdirs import user_config_dir

from .tree_model.sorting import SortKey

APP_NAME = "rippy"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_WINDOW_RADIUS = 20
DEFAULT_INDENT = 2

# Persisted key -> accepted JSON value types.
_PERSISTED_KEYS: dict[str, tuple[type, ...]] = {
    "sort_by": (str,),
    "reverse": (bool,),
    "indent": (int,),
    "window_radius": (int,),
    "show_all": (bool,),
    "use_ignore_files": (bool,),
    "theme": (str,),
}


class PathMode(str, Enum):
    """How entry paths are resolved and displayed."""

    NAME = "name"
    RELATIVE = "relative"
    FULL = "full"


@dataclass(frozen=True)
class RippyConfig:
    """Fully resolved options for one invocation."""

    root: Path
    pattern: str | None = None
    ignore_case: bool = False
    fixed_strings: bool = False
    max_depth: int | None = None
    show_all: bool = False
    sort_key: SortKey = SortKey.NAME
    reverse: bool = False
    ignore_patterns: tuple[str, ...] = ()
    include_patterns: tuple[str, ...] = ()
    use_ignore_files: bool = True
    follow_links: bool = False
    max_files: int | None = None
    window_radius: int = DEFAULT_WINDOW_RADIUS
    windowless: bool = False
    path_mode: PathMode = PathMode.NAME
    quote: bool = False
    output: Path | None = None
    workers: int | None = None
    indent: int = DEFAULT_INDENT
    show_size: bool = False
    show_date: bool = False
    short_date: bool = False
    dir_detail: bool = False
    enumerate_entries: bool = False
    flat: bool = False
    show_elapsed: bool = False
    just_counts: bool = False
    grayscale: bool = False
    theme: str = "default"
    verbosity: int = 0

    @property
    def is_search(self) -> bool:
        return self.pattern is not None

    @property
    def root_path(self) -> Path:
        """Root as it should appear in entry paths (absolute in full-path mode)."""
        if self.path_mode is PathMode.FULL:
            return Path(os.path.abspath(self.root))
        return self.root

    @property
    def worker_count(self) -> int:
        if self.workers is not None and self.workers > 0:
            return self.workers
        return os.cpu_count() or 1


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_persisted_defaults(path: Path | None = None) -> dict[str, object]:
    """Return only recognised persisted keys whose values have the right type.

    ``bool`` is rejected where an ``int`` is expected since JSON ``true`` would
    otherwise pass as ``1``.
    """
    defaults: dict[str, object] = {}
    for key, value in load_config(path).items():
        accepted = _PERSISTED_KEYS.get(key)
        if accepted is None:
            continue
        if isinstance(value, bool) and bool not in accepted:
            continue
        if not isinstance(value, accepted):
            continue
        if key in {"indent", "window_radius"} and value < 0:
            continue
        defaults[key] = value
    return defaults
