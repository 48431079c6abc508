"""JSON export of a finished result tree, and loading it back.

One object per entry, recursively::

    {"name", "entry_type", "full_path", "last_modified", "size", "window", "children"}

``last_modified`` is a timezone-naive UTC timestamp string; windows never
carry ANSI escapes.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from .ansi import strip_ansi
from .errors import ExportIOError
from .tree_model.types import Entry, EntryType

logger = logging.getLogger(__name__)

JSON_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_json_datetime(timestamp: float | None) -> str | None:
    if timestamp is None:
        return None
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime(JSON_DATETIME_FORMAT)


def parse_json_datetime(value: object) -> float | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        moment = datetime.strptime(value, JSON_DATETIME_FORMAT)
    except ValueError:
        return None
    return moment.replace(tzinfo=timezone.utc).timestamp()


def to_payload(entry: Entry) -> dict[str, object]:
    """Return the export object for ``entry`` and its whole subtree."""
    return {
        "name": entry.name,
        "entry_type": entry.entry_type.value,
        "full_path": entry.path.as_posix(),
        "last_modified": format_json_datetime(entry.last_modified),
        "size": entry.size,
        "window": strip_ansi(entry.window) if entry.window is not None else None,
        "children": [to_payload(child) for child in entry.children],
    }


def entry_from_payload(payload: dict[str, object]) -> Entry:
    """Rebuild an ``Entry`` tree from an exported object.

    Raises ``ValueError`` when required fields are missing or malformed.
    """
    try:
        name = payload["name"]
        entry_type = EntryType(payload["entry_type"])
        full_path = payload["full_path"]
    except (KeyError, ValueError) as exc:
        raise ValueError(f"malformed export entry: {exc}") from exc
    if not isinstance(name, str) or not isinstance(full_path, str):
        raise ValueError("malformed export entry: name and full_path must be strings")

    size = payload.get("size")
    window = payload.get("window")
    children = payload.get("children") or []
    if not isinstance(children, list):
        raise ValueError("malformed export entry: children must be a list")
    modified = parse_json_datetime(payload.get("last_modified"))
    return Entry(
        name=name,
        path=Path(full_path),
        entry_type=entry_type,
        size=int(size) if isinstance(size, int) else 0,
        last_modified=modified,
        stat_modified=modified,
        window=window if isinstance(window, str) else None,
        children=[entry_from_payload(child) for child in children if isinstance(child, dict)],
    )


def write_export(tree: Entry, output: Path) -> None:
    """Write ``tree`` as pretty-printed JSON, raising ``ExportIOError`` on failure."""
    text = json.dumps(to_payload(tree), indent=2, ensure_ascii=False) + "\n"
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ExportIOError(f"cannot write export to '{output}': {exc.strerror or exc}") from exc
    logger.info("wrote export to %s", output)


def read_export(source: Path) -> Entry:
    """Load an export file written by ``write_export``."""
    data = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("export root must be a JSON object")
    return entry_from_payload(data)
