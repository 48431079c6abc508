"""Concurrent content search over collected file entries.

The pattern is compiled once up front; a malformed expression is fatal before
any file is opened. Each file is then one task on a bounded thread pool that
writes into its own pre-sized result slot, so only the shared ``SearchStats``
counters need a lock.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from ..config import RippyConfig
from ..errors import ContentDecodeError, FatalConfigurationError, RecoverableEntryError
from ..tree_model.types import Entry

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
_WHITESPACE_CONTROL = str.maketrans({"\r": " ", "\n": " ", "\t": " "})


def compile_pattern(pattern: str, *, ignore_case: bool = False, fixed_strings: bool = False) -> re.Pattern[str]:
    """Compile a search pattern, raising ``FatalConfigurationError`` when invalid."""
    source = re.escape(pattern) if fixed_strings else pattern
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise FatalConfigurationError(f"invalid search pattern {pattern!r}: {exc}") from exc


@dataclass
class SearchStats:
    """Counters for one search run; ``record`` is safe to call from workers."""

    matched: int = 0
    searched: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, matched: bool) -> None:
        with self._lock:
            self.searched += 1
            if matched:
                self.matched += 1


@dataclass(frozen=True)
class FileOutcome:
    """Result slot for one scanned file."""

    searched: bool = False
    window: str | None = None
    match_span: tuple[int, int] | None = None
    error: RecoverableEntryError | None = None


def decode_text(data: bytes, path: Path) -> str:
    """Decode file bytes as UTF-8 text or raise ``ContentDecodeError``."""
    if b"\x00" in data:
        raise ContentDecodeError(path, "binary content")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ContentDecodeError(path, f"not valid UTF-8 ({exc.reason})") from exc


def _line_bounds(text: str, start: int, end: int) -> tuple[int, int]:
    line_start = max(text.rfind("\n", 0, start), text.rfind("\r", 0, start)) + 1
    line_ends = [idx for idx in (text.find("\n", end), text.find("\r", end)) if idx >= 0]
    return line_start, min(line_ends) if line_ends else len(text)


def extract_window(text: str, start: int, end: int, radius: int) -> tuple[str, tuple[int, int]]:
    """Return the snippet around ``text[start:end]`` and the match span inside it.

    Context is at most ``radius`` characters per side and never crosses the
    boundaries of the line holding the match. ``...`` marks a side where line
    content was cut off.
    """
    line_start, line_end = _line_bounds(text, start, end)
    snippet_start = max(line_start, start - radius)
    snippet_end = min(line_end, end + radius)

    before = text[snippet_start:start].lstrip()
    matched = text[start:end]
    after = text[end:snippet_end].rstrip()
    prefix = ELLIPSIS if snippet_start > line_start else ""
    suffix = ELLIPSIS if snippet_end < line_end else ""

    window = f"{prefix}{before}{matched}{after}{suffix}".translate(_WHITESPACE_CONTROL)
    span_start = len(prefix) + len(before)
    return window, (span_start, span_start + len(matched))


def scan_file(path: Path, pattern: re.Pattern[str], radius: int, windowless: bool = False) -> FileOutcome:
    """Scan one file for the first match of ``pattern``."""
    try:
        data = path.read_bytes()
    except OSError as exc:
        return FileOutcome(error=RecoverableEntryError(path, f"cannot read file: {exc.strerror or exc}"))
    try:
        text = decode_text(data, path)
    except ContentDecodeError as exc:
        return FileOutcome(error=exc)

    match = pattern.search(text)
    if match is None:
        return FileOutcome(searched=True)
    if windowless:
        return FileOutcome(searched=True, window="")
    window, span = extract_window(text, match.start(), match.end(), radius)
    return FileOutcome(searched=True, window=window, match_span=span)


class SearchEngine:
    """Run one search over file entries with a fixed-size worker pool.

    Unreadable files are collected in ``errors``; undecodable (binary) files
    are skipped silently and not counted as searched.
    """

    def __init__(self, config: RippyConfig) -> None:
        self._config = config
        self.errors: list[RecoverableEntryError] = []

    def search(self, file_entries: Sequence[Entry], pattern: re.Pattern[str]) -> SearchStats:
        """Annotate ``file_entries`` with windows and return the run's counters.

        Blocks until every file has been scanned or skipped.
        """
        stats = SearchStats()
        slots: list[FileOutcome | None] = [None] * len(file_entries)
        radius = self._config.window_radius
        windowless = self._config.windowless

        def scan_one(index: int) -> None:
            outcome = scan_file(file_entries[index].path, pattern, radius, windowless)
            slots[index] = outcome
            if outcome.searched:
                stats.record(outcome.window is not None)

        if file_entries:
            max_workers = max(1, min(self._config.worker_count, len(file_entries)))
            with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="rippy-search") as executor:
                futures = [executor.submit(scan_one, index) for index in range(len(file_entries))]
                for future in futures:
                    future.result()

        for entry, outcome in zip(file_entries, slots):
            if outcome is None:
                continue
            entry.window = outcome.window
            entry.match_span = outcome.match_span
            if isinstance(outcome.error, ContentDecodeError):
                logger.debug("not searching %s", outcome.error)
            elif outcome.error is not None:
                self.errors.append(outcome.error)
                logger.info("skipping %s", outcome.error)
        logger.debug("searched %d files, %d matched", stats.searched, stats.matched)
        return stats
