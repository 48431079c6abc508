"""Terminal rendering of a finished, sorted result tree.

Rows are built as ANSI-styled strings from a ``UITheme``; the grayscale
palette yields plain text. Layout::

     root
     ├── file.txt
     ╰── src
         ╰── main.py   ...context MATCH context...
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import TextIO

from ..ansi import display_width, style
from ..config import PathMode, RippyConfig
from ..search.content import SearchStats
from ..tree_model.types import Entry, TreeCounts
from ..ui_theme import DEFAULT_THEME, UITheme

MARGIN_LEFT = " "
KB = 1_000.0
MB = 1_000_000.0
GB = 1_000_000_000.0
LONG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SHORT_DATE_FORMAT = "%Y-%m-%d"


def format_size(size: int) -> str:
    """Scale ``size`` to a fixed-width decimal label such as ``" 12 K"``."""
    value = float(size)
    for limit, divisor, unit in ((KB, 1.0, "B"), (MB, KB, "K"), (GB, MB, "M")):
        if value < limit:
            scaled = value / divisor
            break
    else:
        scaled, unit = value / GB, "G"
    text = f"{scaled:.1f}" if scaled < 10.0 else f"{scaled:.0f}"
    return f"{text:>3} {unit}"


def format_timestamp(timestamp: float | None, short: bool = False) -> str:
    if timestamp is None:
        return ""
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime(SHORT_DATE_FORMAT if short else LONG_DATE_FORMAT)


def _quote(text: str, config: RippyConfig) -> str:
    return f'"{text}"' if config.quote else text


def display_name(entry: Entry, config: RippyConfig, is_root: bool = False) -> str:
    """Plain (unstyled) label for ``entry`` honoring path mode and quoting."""
    if is_root or config.path_mode is PathMode.NAME:
        text = entry.name
    else:
        text = entry.path.as_posix()
    return _quote(text, config)


def _link_display(entry: Entry, config: RippyConfig) -> str:
    target = entry.link_target
    if target is None:
        return "[unable to resolve]"
    target = target.replace("\\", "/")
    if config.path_mode is PathMode.NAME:
        target = target.rstrip("/").rsplit("/", 1)[-1] or target
    return _quote(target, config)


def _is_executable(entry: Entry) -> bool:
    return entry.is_file and os.access(entry.path, os.X_OK)


def _details(entry: Entry, config: RippyConfig) -> str:
    if entry.is_dir and not config.dir_detail:
        return ""
    parts: list[str] = []
    if config.show_date or config.short_date:
        date_text = format_timestamp(entry.last_modified, short=config.short_date)
        if date_text:
            parts.append(date_text)
    if config.show_size:
        parts.append(format_size(entry.size))
    if not parts:
        return ""
    return f"({', '.join(parts)}) "


def format_window(entry: Entry, theme: UITheme) -> str:
    """Style a snippet with the match emphasized and context muted."""
    window = entry.window or ""
    if not window:
        return ""
    if entry.match_span is None:
        return style(window, theme.muted)
    start, end = entry.match_span
    return (
        style(window[:start], theme.muted)
        + style(window[start:end], theme.match, bold=theme.bold)
        + style(window[end:], theme.muted)
    )


def _entry_label(entry: Entry, config: RippyConfig, theme: UITheme) -> str:
    name = display_name(entry, config)
    if entry.is_dir:
        color, bold = theme.directory, theme.bold
    elif _is_executable(entry):
        color, bold = theme.executable, False
    else:
        color, bold = theme.file, False
    if entry.is_symlink:
        target_color = theme.directory if entry.is_dir else theme.file
        return (
            style(name, theme.symlink, bold=entry.is_dir and theme.bold)
            + " -> "
            + style(_link_display(entry, config), target_color, bold=entry.is_dir and theme.bold)
        )
    return style(name, color, bold=bold)


def _window_column(children: list[Entry], config: RippyConfig) -> int:
    """Widest plain sibling label, used to align snippet windows."""
    return max((display_width(display_name(child, config)) for child in children), default=0)


def iter_tree_lines(tree: Entry, config: RippyConfig, theme: UITheme = DEFAULT_THEME) -> Iterator[str]:
    """Yield rendered tree rows, root first, without trailing newlines."""
    yield MARGIN_LEFT + style(display_name(tree, config, is_root=True), theme.root, bold=theme.bold)
    yield from _iter_children(tree, "", 1, config, theme)


def _iter_children(node: Entry, prefix: str, depth: int, config: RippyConfig, theme: UITheme) -> Iterator[str]:
    rows: list[Entry | None] = list(node.children)
    if node.omitted:
        rows.append(None)
    last_index = len(rows) - 1
    index_width = len(str(len(rows)))
    show_windows = config.is_search and not config.windowless
    column = _window_column(node.children, config) if show_windows else 0
    bar_color = theme.root if depth == 1 else theme.directory
    indent_bar = "─" * config.indent + " "

    for index, child in enumerate(rows):
        is_last = index == last_index
        if config.flat:
            connector = ""
        else:
            connector = style(("╰" if is_last else "├") + indent_bar, bar_color)
        enum_prefix = ""
        if config.enumerate_entries:
            enum_prefix = style(f"[{index + 1:>{index_width}}] ", theme.detail)

        if child is None:
            marker = style(f"{node.omitted} more ...", theme.detail)
            yield f"{MARGIN_LEFT}{prefix}{connector}{enum_prefix}{marker}"
            continue

        details = _details(child, config)
        line = f"{MARGIN_LEFT}{prefix}{connector}{enum_prefix}{style(details, theme.detail)}"
        line += _entry_label(child, config, theme)
        if show_windows and child.is_file and child.window:
            padding = " " * (column - display_width(display_name(child, config)) + 1)
            line += padding + format_window(child, theme)
        yield line

        if child.is_dir and child.children:
            if config.flat:
                child_prefix = ""
            elif is_last:
                child_prefix = prefix + " " * (config.indent + 2)
            else:
                child_prefix = prefix + style("│", bar_color) + " " * (config.indent + 1)
            yield from _iter_children(child, child_prefix, depth + 1, config, theme)


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def format_summary(
    config: RippyConfig,
    counts: TreeCounts,
    stats: SearchStats | None,
    theme: UITheme = DEFAULT_THEME,
    elapsed_seconds: float | None = None,
) -> str:
    """Summary line: matches/searched when searching, else directories/files."""
    if config.is_search and stats is not None:
        match_color = theme.match if stats.matched else theme.zero
        summary = (
            style(_plural(stats.matched, "match", "matches"), match_color, bold=theme.bold)
            + ", "
            + style(f"{stats.searched} searched", theme.searched)
        )
    else:
        summary = (
            style(_plural(counts.dirs, "directory", "directories"), theme.directory, bold=theme.bold)
            + ", "
            + style(_plural(counts.files, "file", "files"), theme.file, bold=theme.bold)
        )
    if config.show_elapsed and elapsed_seconds is not None:
        summary += f" ({elapsed_seconds:.3f}s)"
    return summary


def write_tree(tree: Entry, config: RippyConfig, writer: TextIO, theme: UITheme = DEFAULT_THEME) -> None:
    for line in iter_tree_lines(tree, config, theme):
        writer.write(line + "\n")


def render_tree(tree: Entry, config: RippyConfig, theme: UITheme = DEFAULT_THEME) -> str:
    return "".join(f"{line}\n" for line in iter_tree_lines(tree, config, theme))
