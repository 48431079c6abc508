"""Tree renderer and summary line tests (grayscale output)."""

from __future__ import annotations

import io
import unittest
from pathlib import Path

from rippy.ansi import strip_ansi
from rippy.config import PathMode, RippyConfig
from rippy.render.tree import (
    display_name,
    format_size,
    format_summary,
    format_timestamp,
    iter_tree_lines,
    render_tree,
    write_tree,
)
from rippy.search.content import SearchStats
from rippy.tree_model.types import Entry, EntryType, TreeCounts
from rippy.ui_theme import DEFAULT_THEME, GRAYSCALE_THEME

ROOT = Path("proj")


def _file(path: Path, size: int = 0, window: str | None = None, span: tuple[int, int] | None = None) -> Entry:
    return Entry(name=path.name, path=path, entry_type=EntryType.FILE, size=size, window=window, match_span=span)


def _dir(path: Path, children: list[Entry]) -> Entry:
    return Entry(name=path.name, path=path, entry_type=EntryType.DIRECTORY, children=children)


def _sample_tree() -> Entry:
    return _dir(ROOT, [_file(ROOT / "a.txt", size=12), _dir(ROOT / "sub", [_file(ROOT / "sub" / "c.txt")])])


def _lines(tree: Entry, config: RippyConfig) -> list[str]:
    return list(iter_tree_lines(tree, config, GRAYSCALE_THEME))


class FormatHelpersTests(unittest.TestCase):
    def test_format_size_scales_to_decimal_units(self) -> None:
        self.assertEqual(format_size(500), "500 B")
        self.assertEqual(format_size(5), "5.0 B")
        self.assertEqual(format_size(2048), "2.0 K")
        self.assertEqual(format_size(20480), " 20 K")
        self.assertEqual(format_size(1_500_000), "1.5 M")
        self.assertEqual(format_size(3_000_000_000), "3.0 G")

    def test_format_timestamp_uses_utc(self) -> None:
        self.assertEqual(format_timestamp(0.0), "1970-01-01 00:00:00")
        self.assertEqual(format_timestamp(0.0, short=True), "1970-01-01")
        self.assertEqual(format_timestamp(None), "")

    def test_display_name_honors_path_mode_and_quotes(self) -> None:
        entry = _file(ROOT / "sub" / "c.txt")
        self.assertEqual(display_name(entry, RippyConfig(root=ROOT)), "c.txt")
        self.assertEqual(display_name(entry, RippyConfig(root=ROOT, path_mode=PathMode.RELATIVE)), "proj/sub/c.txt")
        self.assertEqual(display_name(entry, RippyConfig(root=ROOT, quote=True)), '"c.txt"')


class TreeLinesTests(unittest.TestCase):
    def test_tree_glyphs_and_indentation(self) -> None:
        lines = _lines(_sample_tree(), RippyConfig(root=ROOT))
        self.assertEqual(
            lines,
            [
                " proj",
                " ├── a.txt",
                " ╰── sub",
                "     ╰── c.txt",
            ],
        )

    def test_non_last_directory_draws_continuation_bar(self) -> None:
        tree = _dir(ROOT, [_dir(ROOT / "sub", [_file(ROOT / "sub" / "c.txt")]), _file(ROOT / "z.txt")])
        lines = _lines(tree, RippyConfig(root=ROOT, indent=1))
        self.assertEqual(lines, [" proj", " ├─ sub", " │  ╰─ c.txt", " ╰─ z.txt"])

    def test_flat_mode_drops_glyphs(self) -> None:
        lines = _lines(_sample_tree(), RippyConfig(root=ROOT, flat=True))
        self.assertEqual(lines, [" proj", " a.txt", " sub", " c.txt"])

    def test_enumeration_and_omitted_marker(self) -> None:
        tree = _dir(ROOT, [_file(ROOT / "a.txt")])
        tree.omitted = 3
        lines = _lines(tree, RippyConfig(root=ROOT, enumerate_entries=True))
        self.assertEqual(lines, [" proj", " ├── [1] a.txt", " ╰── [2] 3 more ..."])

    def test_size_details_shown_for_files_only_by_default(self) -> None:
        lines = _lines(_sample_tree(), RippyConfig(root=ROOT, show_size=True))
        self.assertEqual(lines[1], " ├── ( 12 B) a.txt")
        self.assertEqual(lines[2], " ╰── sub")

        detailed = _lines(_sample_tree(), RippyConfig(root=ROOT, show_size=True, dir_detail=True))
        self.assertEqual(detailed[2], " ╰── (0.0 B) sub")

    def test_search_windows_are_aligned_after_widest_sibling(self) -> None:
        tree = _dir(
            ROOT,
            [
                _file(ROOT / "a.txt", window="TODO x", span=(0, 4)),
                _file(ROOT / "bb.txt", window="y TODO", span=(2, 6)),
            ],
        )
        config = RippyConfig(root=ROOT, pattern="TODO")

        lines = _lines(tree, config)

        self.assertEqual(lines[1], " ├── a.txt  TODO x")
        self.assertEqual(lines[2], " ╰── bb.txt y TODO")

    def test_windowless_search_prints_names_only(self) -> None:
        tree = _dir(ROOT, [_file(ROOT / "a.txt", window="")])
        lines = _lines(tree, RippyConfig(root=ROOT, pattern="TODO", windowless=True))
        self.assertEqual(lines, [" proj", " ╰── a.txt"])

    def test_colored_output_strips_to_grayscale_text(self) -> None:
        config = RippyConfig(root=ROOT)
        colored = list(iter_tree_lines(_sample_tree(), config, DEFAULT_THEME))
        self.assertNotEqual(colored, _lines(_sample_tree(), config))
        self.assertEqual([strip_ansi(line) for line in colored], _lines(_sample_tree(), config))

    def test_write_tree_matches_render_tree(self) -> None:
        config = RippyConfig(root=ROOT)
        buffer = io.StringIO()
        write_tree(_sample_tree(), config, buffer, GRAYSCALE_THEME)
        self.assertEqual(buffer.getvalue(), render_tree(_sample_tree(), config, GRAYSCALE_THEME))


class SummaryTests(unittest.TestCase):
    def test_listing_summary_counts_directories_and_files(self) -> None:
        config = RippyConfig(root=ROOT)
        self.assertEqual(format_summary(config, TreeCounts(dirs=1, files=2), None, GRAYSCALE_THEME), "1 directory, 2 files")
        self.assertEqual(format_summary(config, TreeCounts(dirs=0, files=1), None, GRAYSCALE_THEME), "0 directories, 1 file")

    def test_search_summary_reports_matches_and_searched(self) -> None:
        config = RippyConfig(root=ROOT, pattern="TODO")
        stats = SearchStats(matched=1, searched=2)
        self.assertEqual(format_summary(config, TreeCounts(), stats, GRAYSCALE_THEME), "1 match, 2 searched")

    def test_elapsed_time_is_appended_when_requested(self) -> None:
        config = RippyConfig(root=ROOT, show_elapsed=True)
        summary = format_summary(config, TreeCounts(), None, GRAYSCALE_THEME, elapsed_seconds=0.25)
        self.assertEqual(summary, "0 directories, 0 files (0.250s)")


if __name__ == "__main__":
    unittest.main()
