"""End-to-end pipeline tests for ``rippy.app.run``."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from rippy.app import run
from rippy.config import RippyConfig
from rippy.errors import FatalConfigurationError
from rippy.tree_model.build import iter_entries, iter_file_entries
from rippy.tree_model.sorting import SortKey
from rippy.tree_model.types import TreeCounts


class RunPipelineTests(unittest.TestCase):
    def test_listing_run_aggregates_and_sorts(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "big").mkdir()
            (root / "big" / "blob.txt").write_text("x" * 100, encoding="utf-8")
            (root / "small.txt").write_text("x" * 10, encoding="utf-8")
            (root / "mid.txt").write_text("x" * 40, encoding="utf-8")

            result = run(RippyConfig(root=root, sort_key=SortKey.SIZE, reverse=True))

        self.assertIsNone(result.stats)
        self.assertEqual([child.name for child in result.tree.children], ["big", "mid.txt", "small.txt"])
        self.assertEqual(result.tree.children[0].size, 100)
        self.assertEqual(result.tree.size, 150)
        self.assertEqual(result.counts, TreeCounts(dirs=1, files=3))
        self.assertGreaterEqual(result.elapsed_seconds, 0.0)

    def test_search_run_prunes_to_matching_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "docs").mkdir()
            (root / "empty").mkdir()
            (root / "a.txt").write_text("nothing\n", encoding="utf-8")
            (root / "docs" / "b.txt").write_text("prefix text TODO: fix this later\n", encoding="utf-8")
            (root / "docs" / "c.bin").write_bytes(b"TODO\x00")

            result = run(RippyConfig(root=root, pattern="TODO", window_radius=5))

        self.assertEqual((result.stats.matched, result.stats.searched), (1, 2))
        self.assertEqual([entry.name for entry in iter_entries(result.tree)], ["docs", "b.txt"])
        hit = next(iter_file_entries(result.tree))
        self.assertEqual(hit.window, "...text TODO: fix...")
        self.assertEqual(result.tree.size, hit.size)
        self.assertEqual(result.counts, TreeCounts(dirs=1, files=1))

    def test_search_with_no_matches_keeps_only_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("nothing\n", encoding="utf-8")

            result = run(RippyConfig(root=root, pattern="absent"))

        self.assertEqual(result.tree.children, [])
        self.assertEqual(result.tree.size, 0)
        self.assertEqual((result.stats.matched, result.stats.searched), (0, 1))

    def test_max_files_caps_after_sorting(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("c.txt", "a.txt", "b.txt"):
                (root / name).write_text(name, encoding="utf-8")

            result = run(RippyConfig(root=root, max_files=2))

        self.assertEqual([child.name for child in result.tree.children], ["a.txt", "b.txt"])
        self.assertEqual(result.tree.omitted, 1)
        self.assertEqual(result.tree.size, 10)
        self.assertEqual(result.counts, TreeCounts(dirs=0, files=2))

    def test_include_listing_drops_directories_without_included_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "docs").mkdir()
            (root / "src").mkdir()
            (root / "a.py").write_text("x", encoding="utf-8")
            (root / "docs" / "readme.md").write_text("x", encoding="utf-8")
            (root / "src" / "main.py").write_text("x", encoding="utf-8")

            result = run(RippyConfig(root=root, include_patterns=("*.py",)))

        self.assertEqual([entry.name for entry in iter_entries(result.tree)], ["a.py", "src", "main.py"])
        self.assertEqual(result.counts, TreeCounts(dirs=1, files=2))

    def test_listing_without_includes_keeps_empty_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "empty").mkdir()

            result = run(RippyConfig(root=root))

        self.assertEqual([entry.name for entry in iter_entries(result.tree)], ["empty"])

    def test_size_order_holds_after_file_cap(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a").mkdir()
            (root / "b").mkdir()
            (root / "a" / "small.txt").write_bytes(b"x" * 10)
            (root / "a" / "large.txt").write_bytes(b"x" * 1000)
            (root / "b" / "mid.txt").write_bytes(b"x" * 500)

            result = run(RippyConfig(root=root, sort_key=SortKey.SIZE, max_files=1))

        self.assertEqual([(child.name, child.size) for child in result.tree.children], [("a", 10), ("b", 500)])
        self.assertEqual([child.name for child in result.tree.children[0].children], ["small.txt"])
        self.assertEqual(result.tree.children[0].omitted, 1)

    def test_invalid_pattern_fails_before_walking(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing_root = Path(tmp) / "absent"
            with self.assertRaisesRegex(FatalConfigurationError, "invalid search pattern"):
                run(RippyConfig(root=missing_root, pattern="(["))

    @unittest.skipIf(not hasattr(os, "geteuid") or os.geteuid() == 0, "root can read any file")
    def test_unreadable_file_is_reported_in_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            locked = root / "locked.txt"
            locked.write_text("TODO", encoding="utf-8")
            os.chmod(locked, 0)
            try:
                result = run(RippyConfig(root=root, pattern="TODO"))
            finally:
                os.chmod(locked, 0o644)

        self.assertEqual([error.path for error in result.errors], [locked])
        self.assertEqual(result.tree.children, [])


if __name__ == "__main__":
    unittest.main()
