"""Tests for folder-expansion listings: filtering, ordering and errors."""

from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path

from lazylaunch.config import SearchMode
from lazylaunch.folder import UNREADABLE_FOLDER_LABEL, list_folder
from lazylaunch.history import HistoryData, HistoryStore


def _names(results) -> list[str]:
    return [result.name for result in results]


class ListFolderTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def _touch(self, *names: str) -> None:
        for name in names:
            (self.root / name).write_bytes(b"")

    def test_folders_come_first_then_alphabetical(self) -> None:
        self._touch("alpha.txt", "Beta.txt")
        (self.root / "zeta").mkdir()
        (self.root / "Mu").mkdir()

        results = list_folder(self.root, "", SearchMode.SUBSTRING, True, None, 100)

        self.assertEqual(_names(results), ["Mu", "zeta", "alpha.txt", "Beta.txt"])
        self.assertEqual([r.is_folder for r in results], [True, True, False, False])
        self.assertEqual(results[0].path, str(self.root / "Mu"))

    def test_expansion_count_orders_folders_before_name(self) -> None:
        for name in ("alpha", "mu", "zeta"):
            (self.root / name).mkdir()
        history = HistoryStore(
            self.root / "history.bin",
            data=HistoryData(folder_expansion_counts={str(self.root / "zeta"): 3, str(self.root / "mu"): 1}),
        )

        results = list_folder(self.root, "", SearchMode.SUBSTRING, True, history, 100)

        self.assertEqual(_names(results), ["zeta", "mu", "alpha"])

    def test_substring_filter_is_case_insensitive(self) -> None:
        self._touch("README.TXT", "config.toml", "build.rs")
        results = list_folder(self.root, "readme", SearchMode.SUBSTRING, True, None, 100)
        self.assertEqual(_names(results), ["README.TXT"])

    def test_prefix_filter_matches_only_prefix(self) -> None:
        self._touch("report.txt", "my_report.txt")
        results = list_folder(self.root, "rep", SearchMode.PREFIX, True, None, 100)
        self.assertEqual(_names(results), ["report.txt"])

    def test_fuzzy_filter_matches_skipped_characters(self) -> None:
        self._touch("Visual Studio Code.txt")
        self.assertEqual(
            _names(list_folder(self.root, "vsc", SearchMode.FUZZY, True, None, 100)),
            ["Visual Studio Code.txt"],
        )
        self.assertEqual(list_folder(self.root, "vsc", SearchMode.SUBSTRING, True, None, 100), [])

    def test_results_are_truncated(self) -> None:
        self._touch(*(f"file{i}.txt" for i in range(10)))
        self.assertEqual(len(list_folder(self.root, "", SearchMode.SUBSTRING, True, None, 3)), 3)

    def test_empty_directory_lists_nothing(self) -> None:
        self.assertEqual(list_folder(self.root, "", SearchMode.FUZZY, True, None, 100), [])

    def test_unreadable_directory_yields_single_error_row(self) -> None:
        missing = self.root / "missing"
        with self.assertLogs("lazylaunch.folder.listing", level="WARNING"):
            results = list_folder(missing, "", SearchMode.FUZZY, True, None, 100)

        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].is_error)
        self.assertEqual(results[0].name, UNREADABLE_FOLDER_LABEL)
        self.assertEqual(results[0].path, str(missing))

    @unittest.skipIf(sys.platform == "win32", "dot-files are not hidden on Windows")
    def test_dot_files_are_hidden_unless_requested(self) -> None:
        self._touch(".secret", "visible.txt")

        self.assertEqual(_names(list_folder(self.root, "", SearchMode.FUZZY, False, None, 100)), ["visible.txt"])
        self.assertEqual(
            _names(list_folder(self.root, "", SearchMode.FUZZY, True, None, 100)),
            [".secret", "visible.txt"],
        )


if __name__ == "__main__":
    unittest.main()
