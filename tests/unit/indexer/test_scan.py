"""Tests for filesystem enumeration order, filtering and deduplication."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazylaunch.config import PathsConfig, ScanPath
from lazylaunch.indexer import AppEntry, scan_all


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


class ScanAllTests(unittest.TestCase):
    def test_shortcut_sources_are_walked_recursively(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            start_menu = Path(tmp) / "Programs"
            firefox = _touch(start_menu / "Internet" / "Firefox.lnk")
            _touch(start_menu / "readme.txt")

            entries = scan_all(PathsConfig(), shortcut_sources=[start_menu], shortcut_ext=".lnk")

        self.assertEqual(entries, [AppEntry(name="Firefox", target_path=str(firefox))])

    def test_scan_paths_list_direct_children_only(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tools = Path(tmp) / "tools"
            app = _touch(tools / "App.EXE")
            _touch(tools / "nested" / "Deep.exe")
            _touch(tools / "notes.txt")
            scan = ScanPath(path=str(tools), extensions=(".exe",))

            entries = scan_all(PathsConfig(scan=[scan]), shortcut_sources=[], shortcut_ext=".lnk")

        self.assertEqual(entries, [AppEntry(name="App", target_path=str(app))])

    def test_include_folders_registers_subdirectories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "projects"
            (root / "Beta").mkdir(parents=True)
            (root / "alpha").mkdir()
            scan = ScanPath(path=str(root), extensions=(), include_folders=True)

            entries = scan_all(PathsConfig(scan=[scan]), shortcut_sources=[], shortcut_ext=".lnk")

        self.assertEqual(
            entries,
            [
                AppEntry(name="alpha", target_path=str(root / "alpha"), is_folder=True),
                AppEntry(name="Beta", target_path=str(root / "Beta"), is_folder=True),
            ],
        )

    def test_first_occurrence_wins_case_insensitively(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            start_menu = Path(tmp) / "Programs"
            shortcut = _touch(start_menu / "Notepad.lnk")
            tools = Path(tmp) / "tools"
            _touch(tools / "notepad.exe")
            other = _touch(tools / "Paint.exe")
            scan = ScanPath(path=str(tools), extensions=("exe",))

            entries = scan_all(PathsConfig(scan=[scan]), shortcut_sources=[start_menu], shortcut_ext=".lnk")

        self.assertEqual(
            entries,
            [
                AppEntry(name="Notepad", target_path=str(shortcut)),
                AppEntry(name="Paint", target_path=str(other)),
            ],
        )

    def test_additional_paths_follow_shortcut_sources(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            start_menu = Path(tmp) / "Programs"
            extra = Path(tmp) / "links"
            from_start = _touch(start_menu / "Tool.lnk")
            _touch(extra / "tool.lnk")
            deep = _touch(extra / "more" / "Other.lnk")

            entries = scan_all(
                PathsConfig(additional=[str(extra)]),
                shortcut_sources=[start_menu],
                shortcut_ext=".lnk",
            )

        self.assertEqual(
            entries,
            [
                AppEntry(name="Tool", target_path=str(from_start)),
                AppEntry(name="Other", target_path=str(deep)),
            ],
        )

    def test_unreadable_root_is_skipped_with_warning(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tools = Path(tmp) / "tools"
            app = _touch(tools / "App.exe")
            missing = ScanPath(path=str(Path(tmp) / "missing"), extensions=(".exe",))
            present = ScanPath(path=str(tools), extensions=(".exe",))

            with self.assertLogs("lazylaunch.indexer.scan", level="WARNING") as logs:
                entries = scan_all(
                    PathsConfig(scan=[missing, present]),
                    shortcut_sources=[],
                    shortcut_ext=".lnk",
                )

        self.assertEqual(entries, [AppEntry(name="App", target_path=str(app))])
        self.assertIn("missing", logs.output[0])


if __name__ == "__main__":
    unittest.main()
