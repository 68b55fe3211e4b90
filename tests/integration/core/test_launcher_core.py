"""End-to-end behavior of the command surface against a temp data directory."""

from __future__ import annotations

import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from lazylaunch.config import ScanPath, SearchMode
from lazylaunch.core import LauncherCore, RequestTracker
from lazylaunch.errors import StoreIOError
from lazylaunch.history import HistoryStore
from lazylaunch.indexer import AppEntry, read_index


class LauncherCoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.data = self.root / "data"
        self.tools = self.root / "tools"
        self.tools.mkdir()
        for name in ("Notepad.exe", "Notes.exe", "Calculator.exe"):
            (self.tools / name).write_bytes(b"")
        (self.tools / "Projects").mkdir()
        (self.tools / "Projects" / "todo.txt").write_bytes(b"")
        self.opened: list[str] = []

    def _core(self) -> LauncherCore:
        return LauncherCore(data_dir=self.data, shortcut_sources=[], opener=self.opened.append)

    def _configure_tools(self, core: LauncherCore, background: bool = False) -> bool:
        config = core.get_config()
        config.paths.scan = [ScanPath(path=str(self.tools), extensions=(".exe",), include_folders=True)]
        config.search.normal_mode = SearchMode.SUBSTRING
        return core.save_config(config, background=background)

    def test_first_start_writes_config_and_index(self) -> None:
        core = self._core()

        self.assertTrue((self.data / "config.toml").exists())
        self.assertTrue((self.data / "index.bin").exists())
        self.assertEqual(core.entries(), ())

    def test_saving_scan_paths_rebuilds_index(self) -> None:
        core = self._core()

        self.assertTrue(self._configure_tools(core))

        self.assertEqual([r.name for r in core.search("not")], ["Notepad", "Notes"])
        self.assertFalse(self._configure_tools(core))

    def test_background_rebuild_swaps_index_in(self) -> None:
        core = self._core()

        self.assertTrue(self._configure_tools(core, background=True))
        self.assertTrue(core.index_builder.wait_idle(timeout=5.0))

        self.assertEqual(len(core.entries()), 4)

    def test_rebuild_for_replaced_paths_loses_to_newer_background_rebuild(self) -> None:
        core = self._core()
        scanning = threading.Event()
        release = threading.Event()

        def scan(paths_config, shortcut_sources=None):
            if not paths_config.scan:
                scanning.set()
                release.wait(timeout=5.0)
                return [AppEntry(name="Old", target_path="/old/Old.exe")]
            return [AppEntry(name="New", target_path="/new/New.exe")]

        with mock.patch("lazylaunch.indexer.cache.scan_all", side_effect=scan):
            old_rebuild = threading.Thread(target=core.rebuild_index)
            old_rebuild.start()
            self.assertTrue(scanning.wait(timeout=5.0))

            config = core.get_config()
            config.paths.scan = [ScanPath(path=str(self.tools), extensions=(".exe",))]
            self.assertTrue(core.save_config(config, background=True))

            release.set()
            old_rebuild.join(timeout=5.0)
            self.assertFalse(old_rebuild.is_alive())
            self.assertTrue(core.index_builder.wait_idle(timeout=5.0))

        self.assertEqual([entry.name for entry in core.entries()], ["New"])
        self.assertEqual([entry.name for entry in read_index(self.data / "index.bin").entries], ["New"])

    def test_index_is_reused_on_next_start(self) -> None:
        self._configure_tools(self._core())

        with mock.patch("lazylaunch.indexer.cache.scan_all") as scan_all:
            restarted = self._core()

        scan_all.assert_not_called()
        self.assertEqual(len(restarted.entries()), 4)

    def test_launch_records_history_and_boosts_ranking(self) -> None:
        core = self._core()
        self._configure_tools(core)
        notes = str(self.tools / "Notes.exe")

        core.launch_item(notes, "not")

        self.assertEqual(self.opened, [notes])
        self.assertEqual([r.name for r in core.search("not")], ["Notes", "Notepad"])
        self.assertEqual([r.name for r in core.get_history_results()], ["Notes"])
        self.assertEqual(HistoryStore.open(self.data / "history.bin").global_count(notes), 1)

    def test_dry_run_records_without_opening(self) -> None:
        core = self._core()
        core.launch_item(str(self.tools / "Notes.exe"), "", dry_run=True)
        self.assertEqual(self.opened, [])

    def test_history_failure_does_not_block_launch(self) -> None:
        core = self._core()
        target = str(self.tools / "Notes.exe")

        with mock.patch("lazylaunch.history.save_history", side_effect=StoreIOError(self.data, "read-only")):
            with self.assertLogs("lazylaunch.core", level="WARNING"):
                core.launch_item(target, "not")

        self.assertEqual(self.opened, [target])

    def test_folder_session_round_trip(self) -> None:
        core = self._core()
        self._configure_tools(core)
        navigator = core.navigator()
        session = core.new_session()
        navigator.refresh(session, "pro")
        top_level = list(session.results)
        self.assertEqual([r.name for r in top_level], ["Projects"])

        self.assertTrue(navigator.enter_selected(session))
        self.assertEqual([r.name for r in session.results], ["todo.txt"])

        self.assertTrue(navigator.exit(session))
        self.assertEqual(session.results, top_level)
        self.assertEqual(session.query, "pro")

        projects = str(self.tools / "Projects")
        history = HistoryStore.open(self.data / "history.bin")
        self.assertEqual(history.folder_expansion_count(projects), 1)

    def test_list_folder_uses_folder_mode(self) -> None:
        core = self._core()
        config = core.get_config()
        config.search.folder_mode = SearchMode.PREFIX
        core.save_config(config)

        self.assertEqual([r.name for r in core.list_folder(str(self.tools), "calc")], ["Calculator.exe"])
        self.assertEqual(core.list_folder(str(self.tools), "alc"), [])

    def test_window_placements_persist(self) -> None:
        core = self._core()
        self.assertTrue(core.save_search_placement(10, 20))
        self.assertTrue(core.save_settings_size(760, 560))

        restarted = self._core()
        self.assertEqual((restarted.get_search_placement().x, restarted.get_search_placement().y), (10, 20))
        placement, size = restarted.get_settings_placement()
        self.assertIsNone(placement)
        self.assertEqual((size.width, size.height), (760, 560))

    def test_get_config_returns_a_copy(self) -> None:
        core = self._core()
        config = core.get_config()
        config.appearance.max_results = 1
        self.assertEqual(core.get_config().appearance.max_results, 8)


class RequestTrackerTests(unittest.TestCase):
    def test_only_latest_request_is_current(self) -> None:
        tracker = RequestTracker()
        first = tracker.next()
        second = tracker.next()

        self.assertGreater(second, first)
        self.assertFalse(tracker.is_current(first))
        self.assertTrue(tracker.is_current(second))
        self.assertEqual(tracker.latest, second)


if __name__ == "__main__":
    unittest.main()
