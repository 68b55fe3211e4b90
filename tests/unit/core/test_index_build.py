"""Tests for the background index rebuild scheduler."""

from __future__ import annotations

import threading
import time
import unittest

from lazylaunch.config import Config
from lazylaunch.errors import IndexPersistError
from lazylaunch.index_build import IndexBuildScheduler
from lazylaunch.indexer import AppEntry, IndexCache


def _cache(*names: str) -> IndexCache:
    return IndexCache(
        version=1,
        created_at=time.time(),
        entries=tuple(AppEntry(name=name, target_path=f"/apps/{name}") for name in names),
    )


class IndexBuildSchedulerTests(unittest.TestCase):
    def test_build_runs_in_background_and_delivers_cache(self) -> None:
        built: list[IndexCache] = []
        scheduler = IndexBuildScheduler(lambda _config: _cache("A"), built.append)

        request_id = scheduler.schedule(Config())

        self.assertTrue(scheduler.wait_idle(timeout=2.0))
        self.assertEqual([cache.entries[0].name for cache in built], ["A"])
        self.assertEqual(scheduler.last_completed_id, request_id)
        self.assertFalse(scheduler.busy)

    def test_requests_during_a_build_collapse_to_the_newest(self) -> None:
        release = threading.Event()
        started = threading.Event()
        seen: list[int] = []

        def build(config: Config) -> IndexCache:
            started.set()
            release.wait(timeout=2.0)
            seen.append(config.appearance.max_results)
            return _cache("A")

        scheduler = IndexBuildScheduler(build, lambda _cache: None)
        scheduler.schedule(Config())
        self.assertTrue(started.wait(timeout=2.0))

        for max_results in (2, 3, 4):
            config = Config()
            config.appearance.max_results = max_results
            last_id = scheduler.schedule(config)
        release.set()

        self.assertTrue(scheduler.wait_idle(timeout=2.0))
        self.assertEqual(seen, [8, 4])
        self.assertEqual(scheduler.last_completed_id, last_id)

    def test_persist_failure_still_delivers_fresh_cache(self) -> None:
        built: list[IndexCache] = []
        fresh = _cache("Fresh")

        def build(_config: Config) -> IndexCache:
            raise IndexPersistError("index.bin", "disk full", fresh)

        scheduler = IndexBuildScheduler(build, built.append)
        with self.assertLogs("lazylaunch.index_build", level="WARNING"):
            scheduler.schedule(Config())
            self.assertTrue(scheduler.wait_idle(timeout=2.0))

        self.assertEqual(built, [fresh])

    def test_failing_install_does_not_stall_later_builds(self) -> None:
        builds: list[int] = []
        installed: list[IndexCache] = []

        def build(config: Config) -> IndexCache:
            builds.append(config.appearance.max_results)
            return _cache("A")

        def on_built(cache: IndexCache) -> None:
            if len(builds) == 1:
                raise RuntimeError("install failed")
            installed.append(cache)

        scheduler = IndexBuildScheduler(build, on_built)
        with self.assertLogs("lazylaunch.index_build", level="ERROR"):
            scheduler.schedule(Config())
            self.assertTrue(scheduler.wait_idle(timeout=2.0))
        self.assertFalse(scheduler.busy)

        second = Config()
        second.appearance.max_results = 3
        request_id = scheduler.schedule(second)

        self.assertTrue(scheduler.wait_idle(timeout=2.0))
        self.assertEqual(builds, [8, 3])
        self.assertEqual(len(installed), 1)
        self.assertEqual(scheduler.last_completed_id, request_id)

    def test_build_without_install_callback(self) -> None:
        seen: list[int] = []
        scheduler = IndexBuildScheduler(lambda config: seen.append(1) or _cache("A"))

        request_id = scheduler.schedule(Config())

        self.assertTrue(scheduler.wait_idle(timeout=2.0))
        self.assertEqual(seen, [1])
        self.assertEqual(scheduler.last_completed_id, request_id)


if __name__ == "__main__":
    unittest.main()
