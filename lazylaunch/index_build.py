"""Background index rebuild scheduler."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from .config import Config
from .errors import IndexPersistError
from .indexer.types import IndexCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexBuildRequest:
    """One queued rebuild."""

    request_id: int
    config: Config


class IndexBuildScheduler:
    """Serialize index rebuilds on one daemon worker thread at a time.

    Requests that arrive while a build is running collapse to the newest one,
    so a burst of config saves costs at most one extra scan.
    """

    def __init__(
        self,
        build: Callable[[Config], IndexCache],
        on_built: Callable[[IndexCache], None] | None = None,
    ) -> None:
        self._build = build
        self._on_built = on_built
        self._lock = threading.Lock()
        self._pending: IndexBuildRequest | None = None
        self._running = False
        self._idle = threading.Event()
        self._idle.set()
        self._next_request_id = 1
        self.last_completed_id = 0

    def _run(self, request: IndexBuildRequest) -> None:
        try:
            cache = self._build(request.config)
        except IndexPersistError as exc:
            logger.warning("Rebuilt index could not be saved: %s", exc)
            cache = exc.cache
        if self._on_built is not None:
            self._on_built(cache)
        self.last_completed_id = request.request_id

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    self._idle.set()
                    return
            try:
                self._run(request)
            except Exception:
                logger.exception("Background index build %d failed", request.request_id)

    def schedule(self, config: Config) -> int:
        """Queue a rebuild for ``config`` and start the worker if idle."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._pending = IndexBuildRequest(request_id=request_id, config=config)
            if self._running:
                return request_id
            self._running = True
            self._idle.clear()

        worker = threading.Thread(
            target=self._worker,
            name="lazylaunch-index-build",
            daemon=True,
        )
        worker.start()
        return request_id

    @property
    def busy(self) -> bool:
        return not self._idle.is_set()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no build is running or pending."""
        return self._idle.wait(timeout)


__all__ = ["IndexBuildRequest", "IndexBuildScheduler"]
