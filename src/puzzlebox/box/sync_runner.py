"""Background event loop owned by one PuzzleBox, for synchronous callers.

Usage:
    with SyncRunner() as runner:
        result = runner.run(box.perform_action(puzzle_id, "Open"))
    # loop stopped, thread joined
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SyncRunner:
    """Runs coroutines on a private loop thread, started on first use.

    Every coroutine of one runner runs on the same loop, so the transition
    locks and dispatch locks a box creates stay bound to that loop. close()
    stops the loop and joins the thread; a closed runner restarts on the
    next run().

    Args:
        name: Thread name, for diagnostics.
    """

    def __init__(self, name: str = "puzzlebox-sync-runner") -> None:
        self._name = name
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _ensure_started(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever,
                    daemon=True,
                    name=self._name,
                )
                self._thread.start()
                logger.debug("Started %s", self._name)
            return self._loop

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run coro on the runner's loop, blocking until it completes.

        Raises:
            RuntimeError: If called from the runner's own loop thread.
        """
        if self._thread is not None and threading.current_thread() is self._thread:
            coro.close()
            raise RuntimeError("SyncRunner.run() called from its own loop thread")
        loop = self._ensure_started()
        return asyncio.run_coroutine_threadsafe(coro, loop).result()

    def close(self) -> None:
        """Stop the loop and join its thread. Safe to call more than once."""
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop, self._thread = None, None
        if loop is None or thread is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        thread.join()
        loop.close()
        logger.debug("Stopped %s", self._name)

    def __enter__(self) -> SyncRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
