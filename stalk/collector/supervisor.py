"""Runs one watch task per resource kind."""

from __future__ import annotations

import asyncio

import structlog

from stalk.collector.watcher import KindWatcher

_log = structlog.get_logger(component="collector.supervisor")


class WatchSupervisor:
    """Starts every watcher before awaiting any, then waits for all of them.

    Kinds run independently; one watcher failing or finishing does not affect
    the others.
    """

    def __init__(self, watchers: list[KindWatcher]) -> None:
        self._watchers = watchers
        self._tasks: list[asyncio.Task[None]] = []

    async def run(self) -> None:
        self._tasks = [asyncio.create_task(watcher.run(), name=f"watch-{watcher.kind}") for watcher in self._watchers]
        _log.info("watches_started", kinds=[watcher.kind for watcher in self._watchers])

        results = await asyncio.gather(*self._tasks, return_exceptions=True)
        for watcher, result in zip(self._watchers, results, strict=True):
            if isinstance(result, asyncio.CancelledError):
                continue
            if isinstance(result, BaseException):
                _log.error("watch_task_failed", kind=watcher.kind, error=str(result))
        _log.info("watches_finished")

    async def stop(self) -> None:
        """Cancel every outstanding watch task and wait for them to finish."""
        for task in self._tasks:
            if not task.done():
                task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
