"""Per-kind watch consumption loop."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Iterable
from datetime import datetime
from typing import Protocol

from stalk.cache.snapshot_cache import SnapshotCache
from stalk.collector.processor import ChangeProcessor
from stalk.collector.router import EventRouter
from stalk.diff.renderer import DiffRenderer
from stalk.models.events import WatchEvent
from stalk.models.resources import ResourceIdentity
from stalk.observability.logging import get_kind_logger
from stalk.output.sink import BlockSink
from stalk.transform.pipeline import TransformError, Transformer, TransformOptions


class WatchSource(Protocol):
    """Opens a notification stream for one resource kind.

    The returned iterator ends when the server closes the stream.
    """

    def stream(self, namespace: str | None, label_selector: str | None) -> AsyncIterator[WatchEvent]: ...


class KindWatcher:
    """Consumes one kind's stream, one event at a time.

    The watcher owns its SnapshotCache for its whole lifetime; no other task
    may touch it.
    """

    def __init__(
        self,
        kind: str,
        source: WatchSource,
        *,
        options: TransformOptions,
        renderer: DiffRenderer,
        sink: BlockSink,
        namespace: str | None = None,
        label_selector: str | None = None,
        names: Iterable[str] = (),
        show_deleted: bool = False,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.kind = kind
        self._source = source
        self._namespace = namespace
        self._label_selector = label_selector or None
        self._names = frozenset(names)
        self._log = get_kind_logger("collector.watcher", kind)
        self.cache = SnapshotCache()
        self._router = EventRouter(kind, self.cache, log=self._log, clock=clock)
        self._processor = ChangeProcessor(
            Transformer(options, log=self._log),
            renderer,
            sink,
            show_deleted=show_deleted,
        )
        self.events_processed = 0
        self.events_failed = 0

    async def run(self) -> None:
        """Read events until the stream closes or fails.

        A failing stream ends only this watcher; the error is logged.
        """
        self._log.info("watch_started", namespace=self._namespace, label_selector=self._label_selector)
        try:
            async for event in self._source.stream(self._namespace, self._label_selector):
                self.handle(event)
        except asyncio.CancelledError:
            self._log.info("watch_cancelled", events=self.events_processed)
            raise
        except Exception as exc:
            self._log.error("watch_stream_failed", error=str(exc), events=self.events_processed)
            return
        self._log.info("watch_stream_closed", events=self.events_processed)

    def handle(self, event: WatchEvent) -> None:
        """Route, transform, render and emit a single event."""
        identity = ResourceIdentity.from_document(self.kind, event.document)
        if self._names and identity.name not in self._names:
            return

        change = self._router.route(event)
        self.events_processed += 1
        try:
            self._processor.process(change)
        except TransformError as exc:
            self.events_failed += 1
            self._log.error(
                "event_processing_failed",
                resource=identity.key,
                change=str(change.kind),
                error=str(exc),
            )
