"""Event routing: watch event + snapshot cache -> change event."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog

from stalk.cache.snapshot_cache import SnapshotCache
from stalk.models.events import ChangeEvent, ChangeKind, WatchEvent
from stalk.models.resources import ResourceIdentity

_log = structlog.get_logger(component="collector.router")


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class EventRouter:
    """Applies events for one kind to that kind's cache, in delivery order.

    CREATE  -- cache the document; previous is normally absent, but an entry
               left by a duplicate or replayed CREATE becomes the previous side.
    UPDATE  -- previous is whatever was cached (absent after a missed CREATE);
               the cache entry is replaced.
    DELETE  -- previous is whatever was cached; the entry is removed.
    """

    def __init__(
        self,
        kind: str,
        cache: SnapshotCache,
        log: Any = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._kind = kind
        self._cache = cache
        self._log = log or _log.bind(kind=kind)
        self._clock = clock or _utcnow

    def route(self, event: WatchEvent) -> ChangeEvent:
        identity = ResourceIdentity.from_document(self._kind, event.document)
        now = self._clock()
        previous = self._cache.get(identity)

        if event.kind is ChangeKind.CREATE:
            if previous is not None:
                self._log.debug("duplicate_create", resource=identity.key)
            self._cache.set(identity, event.document, now)
        elif event.kind is ChangeKind.UPDATE:
            if previous is None:
                self._log.debug("update_without_previous", resource=identity.key)
            self._cache.set(identity, event.document, now)
        else:
            self._cache.delete(identity)

        return ChangeEvent(
            kind=event.kind,
            identity=identity,
            current=event.document,
            previous=previous,
            observed_at=now,
        )
