"""In-memory snapshot cache for a single watched kind.

Exactly one SnapshotCache exists per watched kind, owned by the task that
consumes that kind's watch stream. The cache is not locked: it must never be
shared between tasks. If a kind ever gets more than one producer, get/set/delete
need a lock around them.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

from stalk.models.resources import ResourceIdentity, Snapshot


class SnapshotCache:
    """Maps a resource identity to its last observed raw document.

    Documents are deep-copied on the way in and on the way out, so callers can
    mutate what they pass or receive without touching stored state.
    """

    def __init__(self) -> None:
        self._store: dict[ResourceIdentity, Snapshot] = {}

    def get(self, identity: ResourceIdentity) -> Snapshot | None:
        """Return an isolated copy of the cached snapshot, or None."""
        snapshot = self._store.get(identity)
        if snapshot is None:
            return None
        return Snapshot(document=copy.deepcopy(snapshot.document), seen_at=snapshot.seen_at)

    def set(self, identity: ResourceIdentity, document: dict[str, Any], now: datetime | None = None) -> None:
        """Insert or replace the snapshot for *identity*."""
        self._store[identity] = Snapshot(
            document=copy.deepcopy(document),
            seen_at=now or datetime.now(tz=UTC),
        )

    def delete(self, identity: ResourceIdentity) -> None:
        """Remove *identity*; a missing entry is not an error."""
        self._store.pop(identity, None)

    def __contains__(self, identity: object) -> bool:
        return identity in self._store

    def __len__(self) -> int:
        return len(self._store)
