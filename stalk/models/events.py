"""Watch and change event data structures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from stalk.models.resources import ResourceIdentity, Snapshot

_WATCH_VERBS = {
    "ADDED": "CREATE",
    "MODIFIED": "UPDATE",
    "DELETED": "DELETE",
}


class ChangeKind(StrEnum):
    """Kind of mutation reported for a resource."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"

    @classmethod
    def from_watch_type(cls, watch_type: str) -> ChangeKind | None:
        """Map a watch verb (ADDED/MODIFIED/DELETED) to a change kind.

        Returns None for verbs that carry no object change, such as BOOKMARK.
        """
        verb = _WATCH_VERBS.get(watch_type.upper())
        return cls(verb) if verb else None


@dataclass(frozen=True)
class WatchEvent:
    """One notification delivered by a watch stream."""

    kind: ChangeKind
    document: dict[str, Any]


@dataclass(frozen=True)
class ChangeEvent:
    """A routed change, ready for transformation and rendering.

    ``previous`` is None when no earlier revision is known, which is always
    the case for a first CREATE.
    """

    kind: ChangeKind
    identity: ResourceIdentity
    current: dict[str, Any]
    previous: Snapshot | None
    observed_at: datetime
