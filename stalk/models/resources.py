"""Resource documents, identities and cached snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

# A resource document is plain JSON data: mappings, sequences and scalars.
Document = dict[str, Any] | list[Any] | str | int | float | bool | None


def _metadata(doc: dict[str, Any]) -> dict[str, Any]:
    meta = doc.get("metadata")
    return meta if isinstance(meta, dict) else {}


def resource_version(doc: dict[str, Any]) -> str:
    return str(_metadata(doc).get("resourceVersion", ""))


def generation(doc: dict[str, Any]) -> int:
    try:
        return int(_metadata(doc).get("generation", 0))
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class ResourceIdentity:
    """Identity of one object within a watched kind.

    The namespace is empty for cluster-scoped kinds.
    """

    kind: str
    namespace: str
    name: str

    @property
    def key(self) -> str:
        """Return ``namespace/name``, or just ``name`` when cluster-scoped."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    @classmethod
    def from_document(cls, kind: str, doc: dict[str, Any]) -> ResourceIdentity:
        meta = _metadata(doc)
        return cls(
            kind=kind,
            namespace=str(meta.get("namespace", "") or ""),
            name=str(meta.get("name", "") or ""),
        )


@dataclass(frozen=True)
class Snapshot:
    """Last observed raw document of a resource and when it was seen."""

    document: dict[str, Any]
    seen_at: datetime
