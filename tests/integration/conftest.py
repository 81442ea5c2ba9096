"""Shared fixtures for stalk integration tests.

Provides fake watch sources and factories so the full pipeline (router ->
transform -> render -> sink) runs without a Kubernetes cluster.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta

import pytest

from stalk.collector.watcher import KindWatcher
from stalk.diff.renderer import DiffRenderer
from stalk.models.config import DiffConfig
from stalk.models.events import ChangeKind, WatchEvent
from stalk.output.sink import MemorySink
from stalk.transform.pipeline import TransformOptions

_T0 = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Document and event factories
# ---------------------------------------------------------------------------


def make_pod(
    name: str = "nginx",
    namespace: str = "default",
    labels: dict[str, str] | None = None,
    rv: str = "1",
    image: str = "nginx:1.25",
) -> dict:
    """Create a raw Pod document."""
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": name,
            "namespace": namespace,
            "resourceVersion": rv,
            "labels": labels if labels is not None else {"app": "nginx"},
            "managedFields": [{"manager": "kubelet", "operation": "Update"}],
        },
        "spec": {"containers": [{"name": "nginx", "image": image}]},
    }


def create(doc: dict) -> WatchEvent:
    return WatchEvent(ChangeKind.CREATE, doc)


def update(doc: dict) -> WatchEvent:
    return WatchEvent(ChangeKind.UPDATE, doc)


def delete(doc: dict) -> WatchEvent:
    return WatchEvent(ChangeKind.DELETE, doc)


# ---------------------------------------------------------------------------
# Fake watch source
# ---------------------------------------------------------------------------


class FakeSource:
    """Replays a fixed list of events, then closes (or fails with *error*)."""

    def __init__(self, events: list[WatchEvent], error: Exception | None = None) -> None:
        self._events = events
        self._error = error
        self.calls: list[tuple[str | None, str | None]] = []

    async def stream(self, namespace: str | None, label_selector: str | None) -> AsyncIterator[WatchEvent]:
        self.calls.append((namespace, label_selector))
        for event in self._events:
            await asyncio.sleep(0)
            yield event
        if self._error is not None:
            raise self._error


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self) -> None:
        self.now = _T0

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def make_watcher(sink: MemorySink):
    """Factory building a KindWatcher wired to the shared memory sink."""

    def _make(kind: str, source: FakeSource, diff: DiffConfig | None = None, **kwargs: object) -> KindWatcher:
        diff = diff or DiffConfig()
        return KindWatcher(
            kind,
            source,
            options=TransformOptions.from_config(diff),
            renderer=DiffRenderer.from_config(diff),
            sink=sink,
            namespace=kwargs.pop("namespace", "default"),  # type: ignore[arg-type]
            show_deleted=diff.show_deleted,
            clock=StepClock(),
            **kwargs,  # type: ignore[arg-type]
        )

    return _make
