"""Collector package for stalk.

Consumes watch streams, one task per resource kind, and turns every
notification into a rendered change block.

Submodules
----------
router     -- EventRouter: classifies events and keeps the kind's snapshot cache current.
processor  -- ChangeProcessor: transforms both sides of a change and writes the rendered block.
watcher    -- KindWatcher: sequential consumption loop for one kind's stream.
supervisor -- WatchSupervisor: starts every watcher and waits for all streams to close.
"""

from stalk.collector.processor import ChangeProcessor
from stalk.collector.router import EventRouter
from stalk.collector.supervisor import WatchSupervisor
from stalk.collector.watcher import KindWatcher, WatchSource

__all__ = ["ChangeProcessor", "EventRouter", "KindWatcher", "WatchSource", "WatchSupervisor"]
