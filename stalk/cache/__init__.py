"""Cache layer for stalk.

Holds the last observed revision of every object of one watched kind so that
updates can be diffed against it.

Submodules:
    snapshot_cache -- Per-kind in-memory store of raw documents and their last-seen times.
"""

from stalk.cache.snapshot_cache import SnapshotCache

__all__ = ["SnapshotCache"]
