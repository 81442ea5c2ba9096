"""Core data structures for stalk."""

from stalk.models.config import DiffConfig, LogConfig, StalkConfig, WatchConfig
from stalk.models.events import ChangeEvent, ChangeKind, WatchEvent
from stalk.models.resources import (
    Document,
    ResourceIdentity,
    Snapshot,
    generation,
    resource_version,
)

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "DiffConfig",
    "Document",
    "LogConfig",
    "ResourceIdentity",
    "Snapshot",
    "StalkConfig",
    "WatchConfig",
    "WatchEvent",
    "generation",
    "resource_version",
]
