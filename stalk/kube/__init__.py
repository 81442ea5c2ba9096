"""Kubernetes glue for stalk.

Exposes:
    connect            -- Load credentials and open a dynamic API client.
    KindResolver       -- Turn typed kind names (``deploy``, ``pods``) into API resources.
    DynamicWatchSource -- Watch stream for one resolved kind.
"""

from stalk.kube.client import DynamicWatchSource, KindResolver, ResolvedKind, WatchStreamError, connect

__all__ = ["DynamicWatchSource", "KindResolver", "ResolvedKind", "WatchStreamError", "connect"]
