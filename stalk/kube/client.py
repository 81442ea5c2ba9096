"""Connection, kind resolution and dynamic watch streams via kubernetes-asyncio."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from typing import Any

import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
import structlog
from kubernetes_asyncio.client import ApiClient  # type: ignore[import-untyped]
from kubernetes_asyncio.dynamic import DynamicClient  # type: ignore[import-untyped]
from kubernetes_asyncio.dynamic.exceptions import (  # type: ignore[import-untyped]
    ResourceNotFoundError,
    ResourceNotUniqueError,
)

from stalk.config import ConfigError
from stalk.models.events import ChangeKind, WatchEvent

_log = structlog.get_logger(component="kube.client")

# Order in which a typed kind is matched against discovery data.
_SEARCH_FIELDS = ("name", "singular_name", "short_names", "kind")


class WatchStreamError(Exception):
    """Raised when the API server reports an error on a watch stream."""


async def connect(kubeconfig: str = "") -> tuple[ApiClient, DynamicClient]:
    """Load credentials and return an API client plus a dynamic client on top of it.

    An explicit kubeconfig wins; otherwise the in-cluster service account is
    tried before the default kubeconfig.
    """
    if kubeconfig:
        await k8s_config.load_kube_config(config_file=kubeconfig)
        _log.info("k8s client configured from kubeconfig", path=kubeconfig)
    else:
        try:
            # load_incluster_config() is synchronous in kubernetes-asyncio
            k8s_config.load_incluster_config()
            _log.info("k8s client configured from in-cluster service account")
        except k8s_config.ConfigException:
            await k8s_config.load_kube_config()
            _log.info("k8s client configured from kubeconfig")

    api_client = ApiClient()
    dynamic_client = await DynamicClient(api_client)
    return api_client, dynamic_client


@dataclass(frozen=True)
class ResolvedKind:
    """A kind the API server knows about, ready to be watched."""

    kind: str
    api_version: str
    namespaced: bool
    resource: Any


class KindResolver:
    """Resolves typed kind names against the API server's discovery data.

    ``deployments``, ``deployment``, ``deploy`` and ``Deployment`` all resolve to
    apps/v1 Deployment; ``name.group`` pins the API group.
    """

    def __init__(self, client: DynamicClient) -> None:
        self._client = client

    async def resolve(self, text: str) -> ResolvedKind:
        name, _, group = text.strip().partition(".")
        if not name:
            raise ConfigError(f"Invalid resource kind {text!r}")

        for field in _SEARCH_FIELDS:
            query: dict[str, Any] = {field: [name] if field == "short_names" else name}
            if group:
                query["group"] = group
            resource = await self._lookup(text, query)
            if resource is not None:
                _log.debug("resource kind resolved", input=text, kind=resource.kind, api_version=resource.group_version)
                return ResolvedKind(
                    kind=resource.kind,
                    api_version=resource.group_version,
                    namespaced=bool(resource.namespaced),
                    resource=resource,
                )

        raise ConfigError(f"Unknown resource kind {text!r}")

    async def resolve_all(self, texts: Iterable[str]) -> list[ResolvedKind]:
        """Resolve every input, collapsing inputs that name the same kind."""
        resolved: dict[tuple[str, str], ResolvedKind] = {}
        for text in texts:
            kind = await self.resolve(text)
            resolved.setdefault((kind.api_version, kind.kind), kind)
        return list(resolved.values())

    async def _lookup(self, text: str, query: dict[str, Any]) -> Any:
        try:
            return await self._client.resources.get(**query)
        except ResourceNotFoundError:
            return None
        except ResourceNotUniqueError:
            if "group" in query:
                raise ConfigError(f"Resource kind {text!r} is ambiguous") from None

        # Prefer the core group when a bare name matches several groups.
        try:
            return await self._client.resources.get(api_version="v1", **query)
        except (ResourceNotFoundError, ResourceNotUniqueError):
            raise ConfigError(
                f"Resource kind {text!r} is ambiguous; qualify it with its API group (e.g. {text}.apps)"
            ) from None


def _raw_document(event: dict[str, Any]) -> dict[str, Any]:
    raw = event.get("raw_object")
    if isinstance(raw, dict):
        return raw
    obj = event.get("object")
    if isinstance(obj, dict):
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if to_dict is not None:
        return to_dict()  # type: ignore[no-any-return]
    raise WatchStreamError(f"watch event carries no object: {event.get('type')}")


class DynamicWatchSource:
    """Watch stream for one resolved kind through the dynamic client.

    Cluster-scoped kinds ignore the requested namespace.
    """

    def __init__(self, client: DynamicClient, resolved: ResolvedKind) -> None:
        self._client = client
        self._resolved = resolved

    async def stream(self, namespace: str | None, label_selector: str | None) -> AsyncIterator[WatchEvent]:
        scope = namespace if self._resolved.namespaced else None
        async for event in self._client.watch(
            self._resolved.resource,
            namespace=scope,
            label_selector=label_selector,
        ):
            verb = str(event.get("type", ""))
            if verb.upper() == "ERROR":
                raise WatchStreamError(f"watch error for {self._resolved.kind}: {event.get('raw_object')}")

            kind = ChangeKind.from_watch_type(verb)
            if kind is None:
                _log.debug("watch event skipped", kind=self._resolved.kind, type=verb)
                continue
            yield WatchEvent(kind=kind, document=_raw_document(event))
