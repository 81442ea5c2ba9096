"""Application bootstrap for stalk.

Startup order: logging -> transform/render options -> K8s client
              -> kind resolution -> watchers -> supervisor

Configuration errors surface before any connection is made. Shutdown cancels
the watch tasks and closes the API client.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any

from stalk.collector.supervisor import WatchSupervisor
from stalk.collector.watcher import KindWatcher
from stalk.config import ConfigError
from stalk.diff.renderer import DiffRenderer
from stalk.models.config import StalkConfig
from stalk.observability.logging import get_logger, setup_logging
from stalk.output.sink import BlockSink, ConsoleSink
from stalk.transform.pipeline import TransformOptions

if TYPE_CHECKING:
    import structlog


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class StalkApp:
    """Application root. Owns the API client and the watch supervisor.

    ``stop()`` is safe to call on an app that was never started or has
    already stopped.
    """

    def __init__(self, config: StalkConfig, sink: BlockSink | None = None) -> None:
        self.config = config
        self._sink = sink or ConsoleSink()
        self._api_client: Any = None
        self._dynamic_client: Any = None
        self._supervisor: WatchSupervisor | None = None
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Prepare everything needed to watch.

        Raises ConfigError for invalid options or unknown kinds and
        _ComponentError if the cluster cannot be reached.
        """
        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("stalk starting", version=_stalk_version(), kinds=self.config.watch.kinds)

        options = TransformOptions.from_config(self.config.diff)
        renderer = DiffRenderer.from_config(self.config.diff)

        await self._start_k8s_client()
        watchers = await self._build_watchers(options, renderer)
        self._supervisor = WatchSupervisor(watchers)

    async def _start_k8s_client(self) -> None:
        assert self._log is not None
        self._log.debug("starting k8s client")
        try:
            from stalk.kube.client import connect

            self._api_client, self._dynamic_client = await connect(self.config.watch.kubeconfig)
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _build_watchers(self, options: TransformOptions, renderer: DiffRenderer) -> list[KindWatcher]:
        assert self._log is not None
        from stalk.kube.client import DynamicWatchSource, KindResolver

        watch = self.config.watch
        self._log.debug("resolving resource kinds", kinds=watch.kinds)
        try:
            resolved = await KindResolver(self._dynamic_client).resolve_all(watch.kinds)
        except ConfigError:
            raise
        except Exception as exc:
            raise _ComponentError("kind_resolver", exc) from exc
        self._log.info("resource kinds resolved", kinds=[f"{kind.api_version}/{kind.kind}" for kind in resolved])

        watchers = []
        for kind in resolved:
            watchers.append(
                KindWatcher(
                    kind.kind,
                    DynamicWatchSource(self._dynamic_client, kind),
                    options=options,
                    renderer=renderer,
                    sink=self._sink,
                    namespace=watch.namespace if kind.namespaced else None,
                    label_selector=watch.labels,
                    names=watch.names,
                    show_deleted=self.config.diff.show_deleted,
                )
            )
        return watchers

    # ------------------------------------------------------------------
    # Run / shutdown
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Block until every watch stream has closed."""
        assert self._supervisor is not None
        await self._supervisor.run()

    async def stop(self) -> None:
        if self._supervisor is None and self._api_client is None:
            return
        log = self._log or get_logger("app")
        if self._supervisor is not None:
            await self._supervisor.stop()
            self._supervisor = None
        if self._api_client is not None:
            try:
                await self._api_client.close()
            except Exception as exc:
                log.debug("k8s client close raised (non-fatal)", error=str(exc))
            self._api_client = None
        log.info("stalk stopped")


def _stalk_version() -> str:
    from stalk import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: StalkConfig, sink: BlockSink | None = None) -> None:
    """Create the app, register OS signals, run until all streams close."""
    app = StalkApp(config, sink=sink)
    loop = asyncio.get_running_loop()

    shutdown: asyncio.Task[None] | None = None

    def _request_shutdown() -> None:
        nonlocal shutdown
        if shutdown is None:
            shutdown = asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        if shutdown is None:
            await app.run()
    except ConfigError as exc:
        get_logger("app").critical("invalid configuration", error=str(exc))
        raise SystemExit(2) from exc
    except _ComponentError as exc:
        get_logger("app").critical("fatal startup error", component=exc.component, error=str(exc.cause))
        raise SystemExit(1) from exc
    finally:
        if shutdown is not None:
            await shutdown
        # Releases anything start() acquired after a signal-driven stop ran.
        await app.stop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)
