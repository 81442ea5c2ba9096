"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class WatchConfig:
    """Which resources to watch and where."""

    kinds: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    namespace: str = "default"
    labels: str = ""
    kubeconfig: str = ""


@dataclass
class DiffConfig:
    """How changes are transformed and rendered."""

    context_lines: int = 3
    create_theme: str = "green"
    update_theme: str = "default"
    delete_theme: str = "red"
    jsonpath: str = ""
    exclude_paths: list[str] = field(default_factory=list)
    hide_managed_fields: bool = True
    show_deleted: bool = False


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class StalkConfig:
    """Top-level stalk configuration."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)
    log: LogConfig = field(default_factory=LogConfig)
