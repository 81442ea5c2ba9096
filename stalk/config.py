"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from stalk.models.config import DiffConfig, LogConfig, StalkConfig, WatchConfig
from stalk.observability.logging import LOG_FORMATS


class ConfigError(ValueError):
    """Raised for invalid configuration; fatal before any watch starts."""


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"STALK_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid integer for STALK_{key}: {raw}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_list(key: str) -> list[str]:
    return [item.strip() for item in _env(key).split(",") if item.strip()]


def validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ConfigError(f"Invalid log format: {value}. Must be one of {LOG_FORMATS}")
    return value.lower()


def validate_context_lines(value: int) -> int:
    if not 0 <= value <= 100:
        raise ConfigError(f"Invalid number of context lines: {value}. Must be between 0 and 100")
    return value


def validate_config(config: StalkConfig) -> StalkConfig:
    """Check cross-field constraints that env loading alone cannot enforce."""
    if not config.watch.kinds:
        raise ConfigError("No resource kind given")
    if config.watch.names and config.watch.labels:
        raise ConfigError("Cannot specify both resource names and a label selector at the same time")
    validate_context_lines(config.diff.context_lines)
    config.log.level = validate_log_level(config.log.level)
    config.log.format = validate_log_format(config.log.format)
    return config


def load_config() -> StalkConfig:
    """Load configuration from STALK_* environment variables (and KUBECONFIG)."""
    return StalkConfig(
        watch=WatchConfig(
            namespace=_env("NAMESPACE", "default"),
            labels=_env("LABELS", ""),
            kubeconfig=os.environ.get("KUBECONFIG", ""),
        ),
        diff=DiffConfig(
            context_lines=_env_int("CONTEXT_LINES", 3, min_val=0, max_val=100),
            create_theme=_env("CREATE_THEME", "green"),
            update_theme=_env("UPDATE_THEME", "default"),
            delete_theme=_env("DELETE_THEME", "red"),
            jsonpath=_env("JSONPATH", ""),
            exclude_paths=_env_list("EXCLUDE"),
            hide_managed_fields=_env_bool("HIDE_MANAGED", True),
            show_deleted=_env_bool("SHOW_DELETED", False),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "info")),
            format=validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
