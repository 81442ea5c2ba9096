"""Sub-document selector compilation (JSONPath)."""

from __future__ import annotations

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.jsonpath import JSONPath

from stalk.config import ConfigError


def compile_selector(expression: str) -> JSONPath | None:
    """Compile a JSONPath selector; return None when no selector is configured.

    kubectl-style ``{.status}``, ``.status``, ``status`` and ``$.status`` all
    select the same subtree.
    """
    text = expression.strip()
    if not text:
        return None
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1].strip()
    if not text.startswith("$"):
        text = "$." + text.lstrip(".")

    try:
        return parse_jsonpath(text)
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Invalid JSONPath expression {expression!r}: {exc}") from exc
