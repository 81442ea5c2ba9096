"""Transformer: raw document -> canonical text used for diffing.

Steps, in order:
    1. absent document -> empty text
    2. normalize through a JSON round trip (sorted keys)
    3. strip ``metadata.managedFields`` if configured
    4. narrow to the first match of the JSONPath selector, if any
    5. remove every configured exclusion path
    6. serialize as block-style YAML
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
import yaml

from stalk.models.resources import Document
from stalk.transform.paths import MANAGED_FIELDS, ExcludePath, parse_path, remove_path
from stalk.transform.selector import compile_selector

if TYPE_CHECKING:
    from jsonpath_ng.jsonpath import JSONPath

    from stalk.models.config import DiffConfig

_log = structlog.get_logger(component="transform.pipeline")

_YAML_DOCUMENT_END = "\n...\n"


class TransformError(Exception):
    """Raised when a document cannot be transformed; fatal to one event only."""


@dataclass(frozen=True)
class TransformOptions:
    """Compiled transform settings."""

    selector: JSONPath | None = None
    exclude_paths: tuple[ExcludePath, ...] = ()
    strip_managed_fields: bool = True

    @classmethod
    def from_config(cls, config: DiffConfig) -> TransformOptions:
        """Compile selector and exclusion expressions; raises ConfigError."""
        return cls(
            selector=compile_selector(config.jsonpath),
            exclude_paths=tuple(parse_path(expr) for expr in config.exclude_paths),
            strip_managed_fields=config.hide_managed_fields,
        )


def _normalize(document: Document) -> Document:
    try:
        return json.loads(json.dumps(document, sort_keys=True))  # type: ignore[no-any-return]
    except (TypeError, ValueError) as exc:
        raise TransformError(f"failed to re-encode document as JSON: {exc}") from exc


def _to_yaml(document: Document) -> str:
    try:
        text = yaml.safe_dump(
            document,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
            width=float("inf"),
        )
    except yaml.YAMLError as exc:
        raise TransformError(f"failed to encode document as YAML: {exc}") from exc
    # Top-level scalars get an explicit document end marker.
    if text.endswith(_YAML_DOCUMENT_END):
        text = text[: -len(_YAML_DOCUMENT_END) + 1]
    return text


class Transformer:
    """Applies the transform pipeline with one fixed set of options."""

    def __init__(self, options: TransformOptions, log: Any = None) -> None:
        self._options = options
        self._log = log or _log

    def transform(self, document: dict[str, Any] | None, resource: str | None = None) -> str:
        """Return the canonical text of *document*, or "" when it is None.

        Raises TransformError if encoding fails. A failing selector is logged
        (tagged with *resource* when given) and the unfiltered document is
        used instead. Exclusion paths that do not resolve are ignored.
        """
        if document is None:
            return ""

        working = _normalize(document)

        if self._options.strip_managed_fields:
            remove_path(working, MANAGED_FIELDS)

        if self._options.selector is not None:
            working = self._select(working, resource)

        for path in self._options.exclude_paths:
            remove_path(working, path)

        return _to_yaml(working)

    def _select(self, document: Document, resource: str | None) -> Document:
        selector = self._options.selector
        assert selector is not None
        try:
            matches = selector.find(document)
        except Exception as exc:  # noqa: BLE001
            self._log.warning("selector_failed", resource=resource, selector=str(selector), error=str(exc))
            return document

        if not matches:
            self._log.debug("selector_matched_nothing", resource=resource, selector=str(selector))
            return document
        return _normalize(matches[0].value)
