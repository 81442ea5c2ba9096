"""Exclusion paths: parsing and subtree removal.

Paths are dotted keys with optional list indices and bracketed quoted keys::

    spec.replicas
    spec.template.spec.containers[0].image
    metadata.annotations["kubectl.kubernetes.io/last-applied-configuration"]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from stalk.config import ConfigError
from stalk.models.resources import Document

_TOKEN = re.compile(
    r"""
      \[(?P<index>\d+)\]
    | \[(?P<quote>["'])(?P<quoted>.*?)(?P=quote)\]
    | (?P<key>[^.\[\]"']+)
    | (?P<dot>\.)
    """,
    re.VERBOSE,
)

_MISSING = object()


@dataclass(frozen=True)
class ExcludePath:
    """A compiled exclusion path: a sequence of mapping keys and list indices."""

    steps: tuple[str | int, ...]
    expression: str

    def __str__(self) -> str:
        return self.expression


MANAGED_FIELDS = ExcludePath(steps=("metadata", "managedFields"), expression="metadata.managedFields")


def parse_path(expression: str) -> ExcludePath:
    """Compile *expression* into an ExcludePath.

    Raises ConfigError on syntax errors and on paths that address the whole
    document.
    """
    text = expression.strip()
    if text.startswith("$"):
        text = text[1:]
    if text.startswith("."):
        text = text[1:]
    if not text:
        raise ConfigError(f"Invalid exclude path {expression!r}: path must not be empty")

    steps: list[str | int] = []
    after_dot = True
    pos = 0
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            raise ConfigError(f"Invalid exclude path {expression!r}: unexpected character at position {pos}")
        if match.group("dot"):
            if after_dot:
                raise ConfigError(f"Invalid exclude path {expression!r}: empty segment at position {pos}")
            after_dot = True
        elif match.group("key") is not None:
            if not after_dot:
                raise ConfigError(f"Invalid exclude path {expression!r}: missing '.' before position {pos}")
            steps.append(match.group("key"))
            after_dot = False
        else:
            if after_dot and steps:
                raise ConfigError(f"Invalid exclude path {expression!r}: unexpected '[' after '.'")
            if match.group("index") is not None:
                steps.append(int(match.group("index")))
            else:
                steps.append(match.group("quoted"))
            after_dot = False
        pos = match.end()

    if after_dot:
        raise ConfigError(f"Invalid exclude path {expression!r}: trailing '.'")

    return ExcludePath(steps=tuple(steps), expression=expression.strip())


def _child(node: Any, step: str | int) -> Any:
    if isinstance(step, int):
        if isinstance(node, list) and step < len(node):
            return node[step]
        return _MISSING
    if isinstance(node, dict):
        return node.get(step, _MISSING)
    return _MISSING


def remove_path(document: Document, path: ExcludePath) -> Document:
    """Remove the subtree addressed by *path* from *document* in place.

    Addressing a location that does not exist leaves the document untouched.
    Returns the document for chaining.
    """
    parent: Any = document
    for step in path.steps[:-1]:
        parent = _child(parent, step)
        if parent is _MISSING:
            return document

    last = path.steps[-1]
    if isinstance(last, int):
        if isinstance(parent, list) and last < len(parent):
            del parent[last]
    elif isinstance(parent, dict):
        parent.pop(last, None)
    return document
