"""Render changes as titled, colored unified diffs.

Lines are matched with difflib; changed line pairs are compared again word
by word so the words that actually changed stand out.
"""

from __future__ import annotations

import difflib
import re
from datetime import datetime
from typing import Any

from rich.text import Text

from stalk.diff.themes import ColorTheme, get_theme
from stalk.models.config import DiffConfig
from stalk.models.events import ChangeEvent, ChangeKind
from stalk.models.resources import ResourceIdentity, generation, resource_version

_RULE = "-" * 45
_NONE_TITLE = "(none)"
_WORD = re.compile(r"\s+|\w+|[^\w\s]")


def block_header(kind: ChangeKind, identity: ResourceIdentity) -> str:
    """Return the header line of an output block, e.g. ``--- UPDATE --- default/nginx ---...``."""
    return f"--- {kind} --- {identity.key} {_RULE}"


def diff_title(identity: ResourceIdentity, document: dict[str, Any] | None, seen_at: datetime) -> str:
    """Title for one side of a diff; ``(none)`` when that side is absent."""
    if document is None:
        return _NONE_TITLE
    timestamp = seen_at.isoformat(timespec="seconds")
    return (
        f"{identity.kind} {identity.key} v{resource_version(document)} "
        f"({timestamp}) (gen. {generation(document)})"
    )


def _format_range(start: int, stop: int) -> str:
    beginning = start + 1
    length = stop - start
    if length == 1:
        return f"{beginning}"
    if not length:
        beginning -= 1
    return f"{beginning},{length}"


class DiffRenderer:
    """Builds output blocks for routed changes.

    One theme is used per change kind; ``context_lines`` bounds the unchanged
    lines shown around each hunk.
    """

    def __init__(self, context_lines: int, themes: dict[ChangeKind, ColorTheme]) -> None:
        self._context_lines = context_lines
        self._themes = themes

    @classmethod
    def from_config(cls, config: DiffConfig) -> DiffRenderer:
        """Build a renderer from config; raises ConfigError for unknown themes."""
        return cls(
            config.context_lines,
            {
                ChangeKind.CREATE: get_theme(config.create_theme),
                ChangeKind.UPDATE: get_theme(config.update_theme),
                ChangeKind.DELETE: get_theme(config.delete_theme),
            },
        )

    def theme_for(self, kind: ChangeKind) -> ColorTheme:
        return self._themes[kind]

    def render_change(self, change: ChangeEvent, old_text: str, new_text: str) -> Text:
        """Render the diff body for *change* from its two transformed texts."""
        identity = change.identity
        previous = change.previous

        if previous is not None:
            title_a = diff_title(identity, previous.document, previous.seen_at)
        elif change.kind is ChangeKind.DELETE:
            title_a = diff_title(identity, change.current, change.observed_at)
        else:
            title_a = _NONE_TITLE

        if change.kind is ChangeKind.DELETE:
            title_b = _NONE_TITLE
        else:
            title_b = diff_title(identity, change.current, change.observed_at)

        return self.render_diff(old_text, new_text, title_a, title_b, self.theme_for(change.kind))

    def render_diff(self, old_text: str, new_text: str, title_a: str, title_b: str, theme: ColorTheme) -> Text:
        """Unified diff of two texts. Empty when they are identical."""
        old_lines = old_text.splitlines()
        new_lines = new_text.splitlines()
        matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

        out = Text()
        started = False
        for group in matcher.get_grouped_opcodes(self._context_lines):
            if not started:
                out.append(f"--- {title_a}\n", style=theme.title)
                out.append(f"+++ {title_b}\n", style=theme.title)
                started = True

            first, last = group[0], group[-1]
            out.append(
                f"@@ -{_format_range(first[1], last[2])} +{_format_range(first[3], last[4])} @@\n",
                style=theme.hunk,
            )
            for tag, i1, i2, j1, j2 in group:
                if tag == "equal":
                    for line in old_lines[i1:i2]:
                        out.append(f" {line}\n", style=theme.context)
                elif tag == "delete":
                    for line in old_lines[i1:i2]:
                        out.append(f"-{line}\n", style=theme.delete)
                elif tag == "insert":
                    for line in new_lines[j1:j2]:
                        out.append(f"+{line}\n", style=theme.insert)
                else:
                    self._render_replace(out, old_lines[i1:i2], new_lines[j1:j2], theme)
        return out

    def render_block(self, kind: ChangeKind, identity: ResourceIdentity, body: Text | None = None) -> Text:
        """Header line, optional body, and a trailing blank line."""
        block = Text()
        block.append(block_header(kind, identity) + "\n", style=self.theme_for(kind).header)
        if body is not None and body.plain:
            block.append_text(body)
            if not body.plain.endswith("\n"):
                block.append("\n")
        block.append("\n")
        return block

    def _render_replace(self, out: Text, old_lines: list[str], new_lines: list[str], theme: ColorTheme) -> None:
        deleted = Text()
        inserted = Text()
        for idx in range(max(len(old_lines), len(new_lines))):
            old = old_lines[idx] if idx < len(old_lines) else None
            new = new_lines[idx] if idx < len(new_lines) else None
            if old is not None and new is not None:
                old_words, new_words = self._word_diff(old, new, theme)
                deleted.append_text(old_words)
                inserted.append_text(new_words)
            elif old is not None:
                deleted.append(f"-{old}\n", style=theme.delete)
            elif new is not None:
                inserted.append(f"+{new}\n", style=theme.insert)
        out.append_text(deleted)
        out.append_text(inserted)

    @staticmethod
    def _word_diff(old: str, new: str, theme: ColorTheme) -> tuple[Text, Text]:
        old_words = _WORD.findall(old)
        new_words = _WORD.findall(new)
        matcher = difflib.SequenceMatcher(None, old_words, new_words, autojunk=False)

        deleted = Text("-", style=theme.delete)
        inserted = Text("+", style=theme.insert)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                deleted.append("".join(old_words[i1:i2]), style=theme.delete)
                inserted.append("".join(new_words[j1:j2]), style=theme.insert)
                continue
            if i2 > i1:
                deleted.append("".join(old_words[i1:i2]), style=theme.delete_word)
            if j2 > j1:
                inserted.append("".join(new_words[j1:j2]), style=theme.insert_word)
        deleted.append("\n")
        inserted.append("\n")
        return deleted, inserted
