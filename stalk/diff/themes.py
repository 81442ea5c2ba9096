"""Color themes for rendered diffs.

Styles are rich style strings; an empty string means unstyled.
"""

from __future__ import annotations

from dataclasses import dataclass

from stalk.config import ConfigError


@dataclass(frozen=True)
class ColorTheme:
    """Styles for every part of a rendered diff block."""

    name: str
    header: str = "bold"
    title: str = "bold"
    hunk: str = "cyan"
    context: str = ""
    delete: str = "red"
    insert: str = "green"
    delete_word: str = "bold reverse red"
    insert_word: str = "bold reverse green"


THEMES: dict[str, ColorTheme] = {
    theme.name: theme
    for theme in (
        ColorTheme(name="default"),
        ColorTheme(
            name="green",
            header="bold green",
            delete="green",
            insert="green",
            delete_word="bold green",
            insert_word="bold green",
        ),
        ColorTheme(
            name="red",
            header="bold red",
            delete="red",
            insert="red",
            delete_word="bold red",
            insert_word="bold red",
        ),
        ColorTheme(
            name="yellow",
            header="bold yellow",
            delete="yellow",
            insert="bright_yellow",
            delete_word="bold reverse yellow",
            insert_word="bold reverse bright_yellow",
        ),
        ColorTheme(
            name="plain",
            header="",
            title="",
            hunk="",
            delete="",
            insert="",
            delete_word="",
            insert_word="",
        ),
    )
}


def get_theme(name: str) -> ColorTheme:
    """Look up a theme by name; raises ConfigError for unknown names."""
    try:
        return THEMES[name.lower()]
    except KeyError:
        raise ConfigError(f"Unknown color theme {name!r}. Must be one of {sorted(THEMES)}") from None
