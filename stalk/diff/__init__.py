"""Diff rendering for stalk.

Submodules:
    themes   -- Named color themes, one selected per change kind.
    renderer -- DiffRenderer: word-level unified diffs and titled output blocks.
"""

from stalk.diff.renderer import DiffRenderer, block_header, diff_title
from stalk.diff.themes import ColorTheme, get_theme

__all__ = ["ColorTheme", "DiffRenderer", "block_header", "diff_title", "get_theme"]
