"""Unit tests for stalk.diff (renderer and themes)."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from stalk.config import ConfigError
from stalk.diff.renderer import DiffRenderer, block_header, diff_title
from stalk.diff.themes import THEMES, get_theme
from stalk.models.config import DiffConfig
from stalk.models.events import ChangeEvent, ChangeKind
from stalk.models.resources import ResourceIdentity, Snapshot
from stalk.transform.pipeline import Transformer, TransformOptions

_NOW = datetime(2024, 5, 1, 12, 0, 5, tzinfo=UTC)
_EARLIER = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)
_NGINX = ResourceIdentity(kind="Pod", namespace="default", name="nginx")


def _pod(app: str = "nginx", rv: str = "10") -> dict:
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"labels": {"app": app}, "name": "nginx", "namespace": "default", "resourceVersion": rv},
        "spec": {"containers": [{"image": "nginx:1.25", "name": "nginx"}]},
    }


def _text(doc: dict | None) -> str:
    return Transformer(TransformOptions()).transform(doc)


def _renderer(context_lines: int = 3) -> DiffRenderer:
    return DiffRenderer.from_config(DiffConfig(context_lines=context_lines))


def _body_lines(plain: str) -> list[str]:
    return [line for line in plain.splitlines() if not line.startswith(("---", "+++", "@@"))]


# ---------------------------------------------------------------------------
# render_diff
# ---------------------------------------------------------------------------


class TestRenderDiff:
    def test_identical_texts_render_nothing(self) -> None:
        """No changes -> no headers, no insertion or deletion markers."""
        text = _text(_pod())
        body = _renderer().render_diff(text, text, "a", "b", get_theme("default"))
        assert body.plain == ""

    def test_single_label_change(self) -> None:
        body = _renderer().render_diff(_text(_pod()), _text(_pod(app="nginx-v2")), "a", "b", get_theme("default"))
        lines = body.plain.splitlines()

        assert lines[0] == "--- a"
        assert lines[1] == "+++ b"
        assert lines[2] == "@@ -2,7 +2,7 @@"

        removed = [line for line in lines[3:] if line.startswith("-")]
        added = [line for line in lines[3:] if line.startswith("+")]
        context = [line for line in lines[3:] if line.startswith(" ")]
        assert removed == ["-    app: nginx"]
        assert added == ["+    app: nginx-v2"]
        assert len(context) == 6

    def test_context_lines_bound_the_hunk(self) -> None:
        body = _renderer(context_lines=1).render_diff(
            _text(_pod()), _text(_pod(app="nginx-v2")), "a", "b", get_theme("default")
        )
        context = [line for line in _body_lines(body.plain) if line.startswith(" ")]
        assert context == ["   labels:", "   name: nginx"]

    def test_removed_line_comes_before_added_line(self) -> None:
        body = _renderer().render_diff(_text(_pod()), _text(_pod(app="nginx-v2")), "a", "b", get_theme("default"))
        changed = [line for line in _body_lines(body.plain) if line[0] in "+-"]
        assert changed == ["-    app: nginx", "+    app: nginx-v2"]

    def test_changed_words_are_emphasized(self) -> None:
        theme = get_theme("default")
        body = _renderer().render_diff(_text(_pod()), _text(_pod(app="nginx-v2")), "a", "b", theme)
        emphasized = [body.plain[span.start : span.end] for span in body.spans if span.style == theme.insert_word]
        assert emphasized == ["-v2"]

    def test_empty_previous_shows_everything_inserted(self) -> None:
        text = _text(_pod())
        body = _renderer().render_diff("", text, "(none)", "b", get_theme("green"))
        lines = body.plain.splitlines()

        assert lines[2] == f"@@ -0,0 +1,{len(text.splitlines())} @@"
        assert [line[1:] for line in lines[3:]] == text.splitlines()
        assert all(line.startswith("+") for line in lines[3:])

    def test_both_sides_empty(self) -> None:
        assert _renderer().render_diff("", "", "a", "b", get_theme("default")).plain == ""

    def test_lines_added_and_removed_unequally(self) -> None:
        old = "a: 1\nb: 2\nc: 3\n"
        new = "a: 1\nb: 20\nb2: 21\nc: 3\n"
        body = _renderer().render_diff(old, new, "a", "b", get_theme("plain"))
        changed = [line for line in _body_lines(body.plain) if line[0] in "+-"]
        assert changed == ["-b: 2", "+b: 20", "+b2: 21"]


# ---------------------------------------------------------------------------
# Titles, headers and blocks
# ---------------------------------------------------------------------------


class TestTitles:
    def test_title_format(self) -> None:
        doc = _pod(rv="10")
        doc["metadata"]["generation"] = 2
        title = diff_title(_NGINX, doc, _NOW)
        assert title == "Pod default/nginx v10 (2024-05-01T12:00:05+00:00) (gen. 2)"

    def test_absent_side_title(self) -> None:
        assert diff_title(_NGINX, None, _NOW) == "(none)"

    def test_block_header(self) -> None:
        header = block_header(ChangeKind.UPDATE, _NGINX)
        assert header.startswith("--- UPDATE --- default/nginx ---")

    def test_cluster_scoped_header(self) -> None:
        node = ResourceIdentity(kind="Node", namespace="", name="worker-1")
        assert block_header(ChangeKind.CREATE, node).startswith("--- CREATE --- worker-1 ---")


class TestRenderChange:
    def test_update_titles_use_previous_and_current_times(self) -> None:
        change = ChangeEvent(
            kind=ChangeKind.UPDATE,
            identity=_NGINX,
            current=_pod(app="nginx-v2", rv="11"),
            previous=Snapshot(document=_pod(rv="10"), seen_at=_EARLIER),
            observed_at=_NOW,
        )
        body = _renderer().render_change(change, _text(_pod(rv="10")), _text(_pod(app="nginx-v2", rv="11")))
        lines = body.plain.splitlines()
        assert lines[0] == "--- Pod default/nginx v10 (2024-05-01T12:00:00+00:00) (gen. 0)"
        assert lines[1] == "+++ Pod default/nginx v11 (2024-05-01T12:00:05+00:00) (gen. 0)"

    def test_create_previous_title_is_none(self) -> None:
        change = ChangeEvent(ChangeKind.CREATE, _NGINX, _pod(), None, _NOW)
        body = _renderer().render_change(change, "", _text(_pod()))
        assert body.plain.splitlines()[0] == "--- (none)"

    def test_delete_current_title_is_none(self) -> None:
        change = ChangeEvent(ChangeKind.DELETE, _NGINX, _pod(), Snapshot(_pod(), _EARLIER), _NOW)
        body = _renderer().render_change(change, _text(_pod()), "")
        assert body.plain.splitlines()[1] == "+++ (none)"


class TestRenderBlock:
    def test_block_without_body_is_header_and_blank_line(self) -> None:
        block = _renderer().render_block(ChangeKind.DELETE, _NGINX)
        assert block.plain == block_header(ChangeKind.DELETE, _NGINX) + "\n\n"

    def test_block_with_body_ends_with_blank_line(self) -> None:
        renderer = _renderer()
        body = renderer.render_diff("", "a: 1\n", "(none)", "b", get_theme("green"))
        block = renderer.render_block(ChangeKind.CREATE, _NGINX, body)
        assert block.plain.startswith("--- CREATE --- default/nginx ---")
        assert block.plain.endswith("+a: 1\n\n")

    def test_empty_body_is_header_only(self) -> None:
        renderer = _renderer()
        body = renderer.render_diff("a: 1\n", "a: 1\n", "a", "b", get_theme("default"))
        block = renderer.render_block(ChangeKind.UPDATE, _NGINX, body)
        assert block.plain == block_header(ChangeKind.UPDATE, _NGINX) + "\n\n"


# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------


class TestThemes:
    def test_builtin_themes(self) -> None:
        assert {"default", "green", "red", "yellow", "plain"} <= set(THEMES)

    def test_lookup_is_case_insensitive(self) -> None:
        assert get_theme("Green").name == "green"

    def test_unknown_theme_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            get_theme("rainbow")

    def test_renderer_picks_theme_per_change_kind(self) -> None:
        renderer = DiffRenderer.from_config(DiffConfig(create_theme="yellow", update_theme="plain", delete_theme="red"))
        assert renderer.theme_for(ChangeKind.CREATE).name == "yellow"
        assert renderer.theme_for(ChangeKind.UPDATE).name == "plain"
        assert renderer.theme_for(ChangeKind.DELETE).name == "red"
