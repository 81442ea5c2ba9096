"""Turn a routed change into a rendered block on the output sink."""

from __future__ import annotations

from stalk.diff.renderer import DiffRenderer
from stalk.models.events import ChangeEvent, ChangeKind
from stalk.output.sink import BlockSink
from stalk.transform.pipeline import Transformer


class ChangeProcessor:
    """Transforms both sides of a change, renders the diff and writes one block.

    DELETE blocks are header-only unless ``show_deleted`` is set, in which
    case the last known content is shown as removed.
    """

    def __init__(
        self,
        transformer: Transformer,
        renderer: DiffRenderer,
        sink: BlockSink,
        show_deleted: bool = False,
    ) -> None:
        self._transformer = transformer
        self._renderer = renderer
        self._sink = sink
        self._show_deleted = show_deleted

    def process(self, change: ChangeEvent) -> None:
        """Raises TransformError if either side cannot be transformed."""
        if change.kind is ChangeKind.DELETE:
            if not self._show_deleted:
                self._sink.write(self._renderer.render_block(change.kind, change.identity))
                return
            last_known = change.previous.document if change.previous is not None else change.current
            old_text = self._transformer.transform(last_known, change.identity.key)
            new_text = ""
        else:
            previous = change.previous.document if change.previous is not None else None
            old_text = self._transformer.transform(previous, change.identity.key)
            new_text = self._transformer.transform(change.current, change.identity.key)

        body = self._renderer.render_change(change, old_text, new_text)
        self._sink.write(self._renderer.render_block(change.kind, change.identity, body))
