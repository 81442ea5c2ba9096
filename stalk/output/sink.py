"""Block sinks shared by every watch task.

A block is written in one call under a lock, so output from different kinds
never interleaves within a block.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from rich.console import Console
from rich.text import Text


class BlockSink(ABC):
    """Destination for rendered blocks.

    ``write`` must emit the whole block as one unit.
    """

    @abstractmethod
    def write(self, block: Text) -> None:
        """Emit *block*."""


class ConsoleSink(BlockSink):
    """Prints blocks to stdout (or the given console)."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(highlight=False, soft_wrap=True)
        self._lock = threading.Lock()

    def write(self, block: Text) -> None:
        with self._lock:
            self._console.print(block, end="")


class MemorySink(BlockSink):
    """Collects blocks in a list; ``texts`` holds their plain-text form."""

    def __init__(self) -> None:
        self.blocks: list[Text] = []
        self._lock = threading.Lock()

    @property
    def texts(self) -> list[str]:
        return [block.plain for block in self.blocks]

    def write(self, block: Text) -> None:
        with self._lock:
            self.blocks.append(block)
