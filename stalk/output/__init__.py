"""Output sinks for rendered change blocks.

Exports:
    BlockSink   -- Abstract base every sink implements.
    ConsoleSink -- Writes blocks to the terminal through rich.
    MemorySink  -- Keeps blocks in memory.
"""

from stalk.output.sink import BlockSink, ConsoleSink, MemorySink

__all__ = ["BlockSink", "ConsoleSink", "MemorySink"]
