"""stalk command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``stalk`` script).
"""

from stalk.cli.main import cli

__all__ = ["cli"]
