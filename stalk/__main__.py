"""Entry point for `python -m stalk`.

Usage:
    python -m stalk deployments,pods
"""

from __future__ import annotations

from stalk.cli import cli

cli(prog_name="stalk")
