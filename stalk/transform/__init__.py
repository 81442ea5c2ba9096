"""Transform pipeline for stalk.

Turns a raw resource document into the canonical text that gets diffed.

Submodules:
    paths    -- Exclusion path parsing and subtree removal.
    selector -- JSONPath sub-document selector compilation.
    pipeline -- Transformer: normalize, strip, select, exclude, serialize.
"""

from stalk.transform.paths import ExcludePath, parse_path, remove_path
from stalk.transform.pipeline import TransformError, Transformer, TransformOptions
from stalk.transform.selector import compile_selector

__all__ = [
    "ExcludePath",
    "TransformError",
    "TransformOptions",
    "Transformer",
    "compile_selector",
    "parse_path",
    "remove_path",
]
