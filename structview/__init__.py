"""
structview: filtered directory trees with optional content and statistics.

This package provides simple, composable tools to:
- render directory structures as readable trees,
- dump the contents of the listed files,
- report heuristic code statistics (line kinds, per-extension counts).

Everything is produced in a single traversal: each visible file is read at
most once, whichever of these outputs are enabled.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import DEFAULT_IGNORE_FOLDERS, TreeConfig
from .tree import build_tree, draw_tree, build_and_draw_tree
from .pipeline import RunResult, run, build_tree_and_contents

__all__ = [
    "DEFAULT_IGNORE_FOLDERS",
    "TreeConfig",
    "build_tree",
    "draw_tree",
    "build_and_draw_tree",
    "RunResult",
    "run",
    "build_tree_and_contents",
]
