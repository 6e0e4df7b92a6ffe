# structview/config.py

"""
Run configuration.

A :class:`TreeConfig` is built once (usually by :mod:`structview.cli`) and is
read, never modified, by every stage of the pipeline.
"""


from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

# Directory names that are never shown nor descended into.
DEFAULT_IGNORE_FOLDERS: frozenset[str] = frozenset(
    {
        # version control
        ".git",
        ".hg",
        ".svn",
        # dependencies / environments
        "node_modules",
        ".venv",
        "venv",
        # build output
        "target",
        "dist",
        "build",
        # editors
        ".idea",
        ".vscode",
        # caches
        "__pycache__",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        ".tox",
    }
)

HIDDEN_MARKER = "."


@dataclass(frozen=True)
class TreeConfig:
    """
    Immutable settings for a single run.

    ``ignore_folders`` is always merged with :data:`DEFAULT_IGNORE_FOLDERS`,
    so the stored value is the effective ignore set.

    Parameters
    ----------
    root : pathlib.Path
        Directory to walk.
    ignore_folders : Iterable[str]
        Extra directory base names to hide (exact, case-sensitive match).
    only_folders : bool
        Hide every file.
    show_lines : bool
        Suffix file lines with their line count.
    show_size : bool
        Suffix file lines with their byte size.
    extension : str | None
        Only show files whose suffix is exactly this (no leading dot).
    max_depth : int | None
        Directories at this depth are shown but not expanded. The root's
        children are at depth 0.
    show_hidden : bool
        Show entries whose name starts with ``"."``.
    show_code : bool
        Capture file contents for the dump section.
    analyze : bool
        Collect code statistics for the analysis section.
    follow_symlinks : bool
        Descend into symbolic links to directories.
    top_extensions : int | None
        Number of rows in the per-extension report tables (``None`` = all).
    """

    root: Path = field(default_factory=lambda: Path("."))
    ignore_folders: Iterable[str] = frozenset()
    only_folders: bool = False
    show_lines: bool = False
    show_size: bool = False
    extension: str | None = None
    max_depth: int | None = None
    show_hidden: bool = False
    show_code: bool = False
    analyze: bool = False
    follow_symlinks: bool = True
    top_extensions: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))
        if isinstance(self.ignore_folders, str):
            raise TypeError(
                f"ignore_folders must be a collection of names, not a string: {self.ignore_folders!r}"
            )
        object.__setattr__(
            self, "ignore_folders", DEFAULT_IGNORE_FOLDERS | frozenset(self.ignore_folders)
        )
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.top_extensions is not None and self.top_extensions < 0:
            raise ValueError(f"top_extensions must be >= 0, got {self.top_extensions}")

    @property
    def reads_content(self) -> bool:
        """Whether visible files have to be read at all."""
        return self.show_lines or self.show_code or self.analyze
