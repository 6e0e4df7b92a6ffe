# structview/tree.py

"""
Filesystem tree building and rendering.

This module walks a directory once, depth-first, and builds an ``anytree``
tree of :class:`EntryNode` objects describing every visible entry. While it
walks, it reads each visible file at most once and hands the text to the
consumers enabled in the :class:`~structview.config.TreeConfig`: line counts
for display, the code statistics accumulator, and the captured-content list.

Traversal is deterministic (directories first, case-insensitive sorting) and
relies on strict pruning-based filtering: if a directory is excluded, its
entire subtree is skipped.

The rendered tree uses ``anytree.RenderTree`` with ``ContStyle``, similar to
the Unix ``tree`` command::

    project/
    ├── src
    │   └── main.py
    └── README.md
"""


from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable

from anytree import ContStyle, NodeMixin, RenderTree

from structview.classify import FileStats, classify_text, split_lines
from structview.config import HIDDEN_MARKER, TreeConfig
from structview.content import CapturedFile
from structview.formatting import format_size
from structview.fs import LocalFileSystem
from structview.stats import CodeStatistics

logger = logging.getLogger(__name__)


class EntryNode(NodeMixin):
    """
    One visible filesystem entry.

    Attributes
    ----------
    name : str
        Base name of the entry (display name for the root).
    fs_path : pathlib.Path
        Absolute path of the entry.
    is_dir : bool
        Whether the entry is a directory.
    level : int
        Depth below the root; the root's children are at level 0 and the
        root itself at -1.
    line_count : int | None
        Number of lines, set on files when line display is enabled.
    byte_size : int | None
        Size in bytes, set on files when size display is enabled.
    """

    def __init__(
        self,
        name: str,
        fs_path: Path,
        *,
        is_dir: bool,
        level: int,
        parent: EntryNode | None = None,
    ) -> None:
        super().__init__()
        self.name = name
        self.fs_path = fs_path
        self.is_dir = is_dir
        self.level = level
        self.line_count: int | None = None
        self.byte_size: int | None = None
        self.parent = parent

    @property
    def label(self) -> str:
        """Text shown for this node after the connector."""
        if self.is_root:
            return f"{self.name}/"
        details = []
        if self.line_count is not None:
            details.append(str(self.line_count))
        if self.byte_size is not None:
            details.append(format_size(self.byte_size))
        if details:
            return f"{self.name} ({', '.join(details)})"
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fs_path!s}, is_dir={self.is_dir}, level={self.level})"


def display_name(root: Path) -> str:
    """Name shown on the first line of the tree (``"."`` for a filesystem root)."""
    return root.name or "."


def file_extension(name: str) -> str:
    """Return the suffix of ``name`` without its dot (``""`` if none)."""
    return PurePosixPath(name).suffix[1:]


def is_visible(name: str, is_dir: bool, config: TreeConfig) -> bool:
    """
    Decide whether a directory entry is shown.

    Rules, in order:
    - hidden names (leading ``"."``) are dropped unless ``show_hidden``,
    - directories are dropped if their name is in the ignore set,
    - files are dropped when ``only_folders`` is set,
    - files are dropped unless their extension matches ``extension``
      exactly, when an extension filter is set.
    """

    if not config.show_hidden and name.startswith(HIDDEN_MARKER):
        return False
    if is_dir:
        return name not in config.ignore_folders
    if config.only_folders:
        return False
    if config.extension is not None:
        return file_extension(name) == config.extension
    return True


def sort_key(name: str, is_dir: bool) -> tuple[bool, str, str]:
    # Dirs first, then case-insensitive name; exact name breaks ties.
    return (not is_dir, name.casefold(), name)


def filter_entries(
    entries: Iterable[tuple[Path, bool]], config: TreeConfig
) -> list[tuple[Path, bool]]:
    """
    Filter and order the immediate children of a directory.

    Parameters
    ----------
    entries : Iterable[tuple[pathlib.Path, bool]]
        ``(path, is_dir)`` pairs in any order.
    config : TreeConfig
        Active configuration.

    Returns
    -------
    list[tuple[pathlib.Path, bool]]
        The visible entries, directories first, each kind sorted
        case-insensitively by name.
    """

    kept = [(p, d) for p, d in entries if is_visible(p.name, d, config)]
    kept.sort(key=lambda e: sort_key(e[0].name, e[1]))
    return kept


def list_children(
    d: Path, config: TreeConfig, fs: LocalFileSystem
) -> list[tuple[Path, bool]]:
    """
    Return the visible children of a directory in stable tree order.

    If the directory cannot be listed, a warning is logged and an empty list
    is returned so that traversal of the siblings can continue.
    """

    try:
        children = fs.iterdir(d)
    except OSError as exc:
        logger.warning("Cannot list directory %s: %s", d, exc)
        return []
    return filter_entries(((c, fs.is_dir(c)) for c in children), config)


def validate_root(root: Path) -> Path:
    """
    Resolve ``root`` and check that it is an existing directory.

    Raises
    ------
    FileNotFoundError
        If ``root`` does not exist.
    NotADirectoryError
        If ``root`` exists but is not a directory.
    """

    if not root.exists():
        raise FileNotFoundError(f"Path '{root}' does not exist")
    if not root.is_dir():
        raise NotADirectoryError(f"'{root}' is not a directory")
    return root.resolve()


def build_tree(
    config: TreeConfig,
    *,
    fs: LocalFileSystem | None = None,
    statistics: CodeStatistics | None = None,
    captured: list[CapturedFile] | None = None,
) -> EntryNode:
    """
    Walk ``config.root`` and build the tree of visible entries.

    Each directory is listed, filtered and sorted exactly once; the same
    ordered list is used to create the child nodes and to recurse. With
    ``max_depth`` set, directories at that depth get a node but no children.

    Visible files are read at most once, and only when line display, content
    capture or analysis is enabled. A file that cannot be read or decoded as
    UTF-8 counts as empty and is not captured.

    Parameters
    ----------
    config : TreeConfig
        Active configuration.
    fs : LocalFileSystem | None, optional
        Filesystem access object; defaults to :class:`LocalFileSystem`.
    statistics : CodeStatistics | None, optional
        Accumulator updated for every visible file when ``config.analyze``
        is set.
    captured : list[CapturedFile] | None, optional
        List that receives file bodies, in visit order, when
        ``config.show_code`` is set.

    Returns
    -------
    EntryNode
        The root node.

    Raises
    ------
    FileNotFoundError, NotADirectoryError
        If ``config.root`` is not an existing directory. Raised before
        anything is read.
    """

    fs = fs or LocalFileSystem()
    root = validate_root(config.root)
    root_node = EntryNode(display_name(root), root, is_dir=True, level=-1)

    def read_text(path: Path) -> tuple[str | None, int | None]:
        """
        Read a file once and decode it.

        Returns the text (``None`` if unreadable) and the number of bytes
        read (``None`` if the read failed).
        """

        try:
            data = fs.read_bytes(path)
        except OSError as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None, None
        try:
            return data.decode("utf-8"), len(data)
        except UnicodeDecodeError:
            logger.debug("Not UTF-8 text, treated as empty: %s", path)
            return None, len(data)

    def stat_size(path: Path) -> int:
        try:
            return fs.file_size(path)
        except OSError:
            return 0

    def visit_file(node: EntryNode) -> None:
        path = node.fs_path
        text = size = None
        if config.reads_content:
            text, size = read_text(path)
        if size is None and (config.show_size or config.analyze):
            size = stat_size(path)

        if config.show_lines:
            node.line_count = len(split_lines(text)) if text is not None else 0
        if config.show_size:
            node.byte_size = size

        ext = file_extension(node.name)
        if config.analyze and statistics is not None:
            file_stats = classify_text(text, ext, node.name) if text is not None else FileStats()
            statistics.add_file(ext, size or 0, file_stats)
        if config.show_code and captured is not None and text is not None:
            rel = PurePosixPath(path.relative_to(root).as_posix())
            captured.append(CapturedFile(rel, text))

    def should_descend(node: EntryNode, ancestors: frozenset[str]) -> str | None:
        """
        Return the real path of ``node`` if it may be expanded, else ``None``.

        Symbolic links are not expanded when ``follow_symlinks`` is off, and
        a directory that resolves to one of its own ancestors is never
        expanded.
        """

        if config.max_depth is not None and node.level >= config.max_depth:
            return None
        if not config.follow_symlinks and fs.is_symlink(node.fs_path):
            return None
        real = fs.real_path(node.fs_path)
        if real in ancestors:
            logger.warning("Skipping directory cycle at %s -> %s", node.fs_path, real)
            return None
        return real

    def rec(d_node: EntryNode, level: int, ancestors: frozenset[str]) -> None:
        """
        Create the child nodes of ``d_node`` and recurse into directories.

        ``ancestors`` holds the real paths of the directories on the current
        recursion path.
        """

        for child, child_is_dir in list_children(d_node.fs_path, config, fs):
            node = EntryNode(child.name, child, is_dir=child_is_dir, level=level, parent=d_node)
            if not child_is_dir:
                visit_file(node)
                continue
            real = should_descend(node, ancestors)
            if real is not None:
                rec(node, level + 1, ancestors | {real})

    rec(root_node, 0, frozenset({fs.real_path(root)}))
    return root_node


def draw_tree(node: EntryNode) -> str:
    """
    Render a built tree as a Unicode string.

    Each line is the ``ContStyle`` prefix (``├── ``, ``└── ``, ``│   ``,
    four spaces per ancestor level) followed by the node label.
    """

    return "\n".join(f"{row.pre}{row.node.label}" for row in RenderTree(node, style=ContStyle()))


def build_and_draw_tree(config: TreeConfig, *, fs: LocalFileSystem | None = None) -> str:
    """Build the tree for ``config`` and return its rendering."""
    return draw_tree(build_tree(config, fs=fs))
