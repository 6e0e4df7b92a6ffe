# structview/pipeline.py

"""
Single-pass tree, content and analysis pipeline.

:func:`run` walks the tree once and returns a :class:`RunResult` holding the
built tree, the code statistics and the captured file bodies.
:meth:`RunResult.render` assembles them into the text handed to the writer.
"""


from __future__ import annotations

import logging
from dataclasses import dataclass, field

from structview.config import TreeConfig
from structview.content import CapturedFile, render_dump
from structview.fs import LocalFileSystem
from structview.stats import CodeStatistics
from structview.tree import EntryNode, build_tree, draw_tree

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Everything collected during one traversal."""

    config: TreeConfig
    tree: EntryNode
    statistics: CodeStatistics = field(default_factory=CodeStatistics)
    captured: list[CapturedFile] = field(default_factory=list)

    def render(self) -> str:
        """
        Assemble the output text.

        The tree comes first, then the content dump when ``show_code`` is
        set, then the analysis report when ``analyze`` is set. Sections are
        separated by a blank line.
        """

        sections = [draw_tree(self.tree)]
        if self.config.show_code and self.captured:
            sections.append(render_dump(self.captured))
        if self.config.analyze:
            sections.append(self.statistics.render_report(self.config.top_extensions))
        return "\n\n".join(sections)


def run(config: TreeConfig, *, fs: LocalFileSystem | None = None) -> RunResult:
    """
    Walk ``config.root`` once and collect the tree, statistics and contents.

    Raises
    ------
    FileNotFoundError, NotADirectoryError
        If the root is not an existing directory.
    """

    statistics = CodeStatistics()
    captured: list[CapturedFile] = []
    tree = build_tree(config, fs=fs, statistics=statistics, captured=captured)
    logger.debug(
        "Walked %s: %d nodes, %d files analysed, %d captured",
        tree.fs_path,
        len(tree.descendants) + 1,
        statistics.total_files,
        len(captured),
    )
    return RunResult(config, tree, statistics, captured)


def build_tree_and_contents(config: TreeConfig, *, fs: LocalFileSystem | None = None) -> str:
    """Run the pipeline and return the assembled text."""
    return run(config, fs=fs).render()
