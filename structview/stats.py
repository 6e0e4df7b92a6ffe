# structview/stats.py

"""
Whole-tree code statistics.

:class:`CodeStatistics` is the accumulator the walker folds every analysed
file into. Once traversal is over, :meth:`CodeStatistics.render_report`
turns it into the analysis section of the output.
"""


from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from structview.classify import FileStats
from structview.formatting import format_size, group_thousands

UNKNOWN_EXTENSION = "unknown"

REPORT_HEADER = "===== ANALYSIS ====="


def normalize_extension(extension: str | None) -> str:
    """Lowercase ``extension`` and strip its dot; empty becomes ``"unknown"``."""
    ext = (extension or "").lstrip(".").lower()
    return ext or UNKNOWN_EXTENSION


@dataclass
class CodeStatistics:
    """Running totals for every file visited with analysis enabled."""

    total_files: int = 0
    total_lines: int = 0
    blank_lines: int = 0
    comment_lines: int = 0
    total_bytes: int = 0
    files_by_extension: Counter[str] = field(default_factory=Counter)
    lines_by_extension: Counter[str] = field(default_factory=Counter)
    int_declarations: int = 0
    float_declarations: int = 0
    string_declarations: int = 0
    bool_declarations: int = 0
    functions: int = 0
    classes: int = 0

    def add_file(self, extension: str | None, size: int, file_stats: FileStats) -> None:
        """
        Fold one file into the totals.

        Parameters
        ----------
        extension : str | None
            File extension; normalised with :func:`normalize_extension`.
        size : int
            File size in bytes.
        file_stats : FileStats
            Classifier output for the file. An unreadable file is passed as
            an empty ``FileStats()``.
        """

        ext = normalize_extension(extension)
        self.total_files += 1
        self.total_bytes += size
        self.files_by_extension[ext] += 1
        self.lines_by_extension[ext] += file_stats.total_lines

        self.total_lines += file_stats.total_lines
        self.blank_lines += file_stats.blank_lines
        self.comment_lines += file_stats.comment_lines
        self.int_declarations += file_stats.int_declarations
        self.float_declarations += file_stats.float_declarations
        self.string_declarations += file_stats.string_declarations
        self.bool_declarations += file_stats.bool_declarations
        self.functions += file_stats.functions
        self.classes += file_stats.classes

    @property
    def code_lines(self) -> int:
        return max(self.total_lines - self.blank_lines - self.comment_lines, 0)

    @property
    def code_density(self) -> float:
        """Share of code lines as a percentage; ``0.0`` for an empty tree."""
        if self.total_lines == 0:
            return 0.0
        return self.code_lines / self.total_lines * 100

    @staticmethod
    def _top(counts: Counter[str], n: int | None) -> list[tuple[str, int]]:
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return ranked if n is None else ranked[:n]

    def top_extensions_by_files(self, n: int | None = None) -> list[tuple[str, int]]:
        return self._top(self.files_by_extension, n)

    def top_extensions_by_lines(self, n: int | None = None) -> list[tuple[str, int]]:
        return self._top(self.lines_by_extension, n)

    def render_report(self, top: int | None = None) -> str:
        """
        Render the analysis section.

        Parameters
        ----------
        top : int | None
            Maximum rows in each per-extension table; ``None`` lists all.

        Returns
        -------
        str
            Multi-line report, without a trailing newline.
        """

        def row(label: str, value: str) -> str:
            return f"  {label:<24}{value}"

        lines = [
            REPORT_HEADER,
            "",
            "Totals:",
            row("Files", group_thousands(self.total_files)),
            row("Total size", format_size(self.total_bytes)),
            row("Total lines", group_thousands(self.total_lines)),
            row("Code lines", group_thousands(self.code_lines)),
            row("Comment lines", group_thousands(self.comment_lines)),
            row("Blank lines", group_thousands(self.blank_lines)),
            row("Code density", f"{self.code_density:.1f}%"),
        ]

        for title, ranked in (
            ("Files by extension:", self.top_extensions_by_files(top)),
            ("Lines by extension:", self.top_extensions_by_lines(top)),
        ):
            lines += ["", title]
            if not ranked:
                lines.append("  (none)")
            lines += [row(ext, group_thousands(count)) for ext, count in ranked]

        lines += [
            "",
            "Heuristics (approximate):",
            row("Integer declarations", group_thousands(self.int_declarations)),
            row("Float declarations", group_thousands(self.float_declarations)),
            row("String declarations", group_thousands(self.string_declarations)),
            row("Boolean declarations", group_thousands(self.bool_declarations)),
            row("Functions", group_thousands(self.functions)),
            row("Classes / types", group_thousands(self.classes)),
        ]
        return "\n".join(lines)
