# structview/content.py

"""
File content dump.

This module turns the file bodies captured during traversal into the content
section of the output: one delimited block per file, in the order the walker
visited them. It never touches the filesystem; everything it renders was read
once by the walker.
"""


from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath

END_MARKER = "===== END FILE ====="


@dataclass(frozen=True)
class CapturedFile:
    """
    A file body captured during traversal.

    Attributes
    ----------
    relative_path : pathlib.PurePosixPath
        Path of the file relative to the traversal root.
    text : str
        Full decoded contents.
    """

    relative_path: PurePosixPath
    text: str


def file_to_text(captured: CapturedFile, index: int) -> str:
    """
    Format a captured file as a textual block.

    The block embeds the 1-based sequence number, the root-relative path and
    the full text, using a stable delimiter format suitable for concatenation
    or downstream processing (e.g. LLM context building).

    Parameters
    ----------
    captured : CapturedFile
        File to render.
    index : int
        1-based position of the file in the dump.

    Returns
    -------
    str
        The formatted block.
    """

    header_path = captured.relative_path.as_posix()
    return f"===== FILE {index}: {header_path} =====\n" f"{captured.text}\n" f"{END_MARKER}"


def render_dump(captured: list[CapturedFile]) -> str:
    """Concatenate every captured file, in capture order, separated by blank lines."""
    return "\n\n".join(file_to_text(c, i) for i, c in enumerate(captured, start=1))
