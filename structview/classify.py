# structview/classify.py

"""
Heuristic line classification.

Each line of a file is classified as blank, comment or code, and scanned for
common declaration and structure patterns across C-like, Python-like and
JS-like syntax. Nothing here parses source code: the counters are substring
and prefix tests and will over- and under-count on unusual code.

Comment syntax is selected from :data:`COMMENT_SYNTAX` by file extension, or
from :data:`NAMED_COMMENT_SYNTAX` by name for files without one. Supporting
a new language means adding a row to one of these tables.
"""


from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

BRACE_COMMENTS = ("//", "/*", "*")
SCRIPT_COMMENTS = ("#",)
MARKUP_COMMENTS = ("<!--",)
DASH_COMMENTS = ("--",)
FALLBACK_COMMENTS = ("//", "#", "/*", "*")

COMMENT_SYNTAX: dict[str, tuple[str, ...]] = {
    **dict.fromkeys(
        (
            "c", "h", "cc", "cpp", "cxx", "hpp", "hh", "cs", "java", "kt", "kts",
            "scala", "go", "rs", "swift", "dart", "js", "jsx", "mjs", "cjs",
            "ts", "tsx", "php", "css", "scss", "less", "groovy", "zig",
        ),
        BRACE_COMMENTS,
    ),
    **dict.fromkeys(
        (
            "py", "pyi", "pyw", "rb", "sh", "bash", "zsh", "fish", "pl", "pm",
            "r", "ps1", "yaml", "yml", "toml", "ini", "cfg", "conf", "mk",
            "cmake", "jl", "ex", "exs", "nim", "tcl",
        ),
        SCRIPT_COMMENTS,
    ),
    **dict.fromkeys(
        ("html", "htm", "xml", "xhtml", "svg", "vue", "md", "markdown"),
        MARKUP_COMMENTS,
    ),
    **dict.fromkeys(("sql", "lua", "hs", "elm", "ada"), DASH_COMMENTS),
}

# Files without a suffix are looked up by lowercase base name.
NAMED_COMMENT_SYNTAX: dict[str, tuple[str, ...]] = {
    **dict.fromkeys(
        ("dockerfile", "makefile", "gnumakefile", "rakefile", "gemfile", "vagrantfile"),
        SCRIPT_COMMENTS,
    ),
}

INT_MARKERS = (
    "int ", "int8", "int16", "int32", "int64", "i8", "i16", "i32", "i64",
    "u8", "u16", "u32", "u64", "usize", "isize", "long ", "short ", ": int",
    "integer",
)
FLOAT_MARKERS = ("float", "double", "f32", "f64", "decimal")
STRING_MARKERS = ("string", "str ", ": str", "&str", "char ", "char*", "rune")
BOOL_MARKERS = ("bool", "true", "false")

FUNCTION_KEYWORDS = (
    "def ",
    "async def ",
    "fn ",
    "pub fn ",
    "pub(crate) fn ",
    "async fn ",
    "pub async fn ",
    "function ",
    "async function ",
    "export function ",
    "export async function ",
    "func ",
    "fun ",
    "sub ",
)
CLASS_KEYWORDS = (
    "class ",
    "abstract class ",
    "export class ",
    "data class ",
    "struct ",
    "pub struct ",
    "typedef struct",
    "enum ",
    "pub enum ",
    "interface ",
    "export interface ",
    "trait ",
    "pub trait ",
    "impl ",
    "impl<",
    "type ",
    "pub type ",
)

_CONTROL_FLOW = re.compile(r"^(if|while|for)\b")


@dataclass
class FileStats:
    """Classification result for one file."""

    total_lines: int = 0
    blank_lines: int = 0
    comment_lines: int = 0
    int_declarations: int = 0
    float_declarations: int = 0
    string_declarations: int = 0
    bool_declarations: int = 0
    functions: int = 0
    classes: int = 0

    @property
    def code_lines(self) -> int:
        return max(self.total_lines - self.blank_lines - self.comment_lines, 0)


def split_lines(text: str) -> list[str]:
    """
    Split ``text`` on ``\\n`` only, dropping a trailing ``\\r`` from each line.

    A final newline does not start an extra line. Form feeds and lone
    carriage returns stay inside their line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def comment_prefixes(extension: str | None, name: str | None = None) -> tuple[str, ...]:
    """
    Return the comment prefixes used for files with ``extension``.

    When there is no extension, the lowercase file ``name`` is looked up in
    :data:`NAMED_COMMENT_SYNTAX` instead (``Dockerfile``, ``Makefile``, ...).
    """
    if extension:
        return COMMENT_SYNTAX.get(extension.lower().lstrip("."), FALLBACK_COMMENTS)
    if name:
        return NAMED_COMMENT_SYNTAX.get(PurePosixPath(name).name.lower(), FALLBACK_COMMENTS)
    return FALLBACK_COMMENTS


def is_function_like(line: str) -> bool:
    """
    Heuristically decide whether a trimmed line introduces a function.

    A line qualifies if it starts with one of :data:`FUNCTION_KEYWORDS`, or,
    failing that, if it contains a parenthesis pair and an opening brace and
    does not start with ``if``, ``while`` or ``for``.
    """
    if line.startswith(FUNCTION_KEYWORDS):
        return True
    return (
        "(" in line
        and ")" in line
        and "{" in line
        and _CONTROL_FLOW.match(line) is None
    )


def is_class_like(line: str) -> bool:
    return line.startswith(CLASS_KEYWORDS)


def classify_text(text: str, extension: str | None = None, name: str | None = None) -> FileStats:
    """
    Classify every line of ``text``.

    Blank and comment classification are mutually exclusive. The heuristic
    counters are evaluated on every non-blank line, comments included, and
    each counter moves by at most one per line.

    Parameters
    ----------
    text : str
        Decoded file contents.
    extension : str | None
        File extension (with or without the dot) used to pick the comment
        syntax.
    name : str | None
        File name, used to pick the comment syntax when there is no
        extension.

    Returns
    -------
    FileStats
        Line and heuristic counts for the file.
    """

    prefixes = comment_prefixes(extension, name)
    stats = FileStats()

    for raw in split_lines(text):
        stats.total_lines += 1
        line = raw.strip()
        if not line:
            stats.blank_lines += 1
            continue

        if line.startswith(prefixes):
            stats.comment_lines += 1

        lowered = line.lower()
        if any(m in lowered for m in INT_MARKERS):
            stats.int_declarations += 1
        if any(m in lowered for m in FLOAT_MARKERS):
            stats.float_declarations += 1
        if any(m in lowered for m in STRING_MARKERS):
            stats.string_declarations += 1
        if any(m in lowered for m in BOOL_MARKERS):
            stats.bool_declarations += 1

        if is_function_like(line):
            stats.functions += 1
        if is_class_like(line):
            stats.classes += 1

    return stats
