# structview/cli.py

"""
Command-line interface.

Parses arguments into a :class:`~structview.config.TreeConfig`, runs the
pipeline and writes the result to stdout or to a file.
"""


from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from structview import __version__
from structview.config import TreeConfig
from structview.pipeline import run

EPILOG = """\
examples:
  structview                     display the structure of the current directory
  structview /path/to/dir        display the structure of the given directory
  structview -i target -of       only folders, ignore 'target'
  structview -l -e rs            .rs files with line counts
  structview -d 2                show structure up to 2 levels deep
  structview -c -a -o dump.txt   tree, file contents and statistics to a file
"""


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative number, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="structview",
        description="Display a filtered directory tree, optionally with file contents and code statistics.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", nargs="?", default=".", help="directory to display (default: .)")
    parser.add_argument(
        "-i", "--ignore", action="append", default=[], metavar="FOLDER",
        help="ignore folders with this name (repeatable)",
    )
    parser.add_argument("-of", "--only-folders", action="store_true", help="show only folders")
    parser.add_argument("-l", "--lines", action="store_true", help="show the number of lines in files")
    parser.add_argument("-s", "--size", action="store_true", help="show file sizes")
    parser.add_argument(
        "-e", "--extension", metavar="EXT",
        help="show only files with this extension (e.g. 'py')",
    )
    parser.add_argument(
        "-d", "--depth", type=_non_negative_int, metavar="DEPTH",
        help="limit the display depth",
    )
    parser.add_argument("-H", "--hidden", action="store_true", help="show hidden files and folders")
    parser.add_argument("-c", "--code", action="store_true", help="append the contents of the listed files")
    parser.add_argument("-a", "--analyze", action="store_true", help="append code statistics")
    parser.add_argument(
        "--top", type=_non_negative_int, metavar="N",
        help="number of extensions listed in the statistics (default: all)",
    )
    parser.add_argument(
        "--no-follow-symlinks", dest="follow_symlinks", action="store_false",
        help="do not descend into symbolic links to directories",
    )
    parser.add_argument("-o", "--output", type=Path, metavar="FILE", help="write the output to FILE")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> TreeConfig:
    extension = args.extension.lstrip(".") if args.extension else None
    return TreeConfig(
        root=Path(args.path),
        ignore_folders=frozenset(args.ignore),
        only_folders=args.only_folders,
        show_lines=args.lines,
        show_size=args.size,
        extension=extension,
        max_depth=args.depth,
        show_hidden=args.hidden,
        show_code=args.code,
        analyze=args.analyze,
        follow_symlinks=args.follow_symlinks,
        top_extensions=args.top,
    )


def write_output(text: str, output: Path | None = None) -> None:
    """
    Print ``text`` to stdout, or write it as UTF-8 to ``output``.

    File names that are not valid UTF-8 reach us surrogate-escaped; they are
    written back as their original bytes. When writing to a file, the number
    of bytes written is reported on stdout.
    """

    data = (text + "\n").encode("utf-8", errors="surrogateescape")
    if output is None:
        buffer = getattr(sys.stdout, "buffer", None)
        if buffer is None:
            sys.stdout.write(data.decode("utf-8", errors="replace"))
        else:
            sys.stdout.flush()
            buffer.write(data)
            buffer.flush()
        return
    output.write_bytes(data)
    print(f"Wrote {len(data)} bytes to {output}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    config = config_from_args(args)
    try:
        result = run(config)
    except (FileNotFoundError, NotADirectoryError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        write_output(result.render(), args.output)
    except OSError as exc:
        print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
        return 1
    return 0
