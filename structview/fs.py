# structview/fs.py

"""
Filesystem access used by the tree walker.

Every disk operation the walker performs goes through a
:class:`LocalFileSystem` instance. Handles are opened and closed inside each
call; nothing is kept open between calls.
"""


from __future__ import annotations

import os
from pathlib import Path


class LocalFileSystem:
    """Thin wrapper over :mod:`pathlib` for the operations the walker needs."""

    def iterdir(self, path: Path) -> list[Path]:
        """
        List the immediate children of ``path``.

        Raises
        ------
        OSError
            If the directory cannot be listed.
        """
        return list(path.iterdir())

    def is_dir(self, path: Path) -> bool:
        """
        Safely determine whether a path refers to a directory.

        Returns ``False`` if the status cannot be determined (e.g. permission
        issues or a dangling symlink).
        """
        try:
            return path.is_dir()
        except OSError:
            return False

    def is_symlink(self, path: Path) -> bool:
        try:
            return path.is_symlink()
        except OSError:
            return False

    def real_path(self, path: Path) -> str:
        return os.path.realpath(path)

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def file_size(self, path: Path) -> int:
        return path.stat().st_size
