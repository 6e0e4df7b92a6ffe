# structview/formatting.py

"""Number formatting helpers for tree and report output."""


from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: int) -> str:
    """
    Render a byte count with a binary (1024) unit.

    Bytes are shown as an integer, larger units with one decimal:
    ``512 B``, ``1.5 KB``, ``2.0 MB``.
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = float(num_bytes)
    for unit in _UNITS[1:]:
        size /= 1024
        if size < 1024:
            break
    return f"{size:.1f} {unit}"


def group_thousands(value: int) -> str:
    return f"{value:,}"
