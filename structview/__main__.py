"""Entry point for ``python -m structview``."""

from __future__ import annotations

import sys

from structview.cli import main

if __name__ == "__main__":
    sys.exit(main())
