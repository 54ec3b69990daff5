"""Module entry-point.

This enables running the project as a module:

    python -m focalpoint

The canonical CLI entry-point is the console script ``focalpoint``. When
invoked without arguments, we default to printing the version.
"""

from __future__ import annotations

import sys

from focalpoint.cli import main


def _run() -> None:
    argv = sys.argv[1:] or ["version"]
    raise SystemExit(main(argv))


if __name__ == "__main__":
    _run()
