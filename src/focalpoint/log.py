"""Console logging for the ``focalpoint`` package.

Only the package logger follows the requested level. The root logger stays at
WARNING so Qt, astropy and friends do not flood the console in DEBUG runs.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

from rich.logging import RichHandler

LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
ENV_LEVEL = "FOCALPOINT_LOG_LEVEL"

_PACKAGE = "focalpoint"


def resolve_level(level: str | None = None) -> str:
    """Argument, then ``$FOCALPOINT_LOG_LEVEL``, then INFO."""
    if level is None:
        level = os.environ.get(ENV_LEVEL, "INFO")
    level = str(level).strip().upper()
    return level if level in LEVELS else "INFO"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Install a single RichHandler on the root logger. Safe to call twice."""
    level = resolve_level(level)

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = RichHandler(rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%H:%M:%S]"))
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    pkg = logging.getLogger(_PACKAGE)
    pkg.setLevel(level)
    return pkg


@contextmanager
def timer(name: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """Log how long the block took (DEBUG), or that it failed (ERROR)."""
    logger = logger or logging.getLogger(_PACKAGE)
    t0 = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.error("%s failed after %.3f s: %s", name, time.perf_counter() - t0, e)
        raise
    logger.debug("%s took %.3f s", name, time.perf_counter() - t0)
