"""Version helpers.

``__version__`` is the Python package version (PEP 440). The CLI ``version``
command prints it together with a small runtime snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import platform
import subprocess
import sys


__version__ = "1.2.0"


@dataclass(frozen=True)
class VersionInfo:
    package_version: str
    git_commit: str | None
    python: str
    platform: str
    qt: str | None


def _try_git_commit() -> str | None:
    """Return short git commit hash if available."""
    try:
        root = Path(__file__).resolve().parents[2]
        if not (root / ".git").exists():
            return None
        out = subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=str(root),
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2,
        ).strip()
        return out or None
    except (OSError, subprocess.SubprocessError):
        return None


def _try_qt_version() -> str | None:
    try:
        import PySide6
    except ImportError:
        return None
    return getattr(PySide6, "__version__", None)


def get_version_info() -> VersionInfo:
    return VersionInfo(
        package_version=__version__,
        git_commit=_try_git_commit(),
        python=sys.version.split()[0],
        platform=f"{platform.system()} {platform.release()} ({platform.machine()})",
        qt=_try_qt_version(),
    )
