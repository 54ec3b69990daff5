"""Convenient local test runner.

Pytest's `-m` option *selects* tests by marker.

Suites:
  - fast: core tests without Qt    `pytest -m "not gui"`
  - gui:  widget tests (offscreen) `pytest -m gui`
  - all:  everything

Usage
-----
  python scripts/run_tests.py fast
  python scripts/run_tests.py gui
  python scripts/run_tests.py all
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _ensure_src_on_path() -> None:
    """Allow running from a source checkout without `pip install -e .`."""

    root = _repo_root()
    src = root / "src"
    if src.exists() and str(src) not in sys.path:
        sys.path.insert(0, str(src))


def _run(cmd: list[str], *, env: dict[str, str] | None = None) -> int:
    print("\n$", " ".join(cmd))
    return subprocess.call(cmd, cwd=str(_repo_root()), env=env)


def main(argv: list[str] | None = None) -> int:
    _ensure_src_on_path()

    ap = argparse.ArgumentParser(description="Run focalpoint test suites")
    ap.add_argument(
        "suite",
        nargs="?",
        default="all",
        choices={"fast", "gui", "all"},
        help="Which suite to run (default: all)",
    )
    ap.add_argument("--pytest", default="pytest", help="Pytest executable (default: pytest)")
    ap.add_argument("--quiet", action="store_true", help="Pass -q to pytest")
    args = ap.parse_args(argv)

    q = ["-q"] if args.quiet else []

    if args.suite == "fast":
        return _run([args.pytest, *q, "-m", "not gui"])

    env = dict(os.environ)
    env.setdefault("QT_QPA_PLATFORM", "offscreen")

    if args.suite == "gui":
        return _run([args.pytest, *q, "-m", "gui"], env=env)

    return _run([args.pytest, *q], env=env)


if __name__ == "__main__":
    raise SystemExit(main())
