from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich import print
from rich.markup import escape

from focalpoint.config import ConfigError, load_config
from focalpoint.coords import clamp, format_point, normalize, parse
from focalpoint.geometry import pixels_to_percent
from focalpoint.log import setup_logging
from focalpoint.preview import rewrite_href
from focalpoint.version import get_version_info


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="focalpoint")
    p.add_argument(
        "--log-level",
        default=None,
        help="CRITICAL|ERROR|WARNING|INFO|DEBUG (or env FOCALPOINT_LOG_LEVEL)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print version information")

    p_parse = sub.add_parser("parse", help="Normalize a 'left,top' value")
    p_parse.add_argument("value", nargs="?", default="")

    p_pct = sub.add_parser("percent", help="Convert a pixel offset into a focal point")
    p_pct.add_argument("--x", type=float, required=True)
    p_pct.add_argument("--y", type=float, required=True)
    p_pct.add_argument("--width", type=float, required=True)
    p_pct.add_argument("--height", type=float, required=True)

    p_url = sub.add_parser("preview-url", help="Rewrite a preview href for a value")
    p_url.add_argument("href")
    p_url.add_argument("value")

    p_pick = sub.add_parser("pick", help="Pick the focal point of an image interactively")
    p_pick.add_argument("image")
    p_pick.add_argument("--value", default="", help="Initial 'left,top' value")
    p_pick.add_argument("--config", default=None, help="YAML config file")

    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        cfg = load_config(getattr(args, "config", None))
    except ConfigError as e:
        print(f"[red]{escape(str(e))}[/red]")
        return 2

    setup_logging(args.log_level or cfg.log_level)
    log = logging.getLogger("focalpoint")

    if args.cmd == "version":
        v = get_version_info()
        print(f"[bold]focalpoint[/bold] {v.package_version}")
        print(f"python {v.python} | {v.platform} | PySide6 {v.qt or 'not installed'}")
        if v.git_commit:
            print(f"git {v.git_commit}")
        return 0

    if args.cmd == "parse":
        point = parse(args.value)
        print(escape(normalize(args.value)))
        if clamp(point) != point:
            log.info("Value %r clamped to %s", args.value, format_point(clamp(point)))
        return 0

    if args.cmd == "percent":
        x = pixels_to_percent(args.x, args.width)
        y = pixels_to_percent(args.y, args.height)
        print(f"{x},{y}")
        return 0

    if args.cmd == "preview-url":
        print(escape(rewrite_href(args.href, normalize(args.value))))
        return 0

    if args.cmd == "pick":
        image = Path(args.image)
        if not image.is_file():
            print(f"[red]Image not found:[/red] {escape(str(image))}")
            return 2

        from focalpoint.ui.picker_window import run_picker

        value = run_picker(image, normalize(args.value) if args.value else "", config=cfg)
        if value is None:
            print("[yellow]Cancelled[/yellow]")
            return 1
        print(escape(value))
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
