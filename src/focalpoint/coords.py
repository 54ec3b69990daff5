"""Focal-point value: parsing, formatting and the headless field.

Wire format
-----------
The field holds plain text ``"<int>,<int>"`` (left, top percentages). An empty
field means the image centre, ``"50,50"``. This text is what gets submitted
and what the cropping code consumes, so :func:`format_point` must stay
byte-stable.

Parsing is permissive in the same way integer parsing in form inputs usually
is: leading whitespace and a sign are accepted and trailing garbage is ignored
(``"30px"`` -> 30). Anything else falls back to the default rather than
raising.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from focalpoint.geometry import clamp_percent

log = logging.getLogger("focalpoint.coords")

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class FocalPoint:
    x: int = 50
    y: int = 50


DEFAULT_POINT = FocalPoint(50, 50)
DEFAULT_VALUE = "50,50"


def _parse_int(text: str) -> Optional[int]:
    m = _INT_PREFIX.match(text)
    if m is None:
        return None
    return int(m.group(1), 10)


def parse(raw: Optional[str]) -> FocalPoint:
    """Parse the field text into a :class:`FocalPoint` (not clamped)."""
    if raw is None or raw == "":
        return DEFAULT_POINT

    parts = str(raw).split(",")
    if len(parts) != 2:
        log.debug("Malformed focal point %r; using default", raw)
        return DEFAULT_POINT

    x = _parse_int(parts[0])
    y = _parse_int(parts[1])
    if x is None or y is None:
        log.debug("Malformed focal point %r; using default", raw)
        return DEFAULT_POINT
    return FocalPoint(x, y)


def format_point(point: FocalPoint) -> str:
    return f"{point.x},{point.y}"


def clamp(point: FocalPoint) -> FocalPoint:
    return FocalPoint(clamp_percent(point.x), clamp_percent(point.y))


def normalize(raw: Optional[str]) -> str:
    """Canonical field text for ``raw``: parsed, clamped, re-formatted."""
    return format_point(clamp(parse(raw)))


Listener = Callable[[str], None]


class CoordinateStore:
    """Headless focal-point field.

    Implements the same protocol as :class:`focalpoint.ui.widgets.FocalPointField`
    so the synchronizer can run without Qt. Listeners are called with the new
    text only when a write actually changes it.
    """

    def __init__(self, value: str = "", *, error: Optional[str] = None):
        self._value = str(value or "")
        self._listeners: List[Listener] = []
        self.error = error
        self._visible = True

    def value(self) -> str:
        return self._value

    def set_value(self, text: str) -> bool:
        """Store ``text``; return True (and notify) if it changed."""
        text = str(text)
        if text == self._value:
            return False
        self._value = text
        self.notify()
        return True

    def notify(self) -> None:
        value = self._value
        for cb in list(self._listeners):
            cb(value)

    def subscribe(self, callback: Listener) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Listener) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    def has_error(self) -> bool:
        return bool(self.error)

    def is_visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        self._visible = bool(visible)

    def point(self) -> FocalPoint:
        return parse(self._value)
