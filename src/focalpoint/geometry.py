"""Pixel <-> percentage geometry for the focal-point indicator.

The widgets position the indicator in *rendered* image pixels, while the
field stores percentages. Keep this module GUI-independent: the Qt layer and
the unit tests both call into it.

Rounding
--------
Percentages are rounded half away from zero (``2.5 -> 3``, ``-2.5 -> -3``).
Python's builtin :func:`round` is banker's rounding and is not used here.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

log = logging.getLogger("focalpoint.geometry")

PERCENT_MIN = 0
PERCENT_MAX = 100


@dataclass(frozen=True)
class ImageDimensions:
    """Rendered (or intrinsic) image size in pixels."""

    width: float = 0
    height: float = 0

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


Probe = Callable[[str], ImageDimensions]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    if value != value:  # NaN
        return 0
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp_percent(value: int) -> int:
    return max(PERCENT_MIN, min(PERCENT_MAX, int(value)))


def pixels_to_percent(delta_pixels: float, dimension_pixels: float) -> int:
    """Convert a pixel offset into an integer percentage in [0, 100].

    Round first, then clamp. A non-positive dimension (image not loaded)
    yields 0.
    """
    if not dimension_pixels or dimension_pixels <= 0:
        return PERCENT_MIN
    return clamp_percent(round_half_away(100.0 * float(delta_pixels) / float(dimension_pixels)))


def percent_to_pixels(percent: float, dimension_pixels: float) -> float:
    """Sub-pixel offset for ``percent`` of ``dimension_pixels`` (no rounding)."""
    return (float(percent) / 100.0) * float(dimension_pixels)


def get_dimensions(image, probe: Optional[Probe] = None) -> ImageDimensions:
    """Effective size of ``image``.

    ``image`` must provide ``rendered_size() -> (w, h)`` and
    ``source() -> str | None``. If either rendered dimension is zero (nothing
    drawn yet) the intrinsic size of the source is probed instead;
    an unreadable source resolves to ``(0, 0)``.
    """
    w, h = image.rendered_size()
    if w and h:
        return ImageDimensions(float(w), float(h))

    src = image.source()
    if not src:
        log.debug("Image has no rendered size and no source; using 0x0")
        return ImageDimensions(0, 0)

    if probe is None:
        from focalpoint.imaging import intrinsic_size

        probe = intrinsic_size

    dims = probe(str(src))
    if dims.is_degenerate:
        log.debug("Could not determine intrinsic size of %s", src)
    return dims
