"""Keep the indicator position and the focal-point field consistent.

Data flows one way per trigger:

* image ready        field      -> indicator
* drag end           indicator  -> field
* click on image     click      -> indicator -> field
* field changed      field      -> indicator (+ normalized field, preview link)

Both directions meet on the field's change notification, so the field must
only notify when its text actually changes. The synchronizer also compares
before writing, which keeps ``field -> indicator -> field`` a no-op.

Collaborators are duck-typed so the same class drives the Qt widgets and the
headless :class:`focalpoint.coords.CoordinateStore` used in tests.
"""

from __future__ import annotations

import logging
from typing import Optional

from focalpoint.coords import FocalPoint, clamp, format_point, parse
from focalpoint.geometry import (
    ImageDimensions,
    Probe,
    get_dimensions,
    percent_to_pixels,
    pixels_to_percent,
    round_half_away,
)
from focalpoint.preview import PreviewRegistry, preview_request_id, rewrite_href

log = logging.getLogger("focalpoint.sync")


class Synchronizer:
    """Event handlers binding one indicator, image, field (and preview link)."""

    def __init__(
        self,
        indicator,
        image,
        field,
        *,
        preview_link=None,
        registry: Optional[PreviewRegistry] = None,
        probe: Optional[Probe] = None,
    ):
        self.indicator = indicator
        self.image = image
        self.field = field
        self.preview_link = preview_link
        self.registry = registry
        self.probe = probe
        self._attached = False

    # ---------------------------- lifecycle ----------------------------

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> bool:
        """Bind handlers once; returns False if already attached."""
        if self._attached:
            return False
        self._attached = True

        # The raw field stays visible when it carries a validation error.
        if not self.field.has_error():
            self.field.set_visible(False)

        self.field.subscribe(self.on_field_changed)

        if self.image.is_loaded():
            self.on_ready()
        else:
            self.image.on_ready(self.on_ready)
        return True

    def detach(self) -> None:
        if not self._attached:
            return
        self.field.unsubscribe(self.on_field_changed)
        self._attached = False

    # ---------------------------- geometry ----------------------------

    def dimensions(self) -> ImageDimensions:
        return get_dimensions(self.image, self.probe)

    def point_from_indicator(self) -> FocalPoint:
        dims = self.dimensions()
        left, top = self.indicator.position()
        return FocalPoint(
            pixels_to_percent(left, dims.width),
            pixels_to_percent(top, dims.height),
        )

    # ---------------------------- transfers ----------------------------

    def set_indicator_from_field(self) -> FocalPoint:
        """Move the indicator to the field's point and normalize the field."""
        point = clamp(parse(self.field.value()))
        dims = self.dimensions()
        if dims.is_degenerate:
            log.debug("Image size unknown; indicator anchored at the origin")
        self.indicator.move_to(
            percent_to_pixels(point.x, dims.width),
            percent_to_pixels(point.y, dims.height),
        )
        self._write_field(format_point(point))
        return point

    def set_field_from_indicator(self) -> Optional[FocalPoint]:
        """Store the indicator's position as a percentage pair."""
        dims = self.dimensions()
        if dims.is_degenerate:
            log.warning("Image size unknown; focal point not updated")
            return None
        point = self.point_from_indicator()
        self._write_field(format_point(point))
        return point

    def _write_field(self, text: str) -> None:
        if self.field.value() != text:
            self.field.set_value(text)

    # ---------------------------- handlers ----------------------------

    def on_ready(self, *_) -> None:
        self.set_indicator_from_field()

    def on_drag_end(self, *_) -> None:
        self.set_field_from_indicator()

    def on_click(self, offset_x: float, offset_y: float) -> None:
        self.indicator.move_to(round_half_away(offset_x), round_half_away(offset_y))
        self.set_field_from_indicator()

    def on_field_changed(self, value: Optional[str] = None) -> None:
        self.set_indicator_from_field()
        self.update_preview_link()

    def toggle_field(self, *_) -> bool:
        visible = not self.field.is_visible()
        self.field.set_visible(visible)
        return visible

    # ---------------------------- preview ----------------------------

    def update_preview_link(self) -> Optional[str]:
        link = self.preview_link
        if link is None:
            return None
        href = rewrite_href(link.href(), self.field.value())
        link.set_href(href)
        if self.registry is not None:
            self.registry.update_url(preview_request_id(link.focal_point_id), href)
        log.debug("Preview link -> %s", href)
        return href
