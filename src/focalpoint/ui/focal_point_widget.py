"""Composite focal-point picker widget."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PySide6 import QtCore, QtWidgets

from focalpoint.config import FocalPointConfig
from focalpoint.preview import PreviewRegistry
from focalpoint.sync import Synchronizer
from focalpoint.ui.attach import attach_focal_points, wrap_image
from focalpoint.ui.widgets import (
    FieldFormItem,
    FocalPointField,
    FocalPointIndicator,
    ImagePreview,
    PreviewLink,
)


class FocalPointWidget(QtWidgets.QWidget):
    """Image preview with a draggable crosshair and the raw value field.

    The field starts hidden (unless ``error`` is given); double-click the
    crosshair to show or hide it.
    """

    valueChanged = QtCore.Signal(str)

    def __init__(
        self,
        focal_point_id: str,
        image_path: str | Path | None = None,
        *,
        value: str = "",
        error: Optional[str] = None,
        preview_href: Optional[str] = None,
        registry: Optional[PreviewRegistry] = None,
        config: Optional[FocalPointConfig] = None,
        parent: QtWidgets.QWidget | None = None,
    ):
        super().__init__(parent)
        cfg = config or FocalPointConfig()
        self.focal_point_id = str(focal_point_id)
        self.registry = registry if registry is not None else PreviewRegistry()

        self.image = ImagePreview(max_size=cfg.max_preview_size)
        self.image.set_source(image_path)
        self.indicator = FocalPointIndicator(
            self.focal_point_id, size=cfg.indicator_size, color=cfg.indicator_color
        )
        self.wrapper = wrap_image(self.image, self.indicator, self)

        self.field = FocalPointField(self.focal_point_id, value or cfg.default_value)
        self.form_item = FieldFormItem(self.field)
        if error:
            self.field.set_error(error)

        self.preview_link: Optional[PreviewLink] = None
        href = preview_href or cfg.preview_href
        if href:
            self.preview_link = PreviewLink(self.focal_point_id, href)

        lay = QtWidgets.QVBoxLayout(self)
        lay.addWidget(self.wrapper, 0, QtCore.Qt.AlignmentFlag.AlignLeft)
        lay.addWidget(self.form_item)
        if self.preview_link is not None:
            lay.addWidget(self.preview_link)
        lay.addStretch(1)

        self.field.valueChanged.connect(self.valueChanged)
        self.synchronizer: Synchronizer = attach_focal_points(self, self.registry)[0]

    def value(self) -> str:
        return self.field.value()

    def set_value(self, text: str) -> bool:
        return self.field.set_value(text)
