"""Qt building blocks of the focal-point picker.

Each widget implements the duck-typed protocol :class:`focalpoint.sync.Synchronizer`
expects, so the synchronizer never touches Qt directly:

* :class:`FocalPointIndicator` - ``position()`` / ``move_to()``
* :class:`ImagePreview` - ``rendered_size()`` / ``source()`` / ``is_loaded()`` / ``on_ready()``
* :class:`FocalPointField` - ``value()`` / ``set_value()`` / ``subscribe()`` ...
* :class:`PreviewLink` - ``href()`` / ``set_href()``

The indicator and the image are siblings inside one wrapper widget with the
image at the wrapper origin, so indicator coordinates are image coordinates.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Callable, List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from focalpoint.imaging import is_fits, read_fits_gray
from focalpoint.log import timer

log = logging.getLogger("focalpoint.ui")


class FocalPointIndicator(QtWidgets.QWidget):
    """Draggable crosshair. Its anchor is the widget centre."""

    dragFinished = QtCore.Signal()
    doubleClicked = QtCore.Signal()

    def __init__(
        self,
        focal_point_id: str,
        parent: QtWidgets.QWidget | None = None,
        *,
        size: int = 21,
        color: str = "#ff3b30",
    ):
        super().__init__(parent)
        self.focal_point_id = str(focal_point_id)
        self.setObjectName(f"{self.focal_point_id}-indicator")
        self.setFixedSize(size, size)
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setCursor(QtCore.Qt.CursorShape.OpenHandCursor)
        self.setToolTip("Drag to set the focal point (double-click to edit the value)")
        self._color = QtGui.QColor(color)
        self._pos = (0.0, 0.0)
        self._press_global: QtCore.QPointF | None = None
        self._press_pos = (0.0, 0.0)
        self._moved = False

    # ---------------------------- protocol ----------------------------

    def position(self) -> tuple[float, float]:
        return self._pos

    def move_to(self, left: float, top: float) -> None:
        self._pos = (float(left), float(top))
        half_w = self.width() // 2
        half_h = self.height() // 2
        self.move(int(round(self._pos[0])) - half_w, int(round(self._pos[1])) - half_h)

    # ---------------------------- dragging ----------------------------

    def _bounds(self) -> tuple[float, float]:
        img = self.image()
        if img is None:
            return 0.0, 0.0
        return float(img.width()), float(img.height())

    def image(self) -> Optional["ImagePreview"]:
        parent = self.parentWidget()
        if parent is None:
            return None
        for child in parent.children():
            if isinstance(child, ImagePreview):
                return child
        return None

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.MouseButton.LeftButton:
            self._press_global = event.globalPosition()
            self._press_pos = self._pos
            self._moved = False
            self.setCursor(QtCore.Qt.CursorShape.ClosedHandCursor)
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        if self._press_global is None:
            super().mouseMoveEvent(event)
            return
        delta = event.globalPosition() - self._press_global
        w, h = self._bounds()
        # Containment: the anchor cannot leave the image rect.
        left = min(max(self._press_pos[0] + delta.x(), 0.0), w)
        top = min(max(self._press_pos[1] + delta.y(), 0.0), h)
        if (left, top) != self._pos:
            self._moved = True
            self.move_to(left, top)
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.MouseButton.LeftButton and self._press_global is not None:
            self._press_global = None
            self.setCursor(QtCore.Qt.CursorShape.OpenHandCursor)
            if self._moved:
                self.dragFinished.emit()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event: QtGui.QMouseEvent) -> None:
        self.doubleClicked.emit()
        event.accept()

    def paintEvent(self, ev: QtGui.QPaintEvent) -> None:
        p = QtGui.QPainter(self)
        p.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        r = self.rect().adjusted(2, 2, -2, -2)
        c = QtCore.QPointF(self.rect().center())

        # Dark halo under the coloured stroke keeps the crosshair readable on any image.
        for pen in (QtGui.QPen(QtGui.QColor(0, 0, 0, 160), 3.0), QtGui.QPen(self._color, 1.5)):
            p.setPen(pen)
            p.setBrush(QtCore.Qt.BrushStyle.NoBrush)
            p.drawEllipse(r)
            p.drawLine(QtCore.QPointF(c.x(), r.top()), QtCore.QPointF(c.x(), r.bottom()))
            p.drawLine(QtCore.QPointF(r.left(), c.y()), QtCore.QPointF(r.right(), c.y()))
        p.end()


class ImagePreview(QtWidgets.QLabel):
    """Image preview sized exactly to its (scaled) pixmap.

    ``ready`` fires once per loaded source, the first time the preview is
    both shown and holding a pixmap.
    """

    clicked = QtCore.Signal(float, float)
    ready = QtCore.Signal()

    def __init__(self, parent: QtWidgets.QWidget | None = None, *, max_size: int = 640):
        super().__init__(parent)
        self._source: Optional[str] = None
        self._max_size = int(max_size)
        self._ready_fired = False
        self._pending: List[Callable[[], None]] = []
        self.setCursor(QtCore.Qt.CursorShape.CrossCursor)
        self.setAlignment(QtCore.Qt.AlignmentFlag.AlignLeft | QtCore.Qt.AlignmentFlag.AlignTop)

    # ---------------------------- loading ----------------------------

    def set_source(self, path: str | Path | None) -> bool:
        """Load ``path`` into the preview; False if it cannot be read."""
        self._source = str(path) if path else None
        self._ready_fired = False
        if not self._source:
            self.clear()
            return False

        with timer(f"load preview {Path(self._source).name}", log):
            pix = self._load_pixmap(self._source)
        if pix.isNull():
            log.warning("Failed to load image %s", self._source)
            self.clear()
            self.setFixedSize(0, 0)
            return False

        if max(pix.width(), pix.height()) > self._max_size:
            pix = pix.scaled(
                self._max_size,
                self._max_size,
                QtCore.Qt.AspectRatioMode.KeepAspectRatio,
                QtCore.Qt.TransformationMode.SmoothTransformation,
            )
        self.setPixmap(pix)
        self.setFixedSize(pix.size())
        parent = self.parentWidget()
        if parent is not None:
            parent.setFixedSize(pix.size())
        self._maybe_fire_ready()
        return True

    @staticmethod
    def _load_pixmap(path: str) -> QtGui.QPixmap:
        if is_fits(path):
            try:
                u8 = read_fits_gray(path)
            except (OSError, ValueError) as e:
                log.warning("Cannot render FITS %s: %s", path, e)
                return QtGui.QPixmap()
            h, w = u8.shape
            qimg = QtGui.QImage(u8.tobytes(), w, h, w, QtGui.QImage.Format.Format_Grayscale8)
            return QtGui.QPixmap.fromImage(qimg.copy())
        return QtGui.QPixmap(path)

    # ---------------------------- protocol ----------------------------

    def source(self) -> Optional[str]:
        return self._source

    def rendered_size(self) -> tuple[int, int]:
        # The scaled pixmap is what gets drawn, shown or not.
        pix = self.pixmap()
        if pix is None or pix.isNull():
            return 0, 0
        return pix.width(), pix.height()

    def is_loaded(self) -> bool:
        pix = self.pixmap()
        return self.isVisible() and pix is not None and not pix.isNull()

    def on_ready(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` once the preview is ready (immediately if it is)."""
        if self.is_loaded():
            callback()
            return
        self._pending.append(callback)

    def _maybe_fire_ready(self) -> None:
        if self._ready_fired or not self.is_loaded():
            return
        self._ready_fired = True
        pending, self._pending = self._pending, []
        self.ready.emit()
        for cb in pending:
            cb()

    def showEvent(self, event: QtGui.QShowEvent) -> None:
        super().showEvent(event)
        self._maybe_fire_ready()

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.MouseButton.LeftButton and self.is_loaded():
            pos = event.position()
            self.clicked.emit(pos.x(), pos.y())
            event.accept()
            return
        super().mousePressEvent(event)


class FocalPointField(QtWidgets.QLineEdit):
    """Raw ``"left,top"`` field.

    ``valueChanged`` is the change notification: emitted when the user
    finishes an edit that changed the text, and on :meth:`set_value` writes
    that change it. Writing the current text is silent.
    """

    valueChanged = QtCore.Signal(str)

    def __init__(self, focal_point_id: str, value: str = "", parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.focal_point_id = str(focal_point_id)
        self.setObjectName(f"{self.focal_point_id}-field")
        self.setPlaceholderText("50,50")
        self.setText(str(value or ""))
        self._last = self.text()
        self._error: Optional[str] = None
        self.editingFinished.connect(self._on_editing_finished)

    def _on_editing_finished(self) -> None:
        if self.text() != self._last:
            self._last = self.text()
            self.valueChanged.emit(self._last)

    # ---------------------------- protocol ----------------------------

    def value(self) -> str:
        return self.text()

    def set_value(self, text: str) -> bool:
        text = str(text)
        if text == self.text():
            return False
        self.setText(text)
        self._last = text
        self.valueChanged.emit(text)
        return True

    def subscribe(self, callback: Callable[[str], None]) -> None:
        self.valueChanged.connect(callback)

    def unsubscribe(self, callback: Callable[[str], None]) -> None:
        try:
            self.valueChanged.disconnect(callback)
        except (RuntimeError, TypeError):
            pass

    def has_error(self) -> bool:
        return bool(self._error)

    def error(self) -> Optional[str]:
        return self._error

    def set_error(self, message: Optional[str]) -> None:
        self._error = message or None
        self.setProperty("error", "true" if self._error else "false")
        self.style().unpolish(self)
        self.style().polish(self)
        item = self.form_item()
        if item is not None:
            item.show_error(self._error)

    def form_item(self) -> Optional["FieldFormItem"]:
        w = self.parentWidget()
        while w is not None:
            if isinstance(w, FieldFormItem):
                return w
            w = w.parentWidget()
        return None

    def is_visible(self) -> bool:
        item = self.form_item()
        return not (item if item is not None else self).isHidden()

    def set_visible(self, visible: bool) -> None:
        item = self.form_item()
        (item if item is not None else self).setVisible(bool(visible))


class FieldFormItem(QtWidgets.QWidget):
    """Form row (label, field, error text); this is what gets hidden."""

    def __init__(self, field: FocalPointField, label: str = "Focal point", parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.field = field
        self.lbl = QtWidgets.QLabel(label)
        self.lbl.setBuddy(field)
        self.lbl_error = QtWidgets.QLabel("")
        self.lbl_error.setObjectName("focalPointError")
        self.lbl_error.setVisible(False)

        lay = QtWidgets.QGridLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.lbl, 0, 0)
        lay.addWidget(field, 0, 1)
        lay.addWidget(self.lbl_error, 1, 1)

    def show_error(self, message: Optional[str]) -> None:
        self.lbl_error.setText(message or "")
        self.lbl_error.setVisible(bool(message))


class PreviewLink(QtWidgets.QLabel):
    """Link to a cropped preview; its last path segment is the focal point."""

    def __init__(self, focal_point_id: str, href: str, text: str = "Preview", parent: QtWidgets.QWidget | None = None):
        super().__init__(parent)
        self.focal_point_id = str(focal_point_id)
        self.setObjectName(f"{self.focal_point_id}-preview-link")
        self._text = text
        self._href = ""
        self.setTextFormat(QtCore.Qt.TextFormat.RichText)
        self.setOpenExternalLinks(True)
        self.set_href(href)

    def href(self) -> str:
        return self._href

    def set_href(self, href: str) -> None:
        self._href = str(href)
        self.setText(f'<a href="{html.escape(self._href, quote=True)}">{html.escape(self._text)}</a>')
        self.setToolTip(self._href)
