from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6 import QtWidgets

from focalpoint.config import FocalPointConfig
from focalpoint.preview import PreviewRegistry
from focalpoint.ui.focal_point_widget import FocalPointWidget
from focalpoint.ui.theme import load_ui_settings

log = logging.getLogger("focalpoint.ui")


class PickerDialog(QtWidgets.QDialog):
    """Pick the focal point of a single image.

    Accepting the dialog returns the ``"left,top"`` value via :meth:`value`.
    """

    def __init__(
        self,
        image_path: str | Path,
        value: str = "",
        *,
        config: Optional[FocalPointConfig] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ):
        super().__init__(parent)
        self.image_path = Path(image_path)
        if not self.image_path.exists():
            raise FileNotFoundError(self.image_path)

        self.setWindowTitle(f"Focal point: {self.image_path.name}")
        self.setModal(True)
        self.registry = PreviewRegistry()

        self.picker = FocalPointWidget(
            "focal-point-0",
            self.image_path,
            value=value,
            registry=self.registry,
            config=config,
        )

        self.lbl_value = QtWidgets.QLabel()
        self.picker.valueChanged.connect(self._on_value)
        self._on_value(self.picker.value())

        self.button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.StandardButton.Ok | QtWidgets.QDialogButtonBox.StandardButton.Cancel
        )
        self.button_box.accepted.connect(self.accept)
        self.button_box.rejected.connect(self.reject)

        root = QtWidgets.QVBoxLayout(self)
        root.addWidget(self.picker, 1)
        root.addWidget(self.lbl_value)
        root.addWidget(self.button_box)

        geom = load_ui_settings().value("picker/geometry")
        if geom is not None:
            self.restoreGeometry(geom)

    def _on_value(self, text: str) -> None:
        self.lbl_value.setText(f"Focal point: {text or '50,50'} (left, top %)")

    def value(self) -> str:
        return self.picker.value()

    def done(self, result: int) -> None:
        load_ui_settings().setValue("picker/geometry", self.saveGeometry())
        log.info("Focal point %s: %s", "accepted" if result else "cancelled", self.value())
        super().done(result)


def run_picker(image_path: str | Path, value: str = "", *, config: Optional[FocalPointConfig] = None) -> Optional[str]:
    """Show a :class:`PickerDialog`; return the value or None if cancelled."""
    from focalpoint.ui.theme import apply_theme

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    cfg = config or FocalPointConfig()
    apply_theme(app, mode=cfg.theme)

    dlg = PickerDialog(image_path, value, config=cfg)
    if dlg.exec() == QtWidgets.QDialog.DialogCode.Accepted:
        return dlg.value()
    return None
