from __future__ import annotations

from PySide6 import QtCore, QtGui, QtWidgets


def apply_theme(app: QtWidgets.QApplication, *, mode: str = "dark") -> None:
    """Apply the picker theme (Fusion + palette + QSS).

    Parameters
    ----------
    mode:
        "dark" or "light".
    """

    mode = (mode or "dark").strip().lower()
    if mode not in {"dark", "light"}:
        mode = "dark"

    app.setStyle("Fusion")

    pal = QtGui.QPalette()

    if mode == "dark":
        bg = QtGui.QColor(30, 30, 30)
        base = QtGui.QColor(22, 22, 22)
        text = QtGui.QColor(225, 225, 225)
        disabled = QtGui.QColor(140, 140, 140)
        accent = QtGui.QColor(61, 174, 233)
        hl_text = QtGui.QColor(0, 0, 0)
        border = "#3a3a3a"
        input_bg = "#151515"
        wrapper_bg = "#101010"
        btn_bg = "#2a2a2a"
        btn_hover = "#323232"
    else:
        bg = QtGui.QColor(245, 245, 247)
        base = QtGui.QColor(255, 255, 255)
        text = QtGui.QColor(25, 25, 25)
        disabled = QtGui.QColor(150, 150, 150)
        accent = QtGui.QColor(47, 111, 237)
        hl_text = QtGui.QColor(255, 255, 255)
        border = "#d7d7db"
        input_bg = "#ffffff"
        wrapper_bg = "#e8e8ec"
        btn_bg = "#ffffff"
        btn_hover = "#f0f0f3"

    pal.setColor(QtGui.QPalette.ColorRole.Window, bg)
    pal.setColor(QtGui.QPalette.ColorRole.WindowText, text)
    pal.setColor(QtGui.QPalette.ColorRole.Base, base)
    pal.setColor(QtGui.QPalette.ColorRole.Text, text)
    pal.setColor(QtGui.QPalette.ColorRole.Button, bg)
    pal.setColor(QtGui.QPalette.ColorRole.ButtonText, text)
    pal.setColor(QtGui.QPalette.ColorRole.Highlight, accent)
    pal.setColor(QtGui.QPalette.ColorRole.HighlightedText, hl_text)
    pal.setColor(QtGui.QPalette.ColorRole.Link, accent)

    pal.setColor(QtGui.QPalette.ColorGroup.Disabled, QtGui.QPalette.ColorRole.Text, disabled)
    pal.setColor(QtGui.QPalette.ColorGroup.Disabled, QtGui.QPalette.ColorRole.ButtonText, disabled)
    app.setPalette(pal)

    qss = f"""
    QWidget {{ font-size: 10pt; }}

    QWidget#focalPointWrapper {{ background: {wrapper_bg}; }}

    QLineEdit {{
        padding: 6px 8px;
        border-radius: 8px;
        border: 1px solid {border};
        background: {input_bg};
        selection-background-color: {accent.name()};
    }}
    QLineEdit[error="true"] {{ border: 1px solid #e5484d; }}
    QLabel#focalPointError {{ color: #e5484d; }}

    QPushButton {{
        padding: 7px 12px;
        border-radius: 10px;
        border: 1px solid {border};
        background: {btn_bg};
        color: {text.name()};
    }}
    QPushButton:hover {{ background: {btn_hover}; }}
    """
    app.setStyleSheet(qss)


def load_ui_settings() -> QtCore.QSettings:
    # QSettings stores per-user config automatically.
    return QtCore.QSettings("FocalPoint", "FocalPointPicker")
