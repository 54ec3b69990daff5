"""Qt widgets for the focal-point picker.

Importing the package does not import PySide6; GUI code should import the
needed modules directly (``focalpoint.ui.focal_point_widget`` etc.).
"""

from __future__ import annotations

__all__ = ["FocalPointWidget", "attach_focal_points"]


def __getattr__(name: str):
    if name == "FocalPointWidget":
        from .focal_point_widget import FocalPointWidget

        return FocalPointWidget
    if name == "attach_focal_points":
        from .attach import attach_focal_points

        return attach_focal_points
    raise AttributeError(name)
