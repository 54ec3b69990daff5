"""focalpoint package.

Visual focal-point picker: a crosshair indicator on an image preview kept in
sync with a ``"left,top"`` percentage field.

The core (:mod:`focalpoint.geometry`, :mod:`focalpoint.coords`,
:mod:`focalpoint.sync`, :mod:`focalpoint.preview`) does not depend on Qt.
Widgets live in :mod:`focalpoint.ui`.
"""

from .version import __version__

__all__ = ["__version__"]
