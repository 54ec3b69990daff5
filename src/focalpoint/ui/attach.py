"""Bind focal-point widgets found in a widget tree.

:func:`attach_focal_points` scans ``root`` for indicators and correlates the
other pieces the same way a page would:

* the image is the indicator's sibling (:class:`ImagePreview` under the same
  parent),
* the field and the optional preview link carry the same ``focal_point_id``.

Every indicator is bound at most once; re-scanning a tree (e.g. after a panel
is rebuilt around existing widgets) skips indicators already bound.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, TypeVar

from PySide6 import QtCore, QtWidgets

from focalpoint.preview import PreviewRegistry, preview_request_id
from focalpoint.sync import Synchronizer
from focalpoint.ui.widgets import FocalPointField, FocalPointIndicator, ImagePreview, PreviewLink

log = logging.getLogger("focalpoint.ui")

_BOUND_PROP = "focalPointAttached"

W = TypeVar("W", bound=QtWidgets.QWidget)


def _by_id(root: QtWidgets.QWidget, cls: type[W]) -> Dict[str, W]:
    out: Dict[str, W] = {}
    for w in root.findChildren(cls):
        fid = getattr(w, "focal_point_id", None)
        if fid is not None and fid not in out:
            out[fid] = w
    return out


def is_bound(indicator: FocalPointIndicator) -> bool:
    return bool(indicator.property(_BOUND_PROP))


def bind(
    indicator: FocalPointIndicator,
    image: ImagePreview,
    field: FocalPointField,
    *,
    preview_link: Optional[PreviewLink] = None,
    registry: Optional[PreviewRegistry] = None,
) -> Synchronizer:
    """Wire one indicator/image/field set to a new :class:`Synchronizer`."""
    sync = Synchronizer(indicator, image, field, preview_link=preview_link, registry=registry)

    indicator.dragFinished.connect(sync.on_drag_end)
    indicator.doubleClicked.connect(sync.toggle_field)
    image.clicked.connect(sync.on_click)
    indicator.raise_()

    if preview_link is not None and registry is not None:
        key = preview_request_id(preview_link.focal_point_id)
        if key not in registry:
            registry.register(key, preview_link.href())

    indicator.setProperty(_BOUND_PROP, True)
    sync.attach()
    log.debug("Bound focal point %s", indicator.focal_point_id)
    return sync


def attach_focal_points(
    root: QtWidgets.QWidget,
    registry: Optional[PreviewRegistry] = None,
) -> List[Synchronizer]:
    """Bind every unbound indicator under ``root``; return the new synchronizers."""
    fields = _by_id(root, FocalPointField)
    links = _by_id(root, PreviewLink)

    bound: List[Synchronizer] = []
    for indicator in root.findChildren(FocalPointIndicator):
        if is_bound(indicator):
            continue
        fid = indicator.focal_point_id
        image = indicator.image()
        field = fields.get(fid)
        if image is None or field is None:
            log.warning(
                "Focal point %s is incomplete (image=%s, field=%s); skipped",
                fid,
                image is not None,
                field is not None,
            )
            continue
        bound.append(bind(indicator, image, field, preview_link=links.get(fid), registry=registry))
    return bound


def wrap_image(
    image: ImagePreview,
    indicator: FocalPointIndicator,
    parent: QtWidgets.QWidget | None = None,
) -> QtWidgets.QWidget:
    """Put ``image`` and ``indicator`` in one left-to-right wrapper widget.

    The wrapper has no layout: the image sits at the origin and the indicator
    is positioned freely on top of it.
    """
    wrapper = QtWidgets.QWidget(parent)
    wrapper.setObjectName("focalPointWrapper")
    wrapper.setAttribute(QtCore.Qt.WidgetAttribute.WA_StyledBackground, True)
    # Image coordinates are measured from the left edge in RTL locales too.
    wrapper.setLayoutDirection(QtCore.Qt.LayoutDirection.LeftToRight)
    image.setParent(wrapper)
    image.move(0, 0)
    indicator.setParent(wrapper)
    indicator.raise_()
    if not image.pixmap().isNull():
        wrapper.setFixedSize(image.size())
    return wrapper
