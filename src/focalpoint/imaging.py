"""Out-of-band image probing.

When the preview is hidden (collapsed form, tab not yet shown) the widget has
no rendered size. :func:`intrinsic_size` reads the natural size of the image
source without rendering it:

* FITS frames: header ``NAXIS1``/``NAXIS2`` of the first image-like HDU
  (astropy, no data read).
* everything else: :class:`QtGui.QImageReader`, which only parses the header.

Unreadable sources resolve to ``0x0``; callers treat that as the degenerate
"anchored at the origin" state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
from astropy.io import fits

from focalpoint.geometry import ImageDimensions

log = logging.getLogger("focalpoint.imaging")

FITS_SUFFIXES = (".fits", ".fit", ".fts", ".fits.gz", ".fit.gz", ".fts.gz")


def is_fits(path: Union[str, Path]) -> bool:
    return str(path).lower().endswith(FITS_SUFFIXES)


def _fits_size(path: Path) -> ImageDimensions:
    with fits.open(path, memmap=False, ignore_missing_end=True) as hdul:
        for hdu in hdul:
            hdr = hdu.header
            if int(hdr.get("NAXIS", 0) or 0) >= 2:
                return ImageDimensions(int(hdr.get("NAXIS1", 0)), int(hdr.get("NAXIS2", 0)))
    return ImageDimensions(0, 0)


def _qt_size(path: Path) -> ImageDimensions:
    try:
        from PySide6 import QtGui
    except ImportError:
        log.debug("PySide6 not available; cannot probe %s", path)
        return ImageDimensions(0, 0)

    reader = QtGui.QImageReader(str(path))
    size = reader.size()
    if not size.isValid():
        log.debug("QImageReader could not read %s: %s", path, reader.errorString())
        return ImageDimensions(0, 0)
    return ImageDimensions(size.width(), size.height())


def intrinsic_size(source: Union[str, Path]) -> ImageDimensions:
    """Natural size of the image at ``source`` (``0x0`` if unreadable)."""
    path = Path(str(source)).expanduser()
    if not path.is_file():
        log.debug("Image source %s does not exist", path)
        return ImageDimensions(0, 0)
    try:
        if is_fits(path):
            return _fits_size(path)
        return _qt_size(path)
    except (OSError, ValueError) as e:
        log.warning("Failed to probe %s: %s", path, e)
        return ImageDimensions(0, 0)


def _safe_percentiles(x: np.ndarray, p_lo: float, p_hi: float) -> tuple[float, float]:
    x = x[np.isfinite(x)]
    if x.size == 0:
        return 0.0, 1.0
    lo = float(np.percentile(x, p_lo))
    hi = float(np.percentile(x, p_hi))
    if hi <= lo:
        hi = lo + 1e-6
    return lo, hi


def stretch_to_u8(img: np.ndarray, p_lo: float = 1.0, p_hi: float = 99.0) -> np.ndarray:
    """Linear percentile stretch of a 2D array into ``uint8``."""
    a = np.asarray(img, dtype=np.float32)
    lo, hi = _safe_percentiles(a, p_lo, p_hi)
    x = np.clip((a - lo) / (hi - lo), 0.0, 1.0)
    x = np.nan_to_num(x, nan=0.0)
    return (x * 255.0).astype(np.uint8)


def read_fits_gray(path: Union[str, Path]) -> np.ndarray:
    """First 2D image HDU of a FITS file as a stretched ``uint8`` array."""
    with fits.open(path, memmap=False, ignore_missing_end=True) as hdul:
        for hdu in hdul:
            data = getattr(hdu, "data", None)
            if data is None:
                continue
            a = np.squeeze(np.asarray(data))
            if a.ndim == 2:
                return stretch_to_u8(a)
    raise ValueError(f"No 2D image HDU found in {path}")
