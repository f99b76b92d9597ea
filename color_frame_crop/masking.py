"""Binary masks of frame-colored pixels."""

from __future__ import annotations

import numpy as np

from .color import in_band_image, rgb_to_hsv_image
from .models import ColorBand


def build_mask(img: np.ndarray, band: ColorBand) -> np.ndarray:
    """Mark every pixel whose color falls inside band.

    Args:
        img: RGB or RGBA uint8 image
        band: Color band to match

    Returns:
        uint8 mask of shape (H, W) where matching pixels are 255, others 0
    """
    hsv = rgb_to_hsv_image(img)
    return in_band_image(hsv, band).astype(np.uint8) * 255


def mask_coverage(mask: np.ndarray) -> float:
    """Return the fraction of set pixels in a mask."""
    if mask.size == 0:
        return 0.0
    return float(np.count_nonzero(mask)) / mask.size
