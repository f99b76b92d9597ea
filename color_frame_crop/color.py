"""HSV conversion and color band membership.

Hue is on the half scale (0-180) used by 8-bit HSV images, so band thresholds
can be read straight off an OpenCV-style color picker. All rounding is
round-half-up, which cv2.cvtColor does not reproduce exactly, so the
conversion is done by hand.
"""

from __future__ import annotations

import math

import numpy as np

from .models import BAND_RANGES, ColorBand


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def rgb_to_hsv(r: int, g: int, b: int) -> tuple[int, int, int]:
    """Convert one 8-bit RGB pixel to (hue, saturation, value).

    Returns:
        hue in [0, 180), saturation and value in [0, 255]
    """
    r_n, g_n, b_n = r / 255, g / 255, b / 255
    c_max = max(r_n, g_n, b_n)
    c_min = min(r_n, g_n, b_n)
    diff = c_max - c_min

    h = 0.0
    if diff != 0:
        if c_max == r_n:
            h = math.fmod((g_n - b_n) / diff, 6)
        elif c_max == g_n:
            h = (b_n - r_n) / diff + 2
        else:
            h = (r_n - g_n) / diff + 4
    hue = _round_half_up(h * 30)
    if hue < 0:
        hue += 180

    sat = 0 if c_max == 0 else _round_half_up(diff / c_max * 255)
    val = _round_half_up(c_max * 255)
    return hue, sat, val


def rgb_to_hsv_image(img: np.ndarray) -> np.ndarray:
    """Vectorized rgb_to_hsv over an RGB or RGBA image.

    Args:
        img: uint8 array of shape (H, W, 3) or (H, W, 4); alpha is ignored

    Returns:
        int32 array of shape (H, W, 3) holding hue, saturation, value
    """
    rgb = img[:, :, :3].astype(np.float64) / 255
    r, g, b = rgb[:, :, 0], rgb[:, :, 1], rgb[:, :, 2]
    c_max = rgb.max(axis=2)
    c_min = rgb.min(axis=2)
    diff = c_max - c_min
    safe_diff = np.where(diff == 0, 1.0, diff)

    # Sector priority matches the scalar version: red, then green, then blue
    h = np.where(
        c_max == r,
        np.fmod((g - b) / safe_diff, 6),
        np.where(c_max == g, (b - r) / safe_diff + 2, (r - g) / safe_diff + 4),
    )
    h = np.where(diff == 0, 0.0, h)
    hue = np.floor(h * 30 + 0.5)
    hue = np.where(hue < 0, hue + 180, hue)

    safe_max = np.where(c_max == 0, 1.0, c_max)
    sat = np.where(c_max == 0, 0.0, np.floor(diff / safe_max * 255 + 0.5))
    val = np.floor(c_max * 255 + 0.5)

    return np.stack([hue, sat, val], axis=2).astype(np.int32)


def in_band(h: int, s: int, v: int, band: ColorBand) -> bool:
    """Check whether an HSV triple belongs to a color band."""
    return BAND_RANGES[band].contains(h, s, v)


def in_band_image(hsv: np.ndarray, band: ColorBand) -> np.ndarray:
    """Boolean mask of pixels in an (H, W, 3) HSV array that belong to band."""
    band_range = BAND_RANGES[band]
    h, s, v = hsv[:, :, 0], hsv[:, :, 1], hsv[:, :, 2]

    hue_ok = np.zeros(h.shape, dtype=bool)
    for lo, hi in band_range.hue_ranges:
        hue_ok |= (h >= lo) & (h <= hi)

    return hue_ok & (s >= band_range.min_saturation) & (v >= band_range.min_value)
