"""Frame boundary search and cropping utilities."""

from __future__ import annotations

import numpy as np

from .exceptions import InvalidBoundariesError, InvalidImageError
from .models import BoundaryRect


def check_image(img: np.ndarray) -> None:
    """Raise InvalidImageError unless img is a non-empty (H, W, 3|4) uint8 array."""
    if not isinstance(img, np.ndarray):
        raise InvalidImageError(f"expected numpy array, got {type(img).__name__}")
    if img.dtype != np.uint8:
        raise InvalidImageError(f"expected uint8 pixels, got {img.dtype}")
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise InvalidImageError(f"expected shape (H, W, 3) or (H, W, 4), got {img.shape}")
    if img.shape[0] == 0 or img.shape[1] == 0:
        raise InvalidImageError("image has zero area")


def _scan(counts: np.ndarray, positions: range, threshold: float) -> int | None:
    """Return the first position whose count is strictly above threshold."""
    for pos in positions:
        if counts[pos] > threshold:
            return pos
    return None


def locate_boundaries(
    mask: np.ndarray,
    min_ratio: float = 0.7,
    search_ratio_x: float = 0.1,
    search_ratio_y: float = 0.05,
) -> BoundaryRect:
    """Find the inner edge of a colored frame in a mask.

    Each edge is searched from the margin limit outward to the image border
    (left/top) or from the margin limit to the far border (right/bottom), so
    the first line that is mostly frame is the frame's inner edge regardless of
    its thickness. Lines deeper inside the image than the margin are never
    considered.

    Args:
        mask: Binary mask (H, W), nonzero where the frame color matched
        min_ratio: Fraction of a column (row) that must be set to count as frame
        search_ratio_x: Search margin for left/right edges as a fraction of width
        search_ratio_y: Search margin for top/bottom edges as a fraction of height

    Returns:
        BoundaryRect with exclusive right/bottom. Edges with no frame fall back
        to the image border; top_frame_detected is True only if the top edge hit.
    """
    height, width = mask.shape[:2]
    max_search_x = int(width * search_ratio_x)
    max_search_y = int(height * search_ratio_y)

    set_pixels = mask > 0
    col_counts = np.count_nonzero(set_pixels, axis=0)
    row_counts = np.count_nonzero(set_pixels, axis=1)
    col_threshold = height * min_ratio
    row_threshold = width * min_ratio

    left = 0
    hit = _scan(col_counts, range(min(max_search_x, width - 1), -1, -1), col_threshold)
    if hit is not None:
        left = hit + 1

    right = width
    hit = _scan(col_counts, range(max(width - max_search_x - 1, 0), width), col_threshold)
    if hit is not None:
        right = hit

    top = 0
    top_frame_detected = False
    hit = _scan(row_counts, range(min(max_search_y, height - 1), -1, -1), row_threshold)
    if hit is not None:
        top = hit + 1
        top_frame_detected = True

    bottom = height
    hit = _scan(row_counts, range(max(height - max_search_y - 1, 0), height), row_threshold)
    if hit is not None:
        bottom = hit

    return BoundaryRect(left, right, top, bottom, top_frame_detected)


def crop_region(img: np.ndarray, rect: BoundaryRect) -> np.ndarray:
    """Copy the pixels inside rect into a new image.

    Args:
        img: Input image as numpy array
        rect: Rectangle with exclusive right/bottom

    Returns:
        Cropped image of shape (rect.height, rect.width, C). The input itself is
        returned when rect covers the whole image.

    Raises:
        InvalidBoundariesError: If rect has no area or lies outside the image
    """
    height, width = img.shape[:2]
    if not rect.is_valid:
        raise InvalidBoundariesError(f"{rect.as_list()}")
    if rect.left < 0 or rect.top < 0 or rect.right > width or rect.bottom > height:
        raise InvalidBoundariesError(f"{rect.as_list()} outside {width}x{height} image")

    if rect.left == 0 and rect.top == 0 and rect.right == width and rect.bottom == height:
        return img
    return img[rect.top : rect.bottom, rect.left : rect.right].copy()
