"""Debug visualization utilities for frame cropping."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from .models import BoundaryRect, Player

CROP_COLOR = (255, 0, 0, 255)
TOP_TRIM_COLOR = (0, 0, 255, 255)
SEARCH_COLOR = (128, 128, 128, 255)


def to_rgba(img: np.ndarray) -> np.ndarray:
    """Return an RGBA copy of an RGB or RGBA image."""
    if img.shape[2] == 4:
        return img.copy()
    return cv2.cvtColor(img, cv2.COLOR_RGB2RGBA)


def to_bgr(img: np.ndarray) -> np.ndarray:
    """Convert RGB(A) pixels to the BGR(A) order cv2.imwrite expects."""
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
    return cv2.cvtColor(img, cv2.COLOR_RGB2BGR)


def create_mask_image(mask: np.ndarray) -> np.ndarray:
    """Render a binary mask as an opaque grey RGBA image."""
    height, width = mask.shape[:2]
    vis = np.empty((height, width, 4), dtype=np.uint8)
    vis[:, :, :3] = mask[:, :, np.newaxis]
    vis[:, :, 3] = 255
    return vis


def _draw_rect(
    vis: np.ndarray,
    x1: int,
    y1: int,
    x2: int,
    y2: int,
    color: tuple[int, int, int, int],
    thickness: int = 3,
) -> None:
    """Draw a rectangle outline whose thickness grows inward from (x1, y1)-(x2, y2)."""
    for t in range(thickness):
        if x1 + t > x2 - t or y1 + t > y2 - t:
            break
        cv2.rectangle(vis, (x1 + t, y1 + t), (x2 - t, y2 - t), color, 1)


def create_debug_image(
    img: np.ndarray,
    boundaries: BoundaryRect,
    search_ratio_x: float = 0.1,
    search_ratio_y: float = 0.05,
    additional_top_crop: int = 0,
) -> np.ndarray:
    """Annotate a copy of img with the crop rectangle and search margins.

    Args:
        img: Original image (RGB or RGBA)
        boundaries: Final crop rectangle (top already trimmed)
        search_ratio_x: Horizontal search margin used for the boundary search
        search_ratio_y: Vertical search margin used for the boundary search
        additional_top_crop: Pixels trimmed below the detected top frame

    Returns:
        RGBA image: crop rectangle in red, detected top edge in blue when a top
        trim was applied, search margin outline in grey
    """
    vis = to_rgba(img)
    height, width = vis.shape[:2]
    left, right, top, bottom = boundaries.as_list()

    _draw_rect(vis, left, top, right - 1, bottom - 1, CROP_COLOR)

    if boundaries.top_frame_detected and additional_top_crop > 0:
        detected_top = top - additional_top_crop
        if 0 <= detected_top < height and left < right:
            cv2.line(vis, (left, detected_top), (right - 1, detected_top), TOP_TRIM_COLOR, 1)

    search_x = int(width * search_ratio_x)
    search_y = int(height * search_ratio_y)
    _draw_rect(
        vis, search_x, search_y, width - search_x - 1, height - search_y - 1, SEARCH_COLOR, 1
    )

    return vis


class DebugVisualizer:
    """Saves debug images for each cropped region."""

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        if self.output_dir.exists():
            # Backup existing debug dir before cleaning
            backup_dir = self.output_dir.with_suffix(".bak")
            if backup_dir.exists():
                shutil.rmtree(backup_dir)
            self.output_dir.rename(backup_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.step = 0

    def _save(self, name: str, img: np.ndarray) -> Path:
        self.step += 1
        path = self.output_dir / f"{self.step:02d}_{name}.png"
        cv2.imwrite(str(path), to_bgr(img))
        return path

    def save_mask(self, player: Player, mask_image: np.ndarray) -> Path:
        """Save the frame color mask for a region."""
        return self._save(f"{player.value}_mask", mask_image)

    def save_debug(self, player: Player, debug_image: np.ndarray) -> Path:
        """Save the annotated crop overlay for a region."""
        return self._save(f"{player.value}_bounds", debug_image)

    def save_crop(self, player: Player, image: np.ndarray) -> Path:
        """Save the cropped output for a region."""
        return self._save(f"{player.value}_crop", image)
