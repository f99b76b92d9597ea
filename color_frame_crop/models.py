"""Data models for color frame cropping."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Literal, Union

import numpy as np


class ColorBand(Enum):
    """Frame colors that can be detected."""

    RED = "red"
    BLUE = "blue"


class Player(Enum):
    """Logical board regions produced by the cropper.

    P1: Player 1 field, framed in blue
    P2: Player 2 field, framed in red
    COMBINED: Player 1 crop cropped again with the red band (nested frames)
    """

    P1 = "1P"
    P2 = "2P"
    COMBINED = "1P2P"

    @property
    def band(self) -> ColorBand:
        """Return the frame color searched for this region."""
        return ColorBand.BLUE if self is Player.P1 else ColorBand.RED


class FailureReason(Enum):
    """Why a crop was rejected."""

    CROP_TOO_SMALL = "Crop too small"
    INVALID_BOUNDARIES = "Invalid boundaries"
    CROP_TOO_SMALL_AFTER_TOP_TRIM = "Crop too small after top cropping"
    MISSING_SOURCE = "Missing source image"


@dataclass(frozen=True)
class HsvRange:
    """Membership thresholds for a color band.

    Hue uses the half-scale convention (0-180). Red needs two intervals
    because it straddles hue 0.
    """

    hue_ranges: tuple[tuple[int, int], ...]
    min_saturation: int
    min_value: int

    def contains(self, h: int, s: int, v: int) -> bool:
        """Check whether a single HSV triple falls inside the band."""
        if s < self.min_saturation or v < self.min_value:
            return False
        return any(lo <= h <= hi for lo, hi in self.hue_ranges)


BAND_RANGES: dict[ColorBand, HsvRange] = {
    ColorBand.RED: HsvRange(hue_ranges=((0, 10), (160, 180)), min_saturation=50, min_value=120),
    ColorBand.BLUE: HsvRange(hue_ranges=((85, 110),), min_saturation=50, min_value=100),
}


@dataclass(frozen=True)
class BoundaryRect:
    """Crop rectangle found by the boundary search.

    left/top are inclusive, right/bottom exclusive.
    """

    left: int
    right: int
    top: int
    bottom: int
    top_frame_detected: bool = False

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_valid(self) -> bool:
        """Check that the rectangle has positive area."""
        return self.left < self.right and self.top < self.bottom

    def with_top(self, top: int) -> BoundaryRect:
        """Return a copy with a different top edge."""
        return BoundaryRect(self.left, self.right, top, self.bottom, self.top_frame_detected)

    def offset(self, dx: int, dy: int) -> BoundaryRect:
        """Return a copy shifted by (dx, dy)."""
        return BoundaryRect(
            self.left + dx, self.right + dx, self.top + dy, self.bottom + dy, self.top_frame_detected
        )

    def as_list(self) -> list[int]:
        """Return bounds as [left, right, top, bottom]."""
        return [self.left, self.right, self.top, self.bottom]

    def to_fractional(self, width: int, height: int) -> tuple[float, float, float, float]:
        """Return (left, right, top, bottom) as fractions of the image size."""
        return (self.left / width, self.right / width, self.top / height, self.bottom / height)


@dataclass(frozen=True)
class CropInfo:
    """Size metadata for a successful crop."""

    original_size: tuple[int, int]
    """(width, height) of the input image."""

    cropped_size: tuple[int, int]
    """(width, height) of the output image."""

    additional_top_crop: int
    """Pixels trimmed below the detected top frame."""


@dataclass
class CropDebug:
    """Diagnostic images, same size as the input."""

    mask_image: np.ndarray
    debug_image: np.ndarray


@dataclass
class CropSuccess:
    """A region that was cropped."""

    player: Player
    image: np.ndarray
    boundaries: BoundaryRect
    """Final rectangle, top edge already trimmed."""

    detected: BoundaryRect
    """Rectangle as returned by the boundary search."""

    info: CropInfo
    debug: CropDebug | None = None
    source_boundaries: BoundaryRect | None = None
    """Final rectangle in the input screenshot, when cropped from an earlier crop."""

    source_size: tuple[int, int] | None = None
    """(width, height) of that screenshot."""

    success: Literal[True] = field(default=True, init=False)

    def fractional_bounds(self) -> tuple[float, float, float, float]:
        """Return (left, right, top, bottom) as fractions of the input screenshot."""
        rect = self.source_boundaries or self.boundaries
        width, height = self.source_size or self.info.original_size
        return rect.to_fractional(width, height)


@dataclass
class CropFailure:
    """A region whose crop was rejected."""

    player: Player
    reason: FailureReason
    message: str = ""
    success: Literal[False] = field(default=False, init=False)

    @property
    def error(self) -> str:
        return self.reason.value


CropResult = Union[CropSuccess, CropFailure]


@dataclass
class CompoundCropResult:
    """Results for P1, P2 and the combined region."""

    regions: dict[Player, CropResult] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def add(self, result: CropResult) -> None:
        """Record a region result, collecting its error if it failed."""
        self.regions[result.player] = result
        if not result.success:
            self.errors.append(f"{result.player.value}: {result.error}")

    def __getitem__(self, player: Player) -> CropResult:
        return self.regions[player]

    def preferred_image(self, fallback: np.ndarray) -> np.ndarray:
        """Return the combined crop, or fallback if that region failed."""
        combined = self.regions.get(Player.COMBINED)
        if combined is not None and combined.success:
            return combined.image
        return fallback


# =============================================================================
# Crop Configuration
# =============================================================================


@dataclass
class CropOptions:
    """Tunable parameters for frame cropping."""

    min_ratio: float = 0.7
    """Fraction of a row/column that must match for it to count as frame."""

    search_ratio_x: float = 0.1
    search_ratio_y: float = 0.05
    additional_top_crop_ratio: float = 1 / 50
    min_crop_ratio: float = 0.7
    min_trimmed_height_ratio: float = 0.3
    debug: bool = False
    log_callback: Callable[[str], None] | None = field(default=None, compare=False, repr=False)

    def validate(self) -> None:
        """Validate parameter ranges."""
        for name in ("min_ratio", "min_crop_ratio", "min_trimmed_height_ratio"):
            value = getattr(self, name)
            if not (0.0 < value <= 1.0):
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        for name in ("search_ratio_x", "search_ratio_y"):
            value = getattr(self, name)
            if not (0.0 <= value < 0.5):
                raise ValueError(f"{name} must be in [0, 0.5), got {value}")
        if not (0.0 <= self.additional_top_crop_ratio < 1.0):
            raise ValueError(
                f"additional_top_crop_ratio must be in [0, 1), got {self.additional_top_crop_ratio}"
            )

    def log(self, message: str) -> None:
        """Forward a progress message to the log callback, if any."""
        if self.log_callback is not None:
            self.log_callback(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "log_callback"}

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CropOptions:
        """Create CropOptions from dictionary."""
        known = {f.name for f in fields(cls)} - {"log_callback"}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown crop option(s): {', '.join(sorted(unknown))}")

        config = cls(**data)
        config.validate()
        return config

    @classmethod
    def from_json(cls, json_str: str) -> CropOptions:
        """Parse CropOptions from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_file(cls, path: str | Path) -> CropOptions:
        """Load CropOptions from JSON file."""
        with open(path) as f:
            return cls.from_json(f.read())

    @classmethod
    def default_json(cls) -> str:
        """Return default configuration as formatted JSON string."""
        return cls().to_json()
