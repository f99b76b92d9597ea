"""Custom exceptions for color frame cropping."""

from __future__ import annotations

from .models import FailureReason


class FrameCropError(Exception):
    """Base exception for frame cropping errors."""

    reason: FailureReason | None = None

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class ImageReadError(FrameCropError):
    """Failed to read input image."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not read image: {path}",
            "Could not read image file. The file may be corrupted or in an unsupported format.",
        )


class InvalidImageError(FrameCropError):
    """Input array is not a usable RGB/RGBA image."""

    def __init__(self, detail: str):
        super().__init__(
            f"Invalid image buffer: {detail}",
            "The image could not be processed. Expected a non-empty RGB or RGBA image.",
        )


class CropTooSmallError(FrameCropError):
    """Detected rectangle is too small to be a play field."""

    reason = FailureReason.CROP_TOO_SMALL

    def __init__(self, player: str = ""):
        super().__init__(
            f"Crop too small for {player}" if player else "Crop too small",
            "Frame not found. The screenshot may not contain the expected frame color.",
        )


class InvalidBoundariesError(FrameCropError):
    """Detected rectangle has no area."""

    reason = FailureReason.INVALID_BOUNDARIES

    def __init__(self, detail: str = ""):
        super().__init__(
            f"Invalid boundaries: {detail}" if detail else "Invalid boundaries",
            "Detected frame boundaries are invalid.",
        )


class CropTooSmallAfterTopTrimError(FrameCropError):
    """Extra top trim left too little of the field."""

    reason = FailureReason.CROP_TOO_SMALL_AFTER_TOP_TRIM

    def __init__(self, player: str = ""):
        super().__init__(
            f"Crop too small after additional top cropping for {player}"
            if player
            else "Crop too small after additional top cropping",
            "Crop became too small after trimming the top frame. Try a smaller top trim ratio.",
        )


class MissingSourceImageError(FrameCropError):
    """Combined region has no player 1 crop to work from."""

    reason = FailureReason.MISSING_SOURCE

    def __init__(self, upstream: str):
        super().__init__(
            f"Missing source image: {upstream} crop failed",
            f"Cannot crop the combined region because the {upstream} frame was not found.",
        )
