"""Crop orchestration: single-band crops and the two-player compound crop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .detection import check_image, crop_region, locate_boundaries
from .exceptions import (
    CropTooSmallAfterTopTrimError,
    CropTooSmallError,
    FrameCropError,
    InvalidBoundariesError,
    MissingSourceImageError,
)
from .masking import build_mask, mask_coverage
from .models import (
    BoundaryRect,
    CompoundCropResult,
    CropDebug,
    CropFailure,
    CropInfo,
    CropOptions,
    CropResult,
    CropSuccess,
    Player,
)
from .visualizer import create_debug_image, create_mask_image

if TYPE_CHECKING:
    from .visualizer import DebugVisualizer

logger = logging.getLogger(__name__)


def _validate_bounds(
    rect: BoundaryRect, width: int, height: int, player: Player, options: CropOptions
) -> None:
    """Reject rectangles that cannot be a play field."""
    if rect.width < width * options.min_crop_ratio or rect.height < height * options.min_crop_ratio:
        raise CropTooSmallError(player.value)
    if not rect.is_valid:
        raise InvalidBoundariesError(f"{rect.as_list()} for {player.value}")


def _trim_top(rect: BoundaryRect, options: CropOptions) -> tuple[BoundaryRect, int]:
    """Trim a fixed share of the height below a detected top frame.

    Returns:
        Tuple of (trimmed rectangle, pixels trimmed)
    """
    if not rect.top_frame_detected:
        return rect, 0
    additional = int(rect.height * options.additional_top_crop_ratio)
    return rect.with_top(rect.top + additional), additional


def crop_for_band(
    img: np.ndarray,
    player: Player,
    options: CropOptions | None = None,
    visualizer: DebugVisualizer | None = None,
) -> CropResult:
    """Detect and remove the colored frame for one region.

    Args:
        img: RGB or RGBA uint8 image
        player: Region to crop; its band selects the frame color
        options: Crop parameters (defaults if None)
        visualizer: Optional debug visualizer to save intermediate images

    Returns:
        CropSuccess with the cropped image, or CropFailure with the reason.
        Crop rejections are never raised.

    Raises:
        InvalidImageError: If img is not a non-empty RGB/RGBA uint8 array
        ValueError: If options are out of range
    """
    options = options or CropOptions()
    options.validate()
    check_image(img)
    height, width = img.shape[:2]
    band = player.band

    options.log(f"Processing {player.value} ({band.value}) frame...")
    logger.debug("Processing %s (%s) frame on %dx%d image", player.value, band.value, width, height)

    mask = build_mask(img, band)
    logger.debug("%s mask coverage: %.3f", player.value, mask_coverage(mask))
    detected = locate_boundaries(
        mask,
        min_ratio=options.min_ratio,
        search_ratio_x=options.search_ratio_x,
        search_ratio_y=options.search_ratio_y,
    )
    logger.debug("%s detected bounds %s (top frame: %s)",
                 player.value, detected.as_list(), detected.top_frame_detected)

    try:
        _validate_bounds(detected, width, height, player, options)
        final, additional_top_crop = _trim_top(detected, options)
        if additional_top_crop:
            options.log(f"Top frame removed, cropping additional {additional_top_crop}px from top")
        if final.height < height * options.min_trimmed_height_ratio:
            raise CropTooSmallAfterTopTrimError(player.value)
        cropped = crop_region(img, final)
    except FrameCropError as e:
        options.log(f"{e}, skipping.")
        logger.warning("%s: %s", player.value, e)
        return CropFailure(player, e.reason, e.user_message)

    debug = None
    if options.debug:
        debug = CropDebug(
            mask_image=create_mask_image(mask),
            debug_image=create_debug_image(
                img,
                final,
                options.search_ratio_x,
                options.search_ratio_y,
                additional_top_crop,
            ),
        )
        if visualizer:
            visualizer.save_mask(player, debug.mask_image)
            visualizer.save_debug(player, debug.debug_image)
            visualizer.save_crop(player, cropped)

    info = CropInfo(
        original_size=(width, height),
        cropped_size=(final.width, final.height),
        additional_top_crop=additional_top_crop,
    )
    options.log(f"Successfully processed {player.value}")
    logger.debug("%s cropped to %dx%d", player.value, final.width, final.height)
    return CropSuccess(player, cropped, final, detected, info, debug)


def crop_both_players(
    img: np.ndarray,
    options: CropOptions | None = None,
    visualizer: DebugVisualizer | None = None,
) -> CompoundCropResult:
    """Crop player 1, player 2 and the combined region.

    P1 (blue) and P2 (red) are cropped from the original image. The combined
    region crops the P1 output again with the red band, for layouts where the
    red frame sits inside the blue one. A failed region never stops the others;
    the combined region fails with MISSING_SOURCE when P1 failed.

    Args:
        img: RGB or RGBA uint8 image
        options: Crop parameters (defaults if None)
        visualizer: Optional debug visualizer to save intermediate images

    Returns:
        CompoundCropResult holding all three region results. The combined
        region carries source_boundaries relative to img.
    """
    options = options or CropOptions()
    options.validate()
    check_image(img)
    options.log("Processing both players (1P + 2P)...")

    results = CompoundCropResult()
    p1 = crop_for_band(img, Player.P1, options, visualizer)
    results.add(p1)
    results.add(crop_for_band(img, Player.P2, options, visualizer))

    if p1.success:
        combined = crop_for_band(p1.image, Player.COMBINED, options, visualizer)
        if combined.success:
            combined.source_boundaries = combined.boundaries.offset(
                p1.boundaries.left, p1.boundaries.top
            )
            combined.source_size = p1.info.original_size
        results.add(combined)
    else:
        err = MissingSourceImageError(Player.P1.value)
        options.log(f"{err}, skipping {Player.COMBINED.value}.")
        logger.warning("%s: %s", Player.COMBINED.value, err)
        results.add(CropFailure(Player.COMBINED, err.reason, err.user_message))

    if results.success:
        options.log("Successfully processed both players")
    else:
        options.log(f"Completed with {len(results.errors)} errors")
        logger.warning("Compound crop errors: %s", "; ".join(results.errors))
    return results


def crop_player(
    img: np.ndarray,
    player: Player,
    options: CropOptions | None = None,
    visualizer: DebugVisualizer | None = None,
) -> CropResult:
    """Crop a single region, running the compound pipeline for COMBINED."""
    if player is Player.COMBINED:
        return crop_both_players(img, options, visualizer)[Player.COMBINED]
    return crop_for_band(img, player, options, visualizer)
