"""Color frame detection and cropping for two-player puzzle board screenshots."""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy import to avoid loading cv2 for CLI subcommands that don't need it."""
    if name in ("crop_both_players", "crop_for_band", "crop_player"):
        from . import cropper
        return getattr(cropper, name)
    if name in ("build_mask", "locate_boundaries", "crop_region", "rgb_to_hsv", "in_band"):
        from . import color, detection, masking
        for module in (color, detection, masking):
            if hasattr(module, name):
                return getattr(module, name)
    if name in (
        "BoundaryRect",
        "ColorBand",
        "CompoundCropResult",
        "CropFailure",
        "CropOptions",
        "CropSuccess",
        "FailureReason",
        "Player",
    ):
        from . import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "crop_for_band",
    "crop_both_players",
    "crop_player",
    "build_mask",
    "locate_boundaries",
    "crop_region",
    "rgb_to_hsv",
    "in_band",
    "BoundaryRect",
    "ColorBand",
    "CompoundCropResult",
    "CropFailure",
    "CropOptions",
    "CropSuccess",
    "FailureReason",
    "Player",
]
