"""Pytest fixtures for color_frame_crop tests."""

import numpy as np
import pytest

# (0, 170, 255) sits at hue 100, inside the blue band; pure (0, 0, 255) is hue 120
BLUE_FRAME = (0, 170, 255, 255)
RED_FRAME = (255, 0, 0, 255)
BLACK = (0, 0, 0, 255)


def _draw_border(img, thickness, color, region=None):
    """Paint a border of the given thickness inside region (top, bottom, left, right)."""
    top, bottom, left, right = region or (0, img.shape[0], 0, img.shape[1])
    img[top : top + thickness, left:right] = color
    img[bottom - thickness : bottom, left:right] = color
    img[top:bottom, left : left + thickness] = color
    img[top:bottom, right - thickness : right] = color


@pytest.fixture
def blank_image():
    """Factory for a uniform RGBA image."""

    def make(width, height, color=BLACK):
        img = np.empty((height, width, 4), dtype=np.uint8)
        img[:, :] = color
        return img

    return make


@pytest.fixture
def framed_image(blank_image):
    """Factory for a black RGBA image with a uniform colored border."""

    def make(width, height, thickness, color=BLUE_FRAME):
        img = blank_image(width, height)
        _draw_border(img, thickness, color)
        return img

    return make


@pytest.fixture
def nested_frames_image(blank_image):
    """300x600 image: 4px blue outer frame with a 4px red frame right inside it."""
    img = blank_image(300, 600)
    _draw_border(img, 4, BLUE_FRAME)
    _draw_border(img, 4, RED_FRAME, region=(4, 596, 4, 296))
    return img


@pytest.fixture
def stripes_image(blank_image):
    """200x400 image with a red outer frame and two full-height blue stripes.

    With search_ratio_x=0.4 the blue stripes at x=70 and x=130 bound a crop
    that is far narrower than 70% of the width.
    """
    img = blank_image(200, 400)
    _draw_border(img, 4, RED_FRAME)
    img[:, 70] = BLUE_FRAME
    img[:, 130] = BLUE_FRAME
    return img


@pytest.fixture
def random_image():
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8)
