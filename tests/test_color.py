"""Tests for HSV conversion, band membership and mask building."""

import numpy as np
import pytest

from color_frame_crop.color import in_band, in_band_image, rgb_to_hsv, rgb_to_hsv_image
from color_frame_crop.masking import build_mask, mask_coverage
from color_frame_crop.models import ColorBand


class TestRgbToHsv:
    """Tests for the scalar converter."""

    @pytest.mark.parametrize(
        "rgb, expected",
        [
            ((0, 0, 0), (0, 0, 0)),
            ((128, 128, 128), (0, 0, 128)),
            ((255, 255, 255), (0, 0, 255)),
        ],
    )
    def test_achromatic_has_zero_hue(self, rgb, expected):
        """Grey pixels have hue 0 and saturation 0."""
        assert rgb_to_hsv(*rgb) == expected

    @pytest.mark.parametrize(
        "rgb, expected",
        [
            ((255, 0, 0), (0, 255, 255)),
            ((0, 255, 0), (60, 255, 255)),
            ((0, 0, 255), (120, 255, 255)),
            ((255, 255, 0), (30, 255, 255)),
            ((0, 255, 255), (90, 255, 255)),
            ((0, 170, 255), (100, 255, 255)),
        ],
    )
    def test_primary_hues_on_half_scale(self, rgb, expected):
        assert rgb_to_hsv(*rgb) == expected

    def test_negative_hue_wraps(self):
        """Red-sector hues just below zero wrap into the top of the range."""
        assert rgb_to_hsv(255, 0, 10) == (179, 255, 255)
        assert rgb_to_hsv(255, 0, 128) == (165, 255, 255)

    def test_hue_stays_in_range(self, random_image):
        for r, g, b, _ in random_image.reshape(-1, 4)[:500]:
            h, s, v = rgb_to_hsv(int(r), int(g), int(b))
            assert 0 <= h < 180
            assert 0 <= s <= 255
            assert 0 <= v <= 255


class TestRgbToHsvImage:
    """Tests for the vectorized converter."""

    def test_matches_scalar_on_color_sweep(self):
        """Vectorized results are identical to the scalar converter."""
        levels = np.arange(0, 256, 17, dtype=np.uint8)
        r, g, b = np.meshgrid(levels, levels, levels, indexing="ij")
        img = np.stack([r, g, b], axis=-1).reshape(16, 256, 3)

        hsv = rgb_to_hsv_image(img)

        for y in range(img.shape[0]):
            for x in range(img.shape[1]):
                pixel = tuple(int(c) for c in img[y, x])
                assert tuple(hsv[y, x]) == rgb_to_hsv(*pixel), pixel

    def test_matches_scalar_on_random_pixels(self, random_image):
        hsv = rgb_to_hsv_image(random_image)

        for y in range(0, random_image.shape[0], 3):
            for x in range(random_image.shape[1]):
                r, g, b, _ = (int(c) for c in random_image[y, x])
                assert tuple(hsv[y, x]) == rgb_to_hsv(r, g, b)

    def test_ignores_alpha(self, random_image):
        opaque = random_image.copy()
        opaque[:, :, 3] = 255

        np.testing.assert_array_equal(rgb_to_hsv_image(random_image), rgb_to_hsv_image(opaque))


class TestInBand:
    """Tests for band thresholds."""

    @pytest.mark.parametrize(
        "hsv, expected",
        [
            ((0, 50, 120), True),
            ((10, 50, 120), True),
            ((11, 255, 255), False),
            ((159, 255, 255), False),
            ((160, 50, 120), True),
            ((179, 255, 255), True),
            ((5, 49, 255), False),
            ((5, 255, 119), False),
        ],
    )
    def test_red(self, hsv, expected):
        assert in_band(*hsv, ColorBand.RED) is expected

    @pytest.mark.parametrize(
        "hsv, expected",
        [
            ((85, 50, 100), True),
            ((110, 50, 100), True),
            ((84, 255, 255), False),
            ((111, 255, 255), False),
            ((100, 49, 255), False),
            ((100, 255, 99), False),
        ],
    )
    def test_blue(self, hsv, expected):
        assert in_band(*hsv, ColorBand.BLUE) is expected

    def test_pure_blue_is_outside_blue_band(self):
        assert in_band(*rgb_to_hsv(0, 0, 255), ColorBand.BLUE) is False

    def test_image_version_matches_scalar(self, random_image):
        hsv = rgb_to_hsv_image(random_image)
        for band in ColorBand:
            result = in_band_image(hsv, band)
            expected = np.array(
                [[in_band(*(int(c) for c in hsv[y, x]), band) for x in range(hsv.shape[1])]
                 for y in range(hsv.shape[0])]
            )
            np.testing.assert_array_equal(result, expected)


class TestBuildMask:
    """Tests for mask building."""

    def test_mask_values_are_binary(self, random_image):
        mask = build_mask(random_image, ColorBand.RED)

        assert mask.dtype == np.uint8
        assert mask.shape == random_image.shape[:2]
        assert set(np.unique(mask)) <= {0, 255}

    @pytest.mark.parametrize("band", list(ColorBand))
    def test_mask_count_matches_in_band(self, random_image, band):
        mask = build_mask(random_image, band)

        expected = sum(
            in_band(*rgb_to_hsv(int(r), int(g), int(b)), band)
            for r, g, b, _ in random_image.reshape(-1, 4)
        )
        assert np.count_nonzero(mask == 255) == expected

    def test_frame_pixels_marked(self, framed_image):
        img = framed_image(40, 80, 3)

        mask = build_mask(img, ColorBand.BLUE)

        assert mask[0, 0] == 255
        assert mask[40, 20] == 0
        assert np.count_nonzero(build_mask(img, ColorBand.RED)) == 0

    def test_accepts_rgb(self, framed_image):
        rgba = framed_image(40, 80, 3)

        np.testing.assert_array_equal(
            build_mask(rgba[:, :, :3], ColorBand.BLUE), build_mask(rgba, ColorBand.BLUE)
        )

    def test_input_not_modified(self, random_image):
        before = random_image.copy()
        build_mask(random_image, ColorBand.BLUE)
        np.testing.assert_array_equal(random_image, before)

    def test_mask_coverage(self):
        mask = np.zeros((10, 10), dtype=np.uint8)
        mask[:5, :] = 255

        assert mask_coverage(mask) == pytest.approx(0.5)
        assert mask_coverage(np.zeros((0, 0), dtype=np.uint8)) == 0.0
