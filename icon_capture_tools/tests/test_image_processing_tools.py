"""Tests for the pixel operations in image_processing_tools."""

import numpy as np
import pytest
from PIL import Image

from icon_capture_tools.batch.exceptions import CropBoundsError
from icon_capture_tools.batch.models import CaptureSurface
from icon_capture_tools.common_functions import DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT
from icon_capture_tools.image_processing_tools import (
    alpha_composite_into,
    center_crop,
    center_crop_origin,
    image_file_to_surface,
    pillow_image_to_surface,
    replace_color_key,
    surface_to_pillow_image,
    upscale_surface,
)


def coordinate_surface(width, height):
    """Surface whose pixel (x, y) is (x % 256, y % 256, (x + y) % 256, 255)."""
    ys, xs = np.mgrid[0:height, 0:width]
    pixels = np.stack(
        [xs % 256, ys % 256, (xs + ys) % 256, np.full_like(xs, 255)], axis=-1
    ).astype(np.uint8)
    return CaptureSurface(pixels)


class TestCenterCropOrigin:
    """Tests for center_crop_origin."""

    def test_512_to_256(self):
        assert center_crop_origin((512, 512), (256, 256)) == (128, 128)

    def test_same_size_is_origin(self):
        assert center_crop_origin((300, 200), (300, 200)) == (0, 0)

    def test_non_square(self):
        assert center_crop_origin((640, 480), (100, 50)) == (270, 215)

    def test_mixed_parity_uses_halved_sizes(self):
        """Origin is w // 2 - tw // 2, not (w - tw) // 2."""
        assert center_crop_origin((6, 6), (3, 3)) == (2, 2)
        assert center_crop_origin((7, 7), (2, 2)) == (2, 2)

    def test_crop_fits_for_all_small_sizes(self):
        """Every crop no larger than the source stays inside it."""
        for w in range(1, 12):
            for tw in range(1, w + 1):
                x, _ = center_crop_origin((w, w), (tw, tw))
                assert 0 <= x
                assert x + tw <= w

    def test_target_larger_than_source_raises(self):
        with pytest.raises(CropBoundsError, match="exceeds"):
            center_crop_origin((100, 100), (101, 50))

    def test_non_positive_target_raises(self):
        with pytest.raises(CropBoundsError, match="positive"):
            center_crop_origin((100, 100), (0, 10))


class TestCenterCrop:
    """Tests for center_crop."""

    def test_output_has_target_size(self):
        cropped = center_crop(coordinate_surface(512, 512), (256, 256))
        assert cropped.size == (256, 256)

    def test_takes_center_block(self):
        source = coordinate_surface(512, 512)
        cropped = center_crop(source, (256, 256))

        assert cropped.pixel(0, 0) == source.pixel(128, 128)
        assert cropped.pixel(255, 255) == source.pixel(383, 383)

    def test_deterministic(self):
        source = coordinate_surface(300, 200)
        first = center_crop(source, (64, 32))
        second = center_crop(source, (64, 32))
        assert first == second

    def test_result_does_not_share_memory(self):
        source = coordinate_surface(64, 64)
        original = source.copy()
        cropped = center_crop(source, (32, 32))

        cropped.pixels[:] = 0

        assert source == original
        assert not np.shares_memory(source.pixels, cropped.pixels)

    def test_crop_larger_than_surface_raises(self):
        with pytest.raises(CropBoundsError):
            center_crop(coordinate_surface(100, 100), (256, 256))

    def test_crop_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            center_crop(coordinate_surface(10, 10), (20, 20))


class TestReplaceColorKey:
    """Tests for replace_color_key."""

    @pytest.fixture
    def preview(self):
        """8x8 preview: key background with a red 4x4 square and a near-key pixel."""
        surface = CaptureSurface.filled(8, 8, DEFAULT_PREVIEW_BACKGROUND)
        surface.pixels[2:6, 2:6] = (255, 0, 0, 255)
        surface.pixels[0, 0] = (82, 82, 83, 255)
        return surface

    def test_replaces_exact_matches(self, preview):
        result = replace_color_key(preview, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)

        assert result.pixel(7, 7) == TRANSPARENT
        assert result.pixel(3, 3) == (255, 0, 0, 255)

    def test_near_matches_are_untouched(self, preview):
        result = replace_color_key(preview, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)
        assert result.pixel(0, 0) == (82, 82, 83, 255)

    def test_alpha_channel_is_part_of_the_key(self):
        surface = CaptureSurface.filled(4, 4, (82, 82, 82, 254))
        result = replace_color_key(surface, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)
        assert result == surface

    def test_no_key_pixels_remain(self, preview):
        result = replace_color_key(preview, DEFAULT_PREVIEW_BACKGROUND, (0, 0, 0, 255))
        key = np.asarray(DEFAULT_PREVIEW_BACKGROUND, dtype=np.uint8)
        assert not np.all(result.pixels == key, axis=-1).any()

    def test_counts_match(self, preview):
        result = replace_color_key(preview, DEFAULT_PREVIEW_BACKGROUND, (0, 0, 255, 255))
        blue = np.all(result.pixels == (0, 0, 255, 255), axis=-1)
        # 64 pixels - 16 red - 1 near-key
        assert int(blue.sum()) == 47

    def test_idempotent(self, preview):
        once = replace_color_key(preview, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)
        twice = replace_color_key(once, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)
        assert once == twice

    def test_source_is_left_untouched(self, preview):
        original = preview.copy()
        replace_color_key(preview, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)
        assert preview == original

    def test_no_matches_returns_equal_copy(self):
        surface = CaptureSurface.filled(4, 4, (1, 2, 3, 255))
        result = replace_color_key(surface, DEFAULT_PREVIEW_BACKGROUND, TRANSPARENT)

        assert result == surface
        assert result is not surface


class TestUpscaleSurface:
    """Tests for upscale_surface."""

    def test_factor_two_repeats_pixels(self):
        source = coordinate_surface(3, 2)
        result = upscale_surface(source, 2)

        assert result.size == (6, 4)
        assert result.pixel(0, 0) == source.pixel(0, 0)
        assert result.pixel(1, 1) == source.pixel(0, 0)
        assert result.pixel(5, 3) == source.pixel(2, 1)

    def test_factor_one_returns_copy(self):
        source = coordinate_surface(4, 4)
        result = upscale_surface(source, 1)

        assert result == source
        assert not np.shares_memory(result.pixels, source.pixels)

    def test_invalid_factor_raises(self):
        with pytest.raises(ValueError, match="factor"):
            upscale_surface(coordinate_surface(4, 4), 0)


class TestAlphaCompositeInto:
    """Tests for alpha_composite_into."""

    def test_opaque_sprite_over_transparent(self):
        destination = np.zeros((4, 4, 4), dtype=np.uint8)
        sprite = np.full((2, 2, 4), (10, 20, 30, 255), dtype=np.uint8)

        alpha_composite_into(destination, sprite, (1, 1))

        assert tuple(destination[1, 1]) == (10, 20, 30, 255)
        assert tuple(destination[0, 0]) == (0, 0, 0, 0)

    def test_half_transparent_sprite_blends(self):
        destination = np.full((2, 2, 4), (0, 0, 255, 255), dtype=np.uint8)
        sprite = np.full((2, 2, 4), (255, 0, 0, 128), dtype=np.uint8)

        alpha_composite_into(destination, sprite, (0, 0))

        r, g, b, a = (int(c) for c in destination[0, 0])
        assert r == 128
        assert g == 0
        assert b == 127
        assert a == 255

    def test_sprite_is_clipped_at_edges(self):
        destination = np.zeros((4, 4, 4), dtype=np.uint8)
        sprite = np.full((4, 4, 4), 255, dtype=np.uint8)

        alpha_composite_into(destination, sprite, (-2, 2))

        assert destination[2:4, 0:2].min() == 255
        assert destination[0:2].max() == 0
        assert destination[:, 2:].max() == 0

    def test_sprite_entirely_outside_is_ignored(self):
        destination = np.zeros((4, 4, 4), dtype=np.uint8)
        sprite = np.full((2, 2, 4), 255, dtype=np.uint8)

        alpha_composite_into(destination, sprite, (10, 10))

        assert destination.max() == 0


class TestPillowConversion:
    """Tests for conversions between Pillow images and surfaces."""

    def test_rgb_image_becomes_opaque_rgba(self):
        image = Image.new("RGB", (3, 2), (1, 2, 3))
        surface = pillow_image_to_surface(image)

        assert surface.size == (3, 2)
        assert surface.pixel(2, 1) == (1, 2, 3, 255)

    def test_surface_to_image_keeps_alpha(self):
        surface = CaptureSurface.filled(5, 4, (9, 8, 7, 6))
        image = surface_to_pillow_image(surface)

        assert image.mode == "RGBA"
        assert image.size == (5, 4)
        assert image.getpixel((0, 0)) == (9, 8, 7, 6)

    def test_image_file_to_surface(self, tmp_path):
        path = tmp_path / "thumb.png"
        Image.new("RGBA", (6, 6), (4, 5, 6, 7)).save(path)

        surface = image_file_to_surface(path)

        assert surface.size == (6, 6)
        assert surface.pixel(3, 3) == (4, 5, 6, 7)

    def test_missing_file_raises_value_error(self, tmp_path):
        with pytest.raises(ValueError, match="Could not read image"):
            image_file_to_surface(tmp_path / "missing.png")
