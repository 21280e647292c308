"""
Test suite for vision/image_transform.py
========================================
Tests for resize, upscale size computation, pixel format conversion and crop.
"""

from unittest.mock import patch

import cv2
import numpy as np
import pytest

from core.exceptions import AllocationError, InvalidSizeError, OutOfBounds
from vision.image import Image, PixelFormat, Rectangle
from vision.image_transform import (
    RESIZED_DPI,
    compute_upscaled_size,
    convert_pixel_format,
    crop_image,
    increase_image_size,
    resize_image,
)


def gradient_image(width, height, pixel_format=PixelFormat.BGR24):
    channels = pixel_format.bytes_per_pixel
    array = np.zeros((height, width, channels), dtype=np.uint8)
    array[:, :, 0] = np.arange(width, dtype=np.uint8)[None, :]
    array[:, :, 1] = np.arange(height, dtype=np.uint8)[:, None]
    array[:, :, 2] = 128
    if channels == 4:
        array[:, :, 3] = 255
    return Image.from_array(array, pixel_format)


class TestResize:
    """Tests for resize_image"""

    def test_exact_output_size(self):
        image = gradient_image(17, 9)
        resized = resize_image(image, (40, 23))

        assert resized.size == (40, 23)
        assert resized.pixel_format is PixelFormat.BGRA32
        assert resized.dpi == RESIZED_DPI

    @pytest.mark.parametrize(
        "source, first, second",
        [
            ((10, 10), (3, 7), (25, 4)),
            ((1, 1), (50, 50), (2, 3)),
            ((31, 5), (1, 1), (8, 8)),
        ],
    )
    def test_chained_resize_ends_at_last_size(self, source, first, second):
        image = gradient_image(*source)

        result = resize_image(resize_image(image, first), second)

        assert result.size == second

    def test_input_not_modified(self):
        image = gradient_image(6, 4)
        before = image.to_array()

        resize_image(image, (12, 8))

        assert np.array_equal(image.to_array(), before)
        assert image.pixel_format is PixelFormat.BGR24

    def test_uniform_image_has_no_dark_border(self):
        """Mirrored edges keep the border the same color as the interior"""
        image = Image.new(8, 6, PixelFormat.BGR24, fill=(200, 200, 200))

        resized = resize_image(image, (30, 21))
        bgr = resized.pixels[:, :, :3].astype(int)

        assert bgr.min() >= 199
        assert bgr.max() <= 201

    def test_alpha_added_for_bgr_source(self):
        image = Image.new(4, 4, PixelFormat.BGR24, fill=(1, 2, 3))

        resized = resize_image(image, (8, 8))

        assert resized.pixels[:, :, 3].min() >= 254

    @pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 10), (10, -1)])
    def test_invalid_size_rejected(self, size):
        with pytest.raises(InvalidSizeError):
            resize_image(gradient_image(4, 4), size)

    def test_empty_source_rejected(self):
        with pytest.raises(InvalidSizeError):
            resize_image(Image.new(0, 0), (4, 4))

    def test_allocation_failure(self):
        with patch("vision.image_transform.cv2.remap", side_effect=MemoryError):
            with pytest.raises(AllocationError):
                resize_image(gradient_image(4, 4), (4000, 3000))

    def test_opencv_failure_reported_as_allocation_error(self):
        with patch("vision.image_transform.cv2.remap", side_effect=cv2.error("remap failed")):
            with pytest.raises(AllocationError):
                resize_image(gradient_image(4, 4), (8, 8))


class TestUpscale:
    """Tests for the asymmetric percentage upscale"""

    def test_fifty_percent(self):
        """Height grows 1.7x faster: 50 + 50 * 0.85 = 92.5, truncated"""
        assert compute_upscaled_size(100, 50, 50) == (150, 92)

    def test_hundred_percent(self):
        assert compute_upscaled_size(10, 10, 100) == (20, 27)

    def test_zero_percent_keeps_size(self):
        assert compute_upscaled_size(100, 50, 0) == (100, 50)

    def test_negative_percent_clamped(self):
        assert compute_upscaled_size(100, 50, -30) == (100, 50)

    def test_increase_image_size_resizes(self):
        image = gradient_image(100, 50)

        upscaled = increase_image_size(image, 50)

        assert upscaled.size == (150, 92)
        assert upscaled.dpi == RESIZED_DPI

    def test_increase_with_negative_percent_keeps_size(self):
        image = gradient_image(20, 10)

        assert increase_image_size(image, -10).size == (20, 10)


class TestConvertPixelFormat:
    """Tests for BGR24 <-> BGRA32 conversion"""

    def test_bgr_to_bgra_sets_opaque_alpha(self):
        image = Image.new(3, 2, PixelFormat.BGR24, fill=(1, 2, 3))

        converted = convert_pixel_format(image, PixelFormat.BGRA32)

        assert converted.pixel_format is PixelFormat.BGRA32
        assert converted.pixel(2, 1) == (1, 2, 3, 255)

    def test_bgra_to_bgr_drops_alpha(self):
        image = Image.new(3, 2, PixelFormat.BGRA32, fill=(1, 2, 3, 40))

        converted = convert_pixel_format(image, PixelFormat.BGR24)

        assert converted.pixel(0, 0) == (1, 2, 3)

    def test_same_format_returns_copy(self):
        image = Image.new(3, 2, PixelFormat.BGRA32, fill=(1, 2, 3, 4))

        converted = convert_pixel_format(image, PixelFormat.BGRA32)
        converted.pixels[0, 0] = (0, 0, 0, 0)

        assert converted is not image
        assert image.pixel(0, 0) == (1, 2, 3, 4)

    def test_dpi_preserved(self):
        image = Image.new(3, 2, PixelFormat.BGR24, dpi=300)

        assert convert_pixel_format(image, PixelFormat.BGRA32).dpi == 300


class TestCrop:
    """Tests for crop_image"""

    def test_rect_larger_than_image_rejected(self):
        image = gradient_image(5, 5)

        with pytest.raises(OutOfBounds):
            crop_image(image, Rectangle(0, 0, 10, 10))

    def test_crop_inside_image(self):
        image = gradient_image(5, 5)

        cropped = crop_image(image, Rectangle(1, 1, 2, 2))

        assert cropped.size == (2, 2)
        assert cropped.pixel(0, 0) == image.pixel(1, 1)
        assert cropped.pixel(1, 1) == image.pixel(2, 2)

    def test_same_pixel_format(self):
        image = gradient_image(5, 5, PixelFormat.BGRA32)

        assert crop_image(image, (0, 0, 5, 5)).pixel_format is PixelFormat.BGRA32

    def test_crop_does_not_alias_source(self):
        image = gradient_image(5, 5)

        cropped = crop_image(image, Rectangle(1, 1, 2, 2))
        cropped.pixels[0, 0] = (255, 255, 255)

        assert image.pixel(1, 1) != (255, 255, 255)

    @pytest.mark.parametrize(
        "rect",
        [(-1, 0, 2, 2), (0, -1, 2, 2), (4, 4, 2, 2), (0, 0, 0, 3), (0, 0, 3, 0)],
    )
    def test_invalid_rects_rejected(self, rect):
        with pytest.raises(OutOfBounds):
            crop_image(gradient_image(5, 5), rect)
