# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Image Transform - FlyFF Awake Reader
====================================
Geometric and layout transforms used to prepare a capture for OCR.

All functions here return a NEW Image and leave their input untouched;
releasing the input is up to the caller.

    - resize_image: bicubic resize with mirrored edges, 300 DPI output
    - increase_image_size: percentage upscale (height grows 1.7x faster)
    - convert_pixel_format: BGR24 <-> BGRA32
    - crop_image: copy of a sub-rectangle
"""

import logging

import cv2
import numpy as np

from core.exceptions import AllocationError, InvalidSizeError, OutOfBounds
from .image import Image, PixelFormat, Rectangle

logger = logging.getLogger("AwakeReader")

# Tesseract favours a high nominal resolution
RESIZED_DPI = 300

# Height grows faster than width; this distortion reads better for the game font
HEIGHT_GROWTH_FACTOR = 1.7


def _sample_coords(src_len, dst_len):
    """Source coordinate of every destination pixel center."""
    scale = src_len / dst_len
    return (np.arange(dst_len, dtype=np.float32) + 0.5) * scale - 0.5


def resize_image(image, new_size):
    """
    Resize an image into a new 32-bit image of exactly new_size.

    The whole source is drawn into the destination with bicubic
    interpolation. Pixel centers are aligned (half-pixel offset) and
    samples falling outside the source are mirrored back in
    (BORDER_REFLECT); clamping the edge instead leaves a dark halo
    around the border that OCR picks up as glyph noise.

    Args:
        image (Image): Source image (BGR24 or BGRA32)
        new_size (tuple): (width, height) of the result

    Returns:
        Image: New BGRA32 image at RESIZED_DPI

    Raises:
        InvalidSizeError: If new_size or the source has an empty dimension
        AllocationError: If the result could not be allocated
    """
    new_width, new_height = (int(v) for v in new_size)
    if new_width <= 0 or new_height <= 0:
        raise InvalidSizeError(f"Cannot resize to {new_width}x{new_height}")
    if image.width <= 0 or image.height <= 0:
        raise InvalidSizeError(f"Cannot resize empty {image!r}")

    try:
        source = np.ascontiguousarray(image.pixels)
        if image.pixel_format is PixelFormat.BGR24:
            source = cv2.cvtColor(source, cv2.COLOR_BGR2BGRA)

        map_x, map_y = np.meshgrid(
            _sample_coords(image.width, new_width),
            _sample_coords(image.height, new_height),
        )
        resized = cv2.remap(
            source,
            map_x,
            map_y,
            interpolation=cv2.INTER_CUBIC,
            borderMode=cv2.BORDER_REFLECT,
        )
        result = Image.from_array(resized, PixelFormat.BGRA32, dpi=RESIZED_DPI)
    except (MemoryError, cv2.error) as e:
        raise AllocationError(f"Could not resize {image!r} to {new_width}x{new_height}: {e}") from e

    logger.debug(f"[Transform] Resized {image.width}x{image.height} -> {new_width}x{new_height}")
    return result


def compute_upscaled_size(width, height, percentage):
    """
    Target size for a percentage upscale.

    Negative percentages are treated as 0 (this path never shrinks).
    Height grows by HEIGHT_GROWTH_FACTOR times the percentage. Both
    results are truncated toward zero.

    Args:
        width (int): Current width
        height (int): Current height
        percentage (int): Growth in percent

    Returns:
        tuple: (new_width, new_height)
    """
    if percentage < 0:
        percentage = 0

    new_width = int(width + width * (percentage / 100))
    new_height = int(height + height * ((percentage * HEIGHT_GROWTH_FACTOR) / 100))
    return new_width, new_height


def increase_image_size(image, percentage):
    """
    Enlarge an image so the awakening text is clearer to Tesseract.

    Args:
        image (Image): Source image
        percentage (int): Growth in percent (see compute_upscaled_size)

    Returns:
        Image: New BGRA32 image produced by resize_image
    """
    new_size = compute_upscaled_size(image.width, image.height, percentage)
    return resize_image(image, new_size)


def convert_pixel_format(image, pixel_format):
    """
    Copy an image into another pixel layout.

    Adding an alpha channel sets it to 255; removing it drops it.

    Args:
        image (Image): Source image
        pixel_format (PixelFormat): Layout of the result

    Returns:
        Image: New image in the requested layout
    """
    if image.pixel_format is pixel_format:
        return image.copy()

    if image.width == 0 or image.height == 0:
        return Image.new(image.width, image.height, pixel_format, dpi=image.dpi)

    source = np.ascontiguousarray(image.pixels)
    if pixel_format is PixelFormat.BGRA32:
        converted = cv2.cvtColor(source, cv2.COLOR_BGR2BGRA)
    else:
        converted = cv2.cvtColor(source, cv2.COLOR_BGRA2BGR)

    return Image.from_array(converted, pixel_format, dpi=image.dpi)


def crop_image(image, rect):
    """
    Copy a sub-rectangle of an image.

    Args:
        image (Image): Source image
        rect (Rectangle): Region to keep, fully inside the image

    Returns:
        Image: Independent image with the same pixel layout and DPI

    Raises:
        OutOfBounds: If rect is empty or not contained in the image
    """
    rect = Rectangle(*rect)
    if rect.width <= 0 or rect.height <= 0:
        raise OutOfBounds(f"Empty crop rectangle {tuple(rect)}")
    if not image.bounds.contains(rect):
        raise OutOfBounds(
            f"Crop rectangle {tuple(rect)} exceeds {image.width}x{image.height} image"
        )

    region = image.pixels[rect.top : rect.bottom, rect.left : rect.right]
    return Image.from_array(region, image.pixel_format, dpi=image.dpi)
