# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Color Segmenter - FlyFF Awake Reader
====================================
Binarizes an image by exact match against the awakening text color.

The game draws awakening stats in a fixed palette color, so a pixel is
text if and only if its (R, G, B) equals the configured color exactly.
Text pixels become black, everything else white. Alpha is left alone.
"""

import logging

import numpy as np

from .pixel_buffer import PixelBuffer

logger = logging.getLogger("AwakeReader")

TEXT_VALUE = 0
BACKGROUND_VALUE = 255


class ColorSegmenter:
    """
    Exact-color text/background segmentation.

    Operates in place on BGRA32 images through a PixelBuffer session.
    """

    def differentiate_awake_text(self, image, reference_color):
        """
        Turn pixels of the reference color black and all others white.

        Args:
            image (Image): BGRA32 image, modified in place
            reference_color (ReferenceColor): (R, G, B) text color

        Returns:
            Image: The same image object

        Raises:
            FormatMismatch: If the image is not BGRA32
        """
        r, g, b = reference_color

        with PixelBuffer(image) as pixels:
            view = pixels.view
            is_text = (view["r"] == r) & (view["g"] == g) & (view["b"] == b)
            values = np.where(is_text, TEXT_VALUE, BACKGROUND_VALUE).astype(np.uint8)
            view["r"] = values
            view["g"] = values
            view["b"] = values
            text_pixels = int(np.count_nonzero(is_text))

        logger.debug(
            f"[Segmenter] {text_pixels}/{image.width * image.height} pixels "
            f"match text color {tuple(reference_color)}"
        )
        return image

    def count_text_pixels(self, image):
        """
        Count black pixels in a segmented image.

        Args:
            image (Image): BGRA32 image produced by differentiate_awake_text

        Returns:
            int: Number of text (black) pixels
        """
        with PixelBuffer(image) as pixels:
            view = pixels.view
            is_text = (
                (view["r"] == TEXT_VALUE)
                & (view["g"] == TEXT_VALUE)
                & (view["b"] == TEXT_VALUE)
            )
            return int(np.count_nonzero(is_text))
