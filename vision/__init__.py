# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Vision Module - FlyFF Awake Reader
==================================
Screen capture, image preparation and OCR for awakening text.

Modules:
    - image: Image buffer model, PixelFormat, Rectangle, ReferenceColor
    - pixel_buffer: Locked, copy-free access to 32-bit pixels
    - screen_capture: Screenshot capture with mss
    - image_transform: Resize, upscale, pixel format conversion, crop
    - color_segmenter: Exact-color black/white segmentation
    - ocr_service: Tesseract wrapper

Usage:
    from vision import ScreenCapture, ColorSegmenter, OCRService

    capture = ScreenCapture()
    image = capture.capture_region(Rectangle(760, 470, 400, 64))
    image = increase_image_size(image, 100)

    ColorSegmenter().differentiate_awake_text(image, ReferenceColor(255, 255, 255))

    with OCRService() as ocr:
        text = ocr.recognize(image)
"""

from .image import Image, PixelFormat, Rectangle, ReferenceColor
from .pixel_buffer import PixelBuffer, Pixel, foreach_pixel
from .screen_capture import ScreenCapture
from .image_transform import (
    resize_image,
    compute_upscaled_size,
    increase_image_size,
    convert_pixel_format,
    crop_image,
)
from .color_segmenter import ColorSegmenter
from .ocr_service import OCRService

__all__ = [
    'Image',
    'PixelFormat',
    'Rectangle',
    'ReferenceColor',
    'PixelBuffer',
    'Pixel',
    'foreach_pixel',
    'ScreenCapture',
    'resize_image',
    'compute_upscaled_size',
    'increase_image_size',
    'convert_pixel_format',
    'crop_image',
    'ColorSegmenter',
    'OCRService',
]
