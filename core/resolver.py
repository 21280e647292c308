# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
AwakeningResolver - Awakening Text Recognition

Turns a screen region showing an item's awakening into plain text.

Pipeline:
    capture -> upscale -> convert to BGRA32 -> segment by text color
    -> crop -> Tesseract

Every stage except segmentation produces a new Image. Errors from any
stage propagate unchanged to the caller; nothing is retried and no stage
substitutes a default image.

Usage:
    with create_resolver() as resolver:
        text = resolver.read_awakening()

Dependencies (settings, OCR service, screen capture) are injected; the
resolver holds no global state. create_resolver() builds the default
object graph and lets InitializationError reach its caller, which decides
whether the process should exit.
"""

import logging
import time
from typing import Optional

from PIL import Image as PILImage

from config.settings_manager import SettingsManager
from services.logging_service import LoggingService
from utils.path_helpers import get_app_dir, get_debug_dir
from vision.color_segmenter import ColorSegmenter
from vision.image import PixelFormat, Rectangle, ReferenceColor
from vision.image_transform import (
    RESIZED_DPI,
    convert_pixel_format,
    crop_image,
    increase_image_size,
)
from vision.ocr_service import OCRService
from vision.screen_capture import ScreenCapture

SETTINGS_FILE_NAME = "awake_settings.json"


class AwakeningResolver:
    """
    Converts images of an awakening into text.

    The resolver owns the OCR service and screen capture handed to it and
    releases both in close().
    """

    def __init__(
        self,
        settings_manager: SettingsManager,
        ocr_service: OCRService,
        screen_capture: Optional[ScreenCapture] = None,
        segmenter: Optional[ColorSegmenter] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize AwakeningResolver with dependencies.

        Args:
            settings_manager: SettingsManager (text color, areas, debug flags)
            ocr_service: OCRService used for recognition
            screen_capture: ScreenCapture for read_awakening (optional)
            segmenter: ColorSegmenter (default: new instance)
            logger: Optional logger (default: 'AwakeReader')
        """
        self._settings = settings_manager
        self._ocr = ocr_service
        self._capture = screen_capture
        self._segmenter = segmenter or ColorSegmenter()
        self._logger = logger or logging.getLogger("AwakeReader")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    # ========== PUBLIC API ==========

    def get_awakening(self, image) -> str:
        """Convert a prepared image of an awakening into text."""
        return self._ocr.recognize(image)

    def prepare_image(self, image, crop_rect=None, upscale_percent=None, reference_color=None):
        """
        Run the preparation pipeline on a captured image.

        The input image is never modified.

        Args:
            image (Image): Captured image
            crop_rect (Rectangle): Region of the upscaled image to keep (None = all)
            upscale_percent (int): Growth in percent (default: from settings)
            reference_color (tuple): (R, G, B) text color (default: from settings)

        Returns:
            Image: Black-on-white BGRA32 image ready for OCR
        """
        if upscale_percent is None:
            upscale_percent = self._settings.load_upscale_percent()
        if reference_color is None:
            reference_color = self._settings.load_awake_text_pixel_color()
        reference_color = ReferenceColor.from_sequence(reference_color)

        prepared = image
        if upscale_percent > 0:
            prepared = increase_image_size(prepared, upscale_percent)
            self._save_debug_image(prepared, "upscaled")

        # Segmentation works in place: never on the caller's image
        if prepared is image or prepared.pixel_format is not PixelFormat.BGRA32:
            prepared = convert_pixel_format(prepared, PixelFormat.BGRA32)
        # OCR input is always tagged at the resize resolution, upscaled or not
        prepared.dpi = RESIZED_DPI

        self._segmenter.differentiate_awake_text(prepared, reference_color)
        self._save_debug_image(prepared, "segmented")

        if crop_rect is not None:
            prepared = crop_image(prepared, Rectangle(*crop_rect))
            self._save_debug_image(prepared, "cropped")

        return prepared

    def read_awakening(self, capture_rect=None, crop_rect=None) -> str:
        """
        Capture, prepare and recognize the awakening text.

        Args:
            capture_rect (Rectangle): Screen region (default: awake area from settings)
            crop_rect (Rectangle): Crop of the prepared image (default: from settings)

        Returns:
            str: Recognized awakening text
        """
        if self._capture is None:
            raise RuntimeError("AwakeningResolver was created without a ScreenCapture")

        if capture_rect is None:
            capture_rect = Rectangle.from_dict(self._settings.load_awake_area_coords())
        if crop_rect is None:
            crop_coords = self._settings.load_awake_crop_coords()
            crop_rect = Rectangle.from_dict(crop_coords) if crop_coords else None

        start = time.perf_counter()
        image = self._capture.capture_region(capture_rect)
        self._save_debug_image(image, "captured")

        prepared = self.prepare_image(image, crop_rect=crop_rect)
        text = self.get_awakening(prepared)

        elapsed_ms = (time.perf_counter() - start) * 1000
        self._logger.debug(f"[Resolver] Read '{text}' from {tuple(capture_rect)} in {elapsed_ms:.1f}ms")
        return text

    def close(self):
        """Release the OCR service and the screen capture."""
        try:
            self._ocr.close()
        finally:
            if self._capture is not None:
                self._capture.cleanup()

    # ========== INTERNAL ==========

    def _save_debug_image(self, image, stage):
        """Save a stage image when debug screenshots are enabled."""
        debug = self._settings.load_debug_settings()
        if not debug.get("debug_screenshots"):
            return

        try:
            file_name = f"awake_{int(time.time() * 1000)}_{stage}.png"
            debug_path = get_debug_dir(debug.get("debug_dir")) / file_name
            PILImage.fromarray(image.pixels[:, :, 2::-1].copy()).save(debug_path)
            self._logger.debug(f"[Resolver] Debug image saved: {debug_path}")
        except OSError as e:
            self._logger.warning(f"[Resolver] Could not save debug image ({stage}): {e}")


def create_resolver(settings_file=None, log_file=None, log_level=logging.INFO):
    """
    Build an AwakeningResolver with its default dependencies.

    Args:
        settings_file: Settings JSON path (default: awake_settings.json in the app dir)
        log_file: Log file path (default: see LoggingService)
        log_level: Logging level

    Returns:
        AwakeningResolver: Ready resolver; close it on shutdown

    Raises:
        InitializationError: If the OCR engine cannot be started
    """
    logger = LoggingService(log_file, log_level).get_logger()

    if settings_file is None:
        settings_file = str(get_app_dir() / SETTINGS_FILE_NAME)
    settings = SettingsManager(settings_file)

    ocr_settings = settings.load_ocr_settings()
    ocr = OCRService(
        tesseract_path=ocr_settings["tesseract_path"],
        tessdata_dir=ocr_settings["tessdata_dir"],
        language=ocr_settings["language"],
        psm=ocr_settings["psm"],
        timeout_ms=ocr_settings["timeout_ms"],
    )

    logger.info("AwakeningResolver initialized")
    return AwakeningResolver(settings, ocr, ScreenCapture(), logger=logger)
