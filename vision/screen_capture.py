# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Screen Capture - FlyFF Awake Reader
===================================
Screenshot capture of a display region using mss.

A single mss instance is created lazily and reused across captures. Each
capture is one synchronous snapshot: no caching and no retries. The
result is a 24-bit BGR Image, ready for the preparation pipeline.
"""

import logging
import threading

import mss
import mss.exception
import numpy as np

from core.exceptions import CaptureError, OutOfBounds
from .image import Image, PixelFormat, Rectangle

logger = logging.getLogger("AwakeReader")


class ScreenCapture:
    """
    Screen region capture backed by mss.

    All coordinates are absolute screen coordinates. Regions outside the
    display are not validated; what ends up in the image is whatever the
    platform grabber returns for them.
    """

    def __init__(self):
        # Thread-safe mss instance creation
        self._mss_instance = None
        self._mss_lock = threading.Lock()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cleanup()
        return False

    def _get_mss_instance(self):
        """Get or create mss instance (thread-safe)."""
        with self._mss_lock:
            if self._mss_instance is None:
                self._mss_instance = mss.mss()
            return self._mss_instance

    def _reset_mss_instance(self):
        """Close and drop the mss instance (thread-safe)."""
        with self._mss_lock:
            if self._mss_instance is not None:
                try:
                    self._mss_instance.close()
                except Exception as e:
                    logger.debug(f"[ScreenCapture] Error closing mss: {e}")
                self._mss_instance = None

    def capture_region(self, rect):
        """
        Capture a rectangle of the screen.

        Args:
            rect (Rectangle): (left, top, width, height) in screen coordinates

        Returns:
            Image: New BGR24 image of exactly rect.width x rect.height

        Raises:
            OutOfBounds: If width or height is not positive
            CaptureError: If mss fails to grab the region
        """
        rect = Rectangle(*rect)
        if rect.width <= 0 or rect.height <= 0:
            raise OutOfBounds(f"Capture rectangle must have a positive size, got {tuple(rect)}")

        monitor = {"left": rect.left, "top": rect.top, "width": rect.width, "height": rect.height}

        try:
            screenshot = self._get_mss_instance().grab(monitor)
        except mss.exception.ScreenShotError as e:
            logger.warning(f"[ScreenCapture] capture_region failed at {tuple(rect)}: {e}")
            self._reset_mss_instance()
            raise CaptureError(f"Could not capture {tuple(rect)}: {e}") from e

        # mss returns BGRA; the alpha channel carries nothing for a screen grab
        bgra = np.array(screenshot, dtype=np.uint8)
        image = Image.from_array(bgra[:, :, :3], PixelFormat.BGR24)
        logger.debug(f"[ScreenCapture] Captured {image.width}x{image.height} at ({rect.left},{rect.top})")
        return image

    def get_screen_size(self):
        """
        Size of the primary monitor.

        Returns:
            tuple: (width, height) in pixels
        """
        try:
            monitor = self._get_mss_instance().monitors[1]
        except (mss.exception.ScreenShotError, IndexError) as e:
            raise CaptureError(f"Could not query monitor size: {e}") from e
        return monitor["width"], monitor["height"]

    def cleanup(self):
        """Close the mss instance if it exists."""
        self._reset_mss_instance()
