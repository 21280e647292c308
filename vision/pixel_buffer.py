# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Pixel Buffer - FlyFF Awake Reader
=================================
Direct, copy-free access to the pixels of a 32-bit image.

A PixelBuffer session locks one Image exclusively, checks its layout once
and then hands out views straight into the Image's memory:

    with PixelBuffer(image) as pixels:
        pixels.foreach_pixel(lambda x, y, px: setattr(px, "alpha", 255))
        greens = pixels.view["g"]

Every write through a session is immediately visible in the Image.
The lock is released when the session ends, even if a callback raised.
"""

import numpy as np

from core.exceptions import FormatMismatch, PixelBufferLockedError
from .image import PixelFormat

# One pixel of a BGRA32 buffer. Field order must match the buffer layout.
PIXEL_DTYPE = np.dtype([("b", np.uint8), ("g", np.uint8), ("r", np.uint8), ("alpha", np.uint8)])

REQUIRED_FORMAT = PixelFormat.BGRA32


class Pixel:
    """
    Mutable handle to the four channel bytes of one pixel.

    Reads and writes go straight to the underlying buffer.
    """

    __slots__ = ("_data",)

    def __init__(self, data):
        self._data = data

    @property
    def b(self):
        return int(self._data[0])

    @b.setter
    def b(self, value):
        self._data[0] = value

    @property
    def g(self):
        return int(self._data[1])

    @g.setter
    def g(self, value):
        self._data[1] = value

    @property
    def r(self):
        return int(self._data[2])

    @r.setter
    def r(self, value):
        self._data[2] = value

    @property
    def alpha(self):
        return int(self._data[3])

    @alpha.setter
    def alpha(self, value):
        self._data[3] = value

    @property
    def rgb(self):
        return (self.r, self.g, self.b)

    def __repr__(self):
        return f"Pixel(b={self.b}, g={self.g}, r={self.r}, alpha={self.alpha})"


class PixelBuffer:
    """
    Exclusive read/write session over an Image's pixel memory.

    Raises:
        PixelBufferLockedError: If another session already holds the image
        FormatMismatch: If the image is not BGRA32
    """

    def __init__(self, image):
        self.image = image
        self._pixels = None

    def __enter__(self):
        self.lock()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.unlock()
        return False

    @property
    def is_locked(self):
        return self._pixels is not None

    def lock(self):
        """Acquire the image and validate its layout."""
        if not self.image.lock.acquire(blocking=False):
            raise PixelBufferLockedError(f"{self.image!r} is already locked")

        try:
            if self.image.pixel_format is not REQUIRED_FORMAT:
                raise FormatMismatch(
                    f"Direct pixel access requires {REQUIRED_FORMAT.name}, "
                    f"got {self.image.pixel_format.name}"
                )
            self._pixels = self.image.pixels
        except Exception:
            self.image.lock.release()
            raise

    def unlock(self):
        if self._pixels is None:
            return
        self._pixels = None
        self.image.lock.release()

    def _require_lock(self):
        if self._pixels is None:
            raise PixelBufferLockedError("PixelBuffer used outside of a locked session")
        return self._pixels

    @property
    def view(self):
        """(height, width) structured array of PIXEL_DTYPE sharing the image memory."""
        pixels = self._require_lock()
        return pixels.view(PIXEL_DTYPE)[..., 0]

    def foreach_pixel(self, callback):
        """
        Call ``callback(x, y, pixel)`` for every pixel in row-major order.

        Args:
            callback: Receives the column, the row and a mutable Pixel handle
        """
        pixels = self._require_lock()
        for y in range(self.image.height):
            row = pixels[y]
            for x in range(self.image.width):
                callback(x, y, Pixel(row[x]))


def foreach_pixel(image, callback):
    """Run one locked ``foreach_pixel`` pass over an image."""
    with PixelBuffer(image) as buffer:
        buffer.foreach_pixel(callback)
