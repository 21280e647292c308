# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Image Model - FlyFF Awake Reader
================================
Pixel buffer owned by every stage of the recognition pipeline.

An Image keeps its pixels in a single numpy uint8 buffer of shape
(height, stride). Rows are padded to a 4-byte boundary the same way a
GDI bitmap is, so a 24-bit image may carry unused bytes at the end of
each row. ``Image.pixels`` hides that padding and exposes the
(height, width, channels) view the rest of the code works with.

Channel order is always blue, green, red (, alpha), matching what mss
returns and what OpenCV expects.
"""

import threading
from enum import Enum
from typing import NamedTuple, Optional

import numpy as np

from core.exceptions import AllocationError, FormatMismatch, InvalidSizeError

DEFAULT_DPI = 96


class PixelFormat(Enum):
    """Supported pixel layouts (value = bytes per pixel)"""

    BGR24 = 3
    BGRA32 = 4

    @property
    def bytes_per_pixel(self):
        return self.value

    @classmethod
    def from_channels(cls, channels):
        for fmt in cls:
            if fmt.value == channels:
                return fmt
        raise FormatMismatch(f"Unsupported channel count: {channels}")


class Rectangle(NamedTuple):
    """Pixel rectangle as (left, top, width, height)"""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self):
        return self.left + self.width

    @property
    def bottom(self):
        return self.top + self.height

    @property
    def size(self):
        return (self.width, self.height)

    def contains(self, other: "Rectangle") -> bool:
        """Check if another rectangle lies fully inside this one."""
        return (
            other.left >= self.left
            and other.top >= self.top
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    @classmethod
    def from_dict(cls, coords):
        """Build from a settings dict with 'x', 'y', 'width', 'height' keys."""
        return cls(
            int(coords["x"]),
            int(coords["y"]),
            int(coords["width"]),
            int(coords["height"]),
        )

    def to_dict(self):
        return {"x": self.left, "y": self.top, "width": self.width, "height": self.height}


class ReferenceColor(NamedTuple):
    """(R, G, B) color of the awakening text glyphs"""

    r: int
    g: int
    b: int

    @classmethod
    def from_sequence(cls, values):
        r, g, b = (int(v) for v in values[:3])
        return cls(r, g, b)


def aligned_stride(width, pixel_format):
    """Row length in bytes, padded to a multiple of 4."""
    return (width * pixel_format.bytes_per_pixel + 3) & ~3


class Image:
    """
    A 2-D grid of pixels with an explicit layout.

    Attributes:
        width (int): Width in pixels
        height (int): Height in pixels
        pixel_format (PixelFormat): Channel layout of each pixel
        stride (int): Bytes per row, including padding
        dpi (int): Resolution metadata handed to the OCR engine
    """

    def __init__(
        self,
        width: int,
        height: int,
        pixel_format: PixelFormat = PixelFormat.BGRA32,
        dpi: int = DEFAULT_DPI,
        buffer: Optional[np.ndarray] = None,
    ):
        if width < 0 or height < 0:
            raise InvalidSizeError(f"Invalid image size {width}x{height}")

        self.width = width
        self.height = height
        self.pixel_format = pixel_format
        self.stride = aligned_stride(width, pixel_format)
        self.dpi = dpi

        if buffer is None:
            try:
                buffer = np.zeros((height, self.stride), dtype=np.uint8)
            except (MemoryError, ValueError) as e:
                raise AllocationError(
                    f"Could not allocate {width}x{height} {pixel_format.name} image: {e}"
                ) from e
        elif buffer.dtype != np.uint8 or buffer.shape != (height, self.stride):
            raise FormatMismatch(
                f"Buffer {buffer.shape}/{buffer.dtype} does not match "
                f"{width}x{height} {pixel_format.name} (stride {self.stride})"
            )

        self._buffer = buffer
        # Exclusive lock taken by PixelBuffer sessions
        self._lock = threading.Lock()

    @classmethod
    def new(cls, width, height, pixel_format=PixelFormat.BGRA32, fill=None, dpi=DEFAULT_DPI):
        """
        Allocate a new image.

        Args:
            width (int): Width in pixels
            height (int): Height in pixels
            pixel_format (PixelFormat): Layout of the new image
            fill (tuple): Optional channel values (buffer order) for every pixel
            dpi (int): Resolution metadata

        Returns:
            Image: The new image, zero-filled unless fill is given
        """
        image = cls(width, height, pixel_format, dpi=dpi)
        if fill is not None:
            image.pixels[:, :] = fill
        return image

    @classmethod
    def from_array(cls, array, pixel_format=None, dpi=DEFAULT_DPI):
        """
        Copy a (height, width, channels) uint8 array into a new image.

        Args:
            array (numpy.ndarray): BGR or BGRA pixel data
            pixel_format (PixelFormat): Layout, inferred from the channel count if None
            dpi (int): Resolution metadata

        Returns:
            Image: New image owning a copy of the data
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.dtype != np.uint8:
            raise FormatMismatch(
                f"Expected (height, width, channels) uint8 array, got {array.shape}/{array.dtype}"
            )
        height, width, channels = array.shape
        if pixel_format is None:
            pixel_format = PixelFormat.from_channels(channels)
        elif pixel_format.bytes_per_pixel != channels:
            raise FormatMismatch(
                f"{channels}-channel array cannot be stored as {pixel_format.name}"
            )

        image = cls(width, height, pixel_format, dpi=dpi)
        image.pixels[:, :, :] = array
        return image

    @property
    def buffer(self):
        """Raw (height, stride) byte buffer, padding included."""
        return self._buffer

    @property
    def lock(self):
        return self._lock

    @property
    def size(self):
        return (self.width, self.height)

    @property
    def bounds(self):
        return Rectangle(0, 0, self.width, self.height)

    @property
    def pixels(self):
        """(height, width, channels) view over the buffer, without row padding."""
        bpp = self.pixel_format.bytes_per_pixel
        return self._buffer[:, : self.width * bpp].reshape(self.height, self.width, bpp)

    def pixel(self, x, y):
        """Channel values of one pixel, in buffer order (B, G, R[, A])."""
        return tuple(int(c) for c in self.pixels[y, x])

    def to_array(self):
        """Contiguous copy of the pixels as a (height, width, channels) array."""
        return self.pixels.copy()

    def copy(self):
        return Image(
            self.width,
            self.height,
            self.pixel_format,
            dpi=self.dpi,
            buffer=self._buffer.copy(),
        )

    def __repr__(self):
        return (
            f"Image({self.width}x{self.height}, {self.pixel_format.name}, "
            f"stride={self.stride}, dpi={self.dpi})"
        )
