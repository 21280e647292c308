# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Core Exceptions

Custom exceptions raised by the awakening recognition pipeline.
"""


class AwakeningException(Exception):
    """Base exception for awakening recognition errors"""
    pass


class AllocationError(AwakeningException):
    """Raised when an image buffer could not be created or resized"""
    pass


class FormatMismatch(AwakeningException):
    """Raised when an image's pixel layout is not the one direct access expects"""
    pass


class OutOfBounds(AwakeningException):
    """Raised when a crop or capture rectangle is invalid for its source"""
    pass


class InvalidSizeError(AwakeningException, ValueError):
    """Raised when a target size has a zero or negative dimension"""
    pass


class PixelBufferLockedError(AwakeningException):
    """
    Raised when pixel memory is accessed without holding the image lock.

    Either a second session tried to open on an image that is already
    locked, or a session's view was used after the session ended.
    """
    pass


class CaptureError(AwakeningException):
    """Raised when the display could not be captured"""
    pass


class RecognitionFailure(AwakeningException):
    """Raised when the OCR engine fails to process an image"""
    pass


class InitializationError(AwakeningException):
    """
    Raised when the OCR engine cannot be brought up.

    This is fatal for the owner of the resolver (missing Tesseract
    executable, missing language data). The owner decides whether the
    process should exit.
    """
    pass
