# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
Core Module - Awakening Recognition Orchestration

This module ties the vision pipeline together. It owns no vision logic
itself: capture, image preparation and OCR live in the vision package and
are injected into the resolver.

Components:
    - resolver: AwakeningResolver (pipeline orchestrator), create_resolver
    - exceptions: Error kinds raised by the pipeline

The package namespace only exposes the exceptions, since the vision
modules import them from here. Import the resolver from its module:

    from core import InitializationError
    from core.resolver import create_resolver

    try:
        resolver = create_resolver()
    except InitializationError:
        ...  # Tesseract missing: the owner decides whether to exit

    with resolver:
        text = resolver.read_awakening()
"""

from core.exceptions import (
    AwakeningException,
    AllocationError,
    FormatMismatch,
    OutOfBounds,
    InvalidSizeError,
    PixelBufferLockedError,
    CaptureError,
    RecognitionFailure,
    InitializationError,
)

__all__ = [
    'AwakeningException',
    'AllocationError',
    'FormatMismatch',
    'OutOfBounds',
    'InvalidSizeError',
    'PixelBufferLockedError',
    'CaptureError',
    'RecognitionFailure',
    'InitializationError',
]
