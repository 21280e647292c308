# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.
#
# Default configuration values and coordinate scaling

import ctypes
import os

# Get screen resolution (Windows-only; safe fallback for CI/non-Windows)
if os.name == "nt":
    SCREEN_WIDTH = ctypes.windll.user32.GetSystemMetrics(0)
    SCREEN_HEIGHT = ctypes.windll.user32.GetSystemMetrics(1)
else:
    SCREEN_WIDTH = 1920
    SCREEN_HEIGHT = 1080
REF_WIDTH = 1920  # Reference resolution width
REF_HEIGHT = 1080  # Reference resolution height

# Default coordinates for 1920x1080 (will be scaled to user's resolution)
DEFAULT_COORDS_1920x1080 = {
    # Awakening line of the item tooltip, next to the upgrade window
    "awake_area_coords": {"x": 760, "y": 470, "width": 400, "height": 64},
    # Crop applied after upscaling; None keeps the whole prepared image
    "awake_crop_coords": None,
}

# Awakening stats are drawn in a single palette color
DEFAULT_AWAKE_TEXT_PIXEL_COLOR = [255, 255, 255]

DEFAULT_UPSCALE_PERCENT = 100

DEFAULT_OCR_SETTINGS = {
    "tesseract_path": None,
    "tessdata_dir": None,
    "language": "eng",
    "psm": 6,  # Single uniform block of text
    "timeout_ms": 5000,
}

DEFAULT_DEBUG_SETTINGS = {
    "debug_screenshots": False,
    "debug_dir": None,  # None = <app dir>/debug
}


def scale_coord(coord_dict):
    """Scale coordinates from 1920x1080 to current screen resolution"""
    if not coord_dict:
        return None

    scaled = {}
    for key, value in coord_dict.items():
        if key in ["x", "width"]:
            scaled[key] = int(value * SCREEN_WIDTH / REF_WIDTH)
        elif key in ["y", "height"]:
            scaled[key] = int(value * SCREEN_HEIGHT / REF_HEIGHT)
        else:
            scaled[key] = value
    return scaled


def get_default_coords():
    """Get default coordinates scaled to current resolution"""
    defaults = {}
    for key, val in DEFAULT_COORDS_1920x1080.items():
        defaults[key] = scale_coord(val)
    return defaults
