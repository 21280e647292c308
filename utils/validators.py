# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.
#
# Validation utilities for settings values

import logging

logger = logging.getLogger('AwakeReader')


def validate_color(color, color_name="color"):
    """Validate an [R, G, B] color with channels in 0..255"""
    if not isinstance(color, (list, tuple)) or len(color) != 3:
        logger.warning(f"Invalid {color_name}: expected [R, G, B]")
        return False

    try:
        channels = [int(c) for c in color]
    except (ValueError, TypeError):
        logger.warning(f"Invalid {color_name}: channels not numeric")
        return False

    if any(isinstance(c, bool) for c in color) or not all(0 <= c <= 255 for c in channels):
        logger.warning(f"Invalid {color_name}: {color} out of range")
        return False
    return True


def validate_percent(value):
    """Validate an upscale percentage (non-negative integer)"""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return value >= 0


def validate_area_coords(coords, screen_width=None, screen_height=None):
    """Validate area coordinates dict with x, y, width, height

    Args:
        coords: Dict with 'x', 'y', 'width' and 'height' keys
        screen_width: Right limit for x + width (no limit if None)
        screen_height: Bottom limit for y + height (no limit if None)
    """
    if coords is None:
        return False
    if not isinstance(coords, dict):
        return False

    required_keys = ['x', 'y', 'width', 'height']
    if not all(key in coords for key in required_keys):
        return False

    try:
        x, y = int(coords['x']), int(coords['y'])
        w, h = int(coords['width']), int(coords['height'])
        if w <= 0 or h <= 0:
            return False
        if x < 0 or y < 0:
            return False
        if screen_width is not None and (x + w) > screen_width:
            return False
        if screen_height is not None and (y + h) > screen_height:
            return False
        return True
    except (ValueError, TypeError):
        return False
