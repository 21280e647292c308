# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

# Utils module for FlyFF Awake Reader

from .path_helpers import get_app_dir, get_debug_dir
from .validators import (
    validate_color,
    validate_percent,
    validate_area_coords
)

__all__ = [
    'get_app_dir',
    'get_debug_dir',
    'validate_color',
    'validate_percent',
    'validate_area_coords'
]
