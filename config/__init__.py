# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

# Config module for FlyFF Awake Reader

from .settings_manager import SettingsManager
from .defaults import get_default_coords, DEFAULT_COORDS_1920x1080

__all__ = ['SettingsManager', 'get_default_coords', 'DEFAULT_COORDS_1920x1080']
