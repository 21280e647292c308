# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.
#
# Path utilities for PyInstaller/Nuitka compatibility

import sys
from pathlib import Path


def get_app_dir():
    """Get the directory where the executable/script is located (for settings/logs)

    For non-frozen runs this is the project root (parent of utils/).
    """
    if getattr(sys, 'frozen', False):
        # Running as compiled executable
        return Path(sys.executable).parent
    return Path(__file__).resolve().parent.parent


def get_debug_dir(debug_dir=None):
    """Directory for debug screenshots, created on demand"""
    path = Path(debug_dir) if debug_dir else get_app_dir() / 'debug'
    path.mkdir(parents=True, exist_ok=True)
    return path
