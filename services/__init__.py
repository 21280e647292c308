# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

# Services module for FlyFF Awake Reader

from .logging_service import LoggingService

__all__ = ['LoggingService']
