# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.
#
# Centralized settings manager
# All load_*() and save_*() methods for the awakening reader live here

import os
import json
import logging
import threading
from .defaults import (
    SCREEN_WIDTH,
    SCREEN_HEIGHT,
    DEFAULT_AWAKE_TEXT_PIXEL_COLOR,
    DEFAULT_UPSCALE_PERCENT,
    DEFAULT_OCR_SETTINGS,
    DEFAULT_DEBUG_SETTINGS,
    get_default_coords,
)
from utils.validators import validate_area_coords, validate_color, validate_percent

logger = logging.getLogger("AwakeReader")


class SettingsManager:
    """Centralized settings management for FlyFF Awake Reader

    Settings live in a single JSON file, cached in memory. Every loader
    returns a default when its key is missing or holds an invalid value.
    """

    def __init__(self, settings_file: str):
        """Initialize settings manager

        Args:
            settings_file: Absolute path to settings JSON file
        """
        self.settings_file = settings_file
        self._data = {}  # In-memory cache
        self._lock = threading.Lock()  # Thread-safe access
        self._ensure_settings_file_exists()
        self._load_all()

    def _ensure_settings_file_exists(self):
        """Create default settings file if it doesn't exist"""
        if not os.path.exists(self.settings_file):
            logger.info("Creating default settings file...")
            defaults = get_default_coords()
            default_settings = {
                "awake_text_pixel_color": list(DEFAULT_AWAKE_TEXT_PIXEL_COLOR),
                "awake_area_coords": defaults["awake_area_coords"],
                "awake_crop_coords": defaults["awake_crop_coords"],
                "upscale_percent": DEFAULT_UPSCALE_PERCENT,
                "ocr_settings": dict(DEFAULT_OCR_SETTINGS),
                "debug_settings": dict(DEFAULT_DEBUG_SETTINGS),
            }
            try:
                with open(self.settings_file, "w", encoding="utf-8") as f:
                    json.dump(default_settings, f, indent=4, ensure_ascii=False)
                logger.info(f"Default settings created at: {self.settings_file}")
            except Exception as e:
                logger.error(f"Failed to create default settings: {e}")

    def _load_all(self):
        """Load all settings from file (called at init, no lock needed)"""
        try:
            if os.path.exists(self.settings_file):
                with open(self.settings_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    self._data = data
                else:
                    logger.error(f"Settings file must hold a JSON object, got {type(data).__name__}")
                    self._data = {}
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse settings file: {e}")
            self._data = {}
        except Exception as e:
            logger.error(f"Error loading settings: {e}")
            self._data = {}

    def _save_all(self):
        """Save all settings to file (assumes caller holds lock)"""
        try:
            with open(self.settings_file, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=4, ensure_ascii=False)
        except Exception as e:
            logger.error(f"Error saving settings: {e}")

    def reload(self):
        """Re-read the settings file, dropping the in-memory cache"""
        with self._lock:
            self._load_all()

    # ========================================================================
    # LOADERS
    # ========================================================================

    def load_awake_text_pixel_color(self):
        """Load the awakening text color as an (R, G, B) tuple"""
        with self._lock:
            color = self._data.get("awake_text_pixel_color", DEFAULT_AWAKE_TEXT_PIXEL_COLOR)
        if not validate_color(color, "awake_text_pixel_color"):
            color = DEFAULT_AWAKE_TEXT_PIXEL_COLOR
        return tuple(int(c) for c in color)

    def load_awake_area_coords(self):
        """Load the screen area holding the awakening text"""
        default_coords = get_default_coords()["awake_area_coords"]
        with self._lock:
            coords = self._data.get("awake_area_coords", default_coords)
        if not validate_area_coords(coords, SCREEN_WIDTH, SCREEN_HEIGHT):
            logger.warning(f"Invalid awake_area_coords {coords}, using default")
            return default_coords
        return coords

    def load_awake_crop_coords(self):
        """Load the crop applied to the prepared image (None = no crop)"""
        with self._lock:
            coords = self._data.get("awake_crop_coords")
        if coords is None:
            return None
        if not validate_area_coords(coords):
            logger.warning(f"Invalid awake_crop_coords {coords}, cropping disabled")
            return None
        return coords

    def load_upscale_percent(self):
        """Load the upscale percentage applied before segmentation"""
        with self._lock:
            percent = self._data.get("upscale_percent", DEFAULT_UPSCALE_PERCENT)
        if not validate_percent(percent):
            logger.warning(f"Invalid upscale_percent {percent}, using default")
            return DEFAULT_UPSCALE_PERCENT
        return percent

    def load_ocr_settings(self):
        """Load Tesseract settings, missing keys filled from defaults"""
        with self._lock:
            stored = self._data.get("ocr_settings", {})
        settings = dict(DEFAULT_OCR_SETTINGS)
        if isinstance(stored, dict):
            settings.update(stored)
        return settings

    def load_debug_settings(self):
        """Load debug screenshot settings"""
        with self._lock:
            stored = self._data.get("debug_settings", {})
        settings = dict(DEFAULT_DEBUG_SETTINGS)
        if isinstance(stored, dict):
            settings.update(stored)
        return settings

    # ========================================================================
    # SAVERS
    # ========================================================================

    def save_awake_text_pixel_color(self, color):
        """Save the awakening text color ([R, G, B])"""
        if not validate_color(color, "awake_text_pixel_color"):
            raise ValueError(f"Invalid awake text color: {color}")
        with self._lock:
            self._data["awake_text_pixel_color"] = [int(c) for c in color]
            self._save_all()

    def save_awake_area_coords(self, area_coords):
        """Save the awakening capture area"""
        with self._lock:
            self._data["awake_area_coords"] = area_coords
            self._save_all()

    def save_awake_crop_coords(self, crop_coords):
        """Save the crop rectangle (None disables cropping)"""
        with self._lock:
            self._data["awake_crop_coords"] = crop_coords
            self._save_all()

    def save_upscale_percent(self, percent):
        """Save the upscale percentage"""
        with self._lock:
            self._data["upscale_percent"] = percent
            self._save_all()

    def save_ocr_settings(self, settings_dict):
        """Save Tesseract settings

        Args:
            settings_dict: Dictionary with keys:
                - tesseract_path
                - tessdata_dir
                - language
                - psm
                - timeout_ms
        """
        with self._lock:
            self._data["ocr_settings"] = settings_dict
            self._save_all()

    def save_debug_settings(self, debug_screenshots, debug_dir=None):
        """Save debug screenshot settings"""
        with self._lock:
            self._data["debug_settings"] = {
                "debug_screenshots": debug_screenshots,
                "debug_dir": debug_dir,
            }
            self._save_all()
        logger.info("Debug settings saved successfully")
