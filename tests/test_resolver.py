"""
Test suite for core/resolver.py
===============================
End-to-end pipeline tests with fake capture and fake OCR.
"""

import os
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from core.exceptions import InitializationError, OutOfBounds, RecognitionFailure
from core.resolver import AwakeningResolver, create_resolver
from vision.color_segmenter import ColorSegmenter
from vision.image import Image, PixelFormat, Rectangle

TEXT_COLOR = (10, 20, 30)
BACKGROUND_BGR = (50, 60, 70)
TEXT_PIXEL = (7, 3)


def make_settings(upscale_percent=0, crop=None, debug=False, debug_dir=None):
    settings = MagicMock()
    settings.load_upscale_percent.return_value = upscale_percent
    settings.load_awake_text_pixel_color.return_value = TEXT_COLOR
    settings.load_awake_area_coords.return_value = {"x": 5, "y": 6, "width": 20, "height": 10}
    settings.load_awake_crop_coords.return_value = crop
    settings.load_debug_settings.return_value = {
        "debug_screenshots": debug,
        "debug_dir": debug_dir,
    }
    return settings


def synthetic_capture():
    """20x10 capture with one pixel of the text color"""
    image = Image.new(20, 10, PixelFormat.BGR24, fill=BACKGROUND_BGR)
    r, g, b = TEXT_COLOR
    x, y = TEXT_PIXEL
    image.pixels[y, x] = (b, g, r)
    return image


def make_resolver(settings=None, text="STR+12%"):
    ocr = MagicMock()
    ocr.recognize.return_value = text
    capture = MagicMock()
    capture.capture_region.side_effect = lambda rect: synthetic_capture()
    resolver = AwakeningResolver(settings or make_settings(), ocr, capture)
    return resolver, ocr, capture


class TestPrepareImage:
    """Tests for the preparation pipeline"""

    def test_isolates_single_text_pixel(self):
        resolver, _, _ = make_resolver()

        prepared = resolver.prepare_image(synthetic_capture())

        assert prepared.pixel_format is PixelFormat.BGRA32
        assert prepared.size == (20, 10)
        assert prepared.pixel(*TEXT_PIXEL)[:3] == (0, 0, 0)
        assert ColorSegmenter().count_text_pixels(prepared) == 1
        is_white = np.all(prepared.pixels[:, :, :3] == 255, axis=2)
        assert is_white.sum() == 199

    def test_input_image_untouched(self):
        resolver, _, _ = make_resolver()
        image = synthetic_capture()
        before = image.to_array()

        resolver.prepare_image(image)

        assert np.array_equal(image.to_array(), before)

    def test_bgra_input_without_upscale_not_mutated(self):
        resolver, _, _ = make_resolver()
        image = Image.new(4, 4, PixelFormat.BGRA32, fill=(30, 20, 10, 255))

        prepared = resolver.prepare_image(image)

        assert prepared is not image
        assert image.pixel(0, 0) == (30, 20, 10, 255)
        assert prepared.pixel(0, 0) == (0, 0, 0, 255)

    def test_ocr_resolution_without_upscale(self):
        resolver, _, _ = make_resolver(make_settings(upscale_percent=0))
        image = synthetic_capture()

        prepared = resolver.prepare_image(image)

        assert prepared.size == (20, 10)
        assert prepared.dpi == 300
        assert image.dpi == 96

    def test_upscale_applied(self):
        resolver, _, _ = make_resolver(make_settings(upscale_percent=100))

        prepared = resolver.prepare_image(synthetic_capture())

        assert prepared.size == (40, 27)
        assert prepared.dpi == 300

    def test_crop_applied(self):
        resolver, _, _ = make_resolver()

        prepared = resolver.prepare_image(synthetic_capture(), crop_rect=Rectangle(6, 2, 3, 3))

        assert prepared.size == (3, 3)
        assert prepared.pixel(1, 1)[:3] == (0, 0, 0)

    def test_crop_out_of_bounds_propagates(self):
        resolver, _, _ = make_resolver()

        with pytest.raises(OutOfBounds):
            resolver.prepare_image(synthetic_capture(), crop_rect=Rectangle(0, 0, 50, 50))

    def test_explicit_color_overrides_settings(self):
        resolver, _, _ = make_resolver()

        prepared = resolver.prepare_image(synthetic_capture(), reference_color=(70, 60, 50))

        assert ColorSegmenter().count_text_pixels(prepared) == 199


class TestReadAwakening:
    """Tests for capture -> prepare -> OCR"""

    def test_returns_ocr_text(self):
        resolver, ocr, capture = make_resolver()

        assert resolver.read_awakening() == "STR+12%"
        capture.capture_region.assert_called_once_with(Rectangle(5, 6, 20, 10))

    def test_ocr_receives_segmented_image(self):
        resolver, ocr, _ = make_resolver()

        resolver.read_awakening()

        prepared = ocr.recognize.call_args[0][0]
        assert ColorSegmenter().count_text_pixels(prepared) == 1

    def test_crop_from_settings(self):
        settings = make_settings(crop={"x": 0, "y": 0, "width": 8, "height": 4})
        resolver, ocr, _ = make_resolver(settings)

        resolver.read_awakening()

        assert ocr.recognize.call_args[0][0].size == (8, 4)

    def test_explicit_capture_rect(self):
        resolver, _, capture = make_resolver()

        resolver.read_awakening(capture_rect=Rectangle(1, 2, 20, 10))

        capture.capture_region.assert_called_once_with(Rectangle(1, 2, 20, 10))

    def test_recognition_failure_propagates(self):
        resolver, ocr, _ = make_resolver()
        ocr.recognize.side_effect = RecognitionFailure("tesseract crashed")

        with pytest.raises(RecognitionFailure):
            resolver.read_awakening()

    def test_color_fetched_per_call(self):
        settings = make_settings()
        resolver, _, _ = make_resolver(settings)

        resolver.read_awakening()
        resolver.read_awakening()

        assert settings.load_awake_text_pixel_color.call_count == 2

    def test_without_capture(self):
        resolver = AwakeningResolver(make_settings(), MagicMock())

        with pytest.raises(RuntimeError):
            resolver.read_awakening()


class TestDebugScreenshots:
    """Tests for stage image dumps"""

    def test_stage_images_saved(self, tmp_path):
        settings = make_settings(crop={"x": 0, "y": 0, "width": 8, "height": 4}, debug=True, debug_dir=str(tmp_path))
        resolver, _, _ = make_resolver(settings)

        resolver.read_awakening()

        names = sorted(os.listdir(tmp_path))
        assert any(name.endswith("_captured.png") for name in names)
        assert any(name.endswith("_segmented.png") for name in names)
        assert any(name.endswith("_cropped.png") for name in names)

    def test_nothing_saved_when_disabled(self, tmp_path):
        settings = make_settings(debug=False, debug_dir=str(tmp_path))
        resolver, _, _ = make_resolver(settings)

        resolver.read_awakening()

        assert os.listdir(tmp_path) == []


class TestLifecycle:
    """Tests for resource release and construction"""

    def test_close_releases_ocr_and_capture(self):
        resolver, ocr, capture = make_resolver()

        with resolver:
            pass

        ocr.close.assert_called_once()
        capture.cleanup.assert_called_once()

    def test_capture_released_even_if_ocr_close_fails(self):
        resolver, ocr, capture = make_resolver()
        ocr.close.side_effect = OSError("busy")

        with pytest.raises(OSError):
            resolver.close()

        capture.cleanup.assert_called_once()

    def test_create_resolver_surfaces_initialization_error(self, tmp_path):
        with patch("vision.ocr_service.find_tesseract", return_value=None):
            with pytest.raises(InitializationError):
                create_resolver(
                    settings_file=str(tmp_path / "settings.json"),
                    log_file=str(tmp_path / "awake.log"),
                )

        # Settings were created before the engine failed
        assert (tmp_path / "settings.json").exists()
