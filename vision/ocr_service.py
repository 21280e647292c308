# Copyright (C) 2026 BPS
# This file is part of FlyFF Awake Reader.

"""
OCR Service - FlyFF Awake Reader
================================
Tesseract OCR wrapper for awakening text recognition.

The service is created once at startup and owns the Tesseract setup for
the whole process: executable lookup, language check and a private
working directory for the images handed to Tesseract. Construction fails
with InitializationError when Tesseract or its language data is missing;
recognition failures are raised as RecognitionFailure. The owner must call
close() (or use the service as a context manager) on shutdown.
"""

import itertools
import logging
import os
import shutil
import subprocess
import tempfile
import threading

import numpy as np
from PIL import Image as PILImage

from core.exceptions import InitializationError, RecognitionFailure

logger = logging.getLogger("AwakeReader")

# Tesseract paths to check (in priority order), before falling back to PATH
TESSERACT_PATHS = [
    # 1. Bundled next to the application (portable mode)
    os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "..", "tesseract", "tesseract.exe"
    ),
    # 2. Standard Tesseract installation
    r"C:\Program Files\Tesseract-OCR\tesseract.exe",
    r"C:\Program Files (x86)\Tesseract-OCR\tesseract.exe",
]

DEFAULT_LANGUAGE = "eng"
# PSM 6: assume a single uniform block of text
SINGLE_BLOCK_PSM = 6
DEFAULT_TIMEOUT_MS = 5000


def _subprocess_kwargs():
    """Hide the console window on Windows."""
    if os.name != "nt":
        return {}
    startupinfo = subprocess.STARTUPINFO()
    startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
    startupinfo.wShowWindow = subprocess.SW_HIDE
    return {"startupinfo": startupinfo, "creationflags": subprocess.CREATE_NO_WINDOW}


def find_tesseract(explicit_path=None):
    """
    Find the Tesseract executable.

    Args:
        explicit_path (str): Path from settings, checked first

    Returns:
        str: Path to the executable, or None if not found
    """
    if explicit_path:
        return explicit_path if os.path.exists(explicit_path) else None
    for path in TESSERACT_PATHS:
        if os.path.exists(path):
            return os.path.normpath(path)
    return shutil.which("tesseract")


class OCRService:
    """
    Process-wide Tesseract engine.

    Configured once for a fixed language and page segmentation mode.
    recognize() calls are serialized with a lock.
    """

    def __init__(
        self,
        tesseract_path=None,
        tessdata_dir=None,
        language=DEFAULT_LANGUAGE,
        psm=SINGLE_BLOCK_PSM,
        timeout_ms=DEFAULT_TIMEOUT_MS,
    ):
        """
        Initialize OCR service.

        Args:
            tesseract_path (str): Tesseract executable, searched for if None
            tessdata_dir (str): Directory holding the .traineddata files (optional)
            language (str): Tesseract language model (default: "eng")
            psm (int): Page segmentation mode (default: 6, single block)
            timeout_ms (int): Timeout per recognition in milliseconds

        Raises:
            InitializationError: If Tesseract or the language data is unavailable
        """
        self.language = language
        self.psm = psm
        self.timeout_ms = timeout_ms
        self.tessdata_dir = tessdata_dir
        self._lock = threading.Lock()
        self._counter = itertools.count()
        self._work_dir = None

        self.tesseract_path = find_tesseract(tesseract_path)
        if self.tesseract_path is None:
            logger.error(
                "❌ Tesseract not found! Install from: https://github.com/UB-Mannheim/tesseract/wiki"
            )
            raise InitializationError("Tesseract executable not found")

        languages = self._list_languages()
        if language not in languages:
            logger.error(f"❌ Tesseract language '{language}' not installed (found: {languages})")
            raise InitializationError(f"Tesseract language data '{language}' is missing")

        try:
            self._work_dir = tempfile.mkdtemp(prefix="awake_ocr_")
        except OSError as e:
            logger.error(f"❌ Could not create OCR work directory: {e}")
            raise InitializationError(f"Could not create OCR work directory: {e}") from e
        logger.info(f"✅ Tesseract found: {self.tesseract_path} (lang={language}, psm={psm})")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    @property
    def is_closed(self):
        return self._work_dir is None

    def _base_command(self):
        cmd = [self.tesseract_path]
        if self.tessdata_dir:
            cmd.extend(["--tessdata-dir", self.tessdata_dir])
        return cmd

    def _list_languages(self):
        """Languages installed for this Tesseract (raises InitializationError)."""
        cmd = self._base_command() + ["--list-langs"]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_ms / 1000.0,
                encoding="utf-8",
                **_subprocess_kwargs(),
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise InitializationError(f"Could not run Tesseract: {e}") from e

        if result.returncode != 0:
            raise InitializationError(f"Tesseract --list-langs failed: {result.stderr.strip()}")

        # First line is the "List of available languages ..." header
        lines = result.stdout.strip().splitlines()
        return [line.strip() for line in lines[1:] if line.strip()]

    def _write_image(self, image, path):
        """Save an Image as an RGB PNG carrying its DPI."""
        rgb = np.ascontiguousarray(image.pixels[:, :, 2::-1])
        PILImage.fromarray(rgb).save(path, "PNG", dpi=(image.dpi, image.dpi))

    def recognize(self, image):
        """
        Run Tesseract on a prepared image.

        Args:
            image (Image): Image to read (BGR24 or BGRA32)

        Returns:
            str: Recognized text, stripped of surrounding whitespace

        Raises:
            RecognitionFailure: If the service is closed or Tesseract fails
        """
        if image.width == 0 or image.height == 0:
            raise RecognitionFailure(f"Cannot recognize empty {image!r}")

        with self._lock:
            if self.is_closed:
                raise RecognitionFailure("OCR service is closed")

            tmp_path = os.path.join(self._work_dir, f"awake_{next(self._counter)}.png")
            timeout_sec = self.timeout_ms / 1000.0
            cmd = self._base_command() + [
                tmp_path,
                "stdout",
                "-l",
                self.language,
                "--psm",
                str(self.psm),
                "--dpi",
                str(image.dpi),
            ]

            try:
                self._write_image(image, tmp_path)
                logger.debug(f"[OCR] Running Tesseract with timeout={timeout_sec}s")
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=timeout_sec,
                    encoding="utf-8",
                    **_subprocess_kwargs(),
                )
            except subprocess.TimeoutExpired as e:
                logger.warning(f"[OCR] ⏰ Timeout exceeded ({timeout_sec}s)")
                raise RecognitionFailure(f"Tesseract timed out after {timeout_sec}s") from e
            except OSError as e:
                logger.warning(f"[OCR] Execution error: {e}")
                raise RecognitionFailure(f"Could not run Tesseract: {e}") from e
            finally:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)

        if result.returncode != 0:
            logger.warning(f"[OCR] Tesseract error: {result.stderr}")
            raise RecognitionFailure(
                f"Tesseract exited with {result.returncode}: {result.stderr.strip()}"
            )

        text = result.stdout.strip()
        logger.debug(f"[OCR] Result: '{text}'")
        return text

    def close(self):
        """Release the working directory. Safe to call more than once."""
        with self._lock:
            if self._work_dir is None:
                return
            shutil.rmtree(self._work_dir, ignore_errors=True)
            self._work_dir = None
        logger.info("[OCR] Tesseract service closed")
