# =============================================================================
# Vision Regression - Page Capture Module
# =============================================================================
# Provides the PageCapture class that renders a web page in headless Chromium
# through Playwright and saves a full-page screenshot.  A JPEG derivative of
# the PNG is written with Pillow so both formats come from the same pixels.
# =============================================================================

import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image
from playwright.sync_api import sync_playwright

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def write_jpeg_copy(png_path: PathLike, jpeg_path: PathLike, quality: int = 90) -> Path:
    """
    Write a JPEG version of a screenshot.

    Args:
        png_path:  Source image (any format Pillow can read).
        jpeg_path: Destination file.
        quality:   JPEG quality, 1-95.

    Returns:
        Path of the written JPEG.
    """
    jpeg_path = Path(jpeg_path)
    with Image.open(png_path) as image:
        # JPEG has no alpha channel
        image.convert("RGB").save(jpeg_path, format="JPEG", quality=quality)
    logger.debug("Wrote JPEG copy %s (quality=%d)", jpeg_path, quality)
    return jpeg_path


def _remove_stale(*paths: Optional[Path]) -> None:
    """Delete leftovers of a previous run so every capture starts clean."""
    for path in paths:
        if path is not None and path.exists():
            logger.debug("Removing stale snapshot %s", path)
            path.unlink()


class PageCapture:
    """
    Full-page screenshot capture with Playwright.

    Args:
        viewport_width:  Browser viewport width in CSS pixels.
        viewport_height: Browser viewport height in CSS pixels.
        headless:        Run Chromium without a window.
        jpeg_quality:    Quality of the JPEG derivative.
    """

    def __init__(
        self,
        viewport_width: int = 1280,
        viewport_height: int = 720,
        headless: bool = True,
        jpeg_quality: int = 90,
    ):
        self._viewport = {"width": viewport_width, "height": viewport_height}
        self._headless = headless
        self._jpeg_quality = jpeg_quality

    @classmethod
    def from_config(cls, config) -> "PageCapture":
        return cls(
            viewport_width=config.viewport_width,
            viewport_height=config.viewport_height,
            headless=config.headless,
            jpeg_quality=config.jpeg_quality,
        )

    def capture(
        self,
        url: str,
        png_path: PathLike,
        jpeg_path: Optional[PathLike] = None,
    ) -> Path:
        """
        Render ``url`` and save a full-page PNG screenshot.

        Args:
            url:       Page to capture.
            png_path:  Destination of the PNG screenshot.
            jpeg_path: Optional destination of a JPEG derivative.

        Returns:
            Path of the PNG screenshot.
        """
        png_path = Path(png_path)
        jpeg_path = Path(jpeg_path) if jpeg_path is not None else None
        png_path.parent.mkdir(parents=True, exist_ok=True)
        _remove_stale(png_path, jpeg_path)

        logger.info(
            "Capturing %s (viewport=%dx%d, headless=%s)",
            url, self._viewport["width"], self._viewport["height"], self._headless,
        )
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=self._headless)
            try:
                context = browser.new_context(
                    viewport=self._viewport,
                    device_scale_factor=1.0,
                    is_mobile=False,
                    has_touch=False,
                )
                page = context.new_page()
                page.goto(url)
                page.wait_for_selector("body", state="visible")
                page.screenshot(path=str(png_path), full_page=True, type="png")
            finally:
                browser.close()

        logger.info("Saved screenshot %s", png_path)
        if jpeg_path is not None:
            write_jpeg_copy(png_path, jpeg_path, quality=self._jpeg_quality)
        return png_path
