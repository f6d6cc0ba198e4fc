"""
Unit tests for the mss screenshot service and Pillow cropping.
"""
import asyncio
import io

import mss
import mss.exception
from conftest import RecordingLogger, png_bytes
from PIL import Image

from answerlens.domain.common.errors import ErrorCategory
from answerlens.domain.models.geometry import PhysicalRect
from answerlens.infrastructure.platform.screenshot_service import MssScreenshotService


def marked_capture():
    """200x100 white image with a red 10x10 block at (50, 20)."""
    img = Image.new("RGB", (200, 100), color=(255, 255, 255))
    img.paste((255, 0, 0), (50, 20, 60, 30))
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


class TestCropSync:

    def setup_method(self):
        self.service = MssScreenshotService(RecordingLogger())

    def test_crops_requested_rectangle(self):
        result = self.service.crop_sync(marked_capture(), PhysicalRect(50, 20, 10, 10))

        assert result.is_success
        with Image.open(io.BytesIO(result.value)) as cropped:
            assert cropped.size == (10, 10)
            assert cropped.convert("RGB").getpixel((5, 5)) == (255, 0, 0)

    def test_translates_by_capture_origin(self):
        """Desktop coordinates left of the primary monitor are negative."""
        result = self.service.crop_sync(marked_capture(), PhysicalRect(0, 20, 10, 10), origin=(-50, 0))

        with Image.open(io.BytesIO(result.value)) as cropped:
            assert cropped.convert("RGB").getpixel((0, 0)) == (255, 0, 0)

    def test_out_of_bounds_is_capture_failure(self):
        result = self.service.crop_sync(png_bytes(100, 50), PhysicalRect(90, 0, 20, 10))

        assert result.is_failure
        assert result.error.category == ErrorCategory.CAPTURE

    def test_zero_area_is_capture_failure(self):
        result = self.service.crop_sync(png_bytes(100, 50), PhysicalRect(10, 10, 0, 10))

        assert result.is_failure
        assert result.error.category == ErrorCategory.CAPTURE

    def test_unreadable_image_is_capture_failure(self):
        result = self.service.crop_sync(b"not an image", PhysicalRect(0, 0, 1, 1))

        assert result.is_failure
        assert result.error.category == ErrorCategory.CAPTURE


class TestCapture:

    def test_grab_error_is_capture_failure(self, monkeypatch):
        logger = RecordingLogger()
        service = MssScreenshotService(logger)

        def no_display():
            raise mss.exception.ScreenShotError("XGetImage() failed")

        monkeypatch.setattr(mss, "mss", no_display)
        result = asyncio.run(service.capture_full_screen())

        assert result.is_failure
        assert result.error.category == ErrorCategory.CAPTURE
        assert "XGetImage() failed" in result.error.message
        assert logger.messages("error")
