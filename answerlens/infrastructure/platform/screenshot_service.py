# answerlens/infrastructure/platform/screenshot_service.py
"""
Screenshot service grabbing the full virtual desktop with mss and cropping
with the Python Imaging Library (PIL).
"""
import asyncio
import io
from typing import Tuple

import mss
import mss.tools
from PIL import Image

from answerlens.domain.common.errors import CaptureFailure
from answerlens.domain.common.result import Result
from answerlens.domain.models.geometry import PhysicalRect
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_screenshot_service import IScreenshotService


class MssScreenshotService(IScreenshotService):
    """
    Captures all monitors in one image.

    The virtual desktop may start at negative coordinates when a monitor
    sits left of or above the primary one, so the capture's own origin is
    remembered and subtracted before cropping.
    """

    def __init__(self, logger: ILoggerService):
        self.logger = logger
        self._capture_origin: Tuple[int, int] = (0, 0)

    async def capture_full_screen(self) -> Result[bytes]:
        return await asyncio.to_thread(self._capture_sync)

    async def crop(self, image: bytes, rect: PhysicalRect) -> Result[bytes]:
        return await asyncio.to_thread(self.crop_sync, image, rect, self._capture_origin)

    def _capture_sync(self) -> Result[bytes]:
        return Result.from_operation(self._grab, self.logger, CaptureFailure, "Screen capture failed")

    def _grab(self) -> bytes:
        with mss.mss() as sct:
            monitor = sct.monitors[0]  # bounding box of every monitor
            shot = sct.grab(monitor)
            png = mss.tools.to_png(shot.rgb, shot.size)

        # Physical-to-logical ratio of the grab, 1.0 unless the platform reports points
        ratio = shot.width / monitor["width"] if monitor["width"] else 1.0
        self._capture_origin = (round(monitor["left"] * ratio), round(monitor["top"] * ratio))

        self.logger.debug(f"Captured desktop {shot.width}x{shot.height}", origin=self._capture_origin)
        return png

    def crop_sync(self, image: bytes, rect: PhysicalRect,
                  origin: Tuple[int, int] = (0, 0)) -> Result[bytes]:
        """
        Crop a desktop-absolute rectangle from PNG bytes.

        Args:
            image: Encoded full-desktop capture
            rect: Rectangle in desktop physical pixels
            origin: Desktop coordinates of the capture's top-left pixel
        """
        if rect.width <= 0 or rect.height <= 0:
            return Result.fail(CaptureFailure(
                message="Capture region has no area",
                details={"rect": rect.to_dict()}
            ))

        try:
            with Image.open(io.BytesIO(image)) as full:
                left = rect.left - origin[0]
                top = rect.top - origin[1]
                if left < 0 or top < 0 or left + rect.width > full.width or top + rect.height > full.height:
                    return Result.fail(CaptureFailure(
                        message="Capture region lies outside the screen",
                        details={"rect": rect.to_dict(), "screen": f"{full.width}x{full.height}"}
                    ))

                cropped = full.crop((left, top, left + rect.width, top + rect.height))
                buffer = io.BytesIO()
                cropped.save(buffer, format="PNG")
        except (OSError, ValueError) as e:
            error = CaptureFailure(
                message=f"Failed to crop capture: {e}",
                details={"rect": rect.to_dict()},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        self.logger.debug("Cropped capture", rect=rect.to_dict(), size=len(buffer.getvalue()))
        return Result.ok(buffer.getvalue())
