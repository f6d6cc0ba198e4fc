# answerlens/domain/services/i_screenshot_service.py

"""
Screenshot service interface.

Captures the whole virtual desktop in physical pixels and crops regions
out of that capture.
"""
from abc import ABC, abstractmethod

from answerlens.domain.common.result import Result
from answerlens.domain.models.geometry import PhysicalRect


class IScreenshotService(ABC):
    """Interface for screen capture services."""

    @abstractmethod
    async def capture_full_screen(self) -> Result[bytes]:
        """
        Capture every monitor at full resolution.

        Returns:
            Result containing PNG bytes on success, CaptureFailure otherwise
        """
        pass

    @abstractmethod
    async def crop(self, image: bytes, rect: PhysicalRect) -> Result[bytes]:
        """
        Crop a desktop-absolute physical rectangle out of a full capture.

        Args:
            image: PNG bytes returned by capture_full_screen
            rect: Rectangle in physical desktop coordinates

        Returns:
            Result containing PNG bytes of the cropped area
        """
        pass
