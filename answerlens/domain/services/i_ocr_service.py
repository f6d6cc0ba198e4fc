#answerlens/domain/services/i_ocr_service.py

"""
OCR service interface for extracting text from images.
"""
from abc import ABC, abstractmethod

from answerlens.domain.common.result import Result


class IOcrService(ABC):
    """Interface for optical character recognition services."""

    @abstractmethod
    async def recognize_text(self, image: bytes, language_pack_path: str) -> Result[str]:
        """
        Extract text from an encoded image.

        Args:
            image: PNG bytes of the region to read
            language_pack_path: Directory holding the trained language data

        Returns:
            Result containing the raw recognized text. Blank output is a
            RecognitionFailure, not an empty success.
        """
        pass
