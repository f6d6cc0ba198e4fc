#answerlens/infrastructure/ocr/tesseract_ocr_service.py

"""
Implementation of the OCR service using Tesseract OCR.
"""
import asyncio
import io
import os
import shutil
import sys

import cv2
import numpy as np
import pytesseract
from PIL import Image

from answerlens.domain.common.errors import RecognitionFailure
from answerlens.domain.common.result import Result
from answerlens.domain.models.ocr_profile import OcrProfile
from answerlens.domain.services.i_logger_service import ILoggerService
from answerlens.domain.services.i_ocr_service import IOcrService


class TesseractOcrService(IOcrService):
    """
    Recognizes text with Tesseract through pytesseract.

    Images are optionally cleaned up with OpenCV first: converted to
    grayscale, upscaled, and binarized with an adaptive threshold.
    """

    def __init__(self, logger: ILoggerService, profile: OcrProfile = None):
        """
        Initialize the OCR service.

        Args:
            logger: Logger service for logging
            profile: Recognition parameters (defaults to simplified Chinese)
        """
        self.logger = logger
        self.profile = profile or OcrProfile()
        self._configure_tesseract_path()

    def _configure_tesseract_path(self) -> None:
        """Point pytesseract at a bundled or commonly installed tesseract binary."""
        if getattr(sys, 'frozen', False):
            # PyInstaller unpacks bundled resources under _MEIPASS
            bundled = os.path.join(sys._MEIPASS, "resources", "Tesseract-OCR", "tesseract.exe")
            pytesseract.pytesseract.tesseract_cmd = bundled
            self.logger.info(f"Configured Tesseract path for executable: {bundled}")
            return

        if shutil.which("tesseract"):
            return

        possible_paths = [
            r'C:\Program Files\Tesseract-OCR\tesseract.exe',
            r'C:\Program Files (x86)\Tesseract-OCR\tesseract.exe',
            '/usr/bin/tesseract',
            '/usr/local/bin/tesseract',
            '/opt/homebrew/bin/tesseract',
        ]
        for path in possible_paths:
            if os.path.exists(path):
                pytesseract.pytesseract.tesseract_cmd = path
                self.logger.info(f"Configured Tesseract path: {path}")
                return

        self.logger.warning("Tesseract OCR not found in common locations. "
                            "Please install Tesseract or add it to PATH.")

    async def recognize_text(self, image: bytes, language_pack_path: str) -> Result[str]:
        return await asyncio.to_thread(self.recognize_text_sync, image, language_pack_path)

    def recognize_text_sync(self, image: bytes, language_pack_path: str) -> Result[str]:
        try:
            with Image.open(io.BytesIO(image)) as source:
                source.load()
                prepared = self.preprocess(source) if self.profile.preprocess else source.convert("RGB")

            config = self.profile.tesseract_config
            if language_pack_path:
                config = f'{config} --tessdata-dir "{language_pack_path}"'

            text = pytesseract.image_to_string(prepared, lang=self.profile.language, config=config)
        except pytesseract.TesseractNotFoundError as e:
            error = RecognitionFailure(message="Tesseract OCR executable not found", inner_error=e)
            self.logger.error(str(error))
            return Result.fail(error)
        except (pytesseract.TesseractError, OSError, ValueError, cv2.error) as e:
            error = RecognitionFailure(
                message=f"Text recognition failed: {e}",
                details={"language": self.profile.language, "tessdata": language_pack_path},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        text = text.strip()
        if not text:
            self.logger.warning("Recognizer returned no text")
            return Result.fail(RecognitionFailure(message="No text recognized"))

        self.logger.debug(f"Recognized text: {text[:100]}" + ("..." if len(text) > 100 else ""))
        return Result.ok(text)

    def preprocess(self, image: Image.Image) -> Image.Image:
        """Grayscale, upscale and binarize an image for Tesseract."""
        img_np = np.array(image.convert("RGB"))
        img_gray = cv2.cvtColor(img_np, cv2.COLOR_RGB2GRAY)

        # Light text on a dark background reads better inverted
        if np.mean(img_gray) < 128:
            img_gray = cv2.bitwise_not(img_gray)

        h, w = img_gray.shape
        img_resized = cv2.resize(
            img_gray,
            (int(w * self.profile.scale_factor), int(h * self.profile.scale_factor)),
            interpolation=cv2.INTER_CUBIC
        )

        block_size = self.profile.threshold_block_size
        if block_size % 2 == 0:
            block_size += 1

        img_thresh = cv2.adaptiveThreshold(
            img_resized,
            255,
            cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
            cv2.THRESH_BINARY,
            block_size,
            self.profile.threshold_c
        )
        return Image.fromarray(img_thresh)
