# answerlens/domain/models/ocr_profile.py
from dataclasses import dataclass


@dataclass
class OcrProfile:
    """Parameters for the text recognizer."""
    language: str = "chi_sim"
    preprocess: bool = True
    scale_factor: float = 2.0
    threshold_block_size: int = 31
    threshold_c: int = 10
    tesseract_config: str = '--oem 1 --psm 6'
