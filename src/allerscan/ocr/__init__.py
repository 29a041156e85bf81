# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""AllerScan OCR Module."""

from allerscan.ocr.engine import (
    OCRResult,
    Recognizer,
    TesseractEngine,
    encode_frame,
    parse_tesseract_data,
)

__all__ = [
    'OCRResult',
    'Recognizer',
    'TesseractEngine',
    'encode_frame',
    'parse_tesseract_data',
]
