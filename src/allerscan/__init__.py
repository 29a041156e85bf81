# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan - Live Allergen Label Scanner
=======================================

Points a camera at a food label, reads it with OCR every few seconds and
highlights any text containing one of your allergen keywords.

Features:
    - Allergen keyword list entered at runtime
    - Periodic Tesseract OCR on the live camera frame
    - Case-insensitive substring matching
    - Bounding-box overlay on the live preview

Example:
    >>> from allerscan import KeywordStore, match_regions
    >>> store = KeywordStore(["Peanut "])
    >>> store.snapshot()
    ('peanut',)

"""

__version__ = "1.0.0"
__author__ = "AllerScan Team"

from allerscan.utils.config import Config, load_config, save_config
from allerscan.utils.logging import setup_logging
from allerscan.scanner import KeywordStore, ScanSession, match_regions

__all__ = [
    "__version__",
    "Config",
    "load_config",
    "save_config",
    "setup_logging",
    "KeywordStore",
    "ScanSession",
    "match_regions",
]
