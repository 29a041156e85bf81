# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""AllerScan Scanner Module."""

from allerscan.scanner.keywords import KeywordStore, normalize_keyword
from allerscan.scanner.matcher import (
    Annotation,
    BoundingBox,
    MatchResult,
    TextRegion,
    match_regions,
)
from allerscan.scanner.session import ScanResult, ScanSession

__all__ = [
    'KeywordStore',
    'normalize_keyword',
    'Annotation',
    'BoundingBox',
    'MatchResult',
    'TextRegion',
    'match_regions',
    'ScanResult',
    'ScanSession',
]
