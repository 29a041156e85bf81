# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan Utilities
===================

Common utility functions and classes.
"""

from allerscan.utils.config import Config, load_config, save_config
from allerscan.utils.diagnostics import DiagnosticChannel, DiagnosticEvent
from allerscan.utils.errors import (
    AllerScanError,
    CameraError,
    ConfigError,
    RecognitionError,
)
from allerscan.utils.logging import get_logger, setup_logging

__all__ = [
    "Config",
    "load_config",
    "save_config",
    "DiagnosticChannel",
    "DiagnosticEvent",
    "AllerScanError",
    "CameraError",
    "ConfigError",
    "RecognitionError",
    "setup_logging",
    "get_logger",
]
