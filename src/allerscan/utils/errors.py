# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""Exception types raised by AllerScan."""


class AllerScanError(Exception):
    """Base class for all AllerScan errors."""


class ConfigError(AllerScanError):
    """Configuration file could not be parsed or validated."""


class CameraError(AllerScanError):
    """Camera device could not be opened or read."""


class RecognitionError(AllerScanError):
    """The OCR engine failed on a frame."""
