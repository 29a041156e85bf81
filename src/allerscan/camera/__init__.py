# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""AllerScan Camera Module."""

from allerscan.camera.stream import CameraStream

__all__ = ['CameraStream']
