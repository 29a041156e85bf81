# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""AllerScan Overlay Module."""

from allerscan.overlay.renderer import OverlayRenderer

__all__ = ['OverlayRenderer']
