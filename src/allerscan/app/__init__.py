# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan UI Module
===================

customtkinter-based scanner window.
"""

from .app import AllerScanApp

__all__ = ['AllerScanApp']
