"""
Pytest Configuration and Fixtures
==================================
"""

from __future__ import annotations

import threading
from pathlib import Path

import numpy as np
import pytest


class FakeRecognizer:
    """Recognizer returning a canned OCR result and counting calls."""

    def __init__(self, regions=(), text=None):
        from allerscan.ocr import OCRResult

        self.result = OCRResult(
            text=text if text is not None else " ".join(r.text for r in regions),
            regions=tuple(regions),
        )
        self.calls = 0
        self.images = []

    def recognize(self, image):
        self.calls += 1
        self.images.append(image)
        return self.result


class FailingRecognizer:
    """Recognizer that always raises, like an OCR decode failure."""

    def __init__(self, error: Exception | None = None):
        self.error = error or RuntimeError("decode failure")
        self.calls = 0

    def recognize(self, image):
        self.calls += 1
        raise self.error


class BlockingRecognizer(FakeRecognizer):
    """Recognizer that waits for ``release`` before returning."""

    def __init__(self, regions=()):
        super().__init__(regions)
        self.entered = threading.Event()
        self.release = threading.Event()

    def recognize(self, image):
        self.entered.set()
        self.release.wait(timeout=5.0)
        return super().recognize(image)


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_frame() -> np.ndarray:
    """Blank 1280x720 BGR frame."""
    return np.full((720, 1280, 3), 128, dtype=np.uint8)


@pytest.fixture
def frame_source(sample_frame):
    """Frame source that always returns the sample frame."""
    return lambda: sample_frame


@pytest.fixture
def bbox_peanut():
    from allerscan.scanner import BoundingBox

    return BoundingBox(100, 100, 300, 140)


@pytest.fixture
def bbox_rice():
    from allerscan.scanner import BoundingBox

    return BoundingBox(100, 200, 220, 240)


@pytest.fixture
def label_regions(bbox_peanut, bbox_rice):
    """OCR regions for a label reading 'PEANUT butter' and 'rice'."""
    from allerscan.scanner import TextRegion

    return [
        TextRegion("PEANUT butter", bbox_peanut, 91.0),
        TextRegion("rice", bbox_rice, 88.0),
    ]


@pytest.fixture
def keywords():
    from allerscan.scanner import KeywordStore

    return KeywordStore(["peanut", "milk"])


@pytest.fixture
def renderer():
    from allerscan.overlay import OverlayRenderer

    return OverlayRenderer()


@pytest.fixture
def make_session(keywords, frame_source, renderer):
    """Factory for sessions with a long interval so only manual ticks run."""
    from allerscan.scanner import ScanSession
    from allerscan.utils import DiagnosticChannel

    sessions = []

    def _make(recognizer, interval: float = 60.0, **kwargs):
        kwargs.setdefault("keywords", keywords)
        kwargs.setdefault("frame_source", frame_source)
        kwargs.setdefault("renderer", renderer)
        kwargs.setdefault("diagnostics", DiagnosticChannel())
        session = ScanSession(recognizer=recognizer, interval=interval, **kwargs)
        sessions.append(session)
        return session

    yield _make

    for session in sessions:
        session.stop()
        session.join(timeout=2.0)


@pytest.fixture
def fake_recognizer():
    """Factory for FakeRecognizer."""
    return FakeRecognizer


@pytest.fixture
def failing_recognizer():
    return FailingRecognizer()


@pytest.fixture
def blocking_recognizer():
    return BlockingRecognizer
