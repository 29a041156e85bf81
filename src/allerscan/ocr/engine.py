# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan OCR Engine
====================

Thin wrapper around Tesseract (via pytesseract) that turns a camera frame
into a list of text regions with bounding boxes.

Any recognizer with a ``recognize(image) -> OCRResult`` method can stand in
for the Tesseract engine, which is how the tests drive the scan loop.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Protocol, Tuple

import cv2
import numpy as np
import pytesseract
from pytesseract import Output

from allerscan.scanner.matcher import BoundingBox, TextRegion
from allerscan.utils import RecognitionError, get_logger


@dataclass(frozen=True)
class OCRResult:
    """Whole-document text plus per-region text and boxes."""
    text: str = ""
    regions: Tuple[TextRegion, ...] = ()


class Recognizer(Protocol):
    def recognize(self, image: np.ndarray) -> OCRResult:
        ...


def encode_frame(frame: np.ndarray, ext: str = ".png") -> bytes:
    """Encode a BGR frame into an image payload (PNG by default)."""
    try:
        ok, buffer = cv2.imencode(ext, frame)
    except cv2.error as e:
        raise RecognitionError(f"Could not encode frame as {ext}: {e}") from e
    if not ok:
        raise RecognitionError(f"Could not encode frame as {ext}")
    return buffer.tobytes()


def _column(data: dict, key: str, i: int) -> int:
    values = data.get(key)
    return int(values[i]) if values else 0


def parse_tesseract_data(
    data: dict,
    granularity: Literal["word", "line"] = "word",
    min_confidence: float = 0.0,
) -> Tuple[TextRegion, ...]:
    """Convert ``pytesseract.image_to_data`` output into text regions.

    Args:
        data: Dict produced with ``output_type=Output.DICT``.
        granularity: "word" keeps each word as its own region, "line" merges
            words sharing a Tesseract (block, paragraph, line) index.
        min_confidence: Words below this confidence are dropped. Tesseract
            reports -1 for layout rows, so the default drops those.

    Returns:
        Tuple of TextRegion in reading order.
    """
    words = []
    for i, raw_text in enumerate(data.get("text", [])):
        text = (raw_text or "").strip()
        if not text:
            continue

        try:
            conf = float(data["conf"][i])
        except (ValueError, TypeError):
            continue
        if conf < min_confidence:
            continue

        left, top = int(data["left"][i]), int(data["top"][i])
        bbox = BoundingBox(left, top, left + int(data["width"][i]), top + int(data["height"][i]))
        line_key = tuple(_column(data, key, i) for key in ("block_num", "par_num", "line_num"))
        words.append((line_key, TextRegion(text=text, bbox=bbox, confidence=conf)))

    if granularity == "word":
        return tuple(region for _, region in words)

    # Group words into lines, keeping first-seen order
    lines: dict = {}
    for key, region in words:
        lines.setdefault(key, []).append(region)

    merged = []
    for members in lines.values():
        bbox = members[0].bbox
        for member in members[1:]:
            bbox = bbox.union(member.bbox)
        merged.append(TextRegion(
            text=" ".join(m.text for m in members),
            bbox=bbox,
            confidence=float(np.mean([m.confidence for m in members])),
        ))
    return tuple(merged)


class TesseractEngine:
    """
    Tesseract-backed recognizer.

    Args:
        language: Tesseract language code (``eng`` by default).
        granularity: Region granularity, see ``parse_tesseract_data``.
        min_confidence: Minimum word confidence to keep.
        tesseract_cmd: Optional explicit path to the tesseract binary.
    """

    def __init__(
        self,
        language: str = "eng",
        granularity: Literal["word", "line"] = "word",
        min_confidence: float = 0.0,
        tesseract_cmd: Optional[str] = None,
    ):
        self.logger = get_logger("allerscan.ocr.engine")
        self.language = language
        self.granularity = granularity
        self.min_confidence = min_confidence

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @classmethod
    def from_config(cls, scan_config) -> "TesseractEngine":
        return cls(
            language=scan_config.language,
            granularity=scan_config.granularity,
            min_confidence=scan_config.min_confidence,
            tesseract_cmd=scan_config.tesseract_cmd,
        )

    def recognize(self, image: np.ndarray) -> OCRResult:
        """Run OCR on a BGR frame.

        Raises:
            RecognitionError: If Tesseract is missing or fails on the image.
        """
        if image is None or image.size == 0:
            raise RecognitionError("Cannot recognize an empty image")

        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB) if image.ndim == 3 else image

        try:
            data = pytesseract.image_to_data(rgb, lang=self.language, output_type=Output.DICT)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError, RuntimeError) as e:
            raise RecognitionError(f"Tesseract failed: {e}") from e

        regions = parse_tesseract_data(data, self.granularity, self.min_confidence)
        text = " ".join(region.text for region in regions)
        self.logger.debug(f"Recognized {len(regions)} regions")
        return OCRResult(text=text, regions=regions)

    @staticmethod
    def version() -> Optional[str]:
        try:
            return str(pytesseract.get_tesseract_version())
        except (pytesseract.TesseractNotFoundError, OSError):
            return None
