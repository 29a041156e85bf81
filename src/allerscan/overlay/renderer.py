# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan Overlay Renderer
==========================

Transparent BGRA drawing surface the size of the video frame. Matching
regions get a rectangle and a label; the surface is blended over the
live frame for display without touching the frame itself.
"""

import threading
from typing import Iterable, Literal, Tuple

import cv2
import numpy as np

from allerscan.scanner.matcher import Annotation
from allerscan.utils import get_logger


class OverlayRenderer:
    """Draws match annotations on a transparent overlay."""

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        color: Tuple[int, int, int] = (0, 0, 255),
        thickness: int = 2,
        font_scale: float = 0.5,
        label_mode: Literal["text", "keyword"] = "text",
    ):
        self.logger = get_logger("allerscan.overlay.renderer")
        self.color = tuple(int(c) for c in color)
        self.thickness = thickness
        self.font_scale = font_scale
        self.label_mode = label_mode

        self._lock = threading.Lock()
        self._surface = np.zeros((height, width, 4), dtype=np.uint8)

    @classmethod
    def from_config(cls, overlay_config) -> "OverlayRenderer":
        return cls(
            color=overlay_config.color,
            thickness=overlay_config.thickness,
            font_scale=overlay_config.font_scale,
            label_mode=overlay_config.label_mode,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) of the overlay."""
        with self._lock:
            h, w = self._surface.shape[:2]
        return w, h

    def resize(self, width: int, height: int) -> None:
        """Match the overlay to a new frame size; clears the surface."""
        with self._lock:
            self._surface = np.zeros((height, width, 4), dtype=np.uint8)

    def clear(self) -> None:
        with self._lock:
            self._surface[:] = 0

    def draw(self, annotations: Iterable[Annotation]) -> int:
        """Clear and redraw all annotations.

        Returns:
            Number of rectangles drawn.
        """
        color = (*self.color, 255)
        font = cv2.FONT_HERSHEY_SIMPLEX
        drawn = 0

        with self._lock:
            self._surface[:] = 0
            for annotation in annotations:
                box = annotation.region.bbox
                cv2.rectangle(
                    self._surface,
                    (box.x0, box.y0),
                    (box.x1, box.y1),
                    color,
                    self.thickness,
                )
                cv2.putText(
                    self._surface,
                    self._label(annotation),
                    (box.x0, max(box.y0 - 4, 0)),
                    font,
                    self.font_scale,
                    color,
                    1,
                    cv2.LINE_AA,
                )
                drawn += 1
        return drawn

    def _label(self, annotation: Annotation) -> str:
        if self.label_mode == "keyword":
            return ", ".join(annotation.keywords)
        return annotation.region.text

    def composite(self, frame: np.ndarray) -> np.ndarray:
        """Alpha-blend the overlay onto a copy of ``frame`` (BGR)."""
        output = frame.copy()

        with self._lock:
            surface = self._surface
            if surface.size == 0:
                return output
            if surface.shape[:2] != frame.shape[:2]:
                # Stale size (e.g. camera changed resolution); scale to fit
                surface = cv2.resize(
                    surface, (frame.shape[1], frame.shape[0]), interpolation=cv2.INTER_NEAREST
                )
            else:
                surface = surface.copy()

        alpha = surface[:, :, 3:4].astype(np.float32) / 255.0
        if not alpha.any():
            return output

        blended = surface[:, :, :3].astype(np.float32) * alpha + output.astype(np.float32) * (1.0 - alpha)
        return blended.astype(np.uint8)

    def snapshot(self) -> np.ndarray:
        with self._lock:
            return self._surface.copy()
