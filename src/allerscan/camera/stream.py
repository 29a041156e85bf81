# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan Camera Stream
=======================

Background camera reader. Keeps only the most recent frame so the scan
loop and the preview always see a fresh image.
"""

import threading
import time
from typing import Optional

import cv2
import numpy as np

from allerscan.utils import CameraError, get_logger


class CameraStream:
    """
    Threaded wrapper around ``cv2.VideoCapture``.

    Architecture:
    - Background Thread: reads frames as fast as the device delivers them
    - Callers: pull a copy of the latest frame with ``latest_frame()``
    """

    def __init__(
        self,
        index: int = 0,
        width: int = 1280,
        height: int = 720,
        flip_horizontal: bool = False,
        max_read_failures: int = 30,
    ):
        self.logger = get_logger("allerscan.camera.stream")

        self.index = index
        self.width = width
        self.height = height
        self.flip_horizontal = flip_horizontal
        self.max_read_failures = max_read_failures

        self._cap = None
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._latest_frame: Optional[np.ndarray] = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, camera_config) -> "CameraStream":
        return cls(
            index=camera_config.index,
            width=camera_config.width,
            height=camera_config.height,
            flip_horizontal=camera_config.flip_horizontal,
            max_read_failures=camera_config.max_read_failures,
        )

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Open the device and start the reader thread.

        Raises:
            CameraError: If the device cannot be opened.
        """
        if self._running:
            return

        cap = cv2.VideoCapture(self.index)
        # Ideal resolution, the driver picks the closest it supports
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        # Minimize buffer for lowest latency (1 frame = most recent)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        if not cap.isOpened():
            cap.release()
            raise CameraError(f"Could not open camera {self.index}")

        self._cap = cap
        self._running = True
        self._thread = threading.Thread(target=self._read_loop, daemon=True)
        self._thread.start()
        self.logger.info(f"Camera {self.index} started ({self.width}x{self.height} requested)")

    def stop(self) -> None:
        """Stop the reader thread and release the device."""
        self._running = False

        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=1.0)
        self._thread = None

        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.logger.info(f"Camera {self.index} stopped")

        with self._lock:
            self._latest_frame = None

    def latest_frame(self) -> Optional[np.ndarray]:
        with self._lock:
            if self._latest_frame is None:
                return None
            return self._latest_frame.copy()

    def _read_loop(self) -> None:
        consecutive_failures = 0

        while self._running:
            ret, frame = self._cap.read()
            if not ret:
                consecutive_failures += 1
                if consecutive_failures >= self.max_read_failures:
                    self.logger.error(
                        f"Camera read failed {self.max_read_failures} times consecutively. Stopping."
                    )
                    self._running = False
                    break
                time.sleep(0.01)
                continue

            consecutive_failures = 0

            if self.flip_horizontal:
                frame = cv2.flip(frame, 1)

            with self._lock:
                self._latest_frame = frame

    def __enter__(self) -> "CameraStream":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
