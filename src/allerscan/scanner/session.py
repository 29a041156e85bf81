# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan Scan Session
======================

Periodic scan-and-match loop:

    frame -> OCR -> match against keywords -> redraw overlay -> publish

Scheduling rules:
- One worker thread per start(); it waits ``interval`` seconds after a
  tick settles before running the next one, so ticks never overlap.
- Keywords are read from the store at tick time, never captured at start.
- stop() bumps a generation counter. A tick whose OCR call finishes after
  the stop sees the new generation and throws its result away.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import numpy as np

from allerscan.scanner.keywords import KeywordStore
from allerscan.scanner.matcher import Annotation, TextRegion, match_regions
from allerscan.utils import DiagnosticChannel, get_logger


FrameSource = Callable[[], Optional[np.ndarray]]


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one tick."""
    tick: int
    allergens: Tuple[str, ...] = ()
    annotations: Tuple[Annotation, ...] = ()
    regions: Tuple[TextRegion, ...] = ()
    text: str = ""
    frame_size: Tuple[int, int] = (0, 0)  # (width, height)
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    @property
    def ok(self) -> bool:
        return self.error is None


ResultListener = Callable[[ScanResult], None]


class ScanSession:
    """
    Owns the scanning flag, the single scheduled task and the
    detected-allergen state.

    Args:
        recognizer: Object with ``recognize(image) -> OCRResult``.
        keywords: Shared keyword store, read on every tick.
        frame_source: Callable returning the current BGR frame or None.
        renderer: OverlayRenderer that receives the annotations.
        interval: Seconds between the end of one tick and the next.
        diagnostics: Channel for debug events; a private one is created
            when omitted.
    """

    def __init__(
        self,
        recognizer,
        keywords: KeywordStore,
        frame_source: FrameSource,
        renderer,
        interval: float = 3.0,
        diagnostics: Optional[DiagnosticChannel] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.logger = get_logger("allerscan.scanner.session")

        self.recognizer = recognizer
        self.keywords = keywords
        self.frame_source = frame_source
        self.renderer = renderer
        self.interval = interval
        self.diagnostics = diagnostics or DiagnosticChannel()

        # State
        self._state_lock = threading.Lock()
        self._tick_lock = threading.Lock()  # at most one recognition in flight
        self._scanning = False
        self._generation = 0
        self._tick_count = 0
        self._detected: Tuple[str, ...] = ()
        self._last_result: Optional[ScanResult] = None
        self._listeners: List[ResultListener] = []

        # Scheduling
        self._wake: Optional[threading.Event] = None
        self._workers: List[threading.Thread] = []

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def is_scanning(self) -> bool:
        with self._state_lock:
            return self._scanning

    @property
    def detected_allergens(self) -> Tuple[str, ...]:
        with self._state_lock:
            return self._detected

    @property
    def warning_visible(self) -> bool:
        """Whether the "allergens found" warning should be shown."""
        return len(self.detected_allergens) > 0

    @property
    def last_result(self) -> Optional[ScanResult]:
        with self._state_lock:
            return self._last_result

    @property
    def tick_count(self) -> int:
        with self._state_lock:
            return self._tick_count

    def on_result(self, listener: ResultListener) -> Callable[[], None]:
        """Register a callback for published results (called on the worker thread)."""
        with self._state_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._state_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start scanning. No-op when already scanning."""
        with self._state_lock:
            if self._scanning:
                return
            self._scanning = True
            self._generation += 1
            generation = self._generation
            wake = threading.Event()
            self._wake = wake

        self._workers = [w for w in self._workers if w.is_alive()]
        worker = threading.Thread(
            target=self._run, args=(generation, wake), name=f"scan-{generation}", daemon=True
        )
        self._workers.append(worker)
        worker.start()

        self.logger.info(f"Scanning started (every {self.interval:.1f}s)")

    def stop(self) -> None:
        """Stop scanning and clear the detected allergens and the overlay.

        An OCR call already in flight is not cancelled; its result is
        discarded when it arrives.
        """
        with self._state_lock:
            was_scanning = self._scanning
            self._scanning = False
            self._generation += 1
            self._detected = ()
            self._last_result = None
            wake = self._wake
            self._wake = None
            self.renderer.clear()

        if wake is not None:
            wake.set()

        if was_scanning:
            self.logger.info("Scanning stopped")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for worker threads to exit. Returns True when all exited."""
        deadline = None if timeout is None else time.monotonic() + timeout
        for worker in list(self._workers):
            if worker is threading.current_thread():
                continue
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            worker.join(remaining)
        self._workers = [w for w in self._workers if w.is_alive()]
        return not self._workers

    def _is_current(self, generation: int) -> bool:
        with self._state_lock:
            return self._scanning and self._generation == generation

    def _run(self, generation: int, wake: threading.Event) -> None:
        """Worker loop: wait, tick, repeat until the generation changes."""
        while self._is_current(generation):
            if wake.wait(self.interval):
                break
            if not self._is_current(generation):
                break
            try:
                self._tick(generation)
            except Exception:
                # Frame source or renderer blew up; keep the loop alive
                self.logger.exception("Scan tick failed")
        self.logger.debug(f"Scan worker {generation} exited")

    # ------------------------------------------------------------------
    # Scan-and-match cycle
    # ------------------------------------------------------------------

    def tick(self) -> Optional[ScanResult]:
        """Run one scan-and-match cycle now.

        Returns:
            The published ScanResult, or None when not scanning, when no
            frame was available, or when the session was stopped while
            the OCR call was running.
        """
        with self._state_lock:
            if not self._scanning:
                return None
            generation = self._generation
        return self._tick(generation)

    def _tick(self, generation: int) -> Optional[ScanResult]:
        with self._tick_lock:
            frame = self.frame_source()
            if frame is None or frame.size == 0 or 0 in frame.shape[:2]:
                self.diagnostics.debug("No frame available, skipping tick")
                return None

            # Rasterize: the camera thread must not change what OCR sees
            image = np.array(frame, copy=True)
            height, width = image.shape[:2]

            with self._state_lock:
                self._tick_count += 1
                tick_number = self._tick_count

            self.diagnostics.debug(f"Tick {tick_number}: recognizing {width}x{height} frame")

            error = None
            try:
                ocr_result = self.recognizer.recognize(image)
                regions = tuple(ocr_result.regions)
                text = ocr_result.text
            except Exception as e:
                self.diagnostics.error(f"OCR error: {e}", tick=tick_number)
                regions, text, error = (), "", str(e)

            for region in regions:
                self.diagnostics.debug(region.text)

            match = match_regions(regions, self.keywords.snapshot())
            for annotation in match.annotations:
                self.diagnostics.info(
                    f"MATCH {', '.join(annotation.keywords)} in {annotation.region.text!r}",
                    tick=tick_number,
                )

            result = ScanResult(
                tick=tick_number,
                allergens=match.allergens,
                annotations=match.annotations,
                regions=regions,
                text=text,
                frame_size=(width, height),
                error=error,
            )

            with self._state_lock:
                if not (self._scanning and self._generation == generation):
                    self.diagnostics.debug(f"Tick {tick_number}: session stopped, result discarded")
                    return None

                if self.renderer.size != (width, height):
                    self.renderer.resize(width, height)
                self.renderer.draw(match.annotations)

                self._detected = match.allergens
                self._last_result = result
                listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(result)
            except Exception:
                self.logger.exception("Scan result listener failed")

        return result
