# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
AllerScan Diagnostics
=====================

Explicit channel for debug events coming out of the scan loop.

The UI subscribes to it to show a live debug panel; every event is also
forwarded to the ``allerscan`` logger so nothing is lost when no panel
is attached.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, List

from allerscan.utils.logging import get_logger


@dataclass(frozen=True)
class DiagnosticEvent:
    """A single debug event."""
    level: int
    message: str
    timestamp: float = field(default_factory=time.time)
    context: dict = field(default_factory=dict)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


Subscriber = Callable[[DiagnosticEvent], None]


class DiagnosticChannel:
    """Thread-safe fan-out of diagnostic events with a short history."""

    def __init__(self, maxlen: int = 200, logger_name: str = "allerscan.diagnostics"):
        self.logger = get_logger(logger_name)
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []
        self._recent: deque = deque(maxlen=maxlen)

    def emit(self, level: int, message: str, **context) -> DiagnosticEvent:
        event = DiagnosticEvent(level=level, message=message, context=context)
        self.logger.log(level, message)

        with self._lock:
            self._recent.append(event)
            subscribers = list(self._subscribers)

        for callback in subscribers:
            try:
                callback(event)
            except Exception:
                self.logger.exception("Diagnostic subscriber %r failed", callback)
        return event

    def debug(self, message: str, **context) -> DiagnosticEvent:
        return self.emit(logging.DEBUG, message, **context)

    def info(self, message: str, **context) -> DiagnosticEvent:
        return self.emit(logging.INFO, message, **context)

    def error(self, message: str, **context) -> DiagnosticEvent:
        return self.emit(logging.ERROR, message, **context)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def recent(self) -> List[DiagnosticEvent]:
        with self._lock:
            return list(self._recent)
