# Copyright (c) 2026 Huynh Huy. All rights reserved.

"""
Allergen Keyword Store
======================

Ordered list of lowercase allergen keywords entered by the user.
"""

import threading
from typing import Iterable, Optional, Tuple

from allerscan.utils import get_logger


def normalize_keyword(raw: str) -> str:
    return raw.strip().lower()


class KeywordStore:
    """
    Append-only keyword list shared between the UI and the scan worker.

    Duplicates are kept; the matcher collapses them anyway.
    """

    def __init__(self, initial: Optional[Iterable[str]] = None):
        self.logger = get_logger("allerscan.scanner.keywords")
        self._lock = threading.Lock()
        self._keywords: list[str] = []
        self._version = 0

        for raw in initial or ():
            self.add(raw)

    def add(self, raw: str) -> Optional[str]:
        """Store ``raw`` trimmed and lowercased.

        Returns:
            The stored keyword, or None when the input was blank.
        """
        keyword = normalize_keyword(raw or "")
        if not keyword:
            return None

        with self._lock:
            self._keywords.append(keyword)
            self._version += 1

        self.logger.info(f"Added allergen keyword: {keyword!r}")
        return keyword

    def snapshot(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._keywords)

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._keywords)

    def __iter__(self):
        return iter(self.snapshot())

    def __contains__(self, keyword: str) -> bool:
        return normalize_keyword(keyword) in self.snapshot()
