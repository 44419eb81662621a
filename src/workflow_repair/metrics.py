"""Counters for messages re-pushed by the repair service."""

from __future__ import annotations

import logging
import threading
from collections import Counter

logger = logging.getLogger(__name__)


class RepairMetrics:
    """In-process repush counter keyed by queue name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._repushes: Counter[str] = Counter()

    def record_repush(self, queue_name: str) -> None:
        with self._lock:
            self._repushes[queue_name] += 1
        logger.debug("Recorded queue message repush", extra={"queue": queue_name})

    def count(self, queue_name: str) -> int:
        with self._lock:
            return self._repushes[queue_name]

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._repushes.values())

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(sorted(self._repushes.items()))
