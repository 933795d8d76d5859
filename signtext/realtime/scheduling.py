from __future__ import annotations

import logging
import threading
from typing import Generic, Optional, Tuple, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class LatestFrameSlot(Generic[T]):
    """
    Single-item hand-off between a producer and a consumer thread.

    `offer` never blocks: a newer item replaces one that has not been taken
    yet (keep-latest). `take` waits on a condition until an item is present
    or the slot is closed.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: Optional[T] = None
        self._has_item = False
        self._closed = False
        self.dropped = 0

    def offer(self, item: T) -> bool:
        """Store item; returns True if an untaken item was overwritten."""
        with self._cond:
            replaced = self._has_item
            if replaced:
                self.dropped += 1
            self._item = item
            self._has_item = True
            self._cond.notify()
            return replaced

    def take(self, timeout: Optional[float] = None) -> Optional[T]:
        with self._cond:
            if not self._cond.wait_for(lambda: self._has_item or self._closed, timeout=timeout):
                return None
            if not self._has_item:
                return None
            item = self._item
            self._item = None
            self._has_item = False
            return item

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        return self._closed


class ResultSequencer(Generic[T]):
    """Passes results through only in strictly increasing timestamp order."""

    def __init__(self) -> None:
        self._last_ts: Optional[float] = None
        self.dropped = 0

    def accept(self, timestamp: float, result: T) -> Optional[Tuple[float, T]]:
        if self._last_ts is not None and timestamp <= self._last_ts:
            self.dropped += 1
            LOGGER.warning("Dropping late result ts=%.1f (last applied %.1f)", timestamp, self._last_ts)
            return None
        self._last_ts = timestamp
        return timestamp, result
