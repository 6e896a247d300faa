"""Time-windowed log of recent text insertions."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

RETENTION_WINDOW_MS_DEFAULT = 60_000
MIN_INSERTION_LENGTH_DEFAULT = 5

Clock = Callable[[], int]


def system_clock_ms() -> int:
    return int(time.time() * 1000)


class EventClock:
    """Clock that follows event timestamps when the host supplies them."""

    def __init__(self, fallback: Clock = system_clock_ms) -> None:
        self._fallback = fallback
        self._pinned: int | None = None

    def pin(self, timestamp_ms: int | None) -> None:
        self._pinned = timestamp_ms

    def __call__(self) -> int:
        if self._pinned is not None:
            return self._pinned
        return self._fallback()


@dataclass(frozen=True)
class InsertionEvent:
    timestamp_ms: int
    file_id: str
    text: str
    line_number: int  # 1-based line where the insertion starts

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp_ms


class InsertionTracker:
    """Process-wide insertion log, oldest event first.

    Only ``record`` mutates the log; expired events are pruned lazily after
    each append.
    """

    def __init__(
        self,
        clock: Clock = system_clock_ms,
        *,
        retention_window_ms: int = RETENTION_WINDOW_MS_DEFAULT,
        min_length: int = MIN_INSERTION_LENGTH_DEFAULT,
    ) -> None:
        self._clock = clock
        self.retention_window_ms = retention_window_ms
        self.min_length = min_length
        self._events: list[InsertionEvent] = []
        self._lock = threading.Lock()

    def record(self, file_id: str, text: str, line_number: int) -> InsertionEvent | None:
        if len(text) <= self.min_length:
            return None
        event = InsertionEvent(self._clock(), file_id, text, line_number)
        with self._lock:
            self._events.append(event)
            self._prune_locked(event.timestamp_ms)
            retained = len(self._events)
        logger.debug(
            "tracked insertion of %d chars at %s:%d (%d retained)",
            len(text),
            file_id,
            line_number,
            retained,
        )
        return event

    def snapshot(self, file_id: str) -> tuple[InsertionEvent, ...]:
        with self._lock:
            return tuple(e for e in self._events if e.file_id == file_id)

    def prune(self) -> int:
        """Drop expired events now; returns how many were removed."""
        with self._lock:
            return self._prune_locked(self._clock())

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _prune_locked(self, now_ms: int) -> int:
        before = len(self._events)
        self._events = [e for e in self._events if e.age_ms(now_ms) <= self.retention_window_ms]
        removed = before - len(self._events)
        if removed:
            logger.debug("pruned %d expired insertion(s)", removed)
        return removed
