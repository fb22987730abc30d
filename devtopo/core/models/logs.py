"""
ServiceLogs — push-only, per-service line stream with bounded replay.

Build output and other per-service text is written here. Subscribers
(a UI, the CLI, a test) receive each line as it is written; late
subscribers can read the replay buffer.

Thread safety: ``_lock`` protects ``_buffer`` and ``_subscribers``.
Callbacks run outside the lock.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable

logger = logging.getLogger(__name__)

LogSubscriber = Callable[[str], None]


class ServiceLogs:
    """Line-oriented log sink attached to a single service."""

    def __init__(self, *, buffer_size: int = 5000) -> None:
        self._lock = threading.Lock()
        self._buffer: deque[str] = deque(maxlen=buffer_size)
        self._subscribers: list[LogSubscriber] = []

    def write(self, text: str) -> None:
        """Push text to the sink. Multi-line text is split into lines."""
        lines = text.splitlines() or [text]
        with self._lock:
            self._buffer.extend(lines)
            subscribers = list(self._subscribers)

        for line in lines:
            for callback in subscribers:
                try:
                    callback(line)
                except Exception:
                    logger.exception("Log subscriber failed")

    def subscribe(self, callback: LogSubscriber) -> Callable[[], None]:
        """Register a callback for new lines. Returns an unsubscribe function."""
        with self._lock:
            self._subscribers.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    @property
    def lines(self) -> list[str]:
        """Snapshot of the replay buffer."""
        with self._lock:
            return list(self._buffer)

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
