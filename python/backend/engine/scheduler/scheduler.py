"""Cooperative, single-threaded scheduling of deferred callbacks.

Every callback is owned by a string key.  Scheduling under a key that
already holds a callback replaces it, so a key can never fire twice
for one logical timer.  Time is in milliseconds.
"""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def now(self) -> float: ...

    def call_later(self, key: str, delay_ms: float, callback: Callable[[], None]) -> None: ...

    def call_every(self, key: str, interval_ms: float, callback: Callable[[], None]) -> None: ...

    def cancel(self, key: str) -> bool: ...

    def pending(self, key: str) -> bool: ...


@dataclass
class _Task:
    due: float
    seq: int
    callback: Callable[[], None]
    interval: float | None = None


class ManualScheduler:
    """Virtual clock; time only moves when :meth:`advance` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._tasks: dict[str, _Task] = {}
        self._seq = itertools.count()

    # -- clock ----------------------------------------------------------------

    def now(self) -> float:
        return self._now

    # -- scheduling -----------------------------------------------------------

    def call_later(self, key: str, delay_ms: float, callback: Callable[[], None]) -> None:
        self._replace(key, _Task(self._now + max(0.0, delay_ms), next(self._seq), callback))

    def call_every(self, key: str, interval_ms: float, callback: Callable[[], None]) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        self._replace(
            key,
            _Task(self._now + interval_ms, next(self._seq), callback, interval=interval_ms),
        )

    def cancel(self, key: str) -> bool:
        return self._tasks.pop(key, None) is not None

    def cancel_all(self, prefix: str = "") -> None:
        for key in [k for k in self._tasks if k.startswith(prefix)]:
            del self._tasks[key]

    def pending(self, key: str) -> bool:
        return key in self._tasks

    @property
    def keys(self) -> list[str]:
        return sorted(self._tasks)

    def _replace(self, key: str, task: _Task) -> None:
        if key in self._tasks:
            logger.debug("Replacing scheduled task %r", key)
        self._tasks[key] = task

    # -- running --------------------------------------------------------------

    def advance(self, ms: float) -> None:
        """Move the clock forward by *ms*, firing due callbacks in order."""
        target = self._now + max(0.0, ms)
        while True:
            due = [(t.due, t.seq, k) for k, t in self._tasks.items() if t.due <= target]
            if not due:
                break
            _, _, key = min(due)
            task = self._tasks[key]
            self._now = max(self._now, task.due)
            if task.interval is None:
                del self._tasks[key]
            else:
                task.due += task.interval
                task.seq = next(self._seq)
            task.callback()
        self._now = target

    def run_due(self) -> None:
        self.advance(0)


class RealtimeScheduler(ManualScheduler):
    """Virtual clock pinned to ``time.monotonic``; pump it from a UI loop."""

    def __init__(self) -> None:
        super().__init__()
        self._origin = time.monotonic()

    def pump(self) -> None:
        elapsed = (time.monotonic() - self._origin) * 1000.0
        self.advance(elapsed - self._now)
