"""
Scheduling Primitives
=====================
The engine never blocks. Every "wait" is a future callback registered with a
Scheduler: a plain timer, an idle callback with a bounded timeout, a
debounced trigger, or a repeating task.

Why is this file needed?
------------------------
1. Host independence: The engine only talks to the Scheduler protocol. The
   Qt application plugs in a QTimer-backed implementation
   (docuviz.controller.qt_scheduler); tests plug in a manual clock.
2. Cancellation: Every scheduled callback returns a handle with cancel(), so
   a diagram has a single place to stop its timers on teardown.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    """Single-threaded timer/idle queue of the host event loop."""

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle: ...

    def call_when_idle(self, callback: Callback, timeout_ms: int) -> TimerHandle:
        """Run once when the loop is idle, or after timeout_ms at the latest."""
        ...

    def now_ms(self) -> float: ...


class Debouncer:
    """Runs the callback once the trigger has been quiet for wait_ms."""

    def __init__(self, scheduler: Scheduler, wait_ms: int, callback: Callback) -> None:
        self._scheduler = scheduler
        self.wait_ms = wait_ms
        self._callback = callback
        self._pending: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and self._pending.active

    def trigger(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self._scheduler.call_later(self.wait_ms, self._fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self) -> None:
        self._pending = None
        self._callback()


class RepeatingTask:
    """
    A cancellable fixed-interval task.

    The first run happens immediately on start() (like calling the body once
    and then installing an interval), later runs every interval_ms.
    """

    def __init__(self, scheduler: Scheduler, interval_ms: int, callback: Callback) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self._scheduler = scheduler
        self.interval_ms = interval_ms
        self._callback = callback
        self._next: Optional[TimerHandle] = None
        self._running = False
        self.runs = 0

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._run()

    def cancel(self) -> None:
        self._running = False
        if self._next is not None:
            self._next.cancel()
            self._next = None

    def _run(self) -> None:
        if not self._running:
            return
        self.runs += 1
        self._next = self._scheduler.call_later(self.interval_ms, self._run)
        self._callback()
