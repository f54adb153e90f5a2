"""
Qt Scheduler
============
QTimer-backed implementation of the engine's Scheduler protocol.

Why is this file needed?
------------------------
1. Event loop: The engine never blocks; every wait is a single-shot QTimer
   owned by this scheduler, so all callbacks run on the GUI thread in the
   order Qt delivers them.
2. Idle work: Qt has no requestIdleCallback. A zero-interval timer fires
   once the event queue has been drained, which is the idle moment; a second
   timer bounds the wait by the requested timeout. Whichever fires first
   runs the callback and cancels the other.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer

logger = logging.getLogger(__name__)


class QtTimerHandle:
    def __init__(self, timers: list[QTimer], owner: QtScheduler) -> None:
        self._timers = timers
        self._owner = owner
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        for timer in self._timers:
            timer.stop()
            timer.deleteLater()
        self._owner._forget(self)

    def _fire(self, callback: Callable[[], None]) -> None:
        if not self._active:
            return
        self.cancel()
        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback failed")


class QtScheduler(QObject):
    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._clock = QElapsedTimer()
        self._clock.start()
        self._handles: set[QtTimerHandle] = set()

    # ------------------------------------------------------------------------------
    # Scheduler protocol
    # ------------------------------------------------------------------------------

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> QtTimerHandle:
        timer = self._single_shot(max(0, int(delay_ms)))
        handle = QtTimerHandle([timer], self)
        timer.timeout.connect(lambda: handle._fire(callback))
        self._handles.add(handle)
        timer.start()
        return handle

    def call_when_idle(self, callback: Callable[[], None], timeout_ms: int) -> QtTimerHandle:
        idle = self._single_shot(0)
        deadline = self._single_shot(max(0, int(timeout_ms)))
        handle = QtTimerHandle([idle, deadline], self)
        idle.timeout.connect(lambda: handle._fire(callback))
        deadline.timeout.connect(lambda: handle._fire(callback))
        self._handles.add(handle)
        idle.start()
        deadline.start()
        return handle

    def now_ms(self) -> float:
        return float(self._clock.elapsed())

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def pending(self) -> int:
        return len(self._handles)

    def cancel_all(self) -> None:
        for handle in list(self._handles):
            handle.cancel()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _single_shot(self, interval_ms: int) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(interval_ms)
        return timer

    def _forget(self, handle: QtTimerHandle) -> None:
        self._handles.discard(handle)
