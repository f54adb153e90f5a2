"""Shared test fixtures: a manual-clock scheduler and recording render fakes."""
from __future__ import annotations

import heapq
import itertools
import os
from typing import Callable, Optional

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from docuviz.engine.tooltip import reset_shared_tooltip  # noqa: E402


class FakeHandle:
    def __init__(self) -> None:
        self.active = True

    def cancel(self) -> None:
        self.active = False


class FakeScheduler:
    """Scheduler protocol on a manual clock. Nothing runs until advance()."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None], FakeHandle]] = []
        self._seq = itertools.count()
        self.idle_requests: list[int] = []

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> FakeHandle:
        handle = FakeHandle()
        heapq.heappush(self._queue, (self.now + max(0, delay_ms), next(self._seq), callback, handle))
        return handle

    def call_when_idle(self, callback: Callable[[], None], timeout_ms: int) -> FakeHandle:
        self.idle_requests.append(timeout_ms)
        return self.call_later(0, callback)

    def now_ms(self) -> float:
        return self.now

    @property
    def pending(self) -> int:
        return sum(1 for *_, h in self._queue if h.active)

    def advance(self, ms: float) -> None:
        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, callback, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self.now = due
            handle.active = False
            callback()
        self.now = target

    def run_until_idle(self, limit_ms: float = 60_000, step_ms: float = 16) -> None:
        elapsed = 0.0
        while self.pending and elapsed < limit_ms:
            self.advance(step_ms)
            elapsed += step_ms


class RecordingSurface:
    def __init__(self) -> None:
        self.descriptor = None
        self.target = None
        self.geometry_updates = 0
        self.last_paths: list = []
        self.visuals = None
        self.particles: dict[int, object] = {}
        self.added: list = []
        self.removed: list = []
        self.cleared = 0

    def build(self, descriptor) -> None:
        self.descriptor = descriptor

    def bind(self, target) -> None:
        self.target = target

    def update_geometry(self, nodes, paths) -> None:
        self.geometry_updates += 1
        self.last_paths = list(paths)

    def apply_visuals(self, visuals) -> None:
        self.visuals = visuals

    def add_particle(self, particle) -> None:
        self.added.append(particle)
        self.particles[particle.id] = particle

    def remove_particle(self, particle) -> None:
        self.removed.append(particle)
        self.particles.pop(particle.id, None)

    def clear(self) -> None:
        self.cleared += 1


class RecordingHost:
    def __init__(self, width: float = 900.0, renderable: bool = True) -> None:
        self._width = width
        self.renderable = renderable
        self.surfaces: list[RecordingSurface] = []
        self.heights: list[float] = []

    def width(self) -> float:
        return self._width

    def resize(self, width: float) -> None:
        self._width = width

    def can_render(self) -> bool:
        return self.renderable

    def mount(self, height: float) -> RecordingSurface:
        surface = RecordingSurface()
        self.surfaces.append(surface)
        self.heights.append(height)
        return surface

    @property
    def surface(self) -> Optional[RecordingSurface]:
        return self.surfaces[-1] if self.surfaces else None


@pytest.fixture(autouse=True)
def fresh_tooltip():
    reset_shared_tooltip()
    yield
    reset_shared_tooltip()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture()
def make_host():
    return RecordingHost
