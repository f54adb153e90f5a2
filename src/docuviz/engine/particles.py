"""
Particle Animator
=================
Short-lived tokens that travel along each link to show the direction of data
flow.

Every cycle spawns one particle per eligible link, staggered by a fixed
increment per link index. A particle moves from the source outline to the
target outline over a fixed duration at constant rate and is then removed
(never recycled). The cycle repeats on an interval strictly longer than one
staggered pass, so a link never carries two particles at once.

All of this is cosmetic: a particle that cannot be placed or drawn is
skipped and logged, nothing else is affected.
"""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, TYPE_CHECKING

from docuviz.engine.geometry import LinkPath, Point
from docuviz.engine.scheduler import RepeatingTask
from docuviz.model.graph import Link, ParticleParams

if TYPE_CHECKING:
    from docuviz.engine.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

_particle_ids = itertools.count(1)


@dataclass
class Particle:
    link: Link
    path: LinkPath
    color: str
    radius: float
    born_ms: float
    duration_ms: int
    offset_ms: int
    id: int = field(default_factory=lambda: next(_particle_ids))

    def progress(self, now_ms: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min(1.0, max(0.0, (now_ms - self.born_ms) / self.duration_ms))

    def position(self, now_ms: float) -> Point:
        return self.path.point_at(self.progress(now_ms))


class ParticleSink(Protocol):
    def add_particle(self, particle: Particle) -> None: ...

    def remove_particle(self, particle: Particle) -> None: ...


class ParticleAnimator:
    """A cancellable animation task owning every particle of one diagram."""

    def __init__(
        self,
        links: list[Link],
        params: ParticleParams,
        scheduler: Scheduler,
        sink: ParticleSink,
        path_for: Callable[[Link], Optional[LinkPath]],
        color_for: Callable[[Link], str],
    ) -> None:
        self.params = params
        self._scheduler = scheduler
        self._sink = sink
        self._path_for = path_for
        self._color_for = color_for

        exclude = params.exclude or (lambda _link: False)
        self.eligible: list[Link] = [lk for lk in links if not exclude(lk)]
        self.offsets: list[int] = [
            lk.delay_ms if lk.delay_ms is not None else i * params.stagger_ms
            for i, lk in enumerate(self.eligible)
        ]
        self.interval_ms = self._effective_interval()

        self._task = RepeatingTask(scheduler, self.interval_ms, self._cycle)
        self._pending: list[TimerHandle] = []
        self._live: dict[int, tuple[Particle, TimerHandle]] = {}
        self.spawned = 0
        self.removed = 0

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._task.is_running

    @property
    def cycles(self) -> int:
        return self._task.runs

    @property
    def live(self) -> list[Particle]:
        return [p for p, _ in self._live.values()]

    def pass_length_ms(self) -> int:
        """Time from the first departure of a cycle until the last arrival."""
        if not self.offsets:
            return 0
        return max(self.offsets) + self.params.duration_ms

    def start(self) -> None:
        if not self.eligible:
            return
        self._task.start()

    def cancel(self) -> None:
        self._task.cancel()
        for handle in self._pending:
            handle.cancel()
        self._pending.clear()
        for particle, handle in list(self._live.values()):
            handle.cancel()
            self._remove(particle)
        self._live.clear()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _effective_interval(self) -> int:
        interval = self.params.interval_ms
        pass_ms = self.pass_length_ms()
        if interval <= pass_ms:
            stretched = pass_ms + max(self.params.stagger_ms, 1)
            logger.warning(f"Particle interval {interval} ms overlaps a {pass_ms} ms staggered pass; using {stretched} ms")
            return stretched
        return interval

    def _cycle(self) -> None:
        self._pending = [h for h in self._pending if h.active]
        for link, offset in zip(self.eligible, self.offsets):
            handle = self._scheduler.call_later(offset, lambda lk=link, off=offset: self._spawn(lk, off))
            self._pending.append(handle)

    def _spawn(self, link: Link, offset: int) -> None:
        try:
            path = self._path_for(link)
        except Exception as e:
            logger.debug(f"Could not compute particle path for {link.source}->{link.target}: {e}")
            return
        if path is None:
            logger.debug(f"Skipping particle on {link.source} -> {link.target}: endpoint missing")
            return

        radius = self.params.radius_for(link) if self.params.radius_for else self.params.radius
        particle = Particle(
            link=link,
            path=path,
            color=self._color_for(link),
            radius=radius,
            born_ms=self._scheduler.now_ms(),
            duration_ms=self.params.duration_ms,
            offset_ms=offset,
        )
        try:
            self._sink.add_particle(particle)
        except Exception as e:
            logger.debug(f"Particle could not be drawn: {e}")
            return

        self.spawned += 1
        handle = self._scheduler.call_later(self.params.duration_ms, lambda: self._expire(particle))
        self._live[particle.id] = (particle, handle)

    def _expire(self, particle: Particle) -> None:
        if self._live.pop(particle.id, None) is not None:
            self._remove(particle)

    def _remove(self, particle: Particle) -> None:
        self.removed += 1
        try:
            self._sink.remove_particle(particle)
        except Exception as e:
            logger.debug(f"Particle could not be removed: {e}")
