"""
Viewport Activation Tracker
===========================
Watches registered containers and activates each one the first time it comes
(close to) into view.

A container intersects when at least `threshold` of its area lies inside the
viewport grown by `root_margin` px, so loading starts slightly before the
diagram is actually visible. The first intersection claims the container in
the registry's activation record, defers the initializer to an idle moment
(bounded by `idle_timeout_ms`) and stops observing the container.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

from docuviz.engine.geometry import Rect, intersection_ratio

if TYPE_CHECKING:
    from docuviz.engine.registry import DiagramRegistry
    from docuviz.engine.scheduler import Scheduler

logger = logging.getLogger(__name__)

BoundsProvider = Callable[[], Optional[Rect]]


class ViewportActivationTracker:
    def __init__(
        self,
        registry: DiagramRegistry,
        scheduler: Scheduler,
        root_margin: float = 100.0,
        threshold: float = 0.1,
        idle_timeout_ms: int = 500,
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {threshold}")
        self._registry = registry
        self._scheduler = scheduler
        self.root_margin = root_margin
        self.threshold = threshold
        self.idle_timeout_ms = idle_timeout_ms
        self._observed: dict[str, BoundsProvider] = {}

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def observe(self, container_id: str, bounds: Optional[BoundsProvider]) -> bool:
        """
        Start observing a container. bounds=None means the element does not
        exist in the document; it is skipped without error.
        """
        if bounds is None:
            logger.debug(f"Container '{container_id}' not found; not observed")
            return False
        if self._registry.is_activated(container_id):
            return False
        self._observed[container_id] = bounds
        return True

    def unobserve(self, container_id: str) -> None:
        self._observed.pop(container_id, None)

    def is_observing(self, container_id: str) -> bool:
        return container_id in self._observed

    def observed(self) -> list[str]:
        return list(self._observed)

    def scan(self, viewport: Rect) -> list[str]:
        """Evaluate every observed container against the viewport. Returns newly activated ids."""
        activated: list[str] = []
        for container_id, bounds in list(self._observed.items()):
            rect = bounds()
            if rect is None:
                continue
            ratio = intersection_ratio(rect, viewport, self.root_margin)
            if self.notify(container_id, ratio):
                activated.append(container_id)
        return activated

    def notify(self, container_id: str, ratio: float) -> bool:
        """Feed one intersection entry. Returns True if this activated the container."""
        if container_id not in self._observed:
            return False
        if ratio <= 0.0 or ratio < self.threshold:
            return False

        claimed = self._registry.mark_activated(container_id)
        if claimed:
            logger.debug(f"Activating '{container_id}' (visible ratio {ratio:.2f})")
            self._scheduler.call_when_idle(
                lambda: self._registry.invoke(container_id), self.idle_timeout_ms
            )
        self.unobserve(container_id)
        return claimed
