"""
Resize Coordinator
==================
Re-renders activated diagrams after the window has stopped resizing.

Only containers in the activation record are touched; a diagram that has
never been scrolled into view is not built early. Each pass re-invokes the
initializer, which rebuilds the surface at the container's new width.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docuviz.engine.scheduler import Debouncer

if TYPE_CHECKING:
    from docuviz.engine.registry import DiagramRegistry
    from docuviz.engine.scheduler import Scheduler

logger = logging.getLogger(__name__)


class ResizeCoordinator:
    def __init__(self, registry: DiagramRegistry, scheduler: Scheduler, debounce_ms: int = 250) -> None:
        self._registry = registry
        self._debouncer = Debouncer(scheduler, debounce_ms, self._rerender)
        self.passes = 0

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def on_resize(self) -> None:
        self._debouncer.trigger()

    def cancel(self) -> None:
        self._debouncer.cancel()

    def _rerender(self) -> None:
        self.passes += 1
        activated = self._registry.activated()
        logger.debug(f"Resize pass {self.passes}: re-rendering {len(activated)} diagram(s)")
        for container_id in activated:
            self._registry.invoke(container_id)
