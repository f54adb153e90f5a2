"""
Page Controller
===============
Wires the diagram catalog to a document: one registry, one viewport tracker,
one resize coordinator and one initializer per container.

Why is this file needed?
------------------------
1. Bootstrap: It is the single place that registers every catalog entry and
   starts observing the containers that exist in the document. Containers
   the document does not have are registered but never observed.
2. Routing: The document forwards scroll/resize notifications here, and the
   toolbar forwards layer filter requests, which reach the architecture
   diagram through the registry's handle (no globals).

Note: This module does not import PySide6; the document and the scheduler
are passed in.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol, TYPE_CHECKING

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams import CATALOG, architecture, bind_config
from docuviz.engine.activation import ViewportActivationTracker
from docuviz.engine.diagram import Diagram, DiagramInitializer
from docuviz.engine.registry import DiagramRegistry
from docuviz.engine.resize import ResizeCoordinator
from docuviz.model.view_state import FULL_VIEW

if TYPE_CHECKING:
    from docuviz.diagrams import Builder
    from docuviz.engine.geometry import Rect
    from docuviz.engine.scheduler import Scheduler
    from docuviz.engine.surface import DiagramHost

logger = logging.getLogger(__name__)


class Document(Protocol):
    def find_host(self, container_id: str) -> Optional[DiagramHost]: ...

    def bounds_provider(self, container_id: str) -> Optional[Callable[[], Optional[Rect]]]: ...


class PageController:
    def __init__(
        self,
        document: Document,
        scheduler: Scheduler,
        config: EngineConfig = DEFAULT_CONFIG,
        catalog: Optional[list[tuple[str, Builder]]] = None,
    ) -> None:
        self.config = config
        self.registry = DiagramRegistry()
        self.tracker = ViewportActivationTracker(
            self.registry,
            scheduler,
            root_margin=config.root_margin_px,
            threshold=config.intersection_threshold,
            idle_timeout_ms=config.idle_timeout_ms,
        )
        self.resizer = ResizeCoordinator(self.registry, scheduler, debounce_ms=config.resize_debounce_ms)
        self.layer_filter = FULL_VIEW

        entries = catalog if catalog is not None else CATALOG
        for container_id, builder in entries:
            factory = bind_config(builder, config)
            initializer = DiagramInitializer(container_id, factory, document.find_host, scheduler, config)
            if container_id == architecture.CONTAINER_ID:
                initializer = self._with_layer_filter(initializer)
            self.registry.register(container_id, initializer)
            self.tracker.observe(container_id, document.bounds_provider(container_id))

        logger.info(f"Registered {len(self.registry.container_ids())} diagrams, "
                    f"observing {len(self.tracker.observed())}")

    # ------------------------------------------------------------------------------
    # Document notifications
    # ------------------------------------------------------------------------------

    def on_viewport_changed(self, viewport: Rect) -> list[str]:
        return self.tracker.scan(viewport)

    def on_resize(self) -> None:
        self.resizer.on_resize()

    # ------------------------------------------------------------------------------
    # Diagram controls
    # ------------------------------------------------------------------------------

    def filter_layer(self, layer: Optional[str]) -> bool:
        """
        Highlight one architecture layer ('full' restores everything).

        Returns False when the architecture diagram has not been built yet;
        the filter is then applied as soon as it is.
        """
        self.layer_filter = layer or FULL_VIEW
        handle = self.registry.handle(architecture.CONTAINER_ID)
        if handle is None:
            logger.debug(f"Layer filter '{self.layer_filter}' deferred: architecture diagram not built yet")
            return False
        handle.filter_layer(self.layer_filter)
        return True

    def _with_layer_filter(self, initializer: DiagramInitializer) -> Callable[[], Optional[Diagram]]:
        # a filter chosen before the diagram was built applies once it is
        def run() -> Optional[Diagram]:
            diagram = initializer()
            if diagram is not None and diagram.state.layer_filter != self.layer_filter:
                diagram.filter_layer(self.layer_filter)
            return diagram
        return run

    def shutdown(self) -> None:
        self.resizer.cancel()
        for container_id in self.registry.activated():
            handle = self.registry.handle(container_id)
            if handle is not None:
                handle.teardown()
