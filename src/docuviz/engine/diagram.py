"""
Diagram Handle
==============
The generic engine/renderer pairing behind every interactive diagram.

Why is this file needed?
------------------------
1. One wiring: Per-diagram code only builds a DiagramDescriptor. This module
   starts the layout engine, attaches the drag controller, starts the
   particle animation task and keeps the surface in sync, the same way for
   every diagram.
2. One handle: A Diagram is created once per container and outlives resizes;
   each render() rebuilds the surface from a fresh descriptor at the new
   width. teardown() is the single cancellation point for its timers.
3. View state: Hover and layer filtering are state transitions; visuals are
   always derived from the state, never patched in event handlers.

Classes:
    Diagram: Handle returned by a container's initializer.
    DiagramInitializer: Zero-argument initializer bound to one container.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TYPE_CHECKING

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.engine.drag import DragController
from docuviz.engine.geometry import LinkPath, link_path
from docuviz.engine.particles import ParticleAnimator
from docuviz.engine.simulation import LayoutEngine
from docuviz.engine.tooltip import peek_shared_tooltip, shared_tooltip
from docuviz.model.graph import DescriptorFactory, DiagramDescriptor, Link, Node
from docuviz.model.view_state import ViewState, derive_visuals

if TYPE_CHECKING:
    from docuviz.engine.scheduler import Scheduler
    from docuviz.engine.surface import DiagramHost, RenderSurface

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800.0


class Diagram:
    def __init__(
        self,
        container_id: str,
        factory: DescriptorFactory,
        scheduler: Scheduler,
        config: EngineConfig = DEFAULT_CONFIG,
        seed: Optional[int] = None,
    ) -> None:
        self.container_id = container_id
        self._factory = factory
        self._scheduler = scheduler
        self.config = config
        self._seed = seed

        self.descriptor: Optional[DiagramDescriptor] = None
        self.surface: Optional[RenderSurface] = None
        self.engine: Optional[LayoutEngine] = None
        self.drag: Optional[DragController] = None
        self.animator: Optional[ParticleAnimator] = None
        self.state = ViewState()
        self.renders = 0

        self._nodes: dict[str, Node] = {}

    # ------------------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------------------

    def render(self, host: DiagramHost) -> None:
        """(Re)build the diagram at the host's current width."""
        width = host.width() or DEFAULT_WIDTH
        descriptor = self._factory(width)

        self.teardown()
        self.descriptor = descriptor
        self._nodes = descriptor.node_map()
        self.state = ViewState(layer_filter=self.state.layer_filter)

        surface = host.mount(descriptor.height)
        self.surface = surface
        surface.build(descriptor)
        surface.bind(self)

        if descriptor.forces is not None:
            self.engine = LayoutEngine(
                descriptor.nodes,
                descriptor.links,
                descriptor.forces,
                scheduler=self._scheduler,
                tick_interval_ms=self.config.tick_interval_ms,
                seed=self._seed,
            )
            self.engine.on_tick(lambda _engine: self.refresh())
            if descriptor.hints.draggable:
                self.drag = DragController(descriptor.nodes, self.engine)

        self.refresh()
        self._apply_visuals()

        if self.engine is not None:
            self.engine.start()

        if descriptor.particles is not None:
            self.animator = ParticleAnimator(
                descriptor.links,
                descriptor.particles,
                self._scheduler,
                surface,
                path_for=self.path_for,
                color_for=self._particle_color,
            )
            self.animator.start()

        self.renders += 1
        logger.debug(f"Rendered '{self.container_id}' at width {width:.0f} (render #{self.renders})")

    def teardown(self) -> None:
        """Stop every timer owned by this diagram."""
        if self.animator is not None:
            self.animator.cancel()
            self.animator = None
        if self.drag is not None:
            self.drag.cancel()
            self.drag = None
        if self.engine is not None:
            self.engine.stop()
            self.engine = None
        self._hide_tooltip()

    # ------------------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------------------

    def path_for(self, link: Link) -> Optional[LinkPath]:
        hints = self.descriptor.hints
        curve = link.curved or (link.dashed and hints.curve_dashed)
        return link_path(
            self._nodes.get(link.source),
            self._nodes.get(link.target),
            link,
            curve=curve,
            bend=hints.curve_bend,
            clip=True,
        )

    def refresh(self) -> None:
        """Push current node positions and link paths to the surface."""
        if self.surface is None or self.descriptor is None:
            return
        paths = [self.path_for(link) for link in self.descriptor.links]
        self.surface.update_geometry(self.descriptor.nodes, paths)

    # ------------------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------------------

    def press(self, node_id: str, x: float, y: float) -> bool:
        if self.drag is None:
            return False
        started = self.drag.press(node_id, x, y)
        if started:
            self.refresh()
        return started

    def move(self, x: float, y: float) -> None:
        if self.drag is None:
            return
        self.drag.move(x, y)
        self.refresh()

    def release(self) -> None:
        if self.drag is not None:
            self.drag.release()

    def set_hover(self, node_id: Optional[str], global_pos: Optional[tuple[float, float]] = None) -> None:
        if node_id is not None and node_id not in self._nodes:
            node_id = None
        if node_id == self.state.hover:
            return

        self.state = self.state.hover_enter(node_id) if node_id else self.state.hover_leave()
        self._apply_visuals()

        node = self._nodes.get(node_id) if node_id else None
        if node is not None and node.tooltip:
            gx, gy = global_pos if global_pos is not None else (node.x or 0.0, node.y or 0.0)
            shared_tooltip().show(self.container_id, node.tooltip, gx, gy)
        else:
            self._hide_tooltip()

    def filter_layer(self, layer: Optional[str]) -> None:
        """Highlight one layer ('full' or None shows everything)."""
        self.state = self.state.filter(layer)
        self._apply_visuals()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _apply_visuals(self) -> None:
        if self.surface is None or self.descriptor is None:
            return
        self.surface.apply_visuals(derive_visuals(self.descriptor, self.state))

    def _hide_tooltip(self) -> None:
        tooltip = peek_shared_tooltip()
        if tooltip is not None:
            tooltip.hide(self.container_id)

    def _particle_color(self, link: Link) -> str:
        hints = self.descriptor.hints
        if link.category is not None:
            return hints.color_for(link.category)
        source = self._nodes.get(link.source)
        return hints.color_for(source.category if source is not None else None)


class DiagramInitializer:
    """
    Zero-argument, idempotent initializer for one container.

    A missing container or a host that cannot render leaves the page as it
    is (placeholder included) and returns None. Otherwise the container's
    Diagram, created on first use, is (re)rendered and returned.
    """

    def __init__(
        self,
        container_id: str,
        factory: DescriptorFactory,
        find_host: Callable[[str], Optional[DiagramHost]],
        scheduler: Scheduler,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.container_id = container_id
        self._factory = factory
        self._find_host = find_host
        self._scheduler = scheduler
        self._config = config
        self.diagram: Optional[Diagram] = None

    def __call__(self) -> Optional[Diagram]:
        host = self._find_host(self.container_id)
        if host is None:
            logger.debug(f"Container '{self.container_id}' missing; skipping diagram")
            return None
        if not host.can_render():
            logger.debug(f"No rendering capability for '{self.container_id}'; placeholder kept")
            return None

        if self.diagram is None:
            self.diagram = Diagram(self.container_id, self._factory, self._scheduler, self._config)
        self.diagram.render(host)
        return self.diagram
