"""
Rendering Contracts
===================
Protocols between the generic engine and whatever draws it.

RenderSurface is implemented by the Qt DiagramSurface (docuviz.view.surface)
and by a recording fake in the tests. DiagramHost is the container a diagram
is mounted into: it knows its width, whether rendering is possible at all,
and how to swap its placeholder for a fresh surface.
"""
from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from docuviz.engine.geometry import LinkPath
    from docuviz.engine.particles import Particle
    from docuviz.model.graph import DiagramDescriptor, Node
    from docuviz.model.view_state import Visuals


class PointerTarget(Protocol):
    """What a surface forwards pointer gestures to (the Diagram handle)."""

    def press(self, node_id: str, x: float, y: float) -> bool: ...

    def move(self, x: float, y: float) -> None: ...

    def release(self) -> None: ...

    def set_hover(self, node_id: Optional[str], global_pos: Optional[tuple[float, float]] = None) -> None: ...


class RenderSurface(Protocol):
    def build(self, descriptor: DiagramDescriptor) -> None: ...

    def bind(self, target: PointerTarget) -> None: ...

    def update_geometry(self, nodes: list[Node], paths: list[Optional[LinkPath]]) -> None: ...

    def apply_visuals(self, visuals: Visuals) -> None: ...

    def add_particle(self, particle: Particle) -> None: ...

    def remove_particle(self, particle: Particle) -> None: ...

    def clear(self) -> None: ...


class DiagramHost(Protocol):
    def width(self) -> float: ...

    def can_render(self) -> bool: ...

    def mount(self, height: float) -> RenderSurface:
        """Drop whatever the container shows (placeholder or old surface) and return a fresh surface."""
        ...
