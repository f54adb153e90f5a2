"""
View State
==========
Explicit hover / filter state for one diagram and the single function that
derives visual attributes from it.

The Qt surface never mutates styling inside pointer callbacks. Pointer events
become state transitions (``hover_enter``, ``hover_leave``, ``filter``) and the
surface re-applies whatever ``derive_visuals`` returns.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from docuviz.model.graph import DiagramDescriptor, HoverMode

FULL_VIEW = "full"

BASE_STROKE = 2.0
HOVER_STROKE = 4.0
GROW_BY = 4.0

LINK_OPACITY = 0.6
LINK_OPACITY_MATCH = 0.8
LINK_OPACITY_DIMMED = 0.08
NODE_OPACITY_DIMMED = 0.15

FOCUS_NODE_OPACITY = 0.3
FOCUS_LINK_OPACITY = 0.8
FOCUS_LINK_OPACITY_DIMMED = 0.1
FOCUS_LINK_OPACITY_IDLE = 0.5
FOCUS_SCALE = 1.15


@dataclass(frozen=True)
class ViewState:
    hover: Optional[str] = None
    layer_filter: str = FULL_VIEW

    def hover_enter(self, node_id: str) -> ViewState:
        return replace(self, hover=node_id)

    def hover_leave(self) -> ViewState:
        return replace(self, hover=None)

    def filter(self, layer: Optional[str]) -> ViewState:
        return replace(self, layer_filter=layer or FULL_VIEW)


@dataclass
class Visuals:
    """Per-element visual attributes, keyed by node id / link index."""
    node_opacity: dict[str, float] = field(default_factory=dict)
    node_stroke: dict[str, float] = field(default_factory=dict)
    node_radius: dict[str, float] = field(default_factory=dict)
    node_scale: dict[str, float] = field(default_factory=dict)
    link_opacity: dict[int, float] = field(default_factory=dict)


def derive_visuals(descriptor: DiagramDescriptor, state: ViewState) -> Visuals:
    nodes = descriptor.node_map()
    mode = descriptor.hints.hover_mode
    focus_idle = mode == HoverMode.FOCUS
    visuals = Visuals()

    for node in descriptor.nodes:
        visuals.node_opacity[node.id] = 1.0
        visuals.node_stroke[node.id] = BASE_STROKE
        visuals.node_radius[node.id] = node.radius
        visuals.node_scale[node.id] = 1.0
    for i in range(len(descriptor.links)):
        visuals.link_opacity[i] = FOCUS_LINK_OPACITY_IDLE if focus_idle else LINK_OPACITY

    # layer filter
    layer = state.layer_filter
    if layer != FULL_VIEW:
        for node in descriptor.nodes:
            visuals.node_opacity[node.id] = 1.0 if node.layer == layer else NODE_OPACITY_DIMMED
        for i, link in enumerate(descriptor.links):
            src, dst = nodes.get(link.source), nodes.get(link.target)
            touches = (src is not None and src.layer == layer) or (dst is not None and dst.layer == layer)
            visuals.link_opacity[i] = LINK_OPACITY_MATCH if touches else LINK_OPACITY_DIMMED

    # hover
    hovered = state.hover
    if hovered is None or hovered not in nodes:
        return visuals

    if mode == HoverMode.EMPHASIZE:
        visuals.node_stroke[hovered] = HOVER_STROKE
    elif mode == HoverMode.GROW:
        visuals.node_radius[hovered] = nodes[hovered].radius + GROW_BY
    elif mode == HoverMode.FOCUS:
        visuals.node_scale[hovered] = FOCUS_SCALE
        for node in descriptor.nodes:
            if node.id != hovered:
                visuals.node_opacity[node.id] = FOCUS_NODE_OPACITY
        for i, link in enumerate(descriptor.links):
            connected = hovered in (link.source, link.target)
            visuals.link_opacity[i] = FOCUS_LINK_OPACITY if connected else FOCUS_LINK_OPACITY_DIMMED

    return visuals
