"""
HNSW Index Diagram
==================
The layered navigable-small-world graph behind the vector index.

Three layers of decreasing density are laid out on fixed bands. Inside a
layer, nodes connect to their neighbours (local) and, above the base layer,
to the node two steps further (long-range). Every upper-layer node also has
a dashed link down to the node below it. Hovering a node grows it and shows
its id and level.
"""
from __future__ import annotations

from dataclasses import dataclass

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE
from docuviz.model.graph import (
    Band, DiagramDescriptor, HoverMode, LegendEntry, Link, Node, NodeShape, RenderHints
)

CONTAINER_ID = "hnswVisualization"
HEIGHT = 400.0

LOCAL = "local"
LONG_RANGE = "long_range"
CROSS_LAYER = "cross_layer"
QUERY = "query"

LINK_COLORS = {
    LOCAL: SLATE,
    LONG_RANGE: "#22d3ee",
    CROSS_LAYER: "#475569",
    QUERY: "#22d3ee",
}


@dataclass(frozen=True)
class Layer:
    level: int
    label: str
    y: float
    size: int
    color: str
    radius: float

    @property
    def key(self) -> str:
        return f"L{self.level}"


LAYERS = (
    Layer(2, "Layer 2 (Top)", 50.0, 3, "#ef4444", 10.0),
    Layer(1, "Layer 1", 160.0, 8, "#f59e0b", 8.0),
    Layer(0, "Layer 0 (Base)", 280.0, 20, "#6366f1", 6.0),
)


def node_id(level: int, index: int) -> str:
    return f"L{level}-N{index}"


def layer_links(layer: Layer) -> list[Link]:
    links: list[Link] = []
    for i in range(layer.size - 1):
        # the base layer keeps every other neighbour link for legibility
        if i % 2 == 0 or layer.level > 0:
            links.append(Link(node_id(layer.level, i), node_id(layer.level, i + 1), category=LOCAL, weight=2.25))
        if layer.level > 0 and i + 2 < layer.size:
            links.append(Link(node_id(layer.level, i), node_id(layer.level, i + 2), category=LONG_RANGE, weight=4.0))
    return links


def cross_layer_links(upper: Layer, lower: Layer) -> list[Link]:
    links: list[Link] = []
    for i in range(upper.size):
        j = int(i * (lower.size / upper.size))
        if j < lower.size:
            links.append(Link(node_id(upper.level, i), node_id(lower.level, j), dashed=True, category=CROSS_LAYER))
    return links


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    nodes: list[Node] = []
    for layer in LAYERS:
        spacing = (width - 100) / (layer.size + 1)
        for i in range(layer.size):
            nid = node_id(layer.level, i)
            nodes.append(Node(
                id=nid,
                category=layer.key,
                layer=layer.key,
                x=50 + spacing * (i + 1),
                y=layer.y,
                radius=layer.radius,
                shape=NodeShape.CIRCLE,
                tooltip=f"Node {nid}<br/>Level: {layer.level}",
            ))
    nodes.append(Node(id="query", label="Query", category=QUERY, x=width - 80, y=50.0, radius=12.0))

    links: list[Link] = []
    for upper, lower in zip(LAYERS, LAYERS[1:]):
        links.extend(cross_layer_links(upper, lower))
    for layer in LAYERS:
        links.extend(layer_links(layer))

    palette = {layer.key: layer.color for layer in LAYERS}
    palette.update(LINK_COLORS)
    hints = RenderHints(
        height=HEIGHT,
        palette=palette,
        default_color=SLATE,
        hover_mode=HoverMode.GROW,
        show_link_labels=False,
        arrows=False,
        link_width=1.0,
        bands=[Band(30, layer.y - 30, width - 60, 60, layer.label, layer.color) for layer in LAYERS],
        legend=[
            LegendEntry("Local connection", LINK_COLORS[LOCAL], line=True),
            LegendEntry("Long-range connection", LINK_COLORS[LONG_RANGE], line=True),
            LegendEntry("Cross-layer link", LINK_COLORS[CROSS_LAYER], dashed=True, line=True),
        ],
        draggable=False,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, links, hints=hints)
