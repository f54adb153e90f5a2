"""
Diagram Data Model
==================
Plain data classes describing one diagram: its nodes, links, layout
parameters and render hints.

Why is this file needed?
------------------------
1. Decoupling: Every diagram on the page is reduced to a DiagramDescriptor.
   The layout engine, the particle animator and the Qt surface only ever read
   descriptors, so per-diagram code is nothing but descriptor construction.
2. Ownership: Node positions live on the Node objects. They are written by
   the layout engine (or by the drag controller through fx/fy) and read by
   the renderer.

Classes:
    Node, Link: Graph elements.
    ForceParams: Force-simulation coefficients (None on a descriptor = static layout).
    ParticleParams: Data-flow animation settings (None = no particles).
    RenderHints: Palette, hover behaviour, background bands and legend.
    DiagramDescriptor: The aggregate consumed by the engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Optional, Union


class NodeShape(StrEnum):
    RECT = "rect"
    CIRCLE = "circle"


class HoverMode(StrEnum):
    """How a diagram reacts to the pointer resting on a node."""
    EMPHASIZE = "emphasize"  # thicker outline
    GROW = "grow"            # larger radius (+ tooltip)
    FOCUS = "focus"          # dim everything not connected
    NONE = "none"


@dataclass
class Node:
    id: str
    label: str = ""
    sublabel: Optional[str] = None
    category: str = "default"
    layer: Optional[str] = None

    # position (mutable, owned by the layout engine)
    x: Optional[float] = None
    y: Optional[float] = None
    # pin (owned by the drag controller)
    fx: Optional[float] = None
    fy: Optional[float] = None

    radius: float = 20.0
    shape: NodeShape = NodeShape.CIRCLE
    width: float = 0.0
    height: float = 0.0
    tooltip: Optional[str] = None

    @property
    def is_pinned(self) -> bool:
        return self.fx is not None or self.fy is not None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None

    def pin(self, x: float, y: float) -> None:
        self.fx = x
        self.fy = y

    def unpin(self) -> None:
        self.fx = None
        self.fy = None


@dataclass(frozen=True)
class Link:
    source: str
    target: str
    label: str = ""
    seq: Optional[Union[int, str]] = None
    dashed: bool = False
    curved: bool = False
    category: Optional[str] = None
    weight: float = 1.0
    label_offset: tuple[float, float] = (0.0, 0.0)
    delay_ms: Optional[int] = None  # explicit particle departure, overrides stagger

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


@dataclass
class ForceParams:
    link_distance: float = 140.0
    link_strength: Optional[float] = 0.4  # None -> 1 / min(degree) as d3 does
    charge_strength: float = -600.0

    # positioning forces; layer_targets maps Node.layer -> coordinate on layer_axis
    layer_axis: str = "y"
    layer_targets: dict[str, float] = field(default_factory=dict)
    layer_strength: float = 0.9
    x_target: Optional[float] = None
    x_strength: float = 0.03
    y_target: Optional[float] = None
    y_strength: float = 0.03

    center: Optional[tuple[float, float]] = None

    # collision: constant radius, or per-node radius + padding when None
    collision_radius: Optional[float] = 65.0
    collision_padding: float = 10.0

    alpha: float = 1.0
    alpha_min: float = 0.001
    alpha_decay: float = 1.0 - 0.001 ** (1.0 / 300.0)
    velocity_decay: float = 0.4
    reheat_alpha: float = 0.3


@dataclass
class ParticleParams:
    duration_ms: int = 1500
    interval_ms: int = 4000
    stagger_ms: int = 300
    radius: float = 4.0
    exclude: Optional[Callable[[Link], bool]] = None
    radius_for: Optional[Callable[[Link], float]] = None


@dataclass(frozen=True)
class Band:
    """A labelled background region (pipeline stage or graph layer)."""
    x: float
    y: float
    width: float
    height: float
    label: str
    color: str


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str
    dashed: bool = False
    line: bool = False


@dataclass
class RenderHints:
    height: float = 400.0
    palette: dict[str, str] = field(default_factory=dict)
    default_color: str = "#64748b"
    hover_mode: HoverMode = HoverMode.EMPHASIZE
    curve_dashed: bool = False
    curve_bend: float = 30.0
    show_seq_badges: bool = False
    show_link_labels: bool = True
    arrows: bool = True
    fill_opacity: float = 1.0
    link_width: float = 2.0  # scaled by sqrt(link.weight)
    bands: list[Band] = field(default_factory=list)
    legend: list[LegendEntry] = field(default_factory=list)
    draggable: bool = True

    def color_for(self, key: Optional[str]) -> str:
        if key is None:
            return self.default_color
        return self.palette.get(key, self.default_color)


@dataclass
class DiagramDescriptor:
    """Everything the generic engine/renderer pair needs to build one diagram."""
    name: str
    width: float
    nodes: list[Node]
    links: list[Link]
    forces: Optional[ForceParams] = None
    particles: Optional[ParticleParams] = None
    hints: RenderHints = field(default_factory=RenderHints)

    @property
    def height(self) -> float:
        return self.hints.height

    @property
    def simulated(self) -> bool:
        return self.forces is not None

    def node_map(self) -> dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def layers(self) -> list[str]:
        seen: list[str] = []
        for n in self.nodes:
            if n.layer is not None and n.layer not in seen:
                seen.append(n.layer)
        return seen


# Builds a descriptor sized to the container's current width.
DescriptorFactory = Callable[[float], DiagramDescriptor]
