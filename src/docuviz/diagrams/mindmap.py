"""
Component Mind Map
==================
The system's components as a two-level radial tree around the engine.

Why is this file needed?
------------------------
1. Layout: A tidy radial tree (d3.tree semantics for a uniform-depth
   hierarchy). Leaves are spread over the full circle with siblings twice
   as close as cousins, parents sit at the angular mean of their children
   and depth maps linearly to radius.
2. Interaction: Hovering a node focuses it. Everything else dims and only
   the links touching the node stay bright. Leaves carry their feature list
   as tooltip text.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE
from docuviz.model.graph import DiagramDescriptor, HoverMode, Link, Node, NodeShape, RenderHints

CONTAINER_ID = "mindmapGraph"
HEIGHT = 600.0
MARGIN = 80.0

ROOT = "DocuVerse Engine"

CATEGORY_COLORS = {
    "root": "#6366f1",
    "Ingestion": "#3b82f6",
    "Processing": "#8b5cf6",
    "Memory": "#10b981",
    "Interaction": "#f59e0b",
}

RADIUS_BY_DEPTH = (55.0, 38.0, 32.0)

COMPONENTS: dict[str, list[tuple[str, list[str]]]] = {
    "Ingestion": [
        ("Crawler Swarm", ["Politeness Sharding", "Per-domain limits", "robots.txt respect"]),
        ("Deduplication", ["modal.Dict", "URL normalization", "Content hashing"]),
        ("Frontier Queue", ["modal.Queue", "Dynamic expansion", "Priority scoring"]),
        ("Seed Injector", ["Cron scheduled", "Root URL mgmt", "Budget guards"]),
    ],
    "Processing": [
        ("HTML Parser", ["BeautifulSoup", "Content extraction", "Metadata capture"]),
        ("Graph Builder", ["Matrix Link", "Adjacency matrix", "Authority scores"]),
        ("Batcher", ["Batch size: 128", "Timeout: 500ms", "Queue coordination"]),
        ("Embedder", ["e5-large", "GPU: A10G x50", "8-bit quant"]),
    ],
    "Memory": [
        ("Pinecone", ["Hybrid search", "S3 bulk import", "Auto-scaling"]),
        ("S3 Bucket", ["Parquet storage", "Async ingestion", "Cost-effective"]),
        ("Graph Store", ["PageRank scores", "Link relationships", "Authority"]),
        ("DLQ Handler", ["Error capture", "Retry logic", "Alerting"]),
    ],
    "Interaction": [
        ("API Endpoint", ["Query validation", "Rate limiting", "Caching"]),
        ("LangChain", ["Chain composition", "Memory mgmt", "Tool integration"]),
        ("RAG Pipeline", ["Retrieval", "Re-ranking", "Synthesis"]),
        ("Cross-Encoder", ["Precision boost", "GPU inference", "Top-K selection"]),
    ],
}


@dataclass
class TreeNode:
    name: str
    category: str
    depth: int = 0
    notes: list[str] = field(default_factory=list)
    children: list[TreeNode] = field(default_factory=list)
    parent: Optional[TreeNode] = None
    angle: float = 0.0
    radius: float = 0.0

    def add(self, child: TreeNode) -> TreeNode:
        child.parent = self
        child.depth = self.depth + 1
        self.children.append(child)
        return child

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> list[TreeNode]:
        return [n for n in self.walk() if not n.children]


def hierarchy() -> TreeNode:
    root = TreeNode(ROOT, "root")
    for category, components in COMPONENTS.items():
        branch = root.add(TreeNode(category, category))
        for name, notes in components:
            branch.add(TreeNode(name, category, notes=list(notes)))
    return root


def separation(a: TreeNode, b: TreeNode) -> float:
    return (1.0 if a.parent is b.parent else 2.0) / a.depth


def radial_layout(root: TreeNode, radius: float) -> None:
    """Assign angle (radians, 0 = up, clockwise) and radius to every node."""
    leaves = root.leaves()
    if not leaves:
        return

    # leaf positions in separation units
    x = 0.0
    prev: Optional[TreeNode] = None
    for leaf in leaves:
        if prev is not None:
            x += separation(prev, leaf)
        leaf.angle = x
        prev = leaf

    # parents centred over their children, deepest first
    for node in sorted(root.walk(), key=lambda n: -n.depth):
        if node.children:
            node.angle = (node.children[0].angle + node.children[-1].angle) / 2

    left, right = leaves[0], leaves[-1]
    s = 1.0 if left is right else separation(left, right) / 2
    left_angle = left.angle
    kx = 2 * math.pi / (right.angle - left_angle + 2 * s)
    max_depth = max(n.depth for n in root.walk()) or 1
    # left is rewritten during the walk, so use its original angle
    for node in root.walk():
        node.angle = (node.angle - left_angle + s) * kx
        node.radius = node.depth * radius / max_depth


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    cx, cy = width / 2, HEIGHT / 2
    root = hierarchy()
    radial_layout(root, max(min(width, HEIGHT) / 2 - MARGIN, 0.0))

    nodes: list[Node] = []
    links: list[Link] = []
    for t in root.walk():
        x = cx + t.radius * math.sin(t.angle)
        y = cy - t.radius * math.cos(t.angle)
        label, sublabel = (("DocuVerse", "Engine") if t.depth == 0 else (t.name, None))
        nodes.append(Node(
            id=t.name,
            label=label,
            sublabel=sublabel,
            category=t.category,
            x=x,
            y=y,
            radius=RADIUS_BY_DEPTH[min(t.depth, len(RADIUS_BY_DEPTH) - 1)],
            shape=NodeShape.CIRCLE,
            tooltip="\n".join(t.notes) if t.notes else None,
        ))
        if t.parent is not None:
            # strokes are drawn sqrt(weight) wide: 2px to categories, 1px to leaves
            links.append(Link(t.parent.name, t.name, category=t.category, weight=max(1, 3 - t.depth) ** 2))

    hints = RenderHints(
        height=HEIGHT,
        palette=dict(CATEGORY_COLORS),
        default_color=SLATE,
        hover_mode=HoverMode.FOCUS,
        show_link_labels=False,
        arrows=False,
        link_width=1.0,
        fill_opacity=0.25,
        draggable=False,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, links, hints=hints)
