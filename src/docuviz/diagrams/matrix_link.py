"""
Matrix link graph: documentation pages and the references between them.

Node size stands for authority, stroke width for reference weight. Force
layout centred in the container; nodes can be dragged.
"""
from __future__ import annotations

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE, forces_from
from docuviz.model.graph import DiagramDescriptor, HoverMode, LegendEntry, Link, Node, RenderHints

CONTAINER_ID = "matrixLinkGraph"
HEIGHT = 350.0

GROUP_COLORS = {
    "official": "#10b981",
    "api": "#6366f1",
    "community": "#f59e0b",
}

# (id, label, group, size)
PAGES = [
    ("react-docs", "React Docs", "official", 28),
    ("useEffect", "useEffect", "api", 24),
    ("useState", "useState", "api", 22),
    ("blog-1", "Blog Post 1", "community", 14),
    ("blog-2", "Blog Post 2", "community", 12),
    ("so-answer", "SO Answer", "community", 18),
    ("tutorial", "Tutorial", "community", 16),
    ("hooks-intro", "Hooks Intro", "official", 20),
]

REFERENCES = [
    ("react-docs", "useEffect", 5),
    ("react-docs", "useState", 5),
    ("react-docs", "hooks-intro", 4),
    ("hooks-intro", "useEffect", 3),
    ("hooks-intro", "useState", 3),
    ("blog-1", "useEffect", 2),
    ("blog-2", "useEffect", 2),
    ("so-answer", "useEffect", 3),
    ("tutorial", "useState", 2),
    ("tutorial", "useEffect", 2),
    ("blog-1", "hooks-intro", 1),
]


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    nodes = [
        Node(id=page_id, label=label, category=group, radius=float(size))
        for page_id, label, group, size in PAGES
    ]
    links = [Link(source, target, weight=float(weight)) for source, target, weight in REFERENCES]

    forces = forces_from(
        config,
        link_distance=80.0,
        link_strength=None,
        charge_strength=-300.0,
        center=(width / 2, HEIGHT / 2),
        collision_radius=None,
        collision_padding=10.0,
    )
    hints = RenderHints(
        height=HEIGHT,
        palette=dict(GROUP_COLORS),
        default_color=SLATE,
        hover_mode=HoverMode.EMPHASIZE,
        show_link_labels=False,
        arrows=False,
        link_width=1.0,
        legend=[
            LegendEntry("Official Docs", GROUP_COLORS["official"]),
            LegendEntry("API Reference", GROUP_COLORS["api"]),
            LegendEntry("Community", GROUP_COLORS["community"]),
        ],
        draggable=True,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, links, forces=forces, hints=hints)
