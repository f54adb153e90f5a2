"""
Crawler swarm: producer/consumer layout with particles on the forward links.

The worker -> queue feedback links are curved and carry no particles.
"""
from __future__ import annotations

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE, box, particles_from
from docuviz.model.graph import DiagramDescriptor, HoverMode, Link, RenderHints

CONTAINER_ID = "crawlerGraph"
HEIGHT = 400.0

COLORS = {
    "producer": "#f59e0b",
    "queue": "#3b82f6",
    "worker": "#10b981",
    "state": "#8b5cf6",
}


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    mid = HEIGHT / 2
    nodes = [
        box("seed", "Seed Injector", "producer", 100, 50, x=100, y=mid, sublabel="Cron: 02:00 UTC"),
        box("queue", "Frontier Queue", "queue", 100, 50, x=280, y=mid, sublabel="modal.Queue"),
        box("worker1", "Worker 1", "worker", 100, 50, x=480, y=mid - 100, sublabel="Container"),
        box("worker2", "Worker 2", "worker", 100, 50, x=480, y=mid, sublabel="Container"),
        box("workerN", "Worker N", "worker", 100, 50, x=480, y=mid + 100, sublabel="...300 total"),
        box("visited", "Visited Dict", "state", 100, 50, x=700, y=mid, sublabel="modal.Dict"),
    ]
    links = [
        Link("seed", "queue", label="Push URLs", category="producer"),
        Link("queue", "worker1", label="Pop", category="queue"),
        Link("queue", "worker2", label="Pop", category="queue"),
        Link("queue", "workerN", label="Pop", category="queue"),
        Link("worker1", "visited", label="Check/Mark", category="worker"),
        Link("worker2", "visited", label="Check/Mark", category="worker"),
        Link("workerN", "visited", label="Check/Mark", category="worker"),
        Link("worker1", "queue", label="New links", category="worker", curved=True, dashed=True),
        Link("worker2", "queue", category="worker", curved=True, dashed=True),
        Link("workerN", "queue", category="worker", curved=True, dashed=True),
    ]
    particles = particles_from(
        config,
        duration_ms=1500,
        interval_ms=4000,
        stagger_ms=300,
        exclude=lambda link: link.curved,
    )
    hints = RenderHints(
        height=HEIGHT,
        palette=dict(COLORS),
        default_color=SLATE,
        hover_mode=HoverMode.EMPHASIZE,
        curve_bend=60.0,
        fill_opacity=0.15,
        draggable=False,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, links, particles=particles, hints=hints)
