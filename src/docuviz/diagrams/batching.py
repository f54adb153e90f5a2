"""
GPU batching: crawlers feed a CPU-side accumulator which ships full batches
to the GPU embedder. Static layout over three shaded stages.
"""
from __future__ import annotations

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE, box, particles_from
from docuviz.model.graph import Band, DiagramDescriptor, HoverMode, Link, RenderHints

CONTAINER_ID = "batchingGraph"
HEIGHT = 350.0

COLORS = {
    "input": "#3b82f6",
    "batcher": "#f59e0b",
    "gpu": "#8b5cf6",
}

GPU_PARTICLE_RADIUS = 6.0
PARTICLE_RADIUS = 4.0


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    h = HEIGHT
    nodes = [
        box("crawler1", "Crawler 1", "input", 100, 56, x=80, y=h * 0.2, sublabel="Text chunks"),
        box("crawler2", "Crawler 2", "input", 100, 56, x=80, y=h * 0.5, sublabel="Text chunks"),
        box("crawlerN", "Crawler N", "input", 100, 56, x=80, y=h * 0.8, sublabel="..."),
        box("queue", "Queue", "batcher", 100, 56, x=280, y=h * 0.5, sublabel="FIFO"),
        box("accumulator", "Accumulator", "batcher", 100, 56, x=480, y=h * 0.5, sublabel="batch=128 | 500ms"),
        box("embedder", "GPU Embedder", "gpu", 100, 56, x=700, y=h * 0.5, sublabel="Matrix Multiply"),
    ]
    links = [
        Link("crawler1", "queue", category="input"),
        Link("crawler2", "queue", category="input"),
        Link("crawlerN", "queue", category="input"),
        Link("queue", "accumulator", label="Stream", category="batcher"),
        Link("accumulator", "embedder", label="Batch of 128", category="gpu"),
    ]
    bands = [
        Band(20, 20, 160, h - 40, "INPUT", COLORS["input"]),
        Band(200, 20, 360, h - 40, "BATCHER (CPU)", COLORS["batcher"]),
        Band(580, 20, max(width - 600, 0.0), h - 40, "GPU", COLORS["gpu"]),
    ]
    particles = particles_from(
        config,
        duration_ms=1200,
        interval_ms=3500,
        stagger_ms=200,
        radius_for=lambda link: GPU_PARTICLE_RADIUS if link.category == "gpu" else PARTICLE_RADIUS,
    )
    hints = RenderHints(
        height=h,
        palette=dict(COLORS),
        default_color=SLATE,
        hover_mode=HoverMode.EMPHASIZE,
        fill_opacity=0.2,
        bands=bands,
        draggable=False,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, links, particles=particles, hints=hints)
