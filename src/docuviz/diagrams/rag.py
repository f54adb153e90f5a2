"""
RAG Pipeline Diagram
====================
Query processing, hybrid retrieval, re-ranking and synthesis as four
columns. A single particle walks the whole pipeline every cycle: each link
has an explicit departure time so the hops follow one another.
"""
from __future__ import annotations

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE, box, particles_from
from docuviz.model.graph import Band, DiagramDescriptor, HoverMode, Link, RenderHints

CONTAINER_ID = "ragGraph"
HEIGHT = 380.0

STAGE_COLORS = {
    "query": "#3b82f6",
    "retrieval": "#10b981",
    "ranking": "#f59e0b",
    "synthesis": "#8b5cf6",
}

# column centre as a fraction of the width
STAGE_X = {
    "query": 0.1,
    "retrieval": 0.35,
    "ranking": 0.6,
    "synthesis": 0.85,
}

# (id, label, sublabel, stage, row) - row 0 is the upper node of a column
NODES = [
    ("user", "User Query", '"How do I mount a volume?"', "query", 0),
    ("queryEmbed", "Query Embedder", "e5-large model", "query", 1),
    ("pinecone", "Pinecone", "Vector + BM25", "retrieval", 0),
    ("filter", "Filter", "metadata.updated > 1yr", "retrieval", 1),
    ("crossEncoder", "Cross-Encoder", "Precision boost", "ranking", 0),
    ("matrixBoost", "Matrix Boost", "Authority score", "ranking", 1),
    ("llm", "GPT-4", "Generate answer", "synthesis", 0),
    ("answer", "Answer", "Final response", "synthesis", 1),
]

HOP_DELAY_MS = 400

# (id, label, x fraction, width fraction)
STAGES = [
    ("query", "1. Query Processing", 0.02, 0.18),
    ("retrieval", "2. Hybrid Retrieval", 0.22, 0.22),
    ("ranking", "3. Re-Ranking", 0.46, 0.22),
    ("synthesis", "4. Synthesis", 0.70, 0.28),
]


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    rows = (HEIGHT * 0.35, HEIGHT * 0.65)
    nodes = [
        box(node_id, label, stage, 110, 56, x=width * STAGE_X[stage], y=rows[row], sublabel=sublabel)
        for node_id, label, sublabel, stage, row in NODES
    ]

    hops = [
        ("user", "queryEmbed", ""),
        ("queryEmbed", "pinecone", "Query vector"),
        ("pinecone", "filter", "Top 50"),
        ("filter", "crossEncoder", ""),
        ("crossEncoder", "matrixBoost", ""),
        ("matrixBoost", "llm", "Top 5 chunks"),
        ("llm", "answer", ""),
    ]
    links = [
        Link(source, target, label=label, delay_ms=i * HOP_DELAY_MS)
        for i, (source, target, label) in enumerate(hops)
    ]

    bands = [
        Band(width * x, 40, width * w, HEIGHT - 60, label, STAGE_COLORS[stage])
        for stage, label, x, w in STAGES
    ]
    particles = particles_from(config, duration_ms=800, interval_ms=4000)
    hints = RenderHints(
        height=HEIGHT,
        palette=dict(STAGE_COLORS),
        default_color=SLATE,
        hover_mode=HoverMode.NONE,
        fill_opacity=0.125,
        bands=bands,
        draggable=False,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, links, particles=particles, hints=hints)
