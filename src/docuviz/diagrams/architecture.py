"""
System Architecture Diagram
===========================
The four-layer pipeline overview (ingestion, processing, storage,
interaction) as a force-directed layout.

Nodes are attracted to the horizontal band of their layer and spread along
it by charge and collision. Sequence badges mark the order of the data path;
dashed links are feedback/side paths and are drawn as curves. This is the
diagram the layer filter buttons act on.
"""
from __future__ import annotations

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.diagrams.common import SLATE, box, forces_from
from docuviz.model.graph import DiagramDescriptor, HoverMode, Link, RenderHints

CONTAINER_ID = "architectureGraph"
HEIGHT = 650.0

LAYERS = ("ingestion", "processing", "storage", "interaction")

LAYER_COLORS = {
    "ingestion": "#3b82f6",
    "processing": "#8b5cf6",
    "storage": "#10b981",
    "interaction": "#f59e0b",
}

# fraction of the height each layer settles on
LAYER_Y = {
    "ingestion": 0.12,
    "processing": 0.37,
    "storage": 0.62,
    "interaction": 0.87,
}

NODE_WIDTH = 100.0

# (id, label, layer, sublabel)
NODES = [
    ("seed", "Seed Injector", "ingestion", "Cron: 02:00 UTC"),
    ("frontier", "Frontier Queue", "ingestion", "modal.Queue"),
    ("crawler", "Crawler Swarm", "ingestion", "300 containers"),
    ("parser", "HTML Parser", "ingestion", None),
    ("dedup", "Deduplication", "ingestion", "modal.Dict"),

    ("textq", "Text Queue", "processing", None),
    ("batcher", "Batcher", "processing", "Batch: 128"),
    ("embedder", "GPU Embedder", "processing", "50x A10G"),
    ("graphbuilder", "Graph Builder", "processing", "Matrix Link"),

    ("s3", "S3 Bucket", "storage", "Parquet"),
    ("pinecone", "Pinecone", "storage", "Serverless"),
    ("graphdb", "Graph Store", "storage", "Authority"),
    ("dlq", "DLQ", "storage", "Failures"),

    ("user", "User Query", "interaction", "Input"),
    ("api", "API Gateway", "interaction", None),
    ("queryembed", "Query Embedder", "interaction", None),
    ("reranker", "Reranker", "interaction", "Cross-Encoder"),
    ("llm", "GPT-4", "interaction", "Synthesis"),
]

LINKS = [
    # ingestion
    Link("seed", "frontier", seq=1),
    Link("frontier", "crawler", seq=2),
    Link("crawler", "parser", seq=3),
    Link("crawler", "dedup", dashed=True),
    Link("crawler", "frontier", dashed=True),
    # processing
    Link("parser", "textq", seq=4),
    Link("textq", "batcher", seq=5),
    Link("batcher", "embedder", seq=6),
    Link("parser", "graphbuilder", seq=4),
    # storage
    Link("embedder", "s3", seq=7),
    Link("s3", "pinecone", seq=8),
    Link("graphbuilder", "graphdb", seq=5),
    Link("embedder", "dlq", dashed=True),
    # query path
    Link("user", "api", seq="Q1"),
    Link("api", "queryembed", seq="Q2"),
    Link("queryembed", "pinecone", seq="Q3"),
    Link("pinecone", "reranker", seq="Q4"),
    Link("graphdb", "reranker", seq="Q4", label_offset=(0.0, -20.0)),
    Link("reranker", "llm", seq="Q5"),
    Link("llm", "user", seq="Q6", label_offset=(-25.0, 5.0)),
]


def build(width: float, config: EngineConfig = DEFAULT_CONFIG) -> DiagramDescriptor:
    layer_y = {layer: HEIGHT * frac for layer, frac in LAYER_Y.items()}

    # seed every layer evenly across the width, on its own band
    nodes = []
    for layer in LAYERS:
        members = [row for row in NODES if row[2] == layer]
        step = width / (len(members) + 1)
        for i, (node_id, label, _, sublabel) in enumerate(members):
            nodes.append(box(
                node_id, label, layer,
                width=NODE_WIDTH,
                height=45.0 if sublabel else 35.0,
                x=step * (i + 1),
                y=layer_y[layer],
                sublabel=sublabel,
                layer=layer,
            ))
    order = {row[0]: i for i, row in enumerate(NODES)}
    nodes.sort(key=lambda n: order[n.id])

    forces = forces_from(
        config,
        layer_axis="y",
        layer_targets=layer_y,
        layer_strength=0.9,
        x_target=width / 2,
        x_strength=0.03,
    )

    hints = RenderHints(
        height=HEIGHT,
        palette=dict(LAYER_COLORS),
        default_color=SLATE,
        hover_mode=HoverMode.EMPHASIZE,
        curve_dashed=True,
        curve_bend=30.0,
        show_seq_badges=True,
        show_link_labels=False,
        arrows=True,
        draggable=True,
    )
    return DiagramDescriptor(CONTAINER_ID, width, nodes, list(LINKS), forces=forces, hints=hints)
