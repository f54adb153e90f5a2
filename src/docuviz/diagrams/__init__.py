"""
Diagram Catalog
===============
Descriptor builders for every diagram on the page, keyed by the identifier
of the container they are mounted into.

Each module exposes ``CONTAINER_ID`` and ``build(width, config)``. The
catalog order is the document order of the containers.
"""
from __future__ import annotations

from typing import Callable

from docuviz.config import EngineConfig
from docuviz.diagrams import architecture, batching, crawler, hnsw, matrix_link, mindmap, rag
from docuviz.model.graph import DiagramDescriptor

Builder = Callable[[float, EngineConfig], DiagramDescriptor]

CATALOG: list[tuple[str, Builder]] = [
    (module.CONTAINER_ID, module.build)
    for module in (architecture, crawler, batching, rag, mindmap, matrix_link, hnsw)
]


def container_ids() -> list[str]:
    return [container_id for container_id, _ in CATALOG]


def bind_config(builder: Builder, config: EngineConfig) -> Callable[[float], DiagramDescriptor]:
    """Bind a builder to an engine configuration, giving a width -> descriptor factory."""
    return lambda width: builder(width, config)
