"""
The MODEL layer contains pure data structures describing diagrams.
It has NO knowledge of the GUI (Qt) or of the layout engine.
"""
from docuviz.model.graph import (
    Band, DiagramDescriptor, ForceParams, HoverMode, LegendEntry, Link, Node, NodeShape,
    ParticleParams, RenderHints
)
from docuviz.model.view_state import ViewState, Visuals, derive_visuals

__all__ = [
    "Band", "DiagramDescriptor", "ForceParams", "HoverMode", "LegendEntry", "Link", "Node",
    "NodeShape", "ParticleParams", "RenderHints", "ViewState", "Visuals", "derive_visuals",
]
