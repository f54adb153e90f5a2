"""
Shared helpers for building diagram descriptors.

Force and particle parameters start from the engine configuration so a
QSettings override (e.g. engine/particle_interval_ms) reaches every diagram
that does not pin its own value.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional

from docuviz.config import EngineConfig
from docuviz.model.graph import ForceParams, Node, NodeShape, ParticleParams

SLATE = "#64748b"
MUTED = "#94a3b8"


def forces_from(config: EngineConfig, **overrides) -> ForceParams:
    base = ForceParams(
        link_distance=config.link_distance,
        link_strength=config.link_strength,
        charge_strength=config.charge_strength,
        collision_radius=config.collision_radius,
        alpha_min=config.alpha_min,
        alpha_decay=config.alpha_decay,
        velocity_decay=config.velocity_decay,
        reheat_alpha=config.reheat_alpha,
    )
    return replace(base, **overrides)


def particles_from(config: EngineConfig, **overrides) -> ParticleParams:
    base = ParticleParams(
        duration_ms=config.particle_duration_ms,
        interval_ms=config.particle_interval_ms,
        stagger_ms=config.particle_stagger_ms,
    )
    return replace(base, **overrides)


def box(
    node_id: str,
    label: str,
    category: str,
    width: float,
    height: float,
    x: Optional[float] = None,
    y: Optional[float] = None,
    sublabel: Optional[str] = None,
    layer: Optional[str] = None,
) -> Node:
    """A rectangular node. radius is the inscribed circle (per-node collision, self-loops)."""
    return Node(
        id=node_id,
        label=label,
        sublabel=sublabel,
        category=category,
        layer=layer,
        x=x,
        y=y,
        radius=min(width, height) / 2,
        shape=NodeShape.RECT,
        width=width,
        height=height,
    )
