"""
Engine Configuration
====================
This module is the central registry for the engine's tunable constants.

Why is this file needed?
------------------------
1. Single source: Activation margins, debounce delays, particle timing and
   force coefficients are scattered across several components. They are
   declared once here with the values the page was tuned with.
2. Overrides: load_config() overlays values stored in the application's
   QSettings (INI format, group "engine/"), so a deployment can retune
   timing without code changes.

Exports:
    EngineConfig: Dataclass of all recognised options.
    load_config: Build an EngineConfig from defaults + QSettings.
    DEFAULT_CONFIG: The untouched defaults.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

SETTINGS_GROUP = "engine"


@dataclass(frozen=True)
class EngineConfig:
    # --- activation ---
    root_margin_px: float = 100.0       # start loading this far before visible
    intersection_threshold: float = 0.1  # visible fraction that counts as intersecting
    idle_timeout_ms: int = 500          # upper bound for idle-deferred initializers

    # --- resize ---
    resize_debounce_ms: int = 250

    # --- particles (defaults; descriptors may override) ---
    particle_duration_ms: int = 1500
    particle_interval_ms: int = 4000
    particle_stagger_ms: int = 300

    # --- simulation ---
    tick_interval_ms: int = 16
    alpha_min: float = 0.001
    alpha_decay: float = 1.0 - 0.001 ** (1.0 / 300.0)
    reheat_alpha: float = 0.3
    velocity_decay: float = 0.4
    collision_radius: float = 65.0
    link_distance: float = 140.0
    link_strength: float = 0.4
    charge_strength: float = -600.0

    @property
    def decay_factor(self) -> float:
        """Per-tick multiplier applied to alpha while it cools toward zero."""
        return 1.0 - self.alpha_decay


DEFAULT_CONFIG = EngineConfig()


def load_config(settings: Optional[QSettings] = None) -> EngineConfig:
    """
    Overlay 'engine/<field>' values from QSettings on top of the defaults.

    Values that cannot be converted to the field's type are logged and ignored.
    """
    config = DEFAULT_CONFIG
    if settings is None:
        return config

    overrides: dict[str, object] = {}
    for f in fields(EngineConfig):
        key = f"{SETTINGS_GROUP}/{f.name}"
        if not settings.contains(key):
            continue
        raw = settings.value(key)
        caster = int if isinstance(getattr(config, f.name), int) else float
        try:
            overrides[f.name] = caster(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid setting {key}={raw!r}")

    if overrides:
        logger.info(f"Engine settings overridden: {sorted(overrides)}")
        config = replace(config, **overrides)
    return config
