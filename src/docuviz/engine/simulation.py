"""
Force-Directed Layout Engine
============================
Iterative velocity-Verlet style force simulation over a node/link set,
following the semantics of d3-force.

Why is this file needed?
------------------------
1. Layout: Interactive diagrams do not carry hand-placed coordinates. Linked
   nodes are pulled to a target distance, all nodes repel, layered nodes are
   softly attracted to their layer coordinate, and overlapping nodes are
   pushed apart.
2. Energy: A decaying alpha bounds the work. Every tick moves alpha toward
   alpha_target by alpha_decay; once alpha < alpha_min the engine stops
   rescheduling itself. Dragging reheats it (alpha_target = reheat_alpha).

Forces per tick (additive on velocities, scaled by alpha):
    link      - spring toward link_distance, degree-weighted bias
    charge    - exact O(n^2) many-body term (diagrams are small)
    x / y     - per-node positioning toward layer / global targets
    center    - translate so the mean sits on the centre point
    collide   - minimum separation, neighbour pairs from a cKDTree
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional, TYPE_CHECKING

import numpy as np
from scipy.spatial import cKDTree

from docuviz.model.graph import ForceParams, Link, Node

if TYPE_CHECKING:
    import numpy.typing as npt
    from docuviz.engine.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
DISTANCE_MIN2 = 1.0
JIGGLE = 1e-6

TickListener = Callable[["LayoutEngine"], None]


class LayoutEngine:
    def __init__(
        self,
        nodes: list[Node],
        links: list[Link],
        params: ForceParams,
        scheduler: Optional[Scheduler] = None,
        tick_interval_ms: int = 16,
        seed: Optional[int] = None,
    ) -> None:
        if not 0.0 < params.alpha_decay <= 1.0:
            raise ValueError(f"alpha_decay must be in (0, 1], got {params.alpha_decay}")
        if not 0.0 <= params.velocity_decay <= 1.0:
            raise ValueError(f"velocity_decay must be in [0, 1], got {params.velocity_decay}")

        self.nodes = nodes
        self.params = params
        self._scheduler = scheduler
        self.tick_interval_ms = tick_interval_ms
        self._rng = np.random.default_rng(seed)

        self.alpha: float = params.alpha
        self.alpha_target: float = 0.0
        self.tick_count: int = 0

        self._index: dict[str, int] = {n.id: i for i, n in enumerate(nodes)}
        self._timer: Optional[TimerHandle] = None
        self._tick_listeners: list[TickListener] = []
        self._end_listeners: list[TickListener] = []

        self.links: list[Link] = []
        self.invalid_links: list[Link] = []
        self._resolve_links(links)

        n = len(nodes)
        self._pos: npt.NDArray[np.float64] = np.zeros((n, 2), dtype=np.float64)
        self._vel: npt.NDArray[np.float64] = np.zeros((n, 2), dtype=np.float64)
        self._init_positions()
        self._init_link_force()
        self._init_targets()
        self._radii = np.array(
            [params.collision_radius if params.collision_radius is not None
             else nd.radius + params.collision_padding for nd in nodes],
            dtype=np.float64,
        )
        self._write_back()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def on_tick(self, listener: TickListener) -> None:
        self._tick_listeners.append(listener)

    def on_end(self, listener: TickListener) -> None:
        self._end_listeners.append(listener)

    @property
    def running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        """Begin self-scheduled ticking."""
        self.restart()

    def restart(self) -> None:
        if self._scheduler is None or self._timer is not None:
            return
        logger.debug(f"Simulation (re)started at alpha={self.alpha:.4f}")
        self._timer = self._scheduler.call_later(self.tick_interval_ms, self._step)

    def stop(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def reheat(self) -> None:
        """Keep energy at reheat_alpha (or above) and resume ticking."""
        self.alpha_target = self.params.reheat_alpha
        if self.alpha < self.params.reheat_alpha:
            self.alpha = self.params.reheat_alpha
        self.restart()

    def cool(self) -> None:
        """Let energy decay normally again."""
        self.alpha_target = 0.0

    def ticks_until_rest(self) -> Optional[int]:
        """
        Number of further ticks before alpha drops below alpha_min.

        None while alpha_target keeps alpha at or above alpha_min.
        """
        p = self.params
        if self.alpha_target >= p.alpha_min:
            return None
        alpha = self.alpha
        n = 0
        while alpha >= p.alpha_min:
            alpha += (self.alpha_target - alpha) * p.alpha_decay
            n += 1
        return n

    def position_of(self, node_id: str) -> tuple[float, float]:
        i = self._index[node_id]
        return float(self._pos[i, 0]), float(self._pos[i, 1])

    @property
    def positions(self) -> npt.NDArray[np.float64]:
        return self._pos.copy()

    def run_to_rest(self, max_ticks: int = 10_000) -> int:
        """Tick synchronously (no scheduler) until alpha < alpha_min."""
        n = 0
        while self.alpha >= self.params.alpha_min and n < max_ticks:
            self.tick()
            n += 1
        return n

    def tick(self, iterations: int = 1) -> None:
        p = self.params
        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * p.alpha_decay
            self._apply_forces(self.alpha)

            self._vel *= (1.0 - p.velocity_decay)
            self._pos += self._vel
            self._apply_pins()
            self.tick_count += 1
        self._write_back()

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _step(self) -> None:
        self._timer = None
        self.tick()
        for listener in self._tick_listeners:
            listener(self)

        if self.alpha < self.params.alpha_min:
            logger.debug(f"Simulation at rest after {self.tick_count} ticks")
            for listener in self._end_listeners:
                listener(self)
        elif self._scheduler is not None:
            self._timer = self._scheduler.call_later(self.tick_interval_ms, self._step)

    def _jiggle(self, shape: tuple[int, ...]) -> npt.NDArray[np.float64]:
        return (self._rng.random(shape) - 0.5) * JIGGLE

    # ---- setup ----

    def _resolve_links(self, links: list[Link]) -> None:
        for link in links:
            if link.source in self._index and link.target in self._index:
                self.links.append(link)
            else:
                logger.debug(f"Link {link.source} -> {link.target} references an unknown node; ignored")
                self.invalid_links.append(link)

    def _origin(self) -> tuple[float, float]:
        p = self.params
        if p.center is not None:
            return p.center
        return (p.x_target or 0.0, p.y_target or 0.0)

    def _init_positions(self) -> None:
        ox, oy = self._origin()
        for i, node in enumerate(self.nodes):
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if node.x is None or node.y is None:
                radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                self._pos[i] = (ox + radius * math.cos(angle), oy + radius * math.sin(angle))
            else:
                self._pos[i] = (node.x, node.y)

    def _init_link_force(self) -> None:
        p = self.params
        springs = [lk for lk in self.links if not lk.is_self_loop]
        self._src = np.array([self._index[lk.source] for lk in springs], dtype=np.int64)
        self._dst = np.array([self._index[lk.target] for lk in springs], dtype=np.int64)

        count = np.zeros(len(self.nodes), dtype=np.float64)
        np.add.at(count, self._src, 1.0)
        np.add.at(count, self._dst, 1.0)

        if len(springs) == 0:
            self._bias = np.zeros(0)
            self._strength = np.zeros(0)
            return

        self._bias = count[self._src] / (count[self._src] + count[self._dst])
        if p.link_strength is None:
            self._strength = 1.0 / np.minimum(count[self._src], count[self._dst])
        else:
            self._strength = np.full(len(springs), p.link_strength, dtype=np.float64)

    def _init_targets(self) -> None:
        p = self.params
        n = len(self.nodes)
        self._layer_target = np.full(n, np.nan)
        for i, node in enumerate(self.nodes):
            if node.layer is not None and node.layer in p.layer_targets:
                self._layer_target[i] = p.layer_targets[node.layer]
        self._layer_col = 0 if p.layer_axis == "x" else 1

    # ---- forces ----

    def _apply_forces(self, alpha: float) -> None:
        if len(self._src):
            self._force_link(alpha)
        if self.params.charge_strength != 0.0 and len(self.nodes) > 1:
            self._force_charge(alpha)
        self._force_position(alpha)
        if self.params.center is not None:
            self._force_center()
        if len(self.nodes) > 1:
            self._force_collide()

    def _force_link(self, alpha: float) -> None:
        pos, vel = self._pos, self._vel
        d = pos[self._dst] + vel[self._dst] - pos[self._src] - vel[self._src]
        zero = np.all(d == 0.0, axis=1)
        if zero.any():
            d[zero] = self._jiggle((int(zero.sum()), 2))
        length = np.hypot(d[:, 0], d[:, 1])
        k = (length - self.params.link_distance) / length * alpha * self._strength
        d *= k[:, None]
        np.add.at(vel, self._dst, -d * self._bias[:, None])
        np.add.at(vel, self._src, d * (1.0 - self._bias)[:, None])

    def _force_charge(self, alpha: float) -> None:
        pos = self._pos
        n = len(pos)
        d = pos[None, :, :] - pos[:, None, :]  # d[i, j] = pos[j] - pos[i]
        l2 = np.einsum("ijk,ijk->ij", d, d)

        off_diag = ~np.eye(n, dtype=bool)
        coincident = (l2 == 0.0) & off_diag
        if coincident.any():
            d[coincident] = self._jiggle((int(coincident.sum()), 2))
            l2 = np.einsum("ijk,ijk->ij", d, d)

        l2 = np.where(l2 < DISTANCE_MIN2, np.sqrt(DISTANCE_MIN2 * l2), l2)
        np.fill_diagonal(l2, np.inf)
        w = self.params.charge_strength * alpha / l2
        self._vel += np.einsum("ijk,ij->ik", d, w)

    def _force_position(self, alpha: float) -> None:
        p = self.params
        pos, vel = self._pos, self._vel

        mask = ~np.isnan(self._layer_target)
        if mask.any():
            col = self._layer_col
            vel[mask, col] += (self._layer_target[mask] - pos[mask, col]) * p.layer_strength * alpha
        if p.x_target is not None:
            vel[:, 0] += (p.x_target - pos[:, 0]) * p.x_strength * alpha
        if p.y_target is not None:
            vel[:, 1] += (p.y_target - pos[:, 1]) * p.y_strength * alpha

    def _force_center(self) -> None:
        cx, cy = self.params.center
        mean = self._pos.mean(axis=0)
        self._pos -= (mean - np.array([cx, cy]))

    def _force_collide(self) -> None:
        pred = self._pos + self._vel
        radii = self._radii
        tree = cKDTree(pred)
        pairs = tree.query_pairs(r=2.0 * float(radii.max()), output_type="ndarray")
        if len(pairs) == 0:
            return
        i, j = pairs[:, 0], pairs[:, 1]
        reach = radii[i] + radii[j]
        d = pred[i] - pred[j]
        l2 = np.einsum("ij,ij->i", d, d)
        hit = l2 < reach * reach
        if not hit.any():
            return
        i, j, reach, d, l2 = i[hit], j[hit], reach[hit], d[hit], l2[hit]

        zero = l2 == 0.0
        if zero.any():
            d[zero] = self._jiggle((int(zero.sum()), 2))
            l2 = np.einsum("ij,ij->i", d, d)

        length = np.sqrt(l2)
        d *= ((reach - length) / length)[:, None]
        ri2, rj2 = radii[i] ** 2, radii[j] ** 2
        share = rj2 / (ri2 + rj2)
        np.add.at(self._vel, i, d * share[:, None])
        np.add.at(self._vel, j, -d * (1.0 - share)[:, None])

    # ---- pins / output ----

    def _apply_pins(self) -> None:
        for i, node in enumerate(self.nodes):
            if node.fx is not None:
                self._pos[i, 0] = node.fx
                self._vel[i, 0] = 0.0
            if node.fy is not None:
                self._pos[i, 1] = node.fy
                self._vel[i, 1] = 0.0

    def _write_back(self) -> None:
        for i, node in enumerate(self.nodes):
            node.x = float(self._pos[i, 0])
            node.y = float(self._pos[i, 1])
