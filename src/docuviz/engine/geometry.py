"""
Geometry Helpers
================
Viewport rectangles and link paths.

Rect / intersection_ratio back the viewport activation tracker. LinkPath is
the only representation of link geometry: the renderer strokes it and the
particle animator interpolates along it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from docuviz.model.graph import Link, Node, NodeShape

Point = tuple[float, float]

SELF_LOOP_FACTOR = 3.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def expanded(self, margin: float) -> Rect:
        """Grow on every side (negative margins shrink)."""
        return Rect(self.x - margin, self.y - margin, self.width + 2 * margin, self.height + 2 * margin)

    def intersection(self, other: Rect) -> Optional[Rect]:
        x0 = max(self.x, other.x)
        y0 = max(self.y, other.y)
        x1 = min(self.right, other.right)
        y1 = min(self.bottom, other.bottom)
        if x1 < x0 or y1 < y0:
            return None
        return Rect(x0, y0, x1 - x0, y1 - y0)


def intersection_ratio(target: Rect, viewport: Rect, root_margin: float = 0.0) -> float:
    """
    Fraction of target's area inside the (margin-grown) viewport.

    A zero-area target that touches the viewport counts as fully visible.
    """
    inter = target.intersection(viewport.expanded(root_margin))
    if inter is None:
        return 0.0
    if target.area == 0.0:
        return 1.0
    return inter.area / target.area


# ---- link paths ----

@dataclass(frozen=True)
class LinkPath:
    start: Point
    end: Point
    control: Optional[Point] = None  # quadratic Bezier control point

    @property
    def curved(self) -> bool:
        return self.control is not None

    @property
    def midpoint(self) -> Point:
        return self.point_at(0.5)

    def point_at(self, t: float) -> Point:
        """Position at parameter t in [0, 1] (clamped)."""
        t = min(1.0, max(0.0, t))
        (x0, y0), (x2, y2) = self.start, self.end
        if self.control is None:
            return x0 + (x2 - x0) * t, y0 + (y2 - y0) * t
        x1, y1 = self.control
        u = 1.0 - t
        return (
            u * u * x0 + 2 * u * t * x1 + t * t * x2,
            u * u * y0 + 2 * u * t * y1 + t * t * y2,
        )


def boundary_distance(node: Node, dx: float, dy: float) -> float:
    """Distance from the node centre to its outline along direction (dx, dy)."""
    if node.shape == NodeShape.RECT and node.width > 0 and node.height > 0:
        hw, hh = node.width / 2, node.height / 2
        length = math.hypot(dx, dy)
        if length == 0.0:
            return 0.0
        ux, uy = abs(dx) / length, abs(dy) / length
        tx = hw / ux if ux > 1e-12 else math.inf
        ty = hh / uy if uy > 1e-12 else math.inf
        return min(tx, ty)
    return node.radius


def _shift(p: Point, toward: Point, distance: float) -> Point:
    dx, dy = toward[0] - p[0], toward[1] - p[1]
    length = math.hypot(dx, dy)
    if length == 0.0 or distance == 0.0:
        return p
    return p[0] + dx / length * distance, p[1] + dy / length * distance


def link_path(
    source: Optional[Node],
    target: Optional[Node],
    link: Link,
    curve: bool = False,
    bend: float = 30.0,
    clip: bool = False,
) -> Optional[LinkPath]:
    """
    Compute the path of a link from its endpoint positions.

    Returns None when an endpoint is missing or has no position yet; the
    caller skips that link only.

    Args:
        curve: draw a quadratic curve bent by `bend` px to the left of the chord.
        clip: start/end on the node outlines instead of the centres.
    """
    if source is None or target is None or not source.has_position or not target.has_position:
        return None

    s: Point = (float(source.x), float(source.y))
    t: Point = (float(target.x), float(target.y))

    if link.is_self_loop:
        r = max(source.radius, 1.0)
        start = (s[0] - r * 0.7, s[1] - r * 0.7)
        end = (s[0] + r * 0.7, s[1] - r * 0.7)
        control = (s[0], s[1] - r * SELF_LOOP_FACTOR)
        return LinkPath(start, end, control)

    control: Optional[Point] = None
    if curve:
        mx, my = (s[0] + t[0]) / 2, (s[1] + t[1]) / 2
        dx, dy = t[0] - s[0], t[1] - s[1]
        length = math.hypot(dx, dy)
        if length > 0.0:
            # left-hand normal of the chord
            control = (mx - dy / length * bend, my + dx / length * bend)
        else:
            control = (mx, my - bend)

    if clip:
        aim_s = control if control is not None else t
        aim_t = control if control is not None else s
        start = _shift(s, aim_s, boundary_distance(source, aim_s[0] - s[0], aim_s[1] - s[1]))
        end = _shift(t, aim_t, boundary_distance(target, aim_t[0] - t[0], aim_t[1] - t[1]))
        return LinkPath(start, end, control)

    return LinkPath(s, t, control)
