"""Tests for viewport rectangles and link paths."""
import math

import pytest

from docuviz.engine.geometry import LinkPath, Rect, boundary_distance, intersection_ratio, link_path
from docuviz.model.graph import Link, Node, NodeShape


# ---- rectangles ----

def test_intersection_ratio():
    viewport = Rect(0, 0, 100, 100)
    assert intersection_ratio(Rect(0, 0, 50, 50), viewport) == 1.0
    assert intersection_ratio(Rect(0, 50, 100, 100), viewport) == 0.5
    assert intersection_ratio(Rect(0, 200, 100, 100), viewport) == 0.0
    assert intersection_ratio(Rect(0, 150, 100, 100), viewport, root_margin=100) == 0.5


def test_zero_area_target_touching_counts_as_visible():
    assert intersection_ratio(Rect(10, 10, 0, 0), Rect(0, 0, 100, 100)) == 1.0


# ---- link paths ----

def test_missing_endpoint_gives_no_path():
    a = Node("a", x=0, y=0)
    assert link_path(a, None, Link("a", "b")) is None
    assert link_path(a, Node("b"), Link("a", "b")) is None


def test_clipped_path_starts_on_the_outline():
    a = Node("a", x=0, y=0, radius=10)
    b = Node("b", x=100, y=0, shape=NodeShape.RECT, width=40, height=20)
    path = link_path(a, b, Link("a", "b"), clip=True)
    assert path.start == pytest.approx((10.0, 0.0))
    assert path.end == pytest.approx((80.0, 0.0))
    assert not path.curved


def test_curved_path_bends_left_of_the_chord():
    a = Node("a", x=0, y=0)
    b = Node("b", x=100, y=0)
    path = link_path(a, b, Link("a", "b"), curve=True, bend=30)
    assert path.control == pytest.approx((50.0, 30.0))
    assert path.midpoint == pytest.approx((50.0, 15.0))


def test_self_loop_is_a_curve_above_the_node():
    a = Node("a", x=0, y=0, radius=10)
    path = link_path(a, a, Link("a", "a"))
    assert path.curved
    assert path.control[1] < -10


def test_point_at_is_clamped():
    path = LinkPath((0.0, 0.0), (10.0, 0.0))
    assert path.point_at(-1) == (0.0, 0.0)
    assert path.point_at(2) == (10.0, 0.0)


def test_boundary_distance_of_a_rectangle_diagonal():
    node = Node("r", shape=NodeShape.RECT, width=20, height=20)
    assert boundary_distance(node, 1, 1) == pytest.approx(10 * math.sqrt(2))
