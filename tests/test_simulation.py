"""Tests for the force-directed layout engine and the drag controller."""
import math

import numpy as np
import pytest

from docuviz.diagrams import architecture
from docuviz.engine.drag import DragController, DragState
from docuviz.engine.simulation import LayoutEngine
from docuviz.model.graph import ForceParams, Link, Node


def small_graph():
    nodes = [Node("X", x=10, y=10), Node("Y", x=300, y=50), Node("Z", x=150, y=200)]
    links = [Link("X", "Y"), Link("Y", "Z")]
    return nodes, links


def params(**kw):
    kw.setdefault("link_distance", 30.0)
    kw.setdefault("collision_radius", None)
    return ForceParams(**kw)


# ---- layout engine ----

def test_ticks_until_rest_matches_scheduled_run(scheduler):
    nodes, links = small_graph()
    engine = LayoutEngine(nodes, links, params(), scheduler=scheduler)
    expected = engine.ticks_until_rest()
    ended = []
    engine.on_end(lambda e: ended.append(e.tick_count))

    engine.start()
    assert engine.running
    scheduler.run_until_idle()

    assert not engine.running
    assert engine.tick_count == expected
    assert ended == [expected]
    assert engine.alpha < engine.params.alpha_min


def test_run_to_rest_is_bounded():
    nodes, links = small_graph()
    engine = LayoutEngine(nodes, links, params())
    expected = engine.ticks_until_rest()
    assert engine.run_to_rest() == expected
    assert engine.ticks_until_rest() == 0


def test_links_to_unknown_nodes_are_isolated():
    nodes, links = small_graph()
    ghost = Link("X", "ghost")
    engine = LayoutEngine(nodes, links + [ghost], params())
    engine.run_to_rest()

    assert engine.invalid_links == [ghost]
    assert len(engine.links) == 2
    assert np.isfinite(engine.positions).all()


def test_unpositioned_nodes_are_seeded_around_the_origin():
    nodes = [Node(str(i)) for i in range(5)]
    engine = LayoutEngine(nodes, [], params(center=(100.0, 100.0)))
    coords = {(n.x, n.y) for n in nodes}
    assert len(coords) == 5
    assert all(math.hypot(x - 100, y - 100) < 30 for x, y in coords)
    assert engine.tick_count == 0


def test_collision_separates_overlapping_nodes():
    nodes = [Node("a", x=0.0, y=0.0, radius=10), Node("b", x=1.0, y=0.0, radius=10)]
    engine = LayoutEngine(nodes, [], params(charge_strength=0.0, collision_padding=0.0), seed=1)
    engine.run_to_rest()
    ax, ay = engine.position_of("a")
    bx, by = engine.position_of("b")
    assert math.hypot(bx - ax, by - ay) > 15


def test_same_seed_gives_the_same_layout():
    def run():
        nodes = [Node(str(i)) for i in range(6)]
        engine = LayoutEngine(nodes, [Link("0", "1"), Link("1", "2")], params(), seed=7)
        engine.run_to_rest()
        return engine.positions

    np.testing.assert_allclose(run(), run())


def test_layers_are_kept_in_order():
    desc = architecture.build(900.0)
    engine = LayoutEngine(desc.nodes, desc.links, desc.forces, seed=3)
    engine.run_to_rest()

    mean_y = {
        layer: np.mean([n.y for n in desc.nodes if n.layer == layer])
        for layer in architecture.LAYERS
    }
    ys = [mean_y[layer] for layer in architecture.LAYERS]
    assert ys == sorted(ys)


def test_invalid_decay_is_rejected():
    with pytest.raises(ValueError):
        LayoutEngine([], [], params(alpha_decay=0.0))


# ---- drag ----

def test_drag_pins_exactly_one_node_and_releases_it(scheduler):
    nodes, links = small_graph()
    engine = LayoutEngine(nodes, links, params(), scheduler=scheduler)
    drag = DragController(nodes, engine)
    x_node = nodes[0]

    assert drag.press("X", 10, 10)
    assert drag.state is DragState.DRAGGING
    assert drag.pinned() == ["X"]
    assert engine.alpha_target == pytest.approx(0.3)
    assert engine.ticks_until_rest() is None

    drag.move(50, 50)
    scheduler.advance(16 * 20)
    assert engine.position_of("X") == (50.0, 50.0)
    assert drag.pinned() == ["X"]

    drag.release()
    assert drag.state is DragState.IDLE
    assert drag.pinned() == []
    assert engine.alpha_target == 0.0

    # X is free again and is pulled toward Y
    scheduler.advance(16 * 20)
    assert (x_node.x, x_node.y) != (50.0, 50.0)


def test_pressing_another_node_moves_the_pin():
    nodes, _ = small_graph()
    drag = DragController(nodes)
    drag.press("X", 0, 0)
    drag.press("Y", 5, 5)
    assert drag.pinned() == ["Y"]
    assert drag.subject == "Y"


def test_press_on_unknown_node_is_ignored():
    nodes, _ = small_graph()
    drag = DragController(nodes)
    assert not drag.press("ghost", 0, 0)
    assert drag.state is DragState.IDLE
    drag.move(1, 1)
    drag.release()
    assert drag.pinned() == []
