"""Tests for the diagram handle and its initializer, against recording fakes."""
from docuviz.config import DEFAULT_CONFIG
from docuviz.diagrams import architecture, bind_config, crawler, hnsw, rag
from docuviz.engine.diagram import Diagram, DiagramInitializer
from docuviz.engine.tooltip import OFFSET_X, OFFSET_Y, peek_shared_tooltip, shared_tooltip
from docuviz.model.view_state import FULL_VIEW, HOVER_STROKE, NODE_OPACITY_DIMMED


def make(module, scheduler, seed=1):
    return Diagram(module.CONTAINER_ID, bind_config(module.build, DEFAULT_CONFIG), scheduler, seed=seed)


def test_render_builds_the_surface_and_starts_the_layout(scheduler, host):
    diagram = make(architecture, scheduler)
    diagram.render(host)

    surface = host.surface
    assert host.heights == [architecture.HEIGHT]
    assert surface.descriptor is diagram.descriptor
    assert surface.target is diagram
    assert surface.geometry_updates == 1
    assert surface.visuals is not None
    assert diagram.engine.running
    assert diagram.drag is not None

    scheduler.advance(16 * 5)
    assert surface.geometry_updates == 6


def test_static_diagram_has_no_engine_but_animates(scheduler, host):
    diagram = make(crawler, scheduler)
    diagram.render(host)
    assert diagram.engine is None
    assert diagram.drag is None
    assert diagram.press("seed", 0, 0) is False

    scheduler.advance(1000)
    assert host.surface.added
    # forward links are coloured after their category
    assert host.surface.added[0].color == crawler.COLORS["producer"]


def test_rerender_tears_down_the_previous_build(scheduler, host):
    diagram = make(crawler, scheduler)
    diagram.render(host)
    scheduler.advance(400)
    first = host.surface
    assert first.particles

    host.resize(600.0)
    diagram.render(host)
    assert first.particles == {}
    assert diagram.descriptor.width == 600.0
    assert diagram.renders == 2
    assert len(host.surfaces) == 2


def test_teardown_cancels_every_timer(scheduler, host):
    diagram = make(architecture, scheduler)
    diagram.render(host)
    diagram.teardown()
    scheduler.advance(10_000)
    assert host.surface.geometry_updates == 1
    assert scheduler.pending == 0


def test_drag_through_the_handle(scheduler, host):
    diagram = make(architecture, scheduler)
    diagram.render(host)
    assert diagram.press("api", 10, 10)
    diagram.move(50, 50)
    node = diagram.descriptor.node_map()["api"]
    assert (node.x, node.y) == (50, 50)
    assert diagram.drag.pinned() == ["api"]
    diagram.release()
    assert diagram.drag.pinned() == []


def test_hover_updates_visuals_and_tooltip(scheduler, host):
    diagram = make(hnsw, scheduler)
    diagram.render(host)
    tooltip = shared_tooltip()

    diagram.set_hover("L1-N3", (100.0, 200.0))
    assert diagram.state.hover == "L1-N3"
    assert tooltip.visible
    assert tooltip.content.text == "Node L1-N3<br/>Level: 1"
    assert (tooltip.content.x, tooltip.content.y) == (100.0 + OFFSET_X, 200.0 + OFFSET_Y)

    diagram.set_hover(None)
    assert diagram.state.hover is None
    assert not tooltip.visible


def test_hover_on_unknown_node_is_a_leave(scheduler, host):
    diagram = make(architecture, scheduler)
    diagram.render(host)
    diagram.set_hover("api")
    assert host.surface.visuals.node_stroke["api"] == HOVER_STROKE
    diagram.set_hover("ghost")
    assert diagram.state.hover is None


def test_tooltip_of_another_diagram_is_left_alone(scheduler, host, make_host):
    first = make(hnsw, scheduler)
    first.render(host)
    first.set_hover("L0-N1", (0.0, 0.0))

    other = make(rag, scheduler)
    other.render(make_host())
    other.teardown()
    assert shared_tooltip().visible


def test_layer_filter_survives_rerender(scheduler, host):
    diagram = make(architecture, scheduler)
    diagram.render(host)
    diagram.filter_layer("storage")
    assert host.surface.visuals.node_opacity["api"] == NODE_OPACITY_DIMMED

    diagram.render(host)
    assert diagram.state.layer_filter == "storage"
    assert host.surface.visuals.node_opacity["api"] == NODE_OPACITY_DIMMED
    assert host.surface.visuals.node_opacity["s3"] == 1.0

    diagram.filter_layer(FULL_VIEW)
    assert host.surface.visuals.node_opacity["api"] == 1.0


def test_zero_width_host_falls_back_to_default(scheduler, make_host):
    diagram = make(crawler, scheduler)
    diagram.render(make_host(width=0))
    assert diagram.descriptor.width == 800.0


def test_tooltip_is_created_by_the_first_hover_with_text(scheduler, host):
    diagram = make(hnsw, scheduler)
    diagram.render(host)
    diagram.render(host)
    diagram.set_hover(None)
    diagram.teardown()
    assert peek_shared_tooltip() is None

    diagram.render(host)
    diagram.set_hover("L1-N3", (0.0, 0.0))
    assert peek_shared_tooltip() is shared_tooltip()
    assert shared_tooltip().visible


# ---- initializer ----

def test_initializer_reuses_one_diagram(scheduler, host):
    init = DiagramInitializer(crawler.CONTAINER_ID, bind_config(crawler.build, DEFAULT_CONFIG),
                              lambda cid: host, scheduler)
    first = init()
    second = init()
    assert first is second
    assert first.renders == 2


def test_initializer_without_container_or_renderer(scheduler, make_host):
    factory = bind_config(crawler.build, DEFAULT_CONFIG)
    assert DiagramInitializer("missing", factory, lambda cid: None, scheduler)() is None

    blind = make_host(renderable=False)
    assert DiagramInitializer("blind", factory, lambda cid: blind, scheduler)() is None
    assert blind.surfaces == []
