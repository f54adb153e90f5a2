"""Tests for view-state transitions and the visuals derived from them."""
from docuviz.model.graph import DiagramDescriptor, HoverMode, Link, Node, RenderHints
from docuviz.model.view_state import (
    FOCUS_SCALE, FULL_VIEW, HOVER_STROKE, LINK_OPACITY, NODE_OPACITY_DIMMED, ViewState, derive_visuals
)


def descriptor(mode: HoverMode) -> DiagramDescriptor:
    nodes = [
        Node("a", layer="ingestion", radius=10),
        Node("b", layer="storage", radius=10),
        Node("c", layer="storage", radius=10),
    ]
    links = [Link("a", "b"), Link("b", "c")]
    return DiagramDescriptor("test", 400, nodes, links, hints=RenderHints(hover_mode=mode))


def test_idle_visuals_are_uniform():
    visuals = derive_visuals(descriptor(HoverMode.EMPHASIZE), ViewState())
    assert set(visuals.node_opacity.values()) == {1.0}
    assert set(visuals.link_opacity.values()) == {LINK_OPACITY}


def test_layer_filter_dims_other_layers():
    state = ViewState().filter("ingestion")
    visuals = derive_visuals(descriptor(HoverMode.EMPHASIZE), state)
    assert visuals.node_opacity == {"a": 1.0, "b": NODE_OPACITY_DIMMED, "c": NODE_OPACITY_DIMMED}
    assert visuals.link_opacity[0] > visuals.link_opacity[1]

    assert state.filter(None).layer_filter == FULL_VIEW
    assert state.filter("full").layer_filter == FULL_VIEW


def test_emphasize_and_grow():
    state = ViewState().hover_enter("a")
    assert derive_visuals(descriptor(HoverMode.EMPHASIZE), state).node_stroke["a"] == HOVER_STROKE
    assert derive_visuals(descriptor(HoverMode.GROW), state).node_radius["a"] == 14.0
    assert derive_visuals(descriptor(HoverMode.NONE), state).node_stroke["a"] != HOVER_STROKE


def test_focus_dims_everything_not_connected():
    state = ViewState().hover_enter("a")
    visuals = derive_visuals(descriptor(HoverMode.FOCUS), state)
    assert visuals.node_scale["a"] == FOCUS_SCALE
    assert visuals.node_opacity["b"] < 1.0
    assert visuals.link_opacity[0] > visuals.link_opacity[1]


def test_hover_leave_restores_idle():
    state = ViewState().hover_enter("a").hover_leave()
    assert state == ViewState()
