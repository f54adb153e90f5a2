"""Tests for the page controller wiring the catalog to a document."""
import pytest

from docuviz.controller.page import PageController
from docuviz.diagrams import architecture, container_ids, crawler
from docuviz.engine.geometry import Rect
from docuviz.model.view_state import NODE_OPACITY_DIMMED

SECTION = 1000.0


class FakeDocument:
    """Containers stacked SECTION px apart, in catalog order; `missing` ones are absent."""

    def __init__(self, make_host, missing=()):
        self.hosts = {cid: make_host() for cid in container_ids() if cid not in missing}
        self.order = container_ids()

    def find_host(self, container_id):
        return self.hosts.get(container_id)

    def bounds_provider(self, container_id):
        if container_id not in self.hosts:
            return None
        top = self.order.index(container_id) * SECTION
        return lambda: Rect(0, top, 900, 400)


def viewport_at(index: int) -> Rect:
    return Rect(0, index * SECTION, 900, 600)


@pytest.fixture()
def document(make_host):
    return FakeDocument(make_host)


@pytest.fixture()
def page(document, scheduler):
    controller = PageController(document, scheduler)
    yield controller
    controller.shutdown()


def test_every_diagram_is_registered_and_observed(page):
    assert page.registry.container_ids() == container_ids()
    assert page.tracker.observed() == container_ids()


def test_missing_containers_are_registered_but_not_observed(make_host, scheduler):
    document = FakeDocument(make_host, missing={crawler.CONTAINER_ID})
    page = PageController(document, scheduler)
    assert crawler.CONTAINER_ID in page.registry
    assert crawler.CONTAINER_ID not in page.tracker.observed()


def test_scrolling_builds_diagrams_lazily(page, document, scheduler):
    assert page.on_viewport_changed(viewport_at(0)) == [architecture.CONTAINER_ID]
    assert document.hosts[architecture.CONTAINER_ID].surfaces == []
    scheduler.advance(0)
    assert len(document.hosts[architecture.CONTAINER_ID].surfaces) == 1
    assert document.hosts[crawler.CONTAINER_ID].surfaces == []

    page.on_viewport_changed(viewport_at(1))
    page.on_viewport_changed(viewport_at(0))
    scheduler.advance(0)
    assert page.registry.activated() == [architecture.CONTAINER_ID, crawler.CONTAINER_ID]
    assert page.registry.invocations(architecture.CONTAINER_ID) == 1


def test_resize_rerenders_activated_diagrams_only(page, document, scheduler):
    page.on_viewport_changed(viewport_at(0))
    scheduler.advance(0)

    page.on_resize()
    page.on_resize()
    scheduler.advance(250)
    assert len(document.hosts[architecture.CONTAINER_ID].surfaces) == 2
    assert document.hosts[crawler.CONTAINER_ID].surfaces == []
    assert page.resizer.passes == 1


def test_layer_filter_is_deferred_until_built(page, document, scheduler):
    assert not page.filter_layer("storage")

    page.on_viewport_changed(viewport_at(0))
    scheduler.advance(0)
    host = document.hosts[architecture.CONTAINER_ID]
    assert host.surface.visuals.node_opacity["api"] == NODE_OPACITY_DIMMED

    assert page.filter_layer("full")
    assert host.surface.visuals.node_opacity["api"] == 1.0


def test_shutdown_stops_running_diagrams(page, scheduler):
    page.on_viewport_changed(viewport_at(0))
    scheduler.advance(0)
    page.shutdown()
    assert scheduler.pending == 0
