"""Qt-side tests: scheduler, containers, surfaces and the main window (offscreen)."""
import pytest

from docuviz.config import DEFAULT_CONFIG
from docuviz.controller.page import PageController
from docuviz.controller.qt_scheduler import QtScheduler
from docuviz.diagrams import architecture, bind_config, crawler
from docuviz.engine.diagram import Diagram
from docuviz.engine.tooltip import Tooltip, peek_shared_tooltip, shared_tooltip
from docuviz.view.container import PLACEHOLDER_TEXT, DiagramContainer
from docuviz.view.document import DocumentView
from docuviz.view.main_window import SECTIONS, MainWindow
from docuviz.view.tooltip import TooltipWidget


@pytest.fixture()
def qt_scheduler(qtbot):
    scheduler = QtScheduler()
    yield scheduler
    scheduler.cancel_all()


# ---- scheduler ----

def test_qt_scheduler_runs_timers_and_idle_callbacks(qtbot, qt_scheduler):
    fired = []
    qt_scheduler.call_later(10, lambda: fired.append("later"))
    qt_scheduler.call_when_idle(lambda: fired.append("idle"), 500)
    qtbot.waitUntil(lambda: len(fired) == 2)
    assert sorted(fired) == ["idle", "later"]
    assert qt_scheduler.pending == 0


def test_qt_scheduler_cancel(qtbot, qt_scheduler):
    fired = []
    handle = qt_scheduler.call_later(10, lambda: fired.append(1))
    handle.cancel()
    assert not handle.active
    qtbot.wait(50)
    assert fired == []


# ---- container / surface ----

def test_container_swaps_placeholder_for_surface(qtbot):
    container = DiagramContainer("test")
    qtbot.addWidget(container)
    assert container.has_placeholder
    assert container.placeholder.text() == PLACEHOLDER_TEXT
    assert container.can_render()

    first = container.mount(400)
    assert not container.has_placeholder
    assert container.height() == 400

    second = container.mount(350)
    assert container.surface is second
    assert second is not first


def test_surface_draws_a_simulated_diagram(qtbot, qt_scheduler):
    container = DiagramContainer(architecture.CONTAINER_ID)
    qtbot.addWidget(container)
    container.resize(900, 300)

    diagram = Diagram(architecture.CONTAINER_ID, bind_config(architecture.build, DEFAULT_CONFIG), qt_scheduler)
    diagram.render(container)
    surface = container.surface
    assert len(surface._nodes) == len(diagram.descriptor.nodes)
    assert surface.height() == int(architecture.HEIGHT)

    qtbot.waitUntil(lambda: diagram.engine.tick_count > 3)
    node = diagram.descriptor.nodes[0]
    assert surface._nodes[node.id].pos().x() == pytest.approx(node.x)

    diagram.filter_layer("storage")
    assert surface._nodes["api"].opacity() < 1.0
    diagram.teardown()


def test_surface_animates_particles(qtbot, qt_scheduler):
    container = DiagramContainer(crawler.CONTAINER_ID)
    qtbot.addWidget(container)
    diagram = Diagram(crawler.CONTAINER_ID, bind_config(crawler.build, DEFAULT_CONFIG), qt_scheduler)
    diagram.render(container)

    qtbot.waitUntil(lambda: len(container.surface._particles) > 0)
    diagram.teardown()
    assert container.surface._particles == {}


# ---- tooltip ----

def test_tooltip_widget_follows_the_tooltip(qtbot):
    tooltip = Tooltip()
    widget = TooltipWidget(tooltip)
    qtbot.addWidget(widget)

    tooltip.show("owner", "Node L0-N1", 100, 100)
    assert widget.isVisible()
    assert widget.text() == "Node L0-N1"
    tooltip.hide("owner")
    assert not widget.isVisible()


# ---- document / window ----

def test_document_builds_only_what_is_in_view(qtbot):
    document = DocumentView(SECTIONS)
    qtbot.addWidget(document)
    document.resize(1000, 600)
    document.show()

    scheduler = QtScheduler(document)
    controller = PageController(document, scheduler)
    document.attach(controller)

    qtbot.waitUntil(lambda: not document.container(architecture.CONTAINER_ID).has_placeholder)
    assert document.container(crawler.CONTAINER_ID).has_placeholder
    assert document.find_host("nope") is None
    assert document.bounds_provider("nope") is None
    controller.shutdown()


def test_main_window_routes_layer_filters(qtbot):
    window = MainWindow()
    qtbot.addWidget(window)
    window.show()

    registry = window.controller.registry
    qtbot.waitUntil(lambda: registry.handle(architecture.CONTAINER_ID) is not None)
    window.filter_actions["storage"].trigger()
    assert registry.handle(architecture.CONTAINER_ID).state.layer_filter == "storage"
    window.close()


def test_main_window_builds_the_tooltip_widget_on_first_use(qtbot):
    window = MainWindow()
    qtbot.addWidget(window)
    assert window.tooltip is None
    assert peek_shared_tooltip() is None

    tooltip = shared_tooltip()
    assert isinstance(window.tooltip, TooltipWidget)
    qtbot.addWidget(window.tooltip)
    tooltip.show("owner", "Node L0-N1", 10, 10)
    assert window.tooltip.isVisible()
    window.close()
