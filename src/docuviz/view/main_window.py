"""
Main Application Window
=======================
The primary GUI container: a toolbar with the architecture diagram controls
above the scrollable document.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the layer filter buttons to the PageController and
   owns the objects that live as long as the window (scheduler, controller,
   tooltip widget, built when the shared tooltip is first created).
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import QMainWindow, QToolBar

from docuviz.config import DEFAULT_CONFIG, EngineConfig
from docuviz.controller.page import PageController
from docuviz.controller.qt_scheduler import QtScheduler
from docuviz.diagrams import architecture
from docuviz.engine.tooltip import Tooltip, on_shared_tooltip_created
from docuviz.model.view_state import FULL_VIEW
from docuviz.view.document import DocumentView
from docuviz.view.tooltip import TooltipWidget

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "DocuVerse Engine"

SECTIONS = [
    ("architectureGraph", "System Architecture",
     "Four layers from crawling to answering. Drag components to rearrange them."),
    ("crawlerGraph", "Crawler Swarm", "Producer/consumer frontier with a shared visited set."),
    ("batchingGraph", "GPU Batching", "Text chunks are accumulated into batches of 128 before embedding."),
    ("ragGraph", "RAG Pipeline", "Query, hybrid retrieval, re-ranking and synthesis."),
    ("mindmapGraph", "Component Map", "Hover a component to focus it."),
    ("matrixLinkGraph", "Matrix Link", "Pages referenced by authoritative pages gain authority."),
    ("hnswVisualization", "HNSW Index", "Search enters at the sparse top layer and descends."),
]

FILTERS = [
    (FULL_VIEW, "Full View"),
    ("ingestion", "Ingestion"),
    ("processing", "Processing"),
    ("storage", "Storage"),
    ("interaction", "Interaction"),
]


class MainWindow(QMainWindow):
    def __init__(self, config: EngineConfig = DEFAULT_CONFIG) -> None:
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1200, 900)

        # --- DOCUMENT ---
        self.document = DocumentView(SECTIONS)
        self.setCentralWidget(self.document)

        # --- ENGINE ---
        self.scheduler = QtScheduler(self)
        self.controller = PageController(self.document, self.scheduler, config)
        self.tooltip: Optional[TooltipWidget] = None
        on_shared_tooltip_created(self._create_tooltip_widget)

        # --- DIAGRAM CONTROLS ---
        self._create_filter_toolbar()

        self.document.attach(self.controller)

    def _create_filter_toolbar(self) -> None:
        toolbar = QToolBar("Architecture", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        group = QActionGroup(self)
        group.setExclusive(True)
        self.filter_actions: dict[str, QAction] = {}
        for layer, label in FILTERS:
            action = QAction(label, self)
            action.setCheckable(True)
            action.setChecked(layer == FULL_VIEW)
            action.triggered.connect(lambda _checked=False, lay=layer: self.on_filter(lay))
            group.addAction(action)
            toolbar.addAction(action)
            self.filter_actions[layer] = action

    def _create_tooltip_widget(self, tooltip: Tooltip) -> None:
        if self.tooltip is None:
            self.tooltip = TooltipWidget(tooltip)

    def on_filter(self, layer: Optional[str]) -> None:
        applied = self.controller.filter_layer(layer)
        if not applied:
            # nothing to filter yet: bring the diagram into view so it gets built
            container = self.document.container(architecture.CONTAINER_ID)
            if container is not None:
                self.document.ensureWidgetVisible(container)

    def closeEvent(self, event) -> None:
        self.controller.shutdown()
        self.scheduler.cancel_all()
        if self.tooltip is not None:
            self.tooltip.hide()
        super().closeEvent(event)
