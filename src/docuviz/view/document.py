"""
Document View
=============
The scrollable page: section headings followed by one DiagramContainer per
catalog entry.

Why is this file needed?
------------------------
1. Geometry: It answers where each container sits in content coordinates
   and which part of the content is visible, which is all the viewport
   activation tracker needs.
2. Notifications: Scrolling and resizing re-run the activation scan;
   resizing additionally feeds the debounced re-render. Both are forwarded
   to whatever listener is attached (the PageController).
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QPoint, Qt, QTimer
from PySide6.QtWidgets import QFrame, QLabel, QScrollArea, QVBoxLayout, QWidget

from docuviz.engine.geometry import Rect
from docuviz.view.container import DiagramContainer

logger = logging.getLogger(__name__)

SPACER_HEIGHT = 480


class DocumentListener(Protocol):
    def on_viewport_changed(self, viewport: Rect) -> list[str]: ...

    def on_resize(self) -> None: ...


class DocumentView(QScrollArea):
    def __init__(self, sections: list[tuple[str, str, str]], parent: Optional[QWidget] = None) -> None:
        """
        Args:
            sections: (container_id, title, description) in document order.
        """
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        self.content = QWidget()
        layout = QVBoxLayout(self.content)
        layout.setContentsMargins(40, 24, 40, 24)
        layout.setSpacing(16)

        self._containers: dict[str, DiagramContainer] = {}
        for container_id, title, description in sections:
            heading = QLabel(title)
            heading.setStyleSheet("font-size: 20px; font-weight: 600;")
            layout.addWidget(heading)
            if description:
                text = QLabel(description)
                text.setWordWrap(True)
                text.setStyleSheet("color: #64748b;")
                layout.addWidget(text)
            container = DiagramContainer(container_id)
            layout.addWidget(container)
            self._containers[container_id] = container

            # prose between diagrams, so most of them start below the fold
            spacer = QWidget()
            spacer.setFixedHeight(SPACER_HEIGHT)
            layout.addWidget(spacer)
        layout.addStretch(1)

        self.setWidget(self.content)
        self._listener: Optional[DocumentListener] = None
        self.verticalScrollBar().valueChanged.connect(self._on_scroll)

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def attach(self, listener: DocumentListener) -> None:
        self._listener = listener
        # first scan once the layout has settled
        QTimer.singleShot(0, self.scan)

    def container(self, container_id: str) -> Optional[DiagramContainer]:
        return self._containers.get(container_id)

    def find_host(self, container_id: str) -> Optional[DiagramContainer]:
        return self._containers.get(container_id)

    def bounds_provider(self, container_id: str) -> Optional[Callable[[], Optional[Rect]]]:
        container = self._containers.get(container_id)
        if container is None:
            return None
        return lambda: self.bounds_of(container)

    def bounds_of(self, widget: QWidget) -> Optional[Rect]:
        if not widget.isVisibleTo(self.content):
            return None
        top_left = widget.mapTo(self.content, QPoint(0, 0))
        return Rect(top_left.x(), top_left.y(), widget.width(), widget.height())

    def viewport_rect(self) -> Rect:
        vp = self.viewport()
        return Rect(
            self.horizontalScrollBar().value(),
            self.verticalScrollBar().value(),
            vp.width(),
            vp.height(),
        )

    def scan(self) -> list[str]:
        if self._listener is None:
            return []
        activated = self._listener.on_viewport_changed(self.viewport_rect())
        if activated:
            logger.debug(f"Activated on scan: {activated}")
        return activated

    # ------------------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------------------

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self._listener is not None:
            self.scan()
            self._listener.on_resize()

    def _on_scroll(self, _value: int) -> None:
        self.scan()
