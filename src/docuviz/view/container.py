"""
Diagram Container
=================
The placeholder frame a diagram is mounted into.

Until its diagram is activated the frame shows "Loading visualization...".
mount() swaps whatever it currently holds (placeholder or previous surface)
for a fresh DiagramSurface; the old surface is scheduled for deletion.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication, QFrame, QLabel, QSizePolicy, QVBoxLayout, QWidget

from docuviz.view.surface import DiagramSurface

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "Loading visualization..."
PLACEHOLDER_HEIGHT = 300


class DiagramContainer(QFrame):
    def __init__(self, container_id: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.container_id = container_id
        self.setObjectName(container_id)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)

        self.placeholder: Optional[QLabel] = QLabel(PLACEHOLDER_TEXT)
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.placeholder.setStyleSheet("color: #64748b; font-size: 14px;")
        self._layout.addWidget(self.placeholder)
        self.setFixedHeight(PLACEHOLDER_HEIGHT)

        self.surface: Optional[DiagramSurface] = None

    # ---- DiagramHost (width() is QWidget.width) ----

    def can_render(self) -> bool:
        return QApplication.instance() is not None

    def mount(self, height: float) -> DiagramSurface:
        if self.placeholder is not None:
            self._layout.removeWidget(self.placeholder)
            self.placeholder.deleteLater()
            self.placeholder = None
        if self.surface is not None:
            self._layout.removeWidget(self.surface)
            self.surface.clear()
            self.surface.deleteLater()

        self.surface = DiagramSurface(self)
        self._layout.addWidget(self.surface)
        self.setFixedHeight(int(height))
        logger.debug(f"Mounted surface in '{self.container_id}' ({self.width()}x{int(height)})")
        return self.surface

    @property
    def has_placeholder(self) -> bool:
        return self.placeholder is not None
