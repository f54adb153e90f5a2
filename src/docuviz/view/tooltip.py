"""
Tooltip widget: the on-screen half of the shared Tooltip.

A frameless tool-tip window that follows the shared Tooltip's content and
visibility. The main window creates it when the shared Tooltip first exists;
transparent to the mouse.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QPoint, Qt
from PySide6.QtWidgets import QLabel, QWidget

from docuviz.engine.tooltip import Tooltip

STYLE = """
QLabel {
    padding: 8px 12px;
    background: rgba(15, 23, 42, 0.95);
    border: 1px solid rgba(99, 102, 241, 0.5);
    border-radius: 6px;
    color: #e2e8f0;
    font-size: 12px;
}
"""


class TooltipWidget(QLabel):
    def __init__(self, tooltip: Tooltip, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent, Qt.WindowType.ToolTip | Qt.WindowType.FramelessWindowHint)
        self.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setTextFormat(Qt.TextFormat.AutoText)
        self.setStyleSheet(STYLE)
        self.hide()

        self._tooltip = tooltip
        tooltip.subscribe(self._sync)

    def _sync(self, tooltip: Tooltip) -> None:
        content = tooltip.content
        if not tooltip.visible or content is None:
            self.hide()
            return
        self.setText(content.text)
        self.adjustSize()
        self.move(QPoint(int(content.x), int(content.y)))
        self.show()
