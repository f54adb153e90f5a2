"""
Drag Controller
===============
Pins a node under the pointer and keeps the layout engine warm while it is
held, so the rest of the diagram relaxes around it.

States: IDLE -> DRAGGING -> IDLE. At most one node is pinned per diagram and
pinning always goes together with a reheat (release goes with a cool-down),
so the simulation is never frozen while a node is held.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, TYPE_CHECKING

from docuviz.model.graph import Node

if TYPE_CHECKING:
    from docuviz.engine.simulation import LayoutEngine

logger = logging.getLogger(__name__)


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class DragController:
    def __init__(self, nodes: list[Node], engine: Optional[LayoutEngine] = None) -> None:
        self._nodes = {n.id: n for n in nodes}
        self._engine = engine
        self.state = DragState.IDLE
        self._subject: Optional[Node] = None

    @property
    def subject(self) -> Optional[str]:
        return self._subject.id if self._subject is not None else None

    def pinned(self) -> list[str]:
        return [n.id for n in self._nodes.values() if n.is_pinned]

    def press(self, node_id: str, x: float, y: float) -> bool:
        """Start dragging node_id at pointer (x, y). Returns False for unknown nodes."""
        node = self._nodes.get(node_id)
        if node is None:
            return False
        if self.state is DragState.DRAGGING:
            self.release()

        self._subject = node
        self.state = DragState.DRAGGING
        self._pin(node, x, y)
        if self._engine is not None:
            self._engine.reheat()
        logger.debug(f"Drag started on {node_id} at ({x:.1f}, {y:.1f})")
        return True

    def move(self, x: float, y: float) -> None:
        if self.state is not DragState.DRAGGING or self._subject is None:
            return
        self._pin(self._subject, x, y)

    def release(self) -> None:
        if self.state is not DragState.DRAGGING or self._subject is None:
            return
        self._subject.unpin()
        if self._engine is not None:
            self._engine.cool()
        logger.debug(f"Drag released on {self._subject.id}")
        self._subject = None
        self.state = DragState.IDLE

    def cancel(self) -> None:
        self.release()

    @staticmethod
    def _pin(node: Node, x: float, y: float) -> None:
        node.pin(x, y)
        node.x = x
        node.y = y
