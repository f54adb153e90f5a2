"""
Diagram Surface
===============
QGraphicsView implementation of the engine's RenderSurface.

Why is this file needed?
------------------------
1. Drawing: It turns a DiagramDescriptor into scene items (background bands,
   links with arrowheads, labels and sequence badges, nodes, legend) and
   keeps them in sync with the positions and paths the engine computes.
2. Pointer input: Mouse gestures over nodes are forwarded to the bound
   Diagram handle (press / move / release for dragging, set_hover for
   hover). The surface itself never changes styling in response to input;
   it only applies the Visuals it is given.
3. Particles: Each particle is a small disc animated along its LinkPath by a
   linear QVariantAnimation lasting the particle's duration.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QPointF, QRectF, Qt, QVariantAnimation
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPainterPath, QPen, QPolygonF
from PySide6.QtWidgets import (
    QFrame, QGraphicsEllipseItem, QGraphicsItem, QGraphicsLineItem, QGraphicsPathItem,
    QGraphicsPolygonItem, QGraphicsRectItem, QGraphicsScene, QGraphicsSimpleTextItem,
    QGraphicsView, QWidget
)

from docuviz.model.graph import HoverMode, NodeShape

if TYPE_CHECKING:
    from docuviz.engine.geometry import LinkPath
    from docuviz.engine.particles import Particle
    from docuviz.engine.surface import PointerTarget
    from docuviz.model.graph import DiagramDescriptor, Link, Node, RenderHints
    from docuviz.model.view_state import Visuals

logger = logging.getLogger(__name__)

NODE_ID_ROLE = 0

TEXT_COLOR = "#f8fafc"
MUTED_COLOR = "#94a3b8"
BADGE_FILL = "#1e293b"
ARROW_SIZE = 8.0
BADGE_RADIUS = 10.0

Z_BAND, Z_LINK, Z_LABEL, Z_NODE, Z_PARTICLE, Z_LEGEND = range(6)


# ------------------------------------------------------------------------------
# Scene items
# ------------------------------------------------------------------------------

class NodeItem(QGraphicsItem):
    """A node drawn as a rounded box or a circle with its label(s) inside."""

    def __init__(self, node: Node, hints: RenderHints) -> None:
        super().__init__()
        self.node = node
        self.color = QColor(hints.color_for(node.category))
        self.fill_opacity = hints.fill_opacity
        self.stroke = 2.0
        self.radius = node.radius
        self.setData(NODE_ID_ROLE, node.id)
        self.setZValue(Z_NODE)
        if hints.draggable:
            self.setCursor(Qt.CursorShape.OpenHandCursor)
        elif hints.hover_mode != HoverMode.NONE:
            self.setCursor(Qt.CursorShape.PointingHandCursor)

    def set_style(self, stroke: float, radius: float) -> None:
        if stroke == self.stroke and radius == self.radius:
            return
        self.prepareGeometryChange()
        self.stroke = stroke
        self.radius = radius
        self.update()

    def _shape_rect(self) -> QRectF:
        node = self.node
        if node.shape == NodeShape.RECT and node.width > 0 and node.height > 0:
            return QRectF(-node.width / 2, -node.height / 2, node.width, node.height)
        r = self.radius
        return QRectF(-r, -r, 2 * r, 2 * r)

    def boundingRect(self) -> QRectF:
        pad = self.stroke + 2.0
        rect = self._shape_rect().adjusted(-pad, -pad, pad, pad)
        if self.node.shape == NodeShape.CIRCLE and self.node.label and self.radius < 20:
            # small circles carry their label underneath
            rect = rect.united(QRectF(-60, self.radius, 120, 20))
        return rect

    def paint(self, painter: QPainter, option, widget: Optional[QWidget] = None) -> None:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        fill = QColor(self.color)
        fill.setAlphaF(self.fill_opacity)
        solid = self.fill_opacity >= 1.0

        painter.setPen(QPen(QColor("#ffffff") if solid else self.color, self.stroke))
        painter.setBrush(QBrush(fill))
        rect = self._shape_rect()
        if self.node.shape == NodeShape.RECT:
            painter.drawRoundedRect(rect, 8, 8)
        else:
            painter.drawEllipse(rect)

        if not self.node.label:
            return
        text_color = QColor(TEXT_COLOR) if solid else self.color
        font = QFont()
        font.setBold(True)
        font.setPointSizeF(8.5)
        painter.setFont(font)
        painter.setPen(text_color)

        if self.node.shape == NodeShape.CIRCLE and self.radius < 20:
            painter.setPen(QColor(MUTED_COLOR))
            painter.drawText(QRectF(-60, self.radius + 2, 120, 16), Qt.AlignmentFlag.AlignCenter, self.node.label)
            return

        if self.node.sublabel:
            painter.drawText(rect.adjusted(2, 2, -2, -rect.height() / 2), Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignBottom, self.node.label)
            font.setBold(False)
            font.setPointSizeF(7.0)
            painter.setFont(font)
            painter.setPen(QColor(MUTED_COLOR) if not solid else text_color)
            painter.drawText(rect.adjusted(2, rect.height() / 2, -2, -2), Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop, self.node.sublabel)
        else:
            painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, self.node.label)


class LinkItems:
    """Everything drawn for one link, faded together."""

    def __init__(self, link: Link, hints: RenderHints, scene: QGraphicsScene) -> None:
        self.link = link
        color = QColor(hints.color_for(link.category))

        pen = QPen(color, hints.link_width * math.sqrt(max(link.weight, 0.0)))
        if link.dashed:
            pen.setStyle(Qt.PenStyle.DashLine)
        self.path = QGraphicsPathItem()
        self.path.setPen(pen)
        self.path.setZValue(Z_LINK)
        scene.addItem(self.path)

        self.arrow: Optional[QGraphicsPolygonItem] = None
        if hints.arrows:
            self.arrow = QGraphicsPolygonItem()
            self.arrow.setPen(QPen(Qt.PenStyle.NoPen))
            self.arrow.setBrush(QBrush(color))
            self.arrow.setZValue(Z_LINK)
            scene.addItem(self.arrow)

        self.label: Optional[QGraphicsSimpleTextItem] = None
        if hints.show_link_labels and link.label:
            self.label = QGraphicsSimpleTextItem(link.label)
            self.label.setBrush(QBrush(QColor(MUTED_COLOR)))
            self.label.setZValue(Z_LABEL)
            scene.addItem(self.label)

        self.badge: Optional[QGraphicsEllipseItem] = None
        if hints.show_seq_badges and link.seq is not None:
            r = BADGE_RADIUS
            self.badge = QGraphicsEllipseItem(-r, -r, 2 * r, 2 * r)
            self.badge.setBrush(QBrush(QColor(BADGE_FILL)))
            self.badge.setPen(QPen(QColor(hints.default_color), 1.5))
            self.badge.setZValue(Z_LABEL)
            text = QGraphicsSimpleTextItem(str(link.seq), self.badge)
            text.setBrush(QBrush(QColor(TEXT_COLOR)))
            font = text.font()
            font.setPointSizeF(6.5)
            font.setBold(True)
            text.setFont(font)
            box = text.boundingRect()
            text.setPos(-box.width() / 2, -box.height() / 2)
            scene.addItem(self.badge)

    def items(self) -> list[QGraphicsItem]:
        return [i for i in (self.path, self.arrow, self.label, self.badge) if i is not None]

    def update(self, path: Optional[LinkPath]) -> None:
        if path is None:
            for item in self.items():
                item.setVisible(False)
            return
        for item in self.items():
            item.setVisible(True)

        qpath = QPainterPath(QPointF(*path.start))
        if path.control is not None:
            qpath.quadTo(QPointF(*path.control), QPointF(*path.end))
        else:
            qpath.lineTo(QPointF(*path.end))
        self.path.setPath(qpath)

        if self.arrow is not None:
            tail = path.control if path.control is not None else path.start
            self.arrow.setPolygon(arrow_head(tail, path.end))

        mx, my = path.midpoint
        if self.label is not None:
            box = self.label.boundingRect()
            self.label.setPos(mx - box.width() / 2, my - box.height() - 4)
        if self.badge is not None:
            dx, dy = self.link.label_offset
            self.badge.setPos(mx + dx, my + dy)

    def set_opacity(self, opacity: float) -> None:
        for item in self.items():
            item.setOpacity(opacity)


def arrow_head(tail: tuple[float, float], tip: tuple[float, float]) -> QPolygonF:
    dx, dy = tip[0] - tail[0], tip[1] - tail[1]
    length = math.hypot(dx, dy) or 1.0
    ux, uy = dx / length, dy / length
    bx, by = tip[0] - ux * ARROW_SIZE, tip[1] - uy * ARROW_SIZE
    half = ARROW_SIZE / 2
    return QPolygonF([
        QPointF(*tip),
        QPointF(bx - uy * half, by + ux * half),
        QPointF(bx + uy * half, by - ux * half),
    ])


# ------------------------------------------------------------------------------
# Surface
# ------------------------------------------------------------------------------

class DiagramSurface(QGraphicsView):
    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setMouseTracking(True)

        self.descriptor: Optional[DiagramDescriptor] = None
        self._target: Optional[PointerTarget] = None
        self._nodes: dict[str, NodeItem] = {}
        self._links: list[LinkItems] = []
        self._particles: dict[int, tuple[QGraphicsEllipseItem, QVariantAnimation]] = {}
        self._dragging = False

    # ------------------------------------------------------------------------------
    # RenderSurface
    # ------------------------------------------------------------------------------

    def build(self, descriptor: DiagramDescriptor) -> None:
        self.clear()
        self.descriptor = descriptor
        hints = descriptor.hints
        self._scene.setSceneRect(0, 0, descriptor.width, descriptor.height)
        self.setFixedHeight(int(math.ceil(descriptor.height)))

        for band in hints.bands:
            self._add_band(band.x, band.y, band.width, band.height, band.label, band.color)
        self._links = [LinkItems(link, hints, self._scene) for link in descriptor.links]
        for node in descriptor.nodes:
            item = NodeItem(node, hints)
            self._scene.addItem(item)
            self._nodes[node.id] = item
        self._add_legend(hints)

        logger.debug(f"Surface built for '{descriptor.name}': {len(self._nodes)} nodes, {len(self._links)} links")

    def bind(self, target: PointerTarget) -> None:
        self._target = target

    def update_geometry(self, nodes: list[Node], paths: list[Optional[LinkPath]]) -> None:
        for node in nodes:
            item = self._nodes.get(node.id)
            if item is None:
                continue
            if node.has_position:
                item.setVisible(True)
                item.setPos(node.x, node.y)
            else:
                item.setVisible(False)
        for items, path in zip(self._links, paths):
            items.update(path)

    def apply_visuals(self, visuals: Visuals) -> None:
        for node_id, item in self._nodes.items():
            item.setOpacity(visuals.node_opacity.get(node_id, 1.0))
            item.setScale(visuals.node_scale.get(node_id, 1.0))
            item.set_style(
                visuals.node_stroke.get(node_id, item.stroke),
                visuals.node_radius.get(node_id, item.node.radius),
            )
        for i, items in enumerate(self._links):
            items.set_opacity(visuals.link_opacity.get(i, 1.0))

    def add_particle(self, particle: Particle) -> None:
        r = particle.radius
        dot = QGraphicsEllipseItem(-r, -r, 2 * r, 2 * r)
        dot.setBrush(QBrush(QColor(particle.color)))
        dot.setPen(QPen(Qt.PenStyle.NoPen))
        dot.setZValue(Z_PARTICLE)
        dot.setPos(*particle.path.start)
        self._scene.addItem(dot)

        animation = QVariantAnimation(self)
        animation.setStartValue(0.0)
        animation.setEndValue(1.0)
        animation.setDuration(max(1, particle.duration_ms))
        path = particle.path
        animation.valueChanged.connect(lambda t: dot.setPos(*path.point_at(float(t))))
        animation.start()
        self._particles[particle.id] = (dot, animation)

    def remove_particle(self, particle: Particle) -> None:
        entry = self._particles.pop(particle.id, None)
        if entry is None:
            return
        dot, animation = entry
        animation.stop()
        animation.deleteLater()
        self._scene.removeItem(dot)

    def clear(self) -> None:
        for dot, animation in self._particles.values():
            animation.stop()
            animation.deleteLater()
        self._particles.clear()
        self._nodes.clear()
        self._links.clear()
        self._scene.clear()
        self.descriptor = None

    # ------------------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------------------

    def node_at(self, pos) -> Optional[str]:
        for item in self.items(pos):
            while item is not None:
                node_id = item.data(NODE_ID_ROLE)
                if node_id is not None:
                    return node_id
                item = item.parentItem()
        return None

    def mousePressEvent(self, event) -> None:
        pos = event.position().toPoint()
        node_id = self.node_at(pos)
        if self._target is not None and node_id is not None and event.button() == Qt.MouseButton.LeftButton:
            scene_pos = self.mapToScene(pos)
            self._dragging = self._target.press(node_id, scene_pos.x(), scene_pos.y())
            if self._dragging:
                self.viewport().setCursor(Qt.CursorShape.ClosedHandCursor)
                event.accept()
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        pos = event.position().toPoint()
        if self._target is None:
            super().mouseMoveEvent(event)
            return
        if self._dragging:
            scene_pos = self.mapToScene(pos)
            self._target.move(scene_pos.x(), scene_pos.y())
            event.accept()
            return
        glob = event.globalPosition()
        self._target.set_hover(self.node_at(pos), (glob.x(), glob.y()))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if self._dragging and self._target is not None:
            self._dragging = False
            self._target.release()
            self.viewport().unsetCursor()
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event) -> None:
        if self._target is not None and not self._dragging:
            self._target.set_hover(None)
        super().leaveEvent(event)

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _add_band(self, x: float, y: float, w: float, h: float, label: str, color: str) -> None:
        base = QColor(color)
        fill = QColor(base)
        fill.setAlphaF(0.08)
        border = QColor(base)
        border.setAlphaF(0.5)
        pen = QPen(border, 1.0)
        pen.setStyle(Qt.PenStyle.DashLine)

        rect = QGraphicsRectItem(x, y, w, h)
        rect.setBrush(QBrush(fill))
        rect.setPen(pen)
        rect.setZValue(Z_BAND)
        self._scene.addItem(rect)

        text = QGraphicsSimpleTextItem(label)
        text.setBrush(QBrush(base))
        font = text.font()
        font.setBold(True)
        text.setFont(font)
        text.setPos(x + 10, y + 6)
        text.setZValue(Z_BAND)
        self._scene.addItem(text)

    def _add_legend(self, hints: RenderHints) -> None:
        if not hints.legend:
            return
        x0, y0 = 20.0, 20.0
        if any(entry.line for entry in hints.legend) and self.descriptor is not None:
            # line legends sit in the lower right corner
            x0 = self.descriptor.width - 180
            y0 = self.descriptor.height - 60
        for i, entry in enumerate(hints.legend):
            y = y0 + i * 20
            color = QColor(entry.color)
            if entry.line:
                pen = QPen(color, 2.0)
                if entry.dashed:
                    pen.setStyle(Qt.PenStyle.DashLine)
                line = QGraphicsLineItem(x0, y, x0 + 30, y)
                line.setPen(pen)
                line.setZValue(Z_LEGEND)
                self._scene.addItem(line)
                text_x = x0 + 40
            else:
                dot = QGraphicsEllipseItem(x0 - 6, y - 6, 12, 12)
                dot.setBrush(QBrush(color))
                dot.setPen(QPen(Qt.PenStyle.NoPen))
                dot.setZValue(Z_LEGEND)
                self._scene.addItem(dot)
                text_x = x0 + 12
            text = QGraphicsSimpleTextItem(entry.label)
            text.setBrush(QBrush(QColor(MUTED_COLOR)))
            text.setPos(text_x, y - text.boundingRect().height() / 2)
            text.setZValue(Z_LEGEND)
            self._scene.addItem(text)
