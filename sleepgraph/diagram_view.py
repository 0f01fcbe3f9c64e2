"""Interactive sleep-settings diagram with draggable nodes and PNG export."""
import math
from pathlib import Path
from typing import Dict, List, Optional, Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import (
    QBrush, QColor, QFont, QImage, QLinearGradient, QPainter, QPainterPath, QPen, QPolygonF
)
from PySide6.QtWidgets import (
    QApplication, QDialog, QFileDialog, QGraphicsItem, QGraphicsPathItem, QGraphicsPolygonItem,
    QGraphicsRectItem, QGraphicsScene, QGraphicsTextItem, QGraphicsView, QHBoxLayout, QLabel,
    QMessageBox, QPushButton, QVBoxLayout, QWidget
)

from .conditions import describe_conditions
from .config import DEFAULT_EXPORT_NAME
from .state_graph import EDGE_COLOR, STATE_GRADIENT, STATE_WIDTH, GraphEdge, GraphNode, GraphResult

STATE_HEIGHT = 60
CONDITION_WIDTH = STATE_WIDTH
CONDITION_PADDING = 16
STUB = 20
ARROW_SIZE = 10

ICON_GLYPHS = {
    "zap": "⚡",
    "power": "⏻",
    "power-off": "⏾",
    "battery-low": "\U0001faab",
}


class ExportError(Exception):
    """Raised when a diagram cannot be exported."""
    pass


def ensure_app() -> QApplication:
    """Return the running QApplication, creating one if needed."""
    return QApplication.instance() or QApplication([])


def condition_text(node: GraphNode) -> str:
    """Text shown in a condition box: the composed conditions, then thresholds."""
    conditions = node.data.get("conditions", {})
    lines = [describe_conditions(
        conditions.get("and", []),
        conditions.get("or", []),
        conditions.get("targ", []),
    )]
    lines.extend(conditions.get("nonZero", []))
    return "\n".join(lines)


class DiagramNode(QGraphicsRectItem):
    """Base for draggable diagram boxes; keeps connected edges in sync."""

    def __init__(self, node: GraphNode, width: float, height: float):
        super().__init__(0, 0, width, height)
        self.node_id = node.id
        self.handles_used = list(node.handles_used)
        self.edges = []  # Connected edges to update on move

        self.setPos(node.x, node.y)

        # Make draggable
        self.setFlag(QGraphicsItem.ItemIsMovable, True)
        self.setFlag(QGraphicsItem.ItemIsSelectable, True)
        self.setFlag(QGraphicsItem.ItemSendsGeometryChanges, True)

    def itemChange(self, change, value):
        """Update connected edges when node moves."""
        if change == QGraphicsItem.ItemPositionHasChanged:
            for edge in self.edges:
                edge.update_path()
        return super().itemChange(change, value)

    def band_fraction(self, handle: str) -> float:
        """Vertical position of a side anchor as a fraction of box height."""
        return 0.5

    def anchor_point(self, handle: str) -> QPointF:
        """Scene position of a named anchor on this box."""
        rect = self.sceneBoundingRect()
        if handle == "source-top":
            return QPointF(rect.center().x(), rect.top())
        x = rect.left() if "-left" in handle else rect.right()
        return QPointF(x, rect.top() + rect.height() * self.band_fraction(handle))


class StateNodeItem(DiagramNode):
    """Gradient box for a power state."""

    def __init__(self, node: GraphNode, width: float = STATE_WIDTH, height: float = STATE_HEIGHT):
        super().__init__(node, width, height)
        self.label = node.data.get("label", node.id)

        # Styling
        gradient = QLinearGradient(0, 0, width, 0)
        gradient.setColorAt(0, QColor(STATE_GRADIENT[0]))
        gradient.setColorAt(1, QColor(STATE_GRADIENT[1]))
        self.setBrush(QBrush(gradient))
        self.setPen(QPen(Qt.NoPen))

        glyph = ICON_GLYPHS.get(node.data.get("icon", ""), "")
        text = f"{glyph}  {self.label}" if glyph else self.label
        self._text = QGraphicsTextItem(text, self)
        self._text.setDefaultTextColor(Qt.white)
        font = QFont("Arial", 12)
        font.setBold(True)
        self._text.setFont(font)
        text_rect = self._text.boundingRect()
        self._text.setPos(
            (width - text_rect.width()) / 2,
            (height - text_rect.height()) / 2
        )

    def band_fraction(self, handle: str) -> float:
        # Target ports sit at 30%, source ports at 70% unless banded
        if handle.endswith("-top"):
            return 0.3
        if handle.endswith("-bottom"):
            return 0.7
        return 0.3 if handle.startswith("target") else 0.7


class ConditionNodeItem(DiagramNode):
    """White box listing a transition's trigger conditions."""

    def __init__(self, node: GraphNode, width: float = CONDITION_WIDTH):
        text = condition_text(node)
        text_item = QGraphicsTextItem()
        text_item.setFont(QFont("Arial", 9))
        text_item.setTextWidth(width - 2 * CONDITION_PADDING)
        text_item.setPlainText(text)
        height = text_item.boundingRect().height() + 2 * CONDITION_PADDING

        super().__init__(node, width, height)
        self.text = text
        self.setBrush(QBrush(QColor("#ffffff")))
        self.setPen(QPen(QColor("#d1d5db"), 1))

        text_item.setParentItem(self)
        text_item.setDefaultTextColor(QColor("#374151"))
        text_item.setPos(CONDITION_PADDING, CONDITION_PADDING)
        self._text = text_item


class AnchorEdge(QGraphicsPathItem):
    """A stepped path between two resolved anchors, with an arrow head."""

    def __init__(self, edge: GraphEdge, source: DiagramNode, target: DiagramNode):
        super().__init__()
        self.edge_id = edge.id
        self.source = source
        self.target = target
        self.source_handle = edge.source_handle
        self.target_handle = edge.target_handle
        self.dashed = edge.dashed
        self._arrow = None

        # Register with nodes for position updates
        source.edges.append(self)
        target.edges.append(self)

        pen = QPen(QColor(EDGE_COLOR), 2)
        if self.dashed:
            pen.setStyle(Qt.DashLine)
        self.setPen(pen)

        self.update_path()

    @staticmethod
    def _stub(handle: str) -> QPointF:
        """Offset leading away from the box side an anchor sits on."""
        if handle == "source-top":
            return QPointF(0, -STUB)
        return QPointF(-STUB, 0) if "-left" in handle else QPointF(STUB, 0)

    def update_path(self):
        """Recalculate path from source anchor to target anchor."""
        start = self.source.anchor_point(self.source_handle)
        end = self.target.anchor_point(self.target_handle)
        start_stub = start + self._stub(self.source_handle)
        end_stub = end + self._stub(self.target_handle)

        path = QPainterPath()
        path.moveTo(start)
        path.lineTo(start_stub)
        path.lineTo(QPointF(start_stub.x(), end_stub.y()))
        path.lineTo(end_stub)
        path.lineTo(end)
        self.setPath(path)

        self._update_arrow(end_stub, end)

    def _update_arrow(self, start: QPointF, end: QPointF):
        """Draw arrow head at end point."""
        if self._arrow is not None:
            if self._arrow.scene() is not None:
                self._arrow.scene().removeItem(self._arrow)
            self._arrow = None

        dx = end.x() - start.x()
        dy = end.y() - start.y()
        length = math.sqrt(dx * dx + dy * dy)
        if length == 0:
            return
        dx /= length
        dy /= length

        p1 = end
        p2 = QPointF(
            end.x() - ARROW_SIZE * dx + ARROW_SIZE * 0.5 * dy,
            end.y() - ARROW_SIZE * dy - ARROW_SIZE * 0.5 * dx
        )
        p3 = QPointF(
            end.x() - ARROW_SIZE * dx - ARROW_SIZE * 0.5 * dy,
            end.y() - ARROW_SIZE * dy + ARROW_SIZE * 0.5 * dx
        )

        self._arrow = QGraphicsPolygonItem(QPolygonF([p1, p2, p3]), self)
        self._arrow.setBrush(QBrush(QColor(EDGE_COLOR)))
        self._arrow.setPen(QPen(Qt.NoPen))


def populate_scene(scene: QGraphicsScene, result: GraphResult):
    """Add node and edge items for a graph; returns (nodes by id, edges)."""
    nodes: Dict[str, DiagramNode] = {}
    for node in result.nodes:
        item = StateNodeItem(node) if node.is_state else ConditionNodeItem(node)
        scene.addItem(item)
        nodes[node.id] = item

    edges: List[AnchorEdge] = []
    for edge in result.edges:
        if edge.source in nodes and edge.target in nodes:
            item = AnchorEdge(edge, nodes[edge.source], nodes[edge.target])
            scene.addItem(item)
            edges.append(item)
    return nodes, edges


class SleepStateDiagram(QGraphicsView):
    """QGraphicsView displaying a sleep-settings graph."""

    def __init__(self, result: Optional[GraphResult] = None, parent=None):
        super().__init__(parent)
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)

        # View settings
        self.setRenderHint(QPainter.Antialiasing)
        self.setDragMode(QGraphicsView.ScrollHandDrag)
        self.setBackgroundBrush(QBrush(QColor("#ffffff")))

        self._nodes: Dict[str, DiagramNode] = {}
        self._edges: List[AnchorEdge] = []
        self.result: Optional[GraphResult] = None
        if result is not None:
            self.load_graph(result)

    def load_graph(self, result: GraphResult):
        """Replace the scene contents with a freshly built graph."""
        self.clear()
        self._nodes, self._edges = populate_scene(self._scene, result)
        self.result = result

    def clear(self):
        """Remove everything from the scene."""
        self._scene.clear()
        self._nodes = {}
        self._edges = []
        self.result = None

    def is_empty(self) -> bool:
        return not self._nodes


def render_scene(scene: QGraphicsScene, scale: float = 2, padding: float = 40) -> QImage:
    """Paint a scene onto a white image with padding around its items."""
    bounds = scene.itemsBoundingRect().adjusted(-padding, -padding, padding, padding)
    image = QImage(
        max(1, int(bounds.width() * scale)),
        max(1, int(bounds.height() * scale)),
        QImage.Format_ARGB32,
    )
    image.fill(QColor("#ffffff"))

    painter = QPainter(image)
    painter.setRenderHint(QPainter.Antialiasing)
    scene.render(painter, QRectF(image.rect()), bounds)
    painter.end()
    return image


def export_png(result: Optional[GraphResult], path: Union[str, Path],
               scale: float = 2, padding: float = 40) -> Path:
    """Render a graph to a PNG file and return its path."""
    if result is None or not result.nodes:
        raise ExportError("No diagram to export")

    ensure_app()
    scene = QGraphicsScene()
    populate_scene(scene, result)
    image = render_scene(scene, scale=scale, padding=padding)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not image.save(str(path), "PNG"):
        raise ExportError(f"Failed to write {path}")
    return path


class SleepSettingsWindow(QDialog):
    """Dialog showing one settings document's diagram."""

    def __init__(self, result: GraphResult, file_name: str = "", parent=None):
        super().__init__(parent)
        self.file_name = file_name
        self.setWindowTitle("Sleep Settings Logic")
        self.resize(1200, 800)

        self._setup_ui()
        self.diagram_view.load_graph(result)

    def _setup_ui(self):
        """Set up header, diagram and footer."""
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        # Header bar
        header_widget = QWidget()
        header_widget.setFixedHeight(36)
        header_widget.setStyleSheet("""
            QWidget {
                background-color: #f8f9fa;
                border-bottom: 1px solid #dee2e6;
            }
        """)
        header_layout = QHBoxLayout(header_widget)
        header_layout.setContentsMargins(12, 0, 12, 0)

        title_label = QLabel(self.file_name or "Sleep Settings Logic")
        title_label.setStyleSheet("font-weight: bold; font-size: 10pt;")
        header_layout.addWidget(title_label)
        header_layout.addStretch()

        export_btn = QPushButton("Export PNG")
        export_btn.clicked.connect(self._on_export_clicked)
        header_layout.addWidget(export_btn)

        main_layout.addWidget(header_widget)

        self.diagram_view = SleepStateDiagram()
        main_layout.addWidget(self.diagram_view)

        # Footer with Close button
        footer_widget = QWidget()
        footer_layout = QHBoxLayout(footer_widget)
        footer_layout.setContentsMargins(16, 12, 16, 12)
        footer_layout.addStretch()

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.close)
        close_btn.setFixedWidth(80)
        footer_layout.addWidget(close_btn)

        main_layout.addWidget(footer_widget)

    def _on_export_clicked(self):
        """Ask for a target file and export the current diagram."""
        default_name = f"{self.file_name or DEFAULT_EXPORT_NAME}.png"
        path, _ = QFileDialog.getSaveFileName(self, "Export PNG", default_name, "PNG (*.png)")
        if not path:
            return
        try:
            export_png(self.diagram_view.result, path)
        except ExportError as e:
            QMessageBox.warning(self, "Export Failed", str(e))
            return
        QMessageBox.information(self, "Export", f"Diagram exported to {path}")


def show(result: GraphResult, file_name: str = "") -> int:
    """Open the diagram window and run the Qt event loop."""
    app = ensure_app()
    window = SleepSettingsWindow(result, file_name)
    window.show()
    return app.exec()

