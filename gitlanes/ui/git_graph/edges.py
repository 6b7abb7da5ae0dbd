"""Edge rendering for the git graph - straight lines and rounded connectors."""

import math

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QPainterPath, QPen
from PySide6.QtWidgets import QGraphicsItem, QGraphicsLineItem, QGraphicsPathItem

from gitlanes.graph.types import ConnectorPath, RenderEdge


def _edge_pen(edge: RenderEdge) -> QPen:
    pen = QPen(QColor(edge.color), edge.stroke_width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def corner_arc(connector: ConnectorPath) -> tuple[QRectF, float, float]:
    """
    Get the `QPainterPath.arcTo` arguments for a connector's corner.

    COORDINATE SYSTEM NOTE: the arc center sits straight above or below
    the end of the horizontal run, level with the start of the vertical
    run. Qt angles grow counter-clockwise on screen while an SVG sweep flag
    of 1 means clockwise, so a sweep of 1 becomes a negative span.
    """
    center_x = connector.horizontal_end.x
    center_y = connector.vertical_start.y
    r = connector.radius
    rect = QRectF(center_x - r, center_y - r, 2 * r, 2 * r)
    start_angle = math.degrees(
        math.atan2(-(connector.horizontal_end.y - center_y), connector.horizontal_end.x - center_x)
    )
    sweep_length = -90.0 if connector.sweep else 90.0
    return rect, start_angle, sweep_length


class StraightEdge(QGraphicsLineItem):
    """A straight connection between two commits in the same lane (or the spine)."""

    def __init__(self, edge: RenderEdge, parent: QGraphicsItem | None = None) -> None:
        super().__init__(
            edge.from_point.x, edge.from_point.y, edge.to_point.x, edge.to_point.y, parent
        )
        self.edge = edge
        self.setPen(_edge_pen(edge))

        # Draw behind commit dots
        self.setZValue(-1)


class ConnectorEdge(QGraphicsPathItem):
    """
    A lane-changing connection with one rounded corner.

    The geometry comes precomputed from the path builder:
    1. Horizontal line from the start dot to just before the target column
    2. Quarter arc of the connector radius toward the target row
    3. Vertical line to the edge of the target dot
    """

    def __init__(self, edge: RenderEdge, parent: QGraphicsItem | None = None) -> None:
        super().__init__(parent)
        assert edge.connector is not None
        self.edge = edge
        self.setPath(self.build_path(edge.connector))
        self.setPen(_edge_pen(edge))
        self.setBrush(Qt.BrushStyle.NoBrush)

        # Draw behind commit dots
        self.setZValue(-1)

    @staticmethod
    def build_path(connector: ConnectorPath) -> QPainterPath:
        """Build a painter path for a connector."""
        path = QPainterPath()
        path.moveTo(QPointF(connector.start.x, connector.start.y))
        path.lineTo(QPointF(connector.horizontal_end.x, connector.horizontal_end.y))
        rect, start_angle, sweep_length = corner_arc(connector)
        path.arcTo(rect, start_angle, sweep_length)
        path.lineTo(QPointF(connector.end.x, connector.end.y))
        return path


def make_edge_item(edge: RenderEdge) -> QGraphicsItem:
    """Create the graphics item for an edge."""
    if edge.is_straight:
        return StraightEdge(edge)
    return ConnectorEdge(edge)
