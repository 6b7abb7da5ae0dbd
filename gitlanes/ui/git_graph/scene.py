"""Git graph scene - measures rows and draws the computed layout."""

from collections.abc import Sequence

from PySide6.QtGui import QBrush, QColor, QFont, QPen
from PySide6.QtWidgets import (
    QGraphicsEllipseItem,
    QGraphicsScene,
    QGraphicsSimpleTextItem,
    QWidget,
)

from gitlanes.constants import DOT_STROKE_WIDTH
from gitlanes.graph.engine import LayoutEngine
from gitlanes.graph.refs import describe_refs
from gitlanes.graph.types import CommitRecord, GraphLayout
from gitlanes.ui.git_graph.edges import make_edge_item


class GitGraphScene(QGraphicsScene):
    """Scene containing commit dots, connectors and one text label per row."""

    # Layout constants
    LABEL_GAP = 12
    LABEL_WIDTH = 480
    SHORT_ID_LENGTH = 7

    def __init__(
        self,
        commits: Sequence[CommitRecord],
        engine: LayoutEngine,
        graph_width: float,
        header_height: float = 0,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.commits = list(commits)
        self.engine = engine
        self.graph_width = graph_width
        self.header_height = header_height
        self.row_height = engine.default_row_height
        self.layout: GraphLayout | None = None
        self.commit_to_dot: dict[str, QGraphicsEllipseItem] = {}
        self.commit_to_label: dict[str, QGraphicsSimpleTextItem] = {}

        self.setBackgroundBrush(QColor("#FAFAFA"))
        self._build_scene()

    def row_positions(self) -> list[float]:
        """Center y of every row (rows have a fixed height here)."""
        return [
            self.header_height + index * self.row_height + self.row_height / 2
            for index in range(len(self.commits))
        ]

    def total_height(self) -> float:
        return self.header_height + len(self.commits) * self.row_height

    def _build_scene(self) -> None:
        """Build the graphics scene from the engine's layout."""
        self.clear()
        self.commit_to_dot = {}
        self.commit_to_label = {}

        self.layout = self.engine.layout(
            self.commits, self.row_positions(), self.header_height, self.graph_width
        )

        # Edges first (behind dots)
        for edge in self.layout.edges:
            self.addItem(make_edge_item(edge))

        for commit, dot in zip(self.commits, self.layout.dots):
            item = QGraphicsEllipseItem(
                dot.x - dot.radius, dot.y - dot.radius, dot.radius * 2, dot.radius * 2
            )
            item.setBrush(QBrush(QColor(dot.color)))
            item.setPen(QPen(QColor(dot.stroke), DOT_STROKE_WIDTH))
            item.setToolTip(f"{commit.id[: self.SHORT_ID_LENGTH]} {commit.subject}")
            item.setZValue(1)
            self.addItem(item)
            self.commit_to_dot.setdefault(commit.id, item)

            decorations = describe_refs(commit.refs, self.engine.remotes)
            label = QGraphicsSimpleTextItem(self.label_text(commit))
            label.setFont(QFont("monospace", 9))
            label.setBrush(QBrush(QColor(dot.color if decorations else "#333333")))
            label.setPos(
                self.graph_width + self.LABEL_GAP, dot.y - label.boundingRect().height() / 2
            )
            self.addItem(label)
            self.commit_to_label.setdefault(commit.id, label)

        self.setSceneRect(
            0, 0, self.graph_width + self.LABEL_GAP + self.LABEL_WIDTH, self.total_height()
        )

    def label_text(self, commit: CommitRecord) -> str:
        """Text shown to the right of a commit dot, `git log --oneline --decorate` style."""
        text = commit.id[: self.SHORT_ID_LENGTH]
        decorations = describe_refs(commit.refs, self.engine.remotes)
        if decorations:
            text += f" ({decorations})"
        if commit.subject:
            text += f" {commit.subject}"
        return text
