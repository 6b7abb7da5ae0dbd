"""Scrollable, zoomable view over a repository's lane graph."""

import logging

from PySide6.QtCore import Qt
from PySide6.QtGui import QKeyEvent, QPainter, QWheelEvent
from PySide6.QtWidgets import QGraphicsView, QWidget

from gitlanes.config.settings import Settings
from gitlanes.git_backend.repository import GitLanesRepository
from gitlanes.graph.engine import LayoutEngine
from gitlanes.ui.git_graph.scene import GitGraphScene

logger = logging.getLogger(__name__)


class GitGraphView(QGraphicsView):
    """
    Shows the commit graph of one repository.

    Ctrl+wheel zooms, F5 reloads history, Ctrl+0 resets the zoom and
    Home scrolls back to the checked out commit. Reloading goes through
    a memoizing engine, so refreshing an unchanged history redraws
    without re-classifying.
    """

    MIN_ZOOM = 0.2
    MAX_ZOOM = 4.0
    ZOOM_STEP = 1.1

    def __init__(
        self,
        repo: GitLanesRepository,
        settings: Settings,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.repo = repo
        self.settings = settings
        self.engine = LayoutEngine.from_settings(settings)
        self._zoom = 1.0
        self._scene: GitGraphScene | None = None

        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)

        self.refresh()

    @property
    def zoom(self) -> float:
        return self._zoom

    def _apply_zoom(self, new_zoom: float) -> None:
        """Scale the view to `new_zoom`, kept within MIN_ZOOM..MAX_ZOOM."""
        clamped = min(self.MAX_ZOOM, max(self.MIN_ZOOM, new_zoom))
        if clamped == self._zoom:
            return
        self.scale(clamped / self._zoom, clamped / self._zoom)
        self._zoom = clamped

    def wheelEvent(self, event: QWheelEvent) -> None:  # noqa: N802
        """Zoom with Ctrl held, scroll otherwise."""
        if not event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            super().wheelEvent(event)
            return

        steps = event.angleDelta().y()
        if steps:
            factor = self.ZOOM_STEP if steps > 0 else 1 / self.ZOOM_STEP
            self._apply_zoom(self._zoom * factor)
        event.accept()

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        key = event.key()
        ctrl = bool(event.modifiers() & Qt.KeyboardModifier.ControlModifier)

        if key == Qt.Key.Key_F5:
            self.refresh()
        elif ctrl and key == Qt.Key.Key_0:
            self._apply_zoom(1.0)
        elif key == Qt.Key.Key_Home:
            self.jump_to_head()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def refresh(self) -> None:
        """Reload history from the repository and rebuild the scene."""
        commits = self.repo.load_commits(max_count=self.settings.get_max_count())
        self._scene = GitGraphScene(
            commits,
            self.engine,
            self.settings.get_graph_width(),
            self.settings.get_header_height(),
        )
        self.setScene(self._scene)
        logger.debug("Showing %d commits", len(commits))

    def jump_to_commit(self, oid: str) -> bool:
        """Center on a commit's dot. Returns False if it is not on screen."""
        if self._scene is None:
            return False
        item = self._scene.commit_to_dot.get(oid)
        if item is None:
            return False
        self.centerOn(item)
        return True

    def jump_to_branch(self, branch_name: str) -> bool:
        """Center on the tip of a local or remote-tracking branch."""
        branch = self.repo.repo.branches.get(branch_name)
        if branch is None:
            return False
        return self.jump_to_commit(str(branch.target))

    def jump_to_head(self) -> bool:
        if self.repo.repo.head_is_unborn:
            return False
        return self.jump_to_commit(str(self.repo.repo.head.target))
