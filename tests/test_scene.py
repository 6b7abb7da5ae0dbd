"""Tests for the Qt graph scene, view and edge items."""

import pytest
from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QPainterPath
from PySide6.QtWidgets import QGraphicsEllipseItem, QGraphicsSimpleTextItem

from gitlanes.config.settings import Settings
from gitlanes.git_backend.repository import GitLanesRepository
from gitlanes.graph.engine import LayoutEngine
from gitlanes.graph.paths import rounded_connector
from gitlanes.graph.types import CommitRecord, Point
from gitlanes.ui.git_graph.edges import ConnectorEdge, StraightEdge, corner_arc, make_edge_item
from gitlanes.ui.git_graph.scene import GitGraphScene
from gitlanes.ui.git_graph.widget import GitGraphView


def c(oid, *parents, refs="", subject=""):
    return CommitRecord(id=oid, parent_ids=tuple(parents), refs=refs, subject=subject)


def history():
    return [
        c("M0000000", "M1000000", "C3000000", refs="HEAD -> main", subject="Merge feature"),
        c("C3000000", "C2000000", refs="feature", subject="Finish feature"),
        c("C2000000", "C1000000"),
        c("C1000000", "M1000000", refs="tag: v1"),
        c("M1000000", subject="Initial commit"),
    ]


class TestGitGraphScene:
    """Test what the scene puts on screen."""

    def test_items(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160)
        assert len(scene.layout.dots) == 5
        dots = [i for i in scene.items() if isinstance(i, QGraphicsEllipseItem)]
        labels = [i for i in scene.items() if isinstance(i, QGraphicsSimpleTextItem)]
        assert len(dots) == 5
        assert len(labels) == 5
        assert len(scene.items()) == 5 + 5 + len(scene.layout.edges)

    def test_rows_without_header(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160)
        assert scene.row_positions()[0] == 20
        assert scene.sceneRect().height() == 5 * 40

    def test_rows_below_header(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160, header_height=12)
        assert scene.row_positions()[0] == 32
        assert scene.layout.dots[0].y == 32
        assert scene.sceneRect().height() == 12 + 5 * 40

    def test_dot_lookup(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160)
        dot = scene.commit_to_dot["C3000000"]
        assert dot.rect().center() == QPointF(96, 60)
        assert dot.zValue() > 0

    def test_label_text(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160)
        assert scene.label_text(history()[0]) == "M000000 (HEAD -> main) Merge feature"
        assert scene.label_text(history()[2]) == "C200000"
        assert scene.label_text(history()[3]) == "C100000 (tag: v1)"

    def test_label_text_collapses_remote_refs(self, qapp):
        commit = c("ABCDEF12", refs="HEAD -> main, origin/main, origin/HEAD, tag: v1", subject="Tip")
        scene = GitGraphScene([commit], LayoutEngine(), 160)
        assert scene.label_text(commit) == "ABCDEF1 (HEAD -> main, tag: v1) Tip"

    def test_label_text_uses_engine_remotes(self, qapp):
        commit = c("ABCDEF12", refs="fork/topic, origin/topic")
        scene = GitGraphScene([commit], LayoutEngine(remotes=("fork",)), 160)
        assert scene.label_text(commit) == "ABCDEF1 (origin/topic, topic)"

    def test_engine_reused_for_same_history(self, qapp):
        engine = LayoutEngine()
        first = GitGraphScene(history(), engine, 160)
        second = GitGraphScene(history(), engine, 160)
        assert first.layout is second.layout


class TestEdgeItems:
    """Test conversion of edges into graphics items."""

    def test_item_types(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160)
        for edge in scene.layout.edges:
            item = make_edge_item(edge)
            expected = StraightEdge if edge.is_straight else ConnectorEdge
            assert isinstance(item, expected)
            assert item.zValue() < 0

    def test_connector_ends_on_target_dot(self, qapp):
        scene = GitGraphScene(history(), LayoutEngine(), 160)
        merge = scene.layout.merge_back_edges[0]
        path = ConnectorEdge.build_path(merge.connector)
        assert path.currentPosition() == QPointF(merge.connector.end.x, merge.connector.end.y)
        assert path.elementAt(0).x == merge.connector.start.x

    def test_corner_arc_right_and_up(self):
        connector = rounded_connector(Point(80, 100), Point(96, 20), 3.5, 8)
        assert corner_arc(connector) == (QRectF(89, 93, 7, 7), -90, 90)

    def test_corner_arc_right_and_down(self):
        connector = rounded_connector(Point(0, 0), Point(20, 50), 3.5, 8)
        assert corner_arc(connector) == (QRectF(4, 0, 16, 16), 90, -90)

    def test_corner_arc_left_and_up(self):
        connector = rounded_connector(Point(96, 60), Point(80, 20), 3.5, 8)
        rect, start_angle, sweep_length = corner_arc(connector)
        assert rect == QRectF(80, 53, 7, 7)
        assert (start_angle, sweep_length) == (-90, -90)

    @pytest.mark.parametrize(
        "start, end",
        [
            (Point(80, 100), Point(96, 20)),
            (Point(0, 0), Point(20, 50)),
            (Point(96, 60), Point(80, 20)),
            (Point(96, 0), Point(80, 40)),
        ],
    )
    def test_arc_joins_the_two_runs(self, start, end):
        connector = rounded_connector(start, end, 3.5, 8)
        path = QPainterPath(QPointF(connector.horizontal_end.x, connector.horizontal_end.y))
        path.arcTo(*corner_arc(connector))
        assert path.currentPosition().x() == pytest.approx(connector.vertical_start.x)
        assert path.currentPosition().y() == pytest.approx(connector.vertical_start.y)


class TestGitGraphView:
    """Test the view against a real repository."""

    def test_view_shows_repository(self, qapp, git_repo, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        view = GitGraphView(GitLanesRepository(git_repo.repo.workdir), settings)
        scene = view.scene()
        assert isinstance(scene, GitGraphScene)
        assert set(scene.commit_to_dot) == {git_repo.first, git_repo.second, git_repo.feature}

    def test_zoom_is_clamped(self, qapp, git_repo, tmp_path):
        view = GitGraphView(
            GitLanesRepository(git_repo.repo.workdir), Settings(tmp_path / "settings.json")
        )
        view._apply_zoom(100)
        assert view.zoom == GitGraphView.MAX_ZOOM
        view._apply_zoom(0)
        assert view.zoom == GitGraphView.MIN_ZOOM

    def test_jumps(self, qapp, git_repo, tmp_path):
        view = GitGraphView(
            GitLanesRepository(git_repo.repo.workdir), Settings(tmp_path / "settings.json")
        )
        assert view.jump_to_commit(git_repo.first)
        assert not view.jump_to_commit("0" * 40)
        assert view.jump_to_branch("feature")
        assert not view.jump_to_branch("no-such-branch")
        assert view.jump_to_head()

    def test_header_height_from_settings(self, qapp, git_repo, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        settings.set("graph.header_height", 12)
        view = GitGraphView(GitLanesRepository(git_repo.repo.workdir), settings)
        scene = view.scene()
        assert scene.header_height == 12
        assert scene.row_positions()[0] == 12 + scene.row_height / 2
        assert scene.layout.dots[0].y == 12 + scene.row_height / 2
