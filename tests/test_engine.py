"""Tests for memoized layout computation."""

import pytest

from gitlanes.config.settings import Settings
from gitlanes.graph import engine as engine_module
from gitlanes.graph.engine import LayoutEngine, commits_key, layout_commits
from gitlanes.graph.types import CommitRecord, MainLinePolicy


def c(oid, *parents, refs=""):
    return CommitRecord(id=oid, parent_ids=tuple(parents), refs=refs)


def history():
    return [
        c("C3", "C2", refs="feature"),
        c("C2", "C1"),
        c("C1", "M1", refs="main"),
        c("M1"),
    ]


@pytest.fixture
def classify_calls(monkeypatch):
    """Count calls to the classifier made through the engine."""
    calls = []
    real_classify = engine_module.classify

    def counting(commits, **kwargs):
        calls.append(len(commits))
        return real_classify(commits, **kwargs)

    monkeypatch.setattr(engine_module, "classify", counting)
    return calls


class TestCommitsKey:
    """Test the commit list fingerprint."""

    def test_equal_lists_equal_keys(self):
        assert commits_key(history()) == commits_key(history())

    def test_refs_change_key(self):
        changed = history()
        changed[1] = c("C2", "C1", refs="other")
        assert commits_key(changed) != commits_key(history())

    def test_parents_change_key(self):
        changed = history()
        changed[0] = c("C3", "C1", refs="feature")
        assert commits_key(changed) != commits_key(history())

    def test_order_matters(self):
        assert commits_key(list(reversed(history()))) != commits_key(history())

    def test_subject_does_not_matter(self):
        changed = history()
        changed[0] = CommitRecord("C3", ("C2",), "feature", subject="reworded")
        assert commits_key(changed) == commits_key(history())


class TestLayoutCommits:
    """Test the one-shot pipeline."""

    def test_layout_carries_classification(self):
        result = layout_commits(history(), [], 0, 160)
        assert result.classification is not None
        assert result.classification.main_branch == "main"
        assert len(result.dots) == 4

    def test_options_are_applied(self):
        result = layout_commits(history(), [], 0, 100, lane_width=30, dot_radius=5)
        assert result.dots[0].x == 80
        assert result.dots[0].radius == 5

    def test_policy_is_applied(self):
        commits = [c("F2", "F1", refs="feature"), c("F1")]
        strict = layout_commits(commits, [], 0, 160, policy=MainLinePolicy.STRICT)
        legacy = layout_commits(commits, [], 0, 160, policy=MainLinePolicy.ALL_MAIN_LINE)
        assert strict.dots[1].x == 96
        assert legacy.dots[1].x == 80


class TestLayoutEngine:
    """Test memoization of classification and layout."""

    def test_classification_reused(self, classify_calls):
        engine = LayoutEngine()
        first = engine.classification(history())
        second = engine.classification(history())
        assert first is second
        assert classify_calls == [4]

    def test_classification_recomputed_on_change(self, classify_calls):
        engine = LayoutEngine()
        first = engine.classification(history())
        second = engine.classification([c("N", "C3")] + history())
        assert first is not second
        assert len(classify_calls) == 2

    def test_layout_reused(self, classify_calls):
        engine = LayoutEngine()
        first = engine.layout(history(), [], 0, 160)
        assert engine.layout(history(), [], 0, 160) is first
        assert len(classify_calls) == 1

    def test_geometry_change_keeps_classification(self, classify_calls):
        engine = LayoutEngine()
        narrow = engine.layout(history(), [], 0, 100)
        wide = engine.layout(history(), [], 0, 200)
        assert narrow is not wide
        assert narrow.classification is wide.classification
        assert wide.dots[-1].x == 100
        assert len(classify_calls) == 1

    def test_row_measurements_are_part_of_the_key(self):
        engine = LayoutEngine()
        first = engine.layout(history(), [10, 20, 30, 40], 0, 160)
        second = engine.layout(history(), [10, 20, 30, 45], 0, 160)
        assert first is not second
        assert second.dots[-1].y == 45

    def test_last_computed_wins(self, classify_calls):
        engine = LayoutEngine()
        engine.layout(history(), [], 0, 160)
        engine.layout(history()[1:], [], 0, 160)
        engine.layout(history(), [], 0, 160)
        assert len(classify_calls) == 3

    def test_invalidate(self, classify_calls):
        engine = LayoutEngine()
        first = engine.layout(history(), [], 0, 160)
        engine.invalidate()
        assert engine.layout(history(), [], 0, 160) is not first
        assert len(classify_calls) == 2

    def test_independent_engines(self):
        one = LayoutEngine()
        two = LayoutEngine()
        a = one.classification(history())
        b = two.classification(history())
        assert a == b
        assert a is not b


class TestFromSettings:
    """Test building an engine from user settings."""

    def test_values_come_from_settings(self, tmp_path):
        settings = Settings(tmp_path / "settings.json")
        settings.set("graph.lane_width", 24)
        settings.set("graph.corner_radius", 6)
        settings.set("graph.no_main_branch", "all_main_line")
        settings.set("git.remotes", ["fork"])

        engine = LayoutEngine.from_settings(settings)
        assert engine.lane_width == 24
        assert engine.corner_radius == 6
        assert engine.policy is MainLinePolicy.ALL_MAIN_LINE
        assert engine.remotes == ("fork",)

    def test_defaults(self, tmp_path):
        engine = LayoutEngine.from_settings(Settings(tmp_path / "settings.json"))
        assert engine.lane_width == 16
        assert engine.dot_radius == 3.5
        assert engine.default_row_height == 40
        assert engine.policy is MainLinePolicy.STRICT
        assert engine.remotes == ("origin", "upstream")
