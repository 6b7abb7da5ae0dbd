"""
Layout engine - one classification plus one path build per distinct input.

Recomputation is keyed by a fingerprint of the whole commit list, so a
caller can ask for a layout on every UI change and only pay for a new
classification when the history actually changed.
"""

import hashlib
import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from gitlanes.constants import (
    DEFAULT_CORNER_RADIUS,
    DEFAULT_DOT_RADIUS,
    DEFAULT_LANE_WIDTH,
    DEFAULT_REMOTES,
    DEFAULT_ROW_HEIGHT,
    DEFAULT_STROKE_WIDTH,
)
from gitlanes.graph.classifier import classify
from gitlanes.graph.paths import build_paths
from gitlanes.graph.types import CommitRecord, GraphClassification, GraphLayout, MainLinePolicy

if TYPE_CHECKING:
    from gitlanes.config.settings import Settings

logger = logging.getLogger(__name__)


def commits_key(commits: Sequence[CommitRecord]) -> str:
    """Fingerprint the ordered commit list (ids, parents and raw refs)."""
    key_str = "|".join(
        f"{commit.id}:{' '.join(commit.parent_ids)}:{commit.refs}" for commit in commits
    )
    return hashlib.sha256(key_str.encode()).hexdigest()


def layout_commits(
    commits: Sequence[CommitRecord],
    row_ys: Sequence[float],
    header_height: float,
    width: float,
    *,
    lane_width: float = DEFAULT_LANE_WIDTH,
    dot_radius: float = DEFAULT_DOT_RADIUS,
    default_row_height: float = DEFAULT_ROW_HEIGHT,
    corner_radius: float = DEFAULT_CORNER_RADIUS,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
    policy: MainLinePolicy = MainLinePolicy.STRICT,
    remotes: Iterable[str] = DEFAULT_REMOTES,
) -> GraphLayout:
    """Classify and build paths in one go, without memoization."""
    remotes = tuple(remotes)
    classification = classify(commits, policy=policy, remotes=remotes)
    return _build(
        commits,
        classification,
        row_ys,
        header_height,
        width,
        lane_width=lane_width,
        dot_radius=dot_radius,
        default_row_height=default_row_height,
        corner_radius=corner_radius,
        stroke_width=stroke_width,
        remotes=remotes,
    )


def _build(
    commits: Sequence[CommitRecord],
    classification: GraphClassification,
    row_ys: Sequence[float],
    header_height: float,
    width: float,
    **options: float | tuple[str, ...],
) -> GraphLayout:
    layout = build_paths(
        commits,
        classification.lane_of,
        classification.branch_colors,
        classification.main_line_ids,
        row_ys,
        header_height,
        width,
        **options,  # type: ignore[arg-type]
    )
    return GraphLayout(dots=layout.dots, edges=layout.edges, classification=classification)


class LayoutEngine:
    """
    Memoizing front end for the classifier and the path builder.

    Only the most recent result is kept: a new key replaces the old
    result outright.
    """

    def __init__(
        self,
        *,
        lane_width: float = DEFAULT_LANE_WIDTH,
        dot_radius: float = DEFAULT_DOT_RADIUS,
        default_row_height: float = DEFAULT_ROW_HEIGHT,
        corner_radius: float = DEFAULT_CORNER_RADIUS,
        stroke_width: float = DEFAULT_STROKE_WIDTH,
        policy: MainLinePolicy = MainLinePolicy.STRICT,
        remotes: Iterable[str] = DEFAULT_REMOTES,
    ) -> None:
        self.lane_width = lane_width
        self.dot_radius = dot_radius
        self.default_row_height = default_row_height
        self.corner_radius = corner_radius
        self.stroke_width = stroke_width
        self.policy = policy
        self.remotes = tuple(remotes)

        self._classification_key: str | None = None
        self._classification: GraphClassification | None = None
        self._layout_key: tuple[object, ...] | None = None
        self._layout: GraphLayout | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "LayoutEngine":
        """Create an engine configured from user settings."""
        return cls(
            lane_width=settings.get_lane_width(),
            dot_radius=settings.get_dot_radius(),
            default_row_height=settings.get_row_height(),
            corner_radius=settings.get_corner_radius(),
            stroke_width=settings.get_stroke_width(),
            policy=settings.get_main_line_policy(),
            remotes=settings.get_remotes(),
        )

    def classification(self, commits: Sequence[CommitRecord]) -> GraphClassification:
        """Get the classification for `commits`, recomputing only when they changed."""
        key = commits_key(commits)
        if self._classification is None or key != self._classification_key:
            logger.debug("Classification cache miss for %d commits", len(commits))
            self._classification = classify(commits, policy=self.policy, remotes=self.remotes)
            self._classification_key = key
        return self._classification

    def layout(
        self,
        commits: Sequence[CommitRecord],
        row_ys: Sequence[float],
        header_height: float,
        width: float,
    ) -> GraphLayout:
        """Get the layout for `commits` and the given geometry."""
        key = (commits_key(commits), tuple(row_ys), header_height, width)
        if self._layout is not None and key == self._layout_key:
            logger.debug("Layout cache hit")
            return self._layout

        classification = self.classification(commits)
        self._layout = _build(
            commits,
            classification,
            row_ys,
            header_height,
            width,
            lane_width=self.lane_width,
            dot_radius=self.dot_radius,
            default_row_height=self.default_row_height,
            corner_radius=self.corner_radius,
            stroke_width=self.stroke_width,
            remotes=self.remotes,
        )
        self._layout_key = key
        return self._layout

    def invalidate(self) -> None:
        """Drop memoized results."""
        self._classification_key = None
        self._classification = None
        self._layout_key = None
        self._layout = None
