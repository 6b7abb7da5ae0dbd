"""Types and constants for commit graph layout."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from gitlanes.constants import DEFAULT_STROKE_WIDTH, DOT_STROKE_COLOR

# Colors for lanes. Index 0 is reserved for the main line; branches cycle
# through the rest in order of first appearance.
BRANCH_COLORS = [
    "#3b82f6",  # Blue (main)
    "#ef4444",  # Red
    "#10b981",  # Green
    "#f59e0b",  # Amber
    "#8b5cf6",  # Purple
    "#ec4899",  # Pink
    "#06b6d4",  # Cyan
    "#84cc16",  # Lime
    "#f97316",  # Orange
    "#6366f1",  # Indigo
]

MAIN_LINE_COLOR = BRANCH_COLORS[0]


def get_branch_color(branch_index: int) -> str:
    """Get color for the n-th non-main branch (0-based), skipping the main color."""
    return BRANCH_COLORS[(branch_index % (len(BRANCH_COLORS) - 1)) + 1]


class RefKind(Enum):
    """What a single decoration in a commit's ref text points at."""

    LOCAL = "local"
    REMOTE_TRACKING = "remote_tracking"
    SYMBOLIC_HEAD = "symbolic_head"
    TAG = "tag"


class MainLinePolicy(Enum):
    """How commits are treated when neither main nor master exists."""

    # No commit is on the main line; branches own their whole ancestry
    STRICT = "strict"
    # Every commit is on the main line (older behaviour)
    ALL_MAIN_LINE = "all_main_line"


class EdgeKind(Enum):
    """Why an edge was drawn."""

    DIRECT = "direct"
    DIVERGENCE = "divergence"
    MERGE_BACK = "merge_back"
    SPINE = "spine"


@dataclass(frozen=True)
class ParsedRef:
    """One decoration parsed out of raw ref text."""

    kind: RefKind
    name: str
    remote: str | None = None
    # Branch a symbolic HEAD points to, e.g. "main" for "HEAD -> main"
    target: str | None = None


@dataclass(frozen=True)
class CommitRecord:
    """A commit as supplied by the commit source, newest first."""

    id: str
    parent_ids: tuple[str, ...] = ()
    refs: str = ""
    subject: str = ""

    @classmethod
    def from_log_fields(
        cls, commit: str, parent: str, refs: str, subject: str = ""
    ) -> "CommitRecord":
        """Build a record from git log fields (space separated parents)."""
        return cls(
            id=commit.strip(),
            parent_ids=tuple(p for p in parent.split() if p),
            refs=refs or "",
            subject=subject,
        )


@dataclass(frozen=True)
class LaneAssignment:
    """Lane a commit is drawn in."""

    lane: int
    is_main_line: bool
    owner_branch: str | None = None


@dataclass(frozen=True)
class BranchColor:
    """Color and lane owned by a non-main branch."""

    branch_name: str
    color: str
    lane: int


@dataclass(frozen=True)
class GraphClassification:
    """Result of classifying one commit list."""

    lane_of: dict[str, LaneAssignment]
    branch_colors: dict[str, BranchColor]
    main_line_ids: frozenset[str]
    main_branch: str | None


class Point(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Dot:
    """A commit dot to draw."""

    x: float
    y: float
    color: str
    commit_id: str
    radius: float
    is_main_line: bool = True
    stroke: str = DOT_STROKE_COLOR


@dataclass(frozen=True)
class ConnectorPath:
    """
    A rounded two-segment connector between two dots.

    Horizontal run from `start` to `horizontal_end`, quarter arc of
    `radius` ending at `vertical_start`, vertical run to `end`.
    `end` sits on the edge of the target dot, not its center.
    """

    start: Point
    horizontal_end: Point
    vertical_start: Point
    end: Point
    radius: float
    sweep: int

    @property
    def path_data(self) -> str:
        """SVG path commands for this connector."""
        r = format_coord(self.radius)
        return (
            f"M {format_coord(self.start.x)} {format_coord(self.start.y)} "
            f"L {format_coord(self.horizontal_end.x)} {format_coord(self.horizontal_end.y)} "
            f"A {r} {r} 0 0 {self.sweep} {format_coord(self.vertical_start.x)} {format_coord(self.vertical_start.y)} "
            f"L {format_coord(self.end.x)} {format_coord(self.end.y)}"
        )


@dataclass(frozen=True)
class RenderEdge:
    """A connector between two dots (or the main spine)."""

    from_point: Point
    to_point: Point
    color: str
    kind: EdgeKind
    connector: ConnectorPath | None = None
    stroke_width: float = DEFAULT_STROKE_WIDTH

    @property
    def is_straight(self) -> bool:
        return self.connector is None


@dataclass(frozen=True)
class GraphLayout:
    """Everything a rendering surface needs for one pass."""

    dots: list[Dot] = field(default_factory=list)
    edges: list[RenderEdge] = field(default_factory=list)
    classification: GraphClassification | None = None

    def edges_of_kind(self, kind: EdgeKind) -> list[RenderEdge]:
        return [edge for edge in self.edges if edge.kind is kind]

    @property
    def direct_edges(self) -> list[RenderEdge]:
        return self.edges_of_kind(EdgeKind.DIRECT)

    @property
    def divergence_edges(self) -> list[RenderEdge]:
        return self.edges_of_kind(EdgeKind.DIVERGENCE)

    @property
    def merge_back_edges(self) -> list[RenderEdge]:
        return self.edges_of_kind(EdgeKind.MERGE_BACK)

    @property
    def spine(self) -> RenderEdge | None:
        spines = self.edges_of_kind(EdgeKind.SPINE)
        return spines[0] if spines else None


def format_coord(value: float) -> str:
    """Format a coordinate compactly (no trailing zeros, no negative zero)."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
