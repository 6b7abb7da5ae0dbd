"""
Path building - dots and connectors for a classified commit list.

COORDINATE SYSTEM NOTE:
Rows are drawn newest first, so children sit ABOVE their parents
(lower y values). The main line runs down the vertical axis in the middle
of the drawing area; branch lane n sits n lane widths to its right.

Connectors come in two shapes:
- straight lines between commits in the same lane,
- a rounded corner for anything that changes lane: horizontal run out of
  the start dot, a quarter arc, then a vertical run that stops on the
  edge of the target dot.
"""

from collections import deque
from collections.abc import Iterable, Mapping, Sequence

from gitlanes.constants import (
    DEFAULT_CORNER_RADIUS,
    DEFAULT_DOT_RADIUS,
    DEFAULT_LANE_WIDTH,
    DEFAULT_REMOTES,
    DEFAULT_ROW_HEIGHT,
    DEFAULT_STROKE_WIDTH,
)
from gitlanes.graph.classifier import CommitGraph, detect_main_branch
from gitlanes.graph.refs import primary_branch
from gitlanes.graph.types import (
    MAIN_LINE_COLOR,
    BranchColor,
    CommitRecord,
    ConnectorPath,
    Dot,
    EdgeKind,
    GraphLayout,
    LaneAssignment,
    Point,
    RenderEdge,
)

_UNASSIGNED = LaneAssignment(0, True, None)


def row_y(
    index: int,
    row_ys: Sequence[float],
    header_height: float,
    default_row_height: float = DEFAULT_ROW_HEIGHT,
) -> float:
    """Get the center y of a row, computing it when the row was not measured."""
    if index < len(row_ys):
        return row_ys[index]
    return header_height + index * default_row_height + default_row_height / 2


def lane_x(assignment: LaneAssignment, width: float, lane_width: float) -> float:
    """Get the x of a commit: the central axis for the main line, offset lanes otherwise."""
    axis = width / 2
    if assignment.is_main_line:
        return axis
    return axis + assignment.lane * lane_width


def lane_color(lane: int, branch_colors: Mapping[str, BranchColor]) -> str:
    """Get the color of a lane (main color for lane 0 and unknown lanes)."""
    if lane > 0:
        for branch_color in branch_colors.values():
            if branch_color.lane == lane:
                return branch_color.color
    return MAIN_LINE_COLOR


def rounded_connector(
    start: Point,
    end: Point,
    dot_radius: float = DEFAULT_DOT_RADIUS,
    corner_radius: float = DEFAULT_CORNER_RADIUS,
) -> ConnectorPath:
    """
    Build a horizontal-then-vertical connector with one rounded corner.

    Path structure:
    1. Horizontal line from the start dot center to one radius short of end.x
    2. Quarter arc turning toward the end row, ending on end.x
    3. Vertical line to the near edge of the end dot

    Going up, the radius is clamped to the dot radius so the arc never
    shows above the start dot.
    """
    going_right = end.x > start.x
    going_down = end.y > start.y

    r = corner_radius if going_down else min(corner_radius, dot_radius)

    horizontal_end_x = end.x - r if going_right else end.x + r
    vertical_start_y = start.y + r if going_down else start.y - r
    target_y = end.y - dot_radius if going_down else end.y + dot_radius

    # Right-then-down and left-then-up turn clockwise
    sweep = 1 if going_right == going_down else 0

    return ConnectorPath(
        start=start,
        horizontal_end=Point(horizontal_end_x, start.y),
        vertical_start=Point(end.x, vertical_start_y),
        end=Point(end.x, target_y),
        radius=r,
        sweep=sweep,
    )


def common_ancestor(
    graph: CommitGraph, tip: str, main_line_ids: Iterable[str] | frozenset[str]
) -> str | None:
    """
    Find where a branch left the main line.

    Breadth-first over parents from the tip; the first main-line commit
    reached wins. Parents missing from the list are skipped.
    """
    main_line_ids = (
        main_line_ids if isinstance(main_line_ids, (set, frozenset)) else frozenset(main_line_ids)
    )
    visited = {tip}
    queue = deque([tip])
    while queue:
        current = queue.popleft()
        for parent_id in graph.parents.get(current, ()):
            if parent_id in visited:
                continue
            visited.add(parent_id)
            if parent_id in main_line_ids:
                return parent_id
            queue.append(parent_id)
    return None


class _Placed:
    """A commit's resolved position and lane."""

    __slots__ = ("point", "assignment")

    def __init__(self, point: Point, assignment: LaneAssignment) -> None:
        self.point = point
        self.assignment = assignment


def build_paths(
    commits: Sequence[CommitRecord],
    lane_of: Mapping[str, LaneAssignment],
    branch_colors: Mapping[str, BranchColor],
    main_line_ids: Iterable[str],
    row_ys: Sequence[float],
    header_height: float,
    width: float,
    lane_width: float = DEFAULT_LANE_WIDTH,
    dot_radius: float = DEFAULT_DOT_RADIUS,
    *,
    default_row_height: float = DEFAULT_ROW_HEIGHT,
    corner_radius: float = DEFAULT_CORNER_RADIUS,
    stroke_width: float = DEFAULT_STROKE_WIDTH,
    remotes: Iterable[str] = DEFAULT_REMOTES,
) -> GraphLayout:
    """
    Turn a classification plus row geometry into dots and edges.

    Args:
        commits: Commit records ordered newest first (same order as rows)
        lane_of: Lane per commit id, from the classifier
        branch_colors: Colors per branch, from the classifier
        main_line_ids: Main line commit ids, from the classifier
        row_ys: Measured center y per row; may be shorter than `commits`
        header_height: Height above the first row
        width: Width of the drawing area (the main line is centered)
        lane_width: Horizontal distance between lanes
        dot_radius: Radius of a commit dot

    Returns:
        Dots (one per record) and edges, spine first
    """
    graph = CommitGraph(commits, remotes)
    main_line_ids = frozenset(main_line_ids)
    main_branch = detect_main_branch(graph)

    dots: list[Dot] = []
    placed: dict[str, _Placed] = {}
    for index, commit in enumerate(commits):
        assignment = lane_of.get(commit.id, _UNASSIGNED)
        point = Point(
            lane_x(assignment, width, lane_width),
            row_y(index, row_ys, header_height, default_row_height),
        )
        color = (
            MAIN_LINE_COLOR if assignment.is_main_line else lane_color(assignment.lane, branch_colors)
        )
        dots.append(
            Dot(
                x=point.x,
                y=point.y,
                color=color,
                commit_id=commit.id,
                radius=dot_radius,
                is_main_line=assignment.is_main_line,
            )
        )
        if commit.id not in placed:
            placed[commit.id] = _Placed(point, assignment)

    def connect(from_id: str, to_id: str, color: str, kind: EdgeKind) -> RenderEdge:
        source = placed[from_id]
        target = placed[to_id]
        straight = (
            source.point.x == target.point.x
            and source.assignment.is_main_line == target.assignment.is_main_line
        )
        connector = (
            None
            if straight
            else rounded_connector(source.point, target.point, dot_radius, corner_radius)
        )
        return RenderEdge(
            from_point=source.point,
            to_point=target.point,
            color=color,
            kind=kind,
            connector=connector,
            stroke_width=stroke_width,
        )

    edges: list[RenderEdge] = []

    # Spine along the main line, beneath everything else
    main_ys = [dot.y for dot in dots if dot.is_main_line]
    if main_ys:
        axis = width / 2
        edges.append(
            RenderEdge(
                from_point=Point(axis, min(main_ys)),
                to_point=Point(axis, max(main_ys)),
                color=MAIN_LINE_COLOR,
                kind=EdgeKind.SPINE,
                stroke_width=stroke_width,
            )
        )

    # Direct parent connections, only within a lane
    for oid in graph.order:
        child = placed[oid].assignment
        for parent_id in graph.parents[oid]:
            parent = placed[parent_id].assignment
            if child.lane != parent.lane or child.is_main_line != parent.is_main_line:
                continue
            color = MAIN_LINE_COLOR if child.is_main_line else lane_color(child.lane, branch_colors)
            edges.append(connect(oid, parent_id, color, EdgeKind.DIRECT))

    # One divergence line per branch, plus a merge-back line if it was merged
    for branch_name, branch_color in branch_colors.items():
        tip = next(
            (
                oid
                for oid in graph.order
                if primary_branch(graph.labels[oid], main_branch) == branch_name
            ),
            None,
        )
        if tip is None:
            continue

        ancestor = common_ancestor(graph, tip, main_line_ids)
        if ancestor is None:
            continue
        edges.append(connect(ancestor, tip, branch_color.color, EdgeKind.DIVERGENCE))

        for oid in graph.order:
            if oid == tip or not placed[oid].assignment.is_main_line:
                continue
            if tip in graph.parents[oid]:
                edges.append(connect(tip, oid, branch_color.color, EdgeKind.MERGE_BACK))
                break

    return GraphLayout(dots=dots, edges=edges)
