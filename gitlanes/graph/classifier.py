"""
Commit classification: main line, branch lanes and branch colors.

The classifier is a pure function of the commit list. It never raises on
malformed history: dangling parents are treated as roots, cycles are cut
by visited sets, and anything that cannot be resolved lands on lane 0.
"""

import logging
from collections import deque
from collections.abc import Iterable, Mapping, Sequence

from gitlanes.constants import DEFAULT_REMOTES, MAIN_BRANCH_NAMES
from gitlanes.graph.refs import branch_names, is_branch_tip, primary_branch
from gitlanes.graph.types import (
    BranchColor,
    CommitRecord,
    GraphClassification,
    LaneAssignment,
    MainLinePolicy,
    get_branch_color,
)

logger = logging.getLogger(__name__)


class CommitGraph:
    """
    Adjacency view over an ordered commit list.

    Only the first record of a repeated id is used. Parent ids that are
    not in the list are dropped from `parents`, so every traversal over
    this graph stays inside the list. A commit listing itself as a parent
    gets no self edge.
    """

    def __init__(
        self, commits: Sequence[CommitRecord], remotes: Iterable[str] = DEFAULT_REMOTES
    ) -> None:
        self.order: list[str] = []
        self.records: dict[str, CommitRecord] = {}
        for commit in commits:
            if commit.id not in self.records:
                self.records[commit.id] = commit
                self.order.append(commit.id)

        remotes = tuple(remotes)
        self.labels: dict[str, tuple[str, ...]] = {
            oid: branch_names(self.records[oid].refs, remotes) for oid in self.order
        }

        self.parents: dict[str, list[str]] = {}
        self.children: dict[str, list[str]] = {oid: [] for oid in self.order}
        for oid in self.order:
            present: list[str] = []
            for parent_id in self.records[oid].parent_ids:
                if parent_id == oid:
                    continue
                if parent_id in self.records and parent_id not in present:
                    present.append(parent_id)
                    self.children[parent_id].append(oid)
            self.parents[oid] = present

    def __len__(self) -> int:
        return len(self.order)

    def __contains__(self, oid: object) -> bool:
        return oid in self.records

    def is_merge(self, oid: str) -> bool:
        """True if the commit lists more than one parent (dangling ones included)."""
        return len(self.records[oid].parent_ids) > 1


def walk(
    edges: Mapping[str, Sequence[str]],
    seeds: Iterable[str],
    stop: Iterable[str] | frozenset[str] = frozenset(),
) -> frozenset[str]:
    """
    Breadth-first closure over `edges` starting from `seeds`.

    Seeds are always part of the result; other commits in `stop` are
    never entered.
    """
    stop = stop if isinstance(stop, (set, frozenset)) else frozenset(stop)
    seen: set[str] = set(seeds)
    queue = deque(seen)
    while queue:
        current = queue.popleft()
        for nxt in edges.get(current, ()):
            if nxt in seen or nxt in stop:
                continue
            seen.add(nxt)
            queue.append(nxt)
    return frozenset(seen)


def detect_main_branch(graph: CommitGraph) -> str | None:
    """
    Find the main branch name.

    Commits are scanned newest first; the first one carrying `main` or
    `master` fixes the main branch (`main` wins if it carries both).
    There is deliberately no fallback to any other branch.
    """
    for oid in graph.order:
        for name in MAIN_BRANCH_NAMES:
            if name in graph.labels[oid]:
                return name
    return None


def find_main_tip(graph: CommitGraph, main_branch: str | None) -> str | None:
    """Get the first (newest) commit carrying the main branch."""
    if main_branch is None:
        return None
    for oid in graph.order:
        if main_branch in graph.labels[oid]:
            return oid
    return None


def main_ancestry(graph: CommitGraph, main_tip: str, marked: frozenset[str]) -> frozenset[str]:
    """
    Ancestors of the main tip that the branch pass must not cross.

    First parents are always followed, so a stale branch label on a commit
    main fast-forwarded over does not cut main's history short. The other
    parents of a merge are followed only into unmarked commits: a merged-in
    branch stays outside main's ancestry.
    """
    seen = {main_tip}
    queue = deque([main_tip])
    while queue:
        current = queue.popleft()
        first_parent = graph.records[current].parent_ids[:1]
        for parent_id in graph.parents[current]:
            if parent_id in seen:
                continue
            if parent_id in marked and (parent_id,) != first_parent:
                continue
            seen.add(parent_id)
            queue.append(parent_id)
    return frozenset(seen)


def branch_descendants(
    graph: CommitGraph,
    main_branch: str | None,
    main_tip: str | None,
    policy: MainLinePolicy = MainLinePolicy.STRICT,
) -> frozenset[str]:
    """
    Mark commits that belong to non-main branches.

    Starting from the branch tips, each round recomputes:

    - the forward closure through children (not entering merge commits or
      commits carrying the main branch),
    - the ancestry of the main tip (`main_ancestry`), which crosses
      marked commits only along first-parent links,
    - the backward closure through parents, stopping before that ancestry
      and before commits carrying the main branch.

    The marked set only ever grows (a larger marked set shrinks the main
    ancestry, which lets the backward pass go further), so the loop stops
    at the exact fixed point after at most one round per commit.
    """
    tips = [oid for oid in graph.order if is_branch_tip(graph.labels[oid], main_branch)]
    if not tips:
        return frozenset()

    main_labelled = frozenset(
        oid for oid in graph.order if main_branch is not None and main_branch in graph.labels[oid]
    )
    forward_stop = main_labelled | {oid for oid in graph.order if graph.is_merge(oid)}

    marked = frozenset(tips)
    for _ in range(len(graph) + 1):
        forward = walk(graph.children, marked, forward_stop)

        if main_tip is not None:
            main_ancestors = main_ancestry(graph, main_tip, marked)
            backward = walk(graph.parents, marked, main_ancestors | main_labelled)
        elif policy is MainLinePolicy.STRICT:
            backward = walk(graph.parents, marked)
        else:
            backward = marked

        candidate = marked | forward | backward
        if candidate == marked:
            break
        marked = candidate

    return marked


def main_line(
    graph: CommitGraph,
    main_branch: str | None,
    main_tip: str | None,
    descendants: frozenset[str],
) -> frozenset[str]:
    """Walk back from the main tip, staying out of branch commits."""
    if main_tip is None:
        return frozenset()
    blocked = descendants | {
        oid for oid in graph.order if is_branch_tip(graph.labels[oid], main_branch)
    }
    return walk(graph.parents, [main_tip], blocked)


def _nearest_lane(
    edges: Mapping[str, Sequence[str]],
    start: str,
    assigned: Mapping[str, LaneAssignment],
    branch_only: bool,
) -> LaneAssignment | None:
    """Breadth-first search for the closest already assigned commit."""
    visited = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        found = assigned.get(current)
        if found is not None and (found.lane > 0 or not branch_only):
            return found
        for nxt in edges.get(current, ()):
            if nxt not in visited:
                visited.add(nxt)
                queue.append(nxt)
    return None


def classify(
    commits: Sequence[CommitRecord],
    *,
    policy: MainLinePolicy = MainLinePolicy.STRICT,
    remotes: Iterable[str] = DEFAULT_REMOTES,
) -> GraphClassification:
    """
    Classify every commit into the main line or one branch lane.

    Args:
        commits: Commit records ordered newest first
        policy: What to do when there is no main/master branch
        remotes: Remote names stripped from remote-tracking refs

    Returns:
        Lane per commit, colors per branch, the main line ids and the
        detected main branch name (None if there is none)
    """
    graph = CommitGraph(commits, remotes)

    main_branch = detect_main_branch(graph)
    main_tip = find_main_tip(graph, main_branch)
    descendants = branch_descendants(graph, main_branch, main_tip, policy)

    if main_branch is None and policy is MainLinePolicy.ALL_MAIN_LINE:
        main_line_ids = frozenset(graph.order)
    else:
        main_line_ids = main_line(graph, main_branch, main_tip, descendants)

    assigned: dict[str, LaneAssignment] = {}
    branch_colors: dict[str, BranchColor] = {}

    # Branch tips, oldest first so the earliest tip of a name claims its lane
    for oid in reversed(graph.order):
        branch = primary_branch(graph.labels[oid], main_branch)
        if branch is None:
            continue
        if branch == main_branch:
            assigned[oid] = LaneAssignment(0, True, branch)
            continue
        if branch not in branch_colors:
            branch_colors[branch] = BranchColor(
                branch_name=branch,
                color=get_branch_color(len(branch_colors)),
                lane=len(branch_colors) + 1,
            )
        assigned[oid] = LaneAssignment(branch_colors[branch].lane, False, branch)

    # Everything else, newest first
    only_branch = next(iter(branch_colors.values())) if len(branch_colors) == 1 else None
    for oid in graph.order:
        if oid in assigned:
            continue

        if oid in descendants:
            if only_branch is not None:
                found: LaneAssignment | None = LaneAssignment(
                    only_branch.lane, False, only_branch.branch_name
                )
            else:
                found = _nearest_lane(graph.children, oid, assigned, branch_only=True)
                if found is None:
                    found = _nearest_lane(graph.parents, oid, assigned, branch_only=True)
            if found is not None:
                assigned[oid] = LaneAssignment(found.lane, False, found.owner_branch)
                continue

        if oid in main_line_ids:
            assigned[oid] = LaneAssignment(0, True, main_branch)
            continue

        found = _nearest_lane(graph.parents, oid, assigned, branch_only=False)
        if found is not None:
            assigned[oid] = LaneAssignment(found.lane, found.lane == 0, found.owner_branch)
        else:
            assigned[oid] = LaneAssignment(0, True, None)

    # Merges with a main-line parent are drawn on the main line
    for oid in graph.order:
        if graph.is_merge(oid) and any(
            parent_id in main_line_ids for parent_id in graph.records[oid].parent_ids
        ):
            assigned[oid] = LaneAssignment(0, True, main_branch)

    lane_of = {oid: assigned[oid] for oid in graph.order}

    logger.debug(
        "Classified %d commits: main branch %s, %d main-line, %d branch descendants, %d branches",
        len(graph),
        main_branch,
        len(main_line_ids),
        len(descendants),
        len(branch_colors),
    )

    return GraphClassification(
        lane_of=lane_of,
        branch_colors=branch_colors,
        main_line_ids=main_line_ids,
        main_branch=main_branch,
    )
