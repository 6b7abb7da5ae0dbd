"""Commit graph layout: classification into lanes and connector paths."""

from gitlanes.graph.classifier import classify
from gitlanes.graph.engine import LayoutEngine, commits_key, layout_commits
from gitlanes.graph.paths import build_paths
from gitlanes.graph.refs import branch_names, describe_refs, parse_refs
from gitlanes.graph.types import (
    BRANCH_COLORS,
    BranchColor,
    CommitRecord,
    EdgeKind,
    GraphClassification,
    GraphLayout,
    LaneAssignment,
    MainLinePolicy,
)

__all__ = [
    "BRANCH_COLORS",
    "BranchColor",
    "CommitRecord",
    "EdgeKind",
    "GraphClassification",
    "GraphLayout",
    "LaneAssignment",
    "LayoutEngine",
    "MainLinePolicy",
    "branch_names",
    "build_paths",
    "classify",
    "commits_key",
    "describe_refs",
    "layout_commits",
    "parse_refs",
]
