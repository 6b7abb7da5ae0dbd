"""
Commit source backed by pygit2
"""

import logging
from pathlib import Path

import pygit2

from gitlanes.constants import HEAD_REF
from gitlanes.graph.types import CommitRecord

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"


class GitLanesRepository:
    """Reads commit history and ref decorations from a git repository"""

    def __init__(self, repo_path: str | None = None) -> None:
        """Initialize repository"""
        if repo_path is None:
            repo_path = self._find_repo()

        try:
            self.repo = pygit2.Repository(repo_path)
        except pygit2.GitError as e:
            raise ValueError(f"Not a git repository: {repo_path}") from e

    def _find_repo(self) -> str:
        """Find git repository in current directory or parents"""
        current = Path.cwd()
        while current != current.parent:
            if (current / ".git").exists():
                return str(current)
            current = current.parent
        raise ValueError("Not in a git repository")

    @property
    def path(self) -> str:
        """Working directory (or git dir for bare repositories)"""
        return str(self.repo.workdir or self.repo.path)

    def get_checked_out_branch(self) -> str | None:
        """Get the branch HEAD points to, or None if detached or unborn"""
        if self.repo.head_is_unborn or self.repo.head_is_detached:
            return None
        return self.repo.head.shorthand

    def get_decorations(self) -> dict[str, list[str]]:
        """
        Get `git log --format=%D` style decorations per commit id.

        HEAD comes first (as ``HEAD -> branch`` when attached), then local
        branches, remote-tracking branches and tags, each sorted by name.
        """
        decorations: dict[str, list[str]] = {}

        def add(oid: pygit2.Oid, text: str) -> None:
            decorations.setdefault(str(oid), []).append(text)

        head_branch = self.get_checked_out_branch()
        if not self.repo.head_is_unborn:
            head_commit = self.repo.head.peel(pygit2.Commit)
            if head_branch is None:
                add(head_commit.id, HEAD_REF)
            else:
                add(head_commit.id, f"{HEAD_REF} -> {head_branch}")

        for branch_name in sorted(self.repo.branches.local):
            if branch_name == head_branch:
                continue
            commit = self.repo.branches.local[branch_name].peel(pygit2.Commit)
            add(commit.id, branch_name)

        for branch_name in sorted(self.repo.branches.remote):
            commit = self.repo.branches.remote[branch_name].peel(pygit2.Commit)
            add(commit.id, branch_name)

        for ref_name in sorted(self.repo.references):
            if not ref_name.startswith(TAG_REF_PREFIX):
                continue
            try:
                commit = self.repo.references[ref_name].peel(pygit2.Commit)
            except ValueError:
                # Tags on trees or blobs have no place in the graph
                continue
            add(commit.id, f"tag: {ref_name[len(TAG_REF_PREFIX):]}")

        return decorations

    def _walk_tips(self, all_branches: bool) -> list[pygit2.Oid]:
        """Get the commits to start walking history from"""
        tips: list[pygit2.Oid] = []
        if not self.repo.head_is_unborn:
            tips.append(self.repo.head.peel(pygit2.Commit).id)
        if all_branches:
            for branches in (self.repo.branches.local, self.repo.branches.remote):
                for branch_name in sorted(branches):
                    oid = branches[branch_name].peel(pygit2.Commit).id
                    if oid not in tips:
                        tips.append(oid)
        return tips

    def load_commits(
        self, max_count: int | None = None, all_branches: bool = True
    ) -> list[CommitRecord]:
        """
        Load commit records, newest first.

        Args:
            max_count: Stop after this many commits (None for all)
            all_branches: Include every local and remote branch, not just HEAD

        Returns:
            Commit records with parents and ref decorations
        """
        tips = self._walk_tips(all_branches)
        if not tips:
            return []

        decorations = self.get_decorations()

        walker = self.repo.walk(
            tips[0], pygit2.enums.SortMode.TOPOLOGICAL | pygit2.enums.SortMode.TIME
        )
        for oid in tips[1:]:
            walker.push(oid)

        records: list[CommitRecord] = []
        for commit in walker:
            if max_count is not None and len(records) >= max_count:
                break
            oid = str(commit.id)
            records.append(
                CommitRecord(
                    id=oid,
                    parent_ids=tuple(str(p) for p in commit.parent_ids),
                    refs=", ".join(decorations.get(oid, [])),
                    subject=commit.message.strip().split("\n")[0],
                )
            )

        logger.debug("Loaded %d commits from %s", len(records), self.path)
        return records
