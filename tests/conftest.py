"""Shared fixtures: an offscreen Qt application and throwaway git repositories."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pygit2
import pytest


@pytest.fixture(scope="session")
def qapp():
    """A QApplication for tests that create widgets or scenes."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


class RepoBuilder:
    """Builds commits with fixed, increasing timestamps."""

    def __init__(self, path):
        self.repo = pygit2.init_repository(str(path), initial_head="main")
        self.tree = self.repo.TreeBuilder().write()
        self.time = 1_700_000_000

    def commit(self, ref, message, parents=()):
        self.time += 100
        sig = pygit2.Signature("Test", "test@example.com", self.time, 0)
        return self.repo.create_commit(ref, sig, sig, message, self.tree, list(parents))


@pytest.fixture
def git_repo(tmp_path):
    """
    A repository shaped like:

        * feature   "feature work"
        | * main    "second"
        |/
        * v1        "first"
    """
    builder = RepoBuilder(tmp_path / "repo")
    first = builder.commit("refs/heads/main", "first")
    second = builder.commit("refs/heads/main", "second\n\nLonger body", [first])
    feature = builder.commit("refs/heads/feature", "feature work", [first])
    builder.repo.create_reference("refs/tags/v1", first)
    builder.first = str(first)
    builder.second = str(second)
    builder.feature = str(feature)
    return builder
