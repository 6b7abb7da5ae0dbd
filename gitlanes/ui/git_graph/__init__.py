"""Git graph visualization components."""

from gitlanes.ui.git_graph.scene import GitGraphScene
from gitlanes.ui.git_graph.widget import GitGraphView

__all__ = ["GitGraphScene", "GitGraphView"]
