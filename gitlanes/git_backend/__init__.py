"""Git backend for reading repository history"""

from gitlanes.git_backend.repository import GitLanesRepository

__all__ = ["GitLanesRepository"]
