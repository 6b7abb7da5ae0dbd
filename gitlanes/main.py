#!/usr/bin/env python3
"""
gitlanes - visualize branch lanes of a git history
"""

import argparse
import logging
import sys
from pathlib import Path

from gitlanes.config.settings import Settings
from gitlanes.git_backend.repository import GitLanesRepository
from gitlanes.graph.engine import LayoutEngine
from gitlanes.graph.svg import render_svg

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog="gitlanes",
        description="gitlanes - visualize branch lanes of a git history",
    )
    parser.add_argument(
        "repo",
        nargs="?",
        default=None,
        help="Repository path (default: search from the current directory)",
    )
    parser.add_argument(
        "--max-count",
        type=int,
        default=None,
        help="Number of commits to load (default: from settings)",
    )
    parser.add_argument(
        "--svg",
        type=Path,
        default=None,
        help="Write the graph to an SVG file instead of opening a window",
    )
    parser.add_argument(
        "--width",
        type=float,
        default=None,
        help="Width of the graph column (default: from settings)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: ~/.config/gitlanes/settings.json)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def write_svg(repo: GitLanesRepository, settings: Settings, args: argparse.Namespace) -> None:
    """Lay out the repository history and write it as SVG."""
    max_count = args.max_count if args.max_count is not None else settings.get_max_count()
    width = args.width if args.width is not None else settings.get_graph_width()
    commits = repo.load_commits(max_count=max_count)

    engine = LayoutEngine.from_settings(settings)
    header_height = settings.get_header_height()
    row_height = settings.get_row_height()
    row_ys = [header_height + i * row_height + row_height / 2 for i in range(len(commits))]
    layout = engine.layout(commits, row_ys, header_height, width)

    height = header_height + len(commits) * row_height
    args.svg.write_text(render_svg(layout, width, height))
    logger.info("Wrote %d commits to %s", len(commits), args.svg)


def run_gui(repo: GitLanesRepository, settings: Settings, args: argparse.Namespace) -> int:
    """Show the graph in a window."""
    from PySide6.QtWidgets import QApplication

    from gitlanes.ui.git_graph.widget import GitGraphView

    if args.max_count is not None:
        settings.set("git.max_count", args.max_count)
    if args.width is not None:
        settings.set("graph.width", args.width)

    app = QApplication(sys.argv)
    app.setApplicationName("gitlanes")

    view = GitGraphView(repo, settings)
    view.setWindowTitle(f"gitlanes - {repo.path}")
    view.resize(900, 700)
    view.show()
    return app.exec()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = Settings(args.config)

    try:
        repo = GitLanesRepository(args.repo)
    except ValueError as e:
        print(f"gitlanes: {e}", file=sys.stderr)
        sys.exit(1)

    if args.svg is not None:
        write_svg(repo, settings, args)
        return

    sys.exit(run_gui(repo, settings, args))


if __name__ == "__main__":
    main()
