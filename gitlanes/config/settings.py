"""
Settings management for gitlanes
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

from gitlanes.constants import (
    DEFAULT_CORNER_RADIUS,
    DEFAULT_DOT_RADIUS,
    DEFAULT_GRAPH_WIDTH,
    DEFAULT_LANE_WIDTH,
    DEFAULT_MAX_COUNT,
    DEFAULT_REMOTES,
    DEFAULT_ROW_HEIGHT,
    DEFAULT_STROKE_WIDTH,
    SETTINGS_DIR,
    SETTINGS_FILE,
)
from gitlanes.graph.types import MainLinePolicy

logger = logging.getLogger(__name__)


class Settings:
    """Manages application settings"""

    DEFAULT_SETTINGS = {
        "graph": {
            "lane_width": DEFAULT_LANE_WIDTH,
            "dot_radius": DEFAULT_DOT_RADIUS,
            "corner_radius": DEFAULT_CORNER_RADIUS,
            "row_height": DEFAULT_ROW_HEIGHT,
            "header_height": 0,
            "width": DEFAULT_GRAPH_WIDTH,
            "stroke_width": DEFAULT_STROKE_WIDTH,
            # "strict" or "all_main_line" - used when there is no main/master
            "no_main_branch": MainLinePolicy.STRICT.value,
        },
        "git": {
            "remotes": list(DEFAULT_REMOTES),
            "max_count": DEFAULT_MAX_COUNT,
        },
    }

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or Path.home() / ".config" / SETTINGS_DIR / SETTINGS_FILE
        self.settings: dict[str, Any] = copy.deepcopy(self.DEFAULT_SETTINGS)
        self.load()

    def load(self) -> None:
        """Overlay the settings file (if any) onto the defaults.

        A file that is not valid JSON is logged and ignored.
        """
        if not self.config_path.exists():
            return
        try:
            loaded = json.loads(self.config_path.read_text())
        except json.JSONDecodeError as e:
            logger.warning("Ignoring unreadable settings file %s: %s", self.config_path, e)
            return
        if isinstance(loaded, dict):
            _merge_into(self.settings, loaded)

    def save(self) -> None:
        """Write all settings (defaults included) back to the file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(json.dumps(self.settings, indent=2))

    def get(self, path: str, default: Any = None) -> Any:
        """Get a setting by dot-separated path (e.g., 'graph.lane_width')"""
        node: Any = self.settings
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, path: str, value: Any) -> None:
        """Set a setting by dot-separated path, creating sections as needed"""
        *sections, leaf = path.split(".")
        node: dict[str, Any] = self.settings
        for section in sections:
            node = node.setdefault(section, {})
        node[leaf] = value

    def get_lane_width(self) -> float:
        return float(self.get("graph.lane_width", DEFAULT_LANE_WIDTH))

    def get_dot_radius(self) -> float:
        return float(self.get("graph.dot_radius", DEFAULT_DOT_RADIUS))

    def get_corner_radius(self) -> float:
        return float(self.get("graph.corner_radius", DEFAULT_CORNER_RADIUS))

    def get_row_height(self) -> float:
        """Get the row height used when rows have not been measured."""
        height = float(self.get("graph.row_height", DEFAULT_ROW_HEIGHT))
        return max(1.0, height)

    def get_header_height(self) -> float:
        return float(self.get("graph.header_height", 0))

    def get_graph_width(self) -> float:
        return float(self.get("graph.width", DEFAULT_GRAPH_WIDTH))

    def get_stroke_width(self) -> float:
        return float(self.get("graph.stroke_width", DEFAULT_STROKE_WIDTH))

    def get_main_line_policy(self) -> MainLinePolicy:
        """Get what to do when the history has neither main nor master.

        Unknown values fall back to the strict policy.
        """
        value = str(self.get("graph.no_main_branch", MainLinePolicy.STRICT.value))
        try:
            return MainLinePolicy(value)
        except ValueError:
            logger.warning("Unknown graph.no_main_branch value %r, using strict", value)
            return MainLinePolicy.STRICT

    def get_remotes(self) -> tuple[str, ...]:
        remotes = self.get("git.remotes", list(DEFAULT_REMOTES))
        if not isinstance(remotes, list):
            return DEFAULT_REMOTES
        return tuple(str(r) for r in remotes)

    def get_max_count(self) -> int:
        """Get how many commits to load (at least 1)."""
        count = int(self.get("git.max_count", DEFAULT_MAX_COUNT))
        return max(1, count)


def _merge_into(base: dict[str, Any], updates: dict[str, Any]) -> None:
    """Recursively merge `updates` into `base`; nested sections merge, values replace."""
    for key, value in updates.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value)
        else:
            base[key] = value
