"""
Centralized constants for gitlanes.

Layout defaults and naming conventions that are shared between the
layout engine, the settings layer and the renderers.
"""

# Branch naming
MAIN_BRANCH_NAMES = ("main", "master")
DEFAULT_REMOTES = ("origin", "upstream")
HEAD_REF = "HEAD"

# Graph geometry defaults
DEFAULT_LANE_WIDTH = 16
DEFAULT_DOT_RADIUS = 3.5
DEFAULT_CORNER_RADIUS = 8
DEFAULT_ROW_HEIGHT = 40
DEFAULT_STROKE_WIDTH = 2
DEFAULT_GRAPH_WIDTH = 160
DOT_STROKE_COLOR = "white"
DOT_STROKE_WIDTH = 1.5

# Commit loading
DEFAULT_MAX_COUNT = 500

# Settings file location (under ~/.config)
SETTINGS_DIR = "gitlanes"
SETTINGS_FILE = "settings.json"
