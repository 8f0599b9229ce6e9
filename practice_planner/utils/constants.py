"""
Constants for the Practice Planner application.

This module contains configuration constants used throughout the application.
"""
from datetime import time

# Application metadata
APP_TITLE = "Practice Planner"

# Activity duration bounds (minutes), enforced by the editing layer
MIN_ACTIVITY_DURATION_MIN = 1
MAX_ACTIVITY_DURATION_MIN = 180
DEFAULT_ACTIVITY_DURATION_MIN = 15

# Length given to a practice that has no activities yet
PLACEHOLDER_PRACTICE_DURATION_MIN = 60

# Schedule form defaults
DEFAULT_START_TIME = time(15, 0)
DEFAULT_PRACTICE_DAYS = ["Monday", "Wednesday", "Friday"]
DEFAULT_SERIES_LENGTH_DAYS = 90

# Calendar colour for new practices
DEFAULT_PRACTICE_COLOR = "blue"

# Undo history kept by the activity editor
MAX_EDITOR_HISTORY = 50

# Web server defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122
DEFAULT_DATA_FILE = "practices.json"
