"""Runtime defaults for the dashboard and its terminal overlay."""
from pathlib import Path

# ─────────────────────────────────────────────────────────────────────────────
#  Layout
# ─────────────────────────────────────────────────────────────────────────────
GRID_SIZE_DEFAULT = 50
GRID_SIZE_RANGE = (10, 500)
MIN_WIDTH = 150
MIN_HEIGHT = 100

# dashboard pixels per terminal cell
CELL_WIDTH = 10
CELL_HEIGHT = 20

# ─────────────────────────────────────────────────────────────────────────────
#  Terminal
# ─────────────────────────────────────────────────────────────────────────────
LINES_PER_PAGE_RANGE = (2, 50)
TERMINAL_ROWS = 6  # default linesPerPage
PROMPT = "> "
CARET_BLINK_SECONDS = 0.5

# ─────────────────────────────────────────────────────────────────────────────
#  Persistence
# ─────────────────────────────────────────────────────────────────────────────
STATE_PATH = Path.home() / ".dashterm" / "state.json"
AUTOSAVE_SECONDS = 1.0
HTTP_TIMEOUT_SECONDS = 10.0
