from __future__ import annotations

from textual import log
from textual.message import Message

# =============================================================================
# Custom Messages
# =============================================================================


class DashboardChanged(Message):
    """Posted after a command or a load changed widgets or layout."""
    def __init__(self, revision: int, is_compact: bool):
        log(f"Posting dashboard change, revision {revision}.")
        self.revision = revision
        self.is_compact = is_compact
        super().__init__()


class TerminalToggled(Message):
    """Posted when the terminal overlay opens or closes."""
    def __init__(self, is_open: bool):
        self.is_open = is_open
        super().__init__()


class PluginDropped(Message):
    """Posted when a widget panel was dragged to a new pixel position."""
    def __init__(self, plugin, x: int, y: int):
        self.plugin = plugin
        self.x = x
        self.y = y
        super().__init__()
