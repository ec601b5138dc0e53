from __future__ import annotations

import dashterm.display.glyphs as glyphs
from dashterm.config import CELL_HEIGHT, CELL_WIDTH
from dashterm.core.events import PluginDropped
from dashterm.core.plugin import PluginBase
from rich.text import Text
from textual import events, log
from textual.widget import Widget


def to_cells(x: int, y: int) -> tuple[int, int]:
    """Dashboard pixels to terminal cells."""
    return x // CELL_WIDTH, y // CELL_HEIGHT


def to_pixels(column: int, row: int) -> tuple[int, int]:
    """The centre of a terminal cell in dashboard pixels."""
    return column * CELL_WIDTH + CELL_WIDTH // 2, row * CELL_HEIGHT + CELL_HEIGHT // 2


class PluginWindow(Widget, can_focus=True):
    """
    Draws one dashboard widget as a bordered panel. The border title is the
    title bar; geometry comes from the widget's pixel rectangle.
    """
    DEFAULT_CSS = """
    PluginWindow {
        position: absolute;
        background: $surface;
        border: round $panel;
        border-title-align: left;
        padding: 0 1;
    }
    PluginWindow:focus {
        border: round $accent;
    }
    """

    def __init__(self, plugin: PluginBase, **kwargs):
        super().__init__(**kwargs)
        self.plugin = plugin
        self._dragging = False
        self._drag_offset: tuple[int, int] = (0, 0)

    def on_mount(self) -> None:
        self.sync()

    def sync(self) -> None:
        """Copies the widget's geometry and title onto the panel."""
        plugin = self.plugin
        column, row = to_cells(plugin.x, plugin.y)
        width, height = to_cells(plugin.width, plugin.height)
        self.styles.offset = (column, row)
        self.styles.width = width
        self.styles.height = height
        icon = glyphs.icons.get(plugin.ICON_NAME, "") if plugin.ICON_NAME else ""
        self.border_title = f"{icon} #{plugin.id} {plugin.title}".strip()
        self.border_subtitle = "+" if plugin.type == "todo" else None
        self.refresh()

    def render(self) -> Text:
        return Text("\n".join(self.plugin.render_lines()), no_wrap=True, overflow="ellipsis")

    # ─────────────────────────────────────────────────────────────────────────
    # Input forwarding
    # ─────────────────────────────────────────────────────────────────────────

    def on_mouse_down(self, event: events.MouseDown) -> None:
        plugin = self.plugin
        self.focus()
        if event.y == 0:
            # title bar drag
            self._dragging = True
            self._drag_offset = (event.x, event.y)
            self.capture_mouse()
            event.stop()
            return

        dx, dy = to_pixels(event.x, event.y)
        if plugin.on_pointer_down(plugin.x + dx, plugin.y + dy):
            log(f"{plugin!r} consumed pointer at cell ({event.x}, {event.y})")
            self.refresh()
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if not self._dragging:
            return
        column = int(self.styles.offset.x.value) + event.x - self._drag_offset[0]
        row = int(self.styles.offset.y.value) + event.y - self._drag_offset[1]
        self.styles.offset = (max(0, column), max(0, row))
        event.stop()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if not self._dragging:
            return
        self._dragging = False
        self.release_mouse()
        column = int(self.styles.offset.x.value)
        row = int(self.styles.offset.y.value)
        self.post_message(PluginDropped(self.plugin, column * CELL_WIDTH, row * CELL_HEIGHT))
        event.stop()

    def on_key(self, event: events.Key) -> None:
        if self.plugin.on_key_down(event.key, event.character):
            event.stop()
            event.prevent_default()
            self.refresh()
