from __future__ import annotations

import dashterm.display.glyphs as glyphs
from dashterm.config import CARET_BLINK_SECONDS
from dashterm.core.controller import Frame, TerminalController
from dashterm.core.events import DashboardChanged, TerminalToggled
from rich.style import Style
from rich.text import Text
from textual import events, log
from textual.widget import Widget

# border-top and left padding in the CSS below
CONTENT_TOP = 1
CONTENT_LEFT = 1
SCROLLBAR_COLUMNS = 2

SELECTION_STYLE = Style(bgcolor="#00664a")
INPUT_STYLE = Style(bold=True)


class TerminalOverlay(Widget, can_focus=True):
    """
    The command terminal docked over the bottom of the dashboard.

    This widget only paints what the controller's frame describes and
    forwards keys, pointer and resize events to the controller.
    """
    DEFAULT_CSS = """
    TerminalOverlay {
        dock: bottom;
        layer: overlay;
        width: 100%;
        height: 7;
        background: $surface;
        border-top: solid $accent;
        padding: 0 1;
        display: none;
    }
    TerminalOverlay.-open {
        display: block;
    }
    """

    def __init__(self, controller: TerminalController, **kwargs):
        super().__init__(**kwargs)
        self.controller = controller
        self._dragging_thumb = False
        self._thumb_grab_row = 0

    def on_mount(self) -> None:
        self.controller.on_change = self._controller_changed
        self.set_interval(CARET_BLINK_SECONDS, self._blink)
        self._apply_rows(self.controller.state.visible_page_rows)
        self._sync_open()

    # ┌───────────────────────────────────────────────────────────────────────┐
    # │ Controller sync                                                       │
    # └───────────────────────────────────────────────────────────────────────┘

    @property
    def is_open(self) -> bool:
        return self.controller.state.is_open

    def toggle(self) -> None:
        self.controller.toggle()
        self._sync_open()

    def open(self) -> None:
        if not self.is_open:
            self.toggle()

    def _sync_open(self) -> None:
        is_open = self.is_open
        if is_open == self.has_class("-open"):
            return
        self.set_class(is_open, "-open")
        if is_open:
            self.call_after_refresh(self.focus)
        else:
            self.blur()
        self.post_message(TerminalToggled(is_open))

    def _apply_rows(self, rows: int) -> None:
        self.styles.height = rows + CONTENT_TOP

    def _sync_layout(self) -> None:
        """Follows linesPerPage changes made by commands."""
        self._apply_rows(self.controller.state.visible_page_rows)

    def _controller_changed(self) -> None:
        self._sync_layout()
        self._sync_open()
        dashboard = self.controller.dashboard
        self.post_message(DashboardChanged(dashboard.revision, dashboard.layout.is_compact))
        self.refresh()

    def _blink(self) -> None:
        self.controller.state.caret_blink_on = not self.controller.state.caret_blink_on
        if self.is_open:
            self.refresh()

    def on_resize(self, event: events.Resize) -> None:
        # rows belong to linesPerPage; only the wrap width follows the widget
        self.controller.resize(max_width=max(1, self.content_size.width - SCROLLBAR_COLUMNS))

    # ┌───────────────────────────────────────────────────────────────────────┐
    # │ Rendering                                                             │
    # └───────────────────────────────────────────────────────────────────────┘

    def render(self) -> Text:
        frame = self.controller.frame()
        body_width = max(1, self.content_size.width - SCROLLBAR_COLUMNS)
        rows = self._output_rows(frame) + self._input_rows(frame)
        while len(rows) < self.controller.state.visible_page_rows:
            rows.append(Text(""))

        for index, row in enumerate(rows):
            row.truncate(body_width, pad=True)
            row.append(" " + self._scrollbar_glyph(frame, index))
        return Text("\n").join(rows)

    def _output_rows(self, frame: Frame) -> list[Text]:
        rows = []
        low, high = frame.selection_range or (-1, -2)
        for i, line in enumerate(frame.visible_output_lines):
            row = Text(line, no_wrap=True, end="")
            if low <= frame.first_output_index + i <= high:
                row.stylize(SELECTION_STYLE)
            rows.append(row)
        return rows

    def _input_rows(self, frame: Frame) -> list[Text]:
        rows = [Text(line, style=INPUT_STYLE, no_wrap=True, end="") for line in frame.visible_input_lines]
        show_caret = self.controller.state.caret_blink_on and self.has_focus
        if show_caret and 0 <= frame.caret_row < len(rows):
            row = rows[frame.caret_row]
            x = frame.caret_column
            if x < len(row.plain):
                row.stylize("reverse", start=x, end=x + 1)
            else:
                row.append(" " * (x - len(row.plain)))
                row.append(" ", style="reverse")
        return rows

    @staticmethod
    def _scrollbar_glyph(frame: Frame, row: int) -> str:
        bar = frame.scrollbar
        if bar is None or row >= bar.track_rows:
            return " "
        return glyphs.icons.get("thumb", "#") if bar.thumb_contains(row) else glyphs.icons.get("track", "|")

    # ┌───────────────────────────────────────────────────────────────────────┐
    # │ Keyboard                                                              │
    # └───────────────────────────────────────────────────────────────────────┘

    def on_key(self, event: events.Key) -> None:
        controller = self.controller
        state = controller.state

        match event.key:
            case "enter":
                controller.execute(state.input_line)
            case "backspace":
                state.backspace()
            case "delete":
                state.delete()
            case "left":
                state.move_caret(-1)
            case "right":
                state.move_caret(1)
            case "up":
                state.history_previous()
            case "down":
                state.history_next()
            case "tab":
                controller.complete()
            case "pageup":
                controller.page(-1)
            case "pagedown":
                controller.page(1)
            case "home":
                controller.scroll_home()
            case "end":
                controller.scroll_end()
            case "shift+up":
                controller.extend_selection_by(-1)
            case "shift+down":
                controller.extend_selection_by(1)
            case "ctrl+c":
                self.copy_selection()
            case "escape":
                self.toggle()
            case _:
                if not (event.is_printable and event.character):
                    return
                state.insert(event.character)

        state.caret_blink_on = True
        event.stop()
        event.prevent_default()
        self.refresh()

    def on_paste(self, event: events.Paste) -> None:
        self.controller.state.insert(event.text)
        event.stop()
        self.refresh()

    def copy_selection(self) -> None:
        text = self.controller.selected_text()
        if not text:
            return
        self.app.copy_to_clipboard(text)
        log(f"Copied {len(text.splitlines())} terminal lines")

    # ┌───────────────────────────────────────────────────────────────────────┐
    # │ Pointer                                                               │
    # └───────────────────────────────────────────────────────────────────────┘

    def _content_coords(self, event: events.MouseEvent) -> tuple[int, int]:
        return event.x - CONTENT_LEFT, event.y - CONTENT_TOP

    def _on_scrollbar(self, column: int) -> bool:
        return column >= self.content_size.width - SCROLLBAR_COLUMNS

    def on_mouse_down(self, event: events.MouseDown) -> None:
        column, row = self._content_coords(event)
        frame = self.controller.frame()
        if self._on_scrollbar(column):
            self.controller.selection.clear()
            bar = frame.scrollbar
            if bar is not None and bar.thumb_contains(row):
                self._dragging_thumb = True
                self._thumb_grab_row = row - bar.thumb_top
            elif bar is not None:
                self.controller.scroll_to_thumb(row, bar.track_rows)
        elif row >= 0:
            self.controller.begin_selection(row)
        else:
            self.controller.selection.clear()
        self.capture_mouse()
        event.stop()
        self.refresh()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        column, row = self._content_coords(event)
        if self._dragging_thumb:
            self.controller.scroll_to_thumb(row - self._thumb_grab_row, self.controller.state.visible_page_rows)
        elif self.controller.state.is_selecting:
            self.controller.extend_selection(row)
        else:
            return
        event.stop()
        self.refresh()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        self._dragging_thumb = False
        self.controller.selection.finish()
        self.release_mouse()

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self.controller.scroll_lines(-1)
        event.stop()
        self.refresh()

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self.controller.scroll_lines(1)
        event.stop()
        self.refresh()
