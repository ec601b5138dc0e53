from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Selection:
    start: int
    end: int

    @property
    def bounds(self) -> tuple[int, int]:
        return min(self.start, self.end), max(self.start, self.end)


@dataclass
class TerminalState:
    """
    Everything the terminal overlay remembers between frames.

    The scrollback is append-only. output_line_offset indexes the wrapped
    output, not the records, and is kept inside [0, max_start_offset] by the
    controller that owns this state.
    """
    input_line: str = ""
    caret_index: int = 0
    history: list[str] = field(default_factory=list)
    history_cursor: int = 0
    scrollback: list[str] = field(default_factory=list)
    output_line_offset: int = 0
    visible_page_rows: int = 6
    selection: Selection | None = None
    is_selecting: bool = False
    caret_blink_on: bool = True
    is_open: bool = False

    # ─────────────────────────────────────────────────────────────────────────
    # Scrollback
    # ─────────────────────────────────────────────────────────────────────────

    def append_output(self, message: str) -> None:
        """Appends a framed block: a blank record, one record per line, a blank record."""
        self.scrollback.append("")
        self.scrollback.extend(str(message).split("\n"))
        self.scrollback.append("")

    # ─────────────────────────────────────────────────────────────────────────
    # Line editing
    # ─────────────────────────────────────────────────────────────────────────

    def insert(self, text: str) -> None:
        # single logical line: pasted line breaks become spaces
        text = text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")
        self.input_line = self.input_line[:self.caret_index] + text + self.input_line[self.caret_index:]
        self.caret_index += len(text)

    def backspace(self) -> None:
        if self.caret_index > 0:
            self.input_line = self.input_line[:self.caret_index - 1] + self.input_line[self.caret_index:]
            self.caret_index -= 1

    def delete(self) -> None:
        if self.caret_index < len(self.input_line):
            self.input_line = self.input_line[:self.caret_index] + self.input_line[self.caret_index + 1:]

    def move_caret(self, delta: int) -> None:
        self.caret_index = min(max(0, self.caret_index + delta), len(self.input_line))

    def set_input(self, line: str, caret_index: int | None = None) -> None:
        self.input_line = line
        self.caret_index = len(line) if caret_index is None else min(max(0, caret_index), len(line))

    # ─────────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────────

    def record_history(self, line: str) -> None:
        """Stores a submitted line and resets the editor for the next one."""
        self.history.append(line)
        self.history_cursor = len(self.history)
        self.input_line = ""
        self.caret_index = 0

    def history_previous(self) -> None:
        if self.history_cursor > 0:
            self.history_cursor -= 1
            self.set_input(self.history[self.history_cursor])

    def history_next(self) -> None:
        if self.history_cursor < len(self.history) - 1:
            self.history_cursor += 1
            self.set_input(self.history[self.history_cursor])
        elif self.history_cursor == len(self.history) - 1:
            # stepping past the newest entry returns to an empty line
            self.history_cursor = len(self.history)
            self.set_input("")
