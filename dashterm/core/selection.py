from __future__ import annotations

from dashterm.core.paging import PagingInfo
from dashterm.core.state import Selection, TerminalState


class SelectionTracker:
    """
    Turns viewport rows into a span of absolute wrapped-output indices.

    The start is fixed when a selection begins; the end follows the latest
    pointer row or keyboard step and may lie before the start. Only text
    extraction orders the two.
    """

    def __init__(self, state: TerminalState):
        self.state = state

    @staticmethod
    def row_to_index(row: int, offset: int, info: PagingInfo) -> int:
        """Absolute output index under a viewport row, clamped to the output."""
        visible = max(1, info.visible_output_rows)
        clamped_row = max(0, min(visible - 1, row))
        last = len(info.wrapped_output) - 1
        return max(0, min(last, offset + clamped_row))

    def begin(self, row: int, offset: int, info: PagingInfo) -> bool:
        """Starts a selection; returns False (and clears) when there is nothing to select."""
        if info.visible_output_rows <= 0 or row < 0 or not info.wrapped_output:
            self.clear()
            return False
        index = self.row_to_index(row, offset, info)
        self.state.selection = Selection(index, index)
        self.state.is_selecting = True
        return True

    def extend(self, row: int, offset: int, info: PagingInfo) -> None:
        selection = self.state.selection
        if not self.state.is_selecting or selection is None or not info.wrapped_output:
            return
        selection.end = self.row_to_index(row, offset, info)

    def extend_by(self, delta: int, info: PagingInfo) -> None:
        """Keyboard selection: moves the end by whole lines."""
        if not info.wrapped_output:
            return
        last = len(info.wrapped_output) - 1
        if self.state.selection is None:
            self.state.selection = Selection(last, last)
        selection = self.state.selection
        selection.end = max(0, min(last, selection.end + delta))

    def finish(self) -> None:
        self.state.is_selecting = False

    def clear(self) -> None:
        self.state.selection = None
        self.state.is_selecting = False

    @property
    def range(self) -> tuple[int, int] | None:
        selection = self.state.selection
        return selection.bounds if selection else None

    def text(self, info: PagingInfo) -> str:
        if self.state.selection is None:
            return ""
        low, high = self.state.selection.bounds
        return "\n".join(info.wrapped_output[low:high + 1])
