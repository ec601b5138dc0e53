"""
The terminal controller owns the terminal state and the command registry.

It turns submitted lines into handler calls, appends their results to the
scrollback, keeps the scroll offset valid and produces the per-frame data
the display layer paints.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable

from dashterm.config import TERMINAL_ROWS
from dashterm.core.autocomplete import accept_completion, autocomplete
from dashterm.core.commands import CoreCommands
from dashterm.core.dashboard import Dashboard
from dashterm.core.outcome import LOAD_JSON, Deferred, Immediate, as_outcome
from dashterm.core.paging import (PagingInfo, Scrollbar, clamp_offset,
                                  offset_for_thumb, paginate, scrollbar,
                                  visible_output, wrap_input)
from dashterm.core.persistence import HttpLoader, RemoteLoader
from dashterm.core.registry import CommandRegistry, rebuild_registry
from dashterm.core.selection import SelectionTracker
from dashterm.core.state import TerminalState
from dashterm.core.text import Measure
from rich.cells import cell_len
from textual import log


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs to paint the terminal once."""
    visible_output_lines: list[str]
    visible_input_lines: list[str]
    first_output_index: int
    caret_row: int
    caret_column: int
    selection_range: tuple[int, int] | None
    scrollbar: Scrollbar | None


class TerminalController:
    def __init__(
        self,
        dashboard: Dashboard,
        measure: Measure = cell_len,
        max_width: int = 80,
        viewport_rows: int | None = None,
        loader: RemoteLoader | None = None,
        on_change: Callable[[], None] | None = None,
    ):
        self.dashboard = dashboard
        self.measure = measure
        self.max_width = max_width
        self.loader = loader or HttpLoader()
        self.on_change = on_change
        self.state = TerminalState(
            visible_page_rows=viewport_rows if viewport_rows is not None else TERMINAL_ROWS
        )
        self.selection = SelectionTracker(self.state)
        self.core = CoreCommands(self)
        self.registry: CommandRegistry = CommandRegistry()
        self._registry_revision: int | None = None
        self._pending: set[asyncio.Task] = set()
        self._page_scrolled = False
        self.refresh_registry(force=True)

    # ─────────────────────────────────────────────────────────────────────────
    # Registry
    # ─────────────────────────────────────────────────────────────────────────

    def refresh_registry(self, force: bool = False) -> bool:
        """Rebuilds the registry when the widget set changed since the last build."""
        if not force and self._registry_revision == self.dashboard.revision:
            return False
        self.registry = rebuild_registry(self.core.commands, self.dashboard.plugins)
        self._registry_revision = self.dashboard.revision
        log(f"Command registry rebuilt with {len(self.registry.handlers)} commands")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Dispatch
    # ─────────────────────────────────────────────────────────────────────────

    def execute(self, raw_line: str) -> None:
        """Runs one submitted line. Errors are reported in the scrollback, never raised."""
        self.refresh_registry()
        self.state.record_history(raw_line)
        self.selection.clear()

        # single-space split so joined arguments keep their exact text
        cmd, *args = raw_line.strip().split(" ")
        handler = self.registry.get(cmd) or (lambda _args: f"Unknown command: {cmd}")

        self._page_scrolled = False
        try:
            outcome = as_outcome(handler(args))
        except Exception as e:
            log.error(f"Command {cmd!r} raised {e!r}")
            outcome = Immediate(f"Command {cmd} failed: {e}")

        self.refresh_registry()

        if isinstance(outcome, Deferred):
            self._start_deferred(outcome)
        else:
            self._finish(outcome.text, keep_scroll=self._page_scrolled)

    def _finish(self, message: str, keep_scroll: bool = False) -> None:
        if message:
            self.state.append_output(message)
        info = self.paging()
        if keep_scroll:
            self.state.output_line_offset = clamp_offset(self.state.output_line_offset, info)
        else:
            self.state.output_line_offset = info.max_start_offset
        self._notify()

    def _start_deferred(self, outcome: Deferred) -> None:
        if outcome.kind != LOAD_JSON:
            self._finish(f"Unsupported operation: {outcome.kind}")
            return
        url = outcome.payload
        self._finish(f"Loading {url} ...")
        coro = self._load_dashboard(url)
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError as e:
            coro.close()
            self._finish(f"Failed to load {url}: {e}")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _load_dashboard(self, url: str) -> None:
        try:
            snapshot = await self.loader.fetch_json(url)
        except Exception as e:
            log.warning(f"load-json {url} failed: {e!r}")
            self._finish(f"Failed to load {url}: {e}")
            return
        try:
            applied = self.dashboard.apply(snapshot)
        except Exception as e:
            log.error(f"Applying dashboard from {url} raised {e!r}")
            applied = False
        if applied:
            self.refresh_registry(force=True)
            self._finish(f"Loaded dashboard from {url}")
        else:
            self._finish(f"Failed to apply dashboard from {url}")

    async def drain(self) -> None:
        """Waits until every outstanding deferred operation has settled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()

    # ─────────────────────────────────────────────────────────────────────────
    # Paging & scrolling
    # ─────────────────────────────────────────────────────────────────────────

    def paging(self) -> PagingInfo:
        return paginate(
            self.state.scrollback,
            self.state.input_line,
            self.state.visible_page_rows,
            self.measure,
            self.max_width,
        )

    def clamp(self) -> PagingInfo:
        """Pulls the offset back inside the valid range and returns the paging used."""
        info = self.paging()
        self.state.output_line_offset = clamp_offset(self.state.output_line_offset, info)
        return info

    def resize(self, max_width: int | None = None, viewport_rows: int | None = None) -> None:
        if max_width is not None:
            self.max_width = max(1, max_width)
        if viewport_rows is not None:
            self.state.visible_page_rows = max(0, viewport_rows)
        self.clamp()

    def set_viewport_rows(self, rows: int) -> None:
        self.resize(viewport_rows=rows)

    def scroll_lines(self, delta: int) -> None:
        info = self.paging()
        self.state.output_line_offset = clamp_offset(self.state.output_line_offset + delta, info)

    def page(self, direction: int) -> bool:
        """Scrolls by one viewport; returns False when the offset did not move."""
        info = self.paging()
        before = clamp_offset(self.state.output_line_offset, info)
        step = info.visible_output_rows or 1
        self.state.output_line_offset = clamp_offset(before + direction * step, info)
        self._page_scrolled = True
        return self.state.output_line_offset != before

    def scroll_home(self) -> None:
        self.state.output_line_offset = 0

    def scroll_end(self) -> None:
        self.state.output_line_offset = self.paging().max_start_offset

    def scroll_to_thumb(self, thumb_top: int, track_rows: int) -> None:
        info = self.paging()
        bar = scrollbar(info, self.state.output_line_offset, track_rows)
        if bar is not None:
            self.state.output_line_offset = offset_for_thumb(thumb_top, bar, info)

    # ─────────────────────────────────────────────────────────────────────────
    # Completion & selection
    # ─────────────────────────────────────────────────────────────────────────

    def completions(self) -> list[str]:
        self.refresh_registry()
        return autocomplete(self.registry, self.dashboard.plugins,
                            self.state.input_line, self.state.caret_index)

    def complete(self) -> bool:
        """Accepts the first completion for the token under the caret."""
        choices = self.completions()
        if not choices:
            return False
        line, caret = accept_completion(self.state.input_line, self.state.caret_index, choices[0])
        self.state.set_input(line, caret)
        return True

    def begin_selection(self, row: int) -> bool:
        info = self.clamp()
        return self.selection.begin(row, self.state.output_line_offset, info)

    def extend_selection(self, row: int) -> None:
        info = self.clamp()
        self.selection.extend(row, self.state.output_line_offset, info)

    def extend_selection_by(self, delta: int) -> None:
        self.selection.extend_by(delta, self.paging())

    def selected_text(self) -> str:
        return self.selection.text(self.paging())

    # ─────────────────────────────────────────────────────────────────────────
    # Rendering boundary
    # ─────────────────────────────────────────────────────────────────────────

    def frame(self, track_rows: int | None = None) -> Frame:
        info = self.clamp()
        offset = self.state.output_line_offset
        before_caret = wrap_input(self.state.input_line[:self.state.caret_index], self.measure, self.max_width)
        return Frame(
            visible_output_lines=visible_output(info, offset),
            visible_input_lines=info.wrapped_input,
            first_output_index=offset if info.visible_output_rows > 0 else 0,
            caret_row=len(before_caret) - 1,
            caret_column=self.measure(before_caret[-1]),
            selection_range=self.selection.range,
            scrollbar=scrollbar(info, offset, self.state.visible_page_rows if track_rows is None else track_rows),
        )

    def toggle(self) -> bool:
        self.state.is_open = not self.state.is_open
        return self.state.is_open

