"""
Paging engine for the terminal overlay.

Everything here is derived on demand from the scrollback and the viewport
metrics. Nothing is cached: a change of content or of width invalidates the
previous wrapping, so callers paginate again on every render and resize.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dashterm.config import PROMPT
from dashterm.core.text import Measure, wrap, wrap_paragraphs


@dataclass(frozen=True)
class PagingInfo:
    wrapped_output: list[str]
    wrapped_input: list[str]
    reserved_input_rows: int
    visible_output_rows: int
    max_start_offset: int


@dataclass(frozen=True)
class Scrollbar:
    """Scrollbar geometry in rows, relative to the top of the track."""
    track_rows: int
    thumb_top: int
    thumb_rows: int

    def thumb_contains(self, row: int) -> bool:
        return self.thumb_top <= row < self.thumb_top + self.thumb_rows


def wrap_output(scrollback: Sequence[str], measure: Measure, max_width: int) -> list[str]:
    """Wraps every scrollback record, in order, into display lines."""
    wrapped: list[str] = []
    for record in scrollback:
        wrapped.extend(wrap_paragraphs(record, measure, max_width))
    return wrapped


def wrap_input(input_line: str, measure: Measure, max_width: int) -> list[str]:
    return wrap(PROMPT + input_line, measure, max_width)


def paginate(
    scrollback: Sequence[str],
    input_line: str,
    viewport_rows: int,
    measure: Measure,
    max_width: int,
) -> PagingInfo:
    """Splits the viewport between the wrapped input and the output above it."""
    wrapped_output = wrap_output(scrollback, measure, max_width)
    wrapped_input = wrap_input(input_line, measure, max_width)
    reserved_input_rows = max(1, len(wrapped_input))
    visible_output_rows = max(0, viewport_rows - reserved_input_rows)
    max_start_offset = max(0, len(wrapped_output) - visible_output_rows)
    return PagingInfo(
        wrapped_output=wrapped_output,
        wrapped_input=wrapped_input,
        reserved_input_rows=reserved_input_rows,
        visible_output_rows=visible_output_rows,
        max_start_offset=max_start_offset,
    )


def clamp_offset(offset: int, info: PagingInfo) -> int:
    return min(max(0, offset), info.max_start_offset)


def visible_output(info: PagingInfo, offset: int) -> list[str]:
    """The output lines currently inside the viewport."""
    if info.visible_output_rows <= 0:
        return []
    start = clamp_offset(offset, info)
    return info.wrapped_output[start:start + info.visible_output_rows]


def scrollbar(info: PagingInfo, offset: int, track_rows: int) -> Scrollbar | None:
    """Thumb position and size, or None when all output fits the viewport."""
    total = len(info.wrapped_output)
    visible = info.visible_output_rows
    if visible <= 0 or total <= visible or track_rows <= 0:
        return None
    thumb_rows = min(track_rows, max(1, (track_rows * visible) // total))
    free_rows = track_rows - thumb_rows
    ratio = 0 if info.max_start_offset == 0 else clamp_offset(offset, info) / info.max_start_offset
    thumb_top = min(free_rows, int(free_rows * ratio))
    return Scrollbar(track_rows=track_rows, thumb_top=thumb_top, thumb_rows=thumb_rows)


def offset_for_thumb(thumb_top: int, bar: Scrollbar, info: PagingInfo) -> int:
    """Maps a thumb position (clicked or dragged) back to an output offset."""
    free_rows = bar.track_rows - bar.thumb_rows
    thumb_top = min(max(0, thumb_top), free_rows)
    ratio = thumb_top / max(1, free_rows)
    return clamp_offset(round(ratio * info.max_start_offset), info)
