"""Greedy word wrapping against an injected width measurement."""
from typing import Callable

from rich.cells import cell_len

Measure = Callable[[str], int]


def wrap(text: str, measure: Measure = cell_len, max_width: int = 80) -> list[str]:
    """
    Wraps a single paragraph into display lines narrower than max_width.

    Words are split on single spaces and accumulated while the candidate
    line still measures below max_width. A word that is wider than max_width
    on its own is emitted as a line of its own, never split.
    """
    words = str(text).split(" ")
    lines: list[str] = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if measure(candidate) < max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def wrap_paragraphs(text: str, measure: Measure = cell_len, max_width: int = 80) -> list[str]:
    """Wraps text that may contain newlines, one paragraph at a time."""
    lines: list[str] = []
    for paragraph in str(text).split("\n"):
        lines.extend(wrap(paragraph, measure, max_width))
    return lines
