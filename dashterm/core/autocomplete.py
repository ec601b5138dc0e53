"""Tab completion for command names and widget targets."""
from __future__ import annotations

from dashterm.core.plugin import PluginBase
from dashterm.core.registry import CommandRegistry

# core commands whose first argument is a widget id or name
TARGET_COMMANDS = frozenset({"remove", "update", "resize", "move"})


def autocomplete(
    registry: CommandRegistry,
    plugins: list[PluginBase],
    input_line: str,
    caret_index: int,
) -> list[str]:
    """Sorted completions for the token before the caret; empty when nothing applies."""
    cmd, *args = input_line[:caret_index].split(" ")
    if not args:
        return sorted(name for name in registry.handlers if name.startswith(cmd))

    plugin_handlers = registry.by_name.get(cmd)
    if cmd not in TARGET_COMMANDS and not plugin_handlers:
        return []

    if plugin_handlers:
        candidates = [p for p in plugins if p.id in plugin_handlers]
    else:
        candidates = list(plugins)

    prefix = args[0].lower()
    suggestions = [s for p in candidates for s in (str(p.id), p.title)]
    return sorted(s for s in suggestions if s.lower().startswith(prefix))


def accept_completion(input_line: str, caret_index: int, completion: str) -> tuple[str, int]:
    """
    Replaces the token under the caret with a completion.

    Returns the new line and the caret, placed right after the inserted
    token and one trailing space.
    """
    cmd, *args = input_line[:caret_index].split(" ")
    rest = input_line[caret_index:]
    if not args:
        return f"{completion} {rest}", len(completion) + 1
    line = f"{cmd} {completion} {rest}"
    return line, len(cmd) + 1 + len(completion) + 1
