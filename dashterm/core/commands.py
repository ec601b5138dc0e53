from __future__ import annotations

import json
from typing import TYPE_CHECKING

from dashterm.config import LINES_PER_PAGE_RANGE, MIN_HEIGHT, MIN_WIDTH
from dashterm.core.outcome import LOAD_JSON, Deferred
from dashterm.core.plugin import PluginBase
from textual import log

if TYPE_CHECKING:
    from dashterm.core.controller import TerminalController


class CoreCommands:
    """The built-in command table of the terminal."""

    def __init__(self, controller: TerminalController):
        self.controller = controller
        self.dashboard = controller.dashboard
        self.commands = {
            "help": self._cmd_help, "settings": self._cmd_settings, "save": self._cmd_save,
            "load-json": self._cmd_load_json, "add": self._cmd_add, "list": self._cmd_list,
            "remove": self._cmd_remove, "update": self._cmd_update, "compact": self._cmd_compact,
            "exit": self._cmd_exit, "resize": self._cmd_resize, "move": self._cmd_move,
            "next": self._cmd_next, "prev": self._cmd_prev,
        }

    def _cmd_help(self, args: list[str]) -> str:
        """help [TYPE]

        List core commands and loaded modules, or the commands of one module type.
        """
        if not args:
            loaded = sorted({p.type for p in self.dashboard.plugins})
            core = "Core commands:\n" + ", ".join(sorted(self.commands))
            modules = "Loaded modules:\n" + ("\n".join(loaded) if loaded else "None")
            return f"{core}\n\n{modules}"
        plugin_type = args[0].lower()
        return self.dashboard.plugin_types.help_text(plugin_type) or f"No module commands for type {plugin_type}"

    def _cmd_settings(self, args: list[str]) -> str:
        """settings get|set|list <KEY> [VALUE]

        Read or change gridSize and linesPerPage.
        """
        sub = (args[0] if args else "").lower()
        grid_size = self.dashboard.layout.grid_size
        lines_per_page = self.controller.state.visible_page_rows

        if not sub or sub == "help":
            return "\n".join([
                "settings get <key>                Get a setting (gridSize, linesPerPage)",
                "settings set <key> <value>        Set a setting",
                "settings list                     List all settings",
            ])
        if sub == "list":
            return f"gridSize {grid_size}\nlinesPerPage {lines_per_page}"

        key = (args[1] if len(args) > 1 else "").lower()
        if sub == "get":
            if key == "gridsize":
                return f"gridSize {grid_size}"
            if key == "linesperpage":
                return f"linesPerPage {lines_per_page}"
            return f"Unknown setting {key}"

        if sub == "set":
            value = args[2] if len(args) > 2 else None
            if key == "gridsize":
                if self.dashboard.set_grid_size(value):
                    return f"gridSize set to {self.dashboard.layout.grid_size}"
                return "Invalid gridSize (10-500)"
            if key == "linesperpage":
                low, high = LINES_PER_PAGE_RANGE
                try:
                    rows = int(value)
                except (TypeError, ValueError):
                    rows = None
                if rows is None or not low <= rows <= high:
                    return f"Invalid linesPerPage ({low}-{high})"
                self.controller.set_viewport_rows(rows)
                return f"linesPerPage set to {rows}"
            return f"Unknown setting {key}"

        return "Invalid settings command"

    def _cmd_save(self, args: list[str]) -> str:
        """save

        Print the dashboard snapshot as JSON.
        """
        try:
            return json.dumps(self.dashboard.serialize(), indent=2)
        except (TypeError, ValueError):
            return "Failed to serialize dashboard"

    def _cmd_load_json(self, args: list[str]) -> str | Deferred:
        """load-json <URL>

        Replace the dashboard with a snapshot fetched from URL.
        """
        if not args:
            return "Usage: load-json <url>"
        return Deferred(LOAD_JSON, args[0])

    def _cmd_add(self, args: list[str]) -> str:
        """add [TYPE] [TITLE...]

        Add a widget of TYPE (todo by default).
        """
        plugin_type = args[0] if args else "todo"
        title = " ".join(args[1:]) or None
        plugin = self.dashboard.add(plugin_type, title)
        if plugin is None:
            return f"Unknown module type: {plugin_type}"
        return f"Added {plugin_type} plugin: {plugin.title}"

    def _cmd_list(self, args: list[str]) -> str:
        """list

        List the widgets on the dashboard.
        """
        lines = [f"ID: {p.id}, Type: {p.type}, Title: {p.title}" for p in self.dashboard.plugins]
        return "\n".join(lines) or "No plugins"

    def _cmd_remove(self, args: list[str]) -> str:
        """remove <ID|NAME>

        Remove a widget.
        """
        id_or_name = args[0] if args else None
        plugin = self.dashboard.find(id_or_name)
        if plugin is None:
            return f"Plugin {id_or_name} not found"
        self.dashboard.remove(plugin)
        return f"Removed plugin {plugin.title} (ID: {plugin.id})"

    def _cmd_update(self, args: list[str]) -> str:
        """update <ID|NAME> <JSON>

        Merge a JSON object into a widget's state.
        """
        id_or_name = args[0] if args else None
        plugin = self.dashboard.find(id_or_name)
        if plugin is None:
            return f"Plugin {id_or_name} not found"
        try:
            data = json.loads(" ".join(args[1:]))
        except json.JSONDecodeError:
            data = None
        failure = f"Failed to parse update payload for {plugin.title} (ID: {plugin.id})"
        if not isinstance(data, dict):
            return failure
        try:
            plugin.update(data)
        except ValueError as e:
            log.warning(f"Rejected update for {plugin!r}: {e}")
            return failure
        return f"Updated plugin {plugin.title} (ID: {plugin.id})"

    def _cmd_compact(self, args: list[str]) -> str:
        """compact

        Toggle compact layout.
        """
        is_compact = self.dashboard.toggle_compact()
        return f"Compact mode: {'ON' if is_compact else 'OFF'}"

    def _cmd_exit(self, args: list[str]) -> str:
        """exit

        Close the terminal.
        """
        self.controller.state.is_open = False
        return ""

    def _parse_target_pair(self, args: list[str]) -> tuple[PluginBase | None, tuple[int, int] | None]:
        plugin = self.dashboard.find(args[0] if args else None)
        try:
            first, second = int(args[1]), int(args[2])
        except (IndexError, ValueError):
            return plugin, None
        return plugin, (first, second)

    def _cmd_resize(self, args: list[str]) -> str:
        """resize <ID|NAME> <WIDTH> <HEIGHT>

        Resize a widget, snapped to the grid.
        """
        plugin, size = self._parse_target_pair(args)
        if plugin is None or size is None:
            return f"Plugin {args[0] if args else None} not found or invalid dimensions"
        plugin.width = max(MIN_WIDTH, self.dashboard.quantize(size[0]))
        plugin.height = max(MIN_HEIGHT, self.dashboard.quantize(size[1]))
        return f"Resized plugin {plugin.title} (ID: {plugin.id}) to {plugin.width}x{plugin.height}"

    def _cmd_move(self, args: list[str]) -> str:
        """move <ID|NAME> <X> <Y>

        Move a widget, snapped to the grid.
        """
        plugin, position = self._parse_target_pair(args)
        if plugin is None or position is None:
            return f"Plugin {args[0] if args else None} not found or invalid coordinates"
        plugin.x = self.dashboard.quantize(position[0])
        plugin.y = self.dashboard.quantize(position[1])
        return f"Moved plugin {plugin.title} (ID: {plugin.id}) to ({plugin.x}, {plugin.y})"

    def _cmd_next(self, args: list[str]) -> str:
        """next

        Scroll the output one page down.
        """
        return "Next" if self.controller.page(1) else "No more pages"

    def _cmd_prev(self, args: list[str]) -> str:
        """prev

        Scroll the output one page up.
        """
        return "Prev" if self.controller.page(-1) else "Already at first page"
