"""Tests for the built-in terminal commands."""

import json

import pytest
from conftest import run

from dashterm.core.controller import TerminalController
from dashterm.core.dashboard import Dashboard


@pytest.fixture
def lobby(empty_dashboard: Dashboard, loader) -> TerminalController:
    return TerminalController(empty_dashboard, measure=len, max_width=40, loader=loader)


class TestWidgetCommands:
    def test_remove_by_name_then_list(self, controller: TerminalController) -> None:
        assert run(controller, "remove clock") == "Removed plugin Clock (ID: 1)"
        assert run(controller, "list") == "ID: 0, Type: todo, Title: Tasks"

    def test_remove_unknown(self, controller: TerminalController) -> None:
        assert run(controller, "remove nothing") == "Plugin nothing not found"
        assert len(controller.dashboard.plugins) == 2

    def test_list_empty(self, lobby: TerminalController) -> None:
        assert run(lobby, "list") == "No plugins"

    def test_add(self, lobby: TerminalController) -> None:
        assert run(lobby, "add clock Lobby Wall") == "Added clock plugin: Lobby Wall"
        assert run(lobby, "add todo") == "Added todo plugin: Plugin 2"
        assert run(lobby, "add weather") == "Unknown module type: weather"

    def test_suffix_and_base_forms_agree(self, lobby: TerminalController) -> None:
        run(lobby, "add clock Lobby")
        suffixed = run(lobby, "clock-format-0 12")
        assert suffixed == "Clock Lobby set to 12-hour format"
        assert run(lobby, "clock-format Lobby 12") == suffixed
        assert lobby.dashboard.plugins[0].state["is24h"] is False

    def test_added_widget_commands_are_available_immediately(self, lobby: TerminalController) -> None:
        run(lobby, "add todo Chores")
        assert run(lobby, "add-todo chores buy milk") == "Added task to Chores: buy milk"
        assert run(lobby, "list-todos-0") == "0: buy milk [ ]"

    def test_update(self, controller: TerminalController) -> None:
        line = 'update tasks {"todos": [{"text": "water plants", "completed": true}]}'
        assert run(controller, line) == "Updated plugin Tasks (ID: 0)"
        assert controller.dashboard.plugins[0].state["todos"][0]["text"] == "water plants"

    def test_update_keeps_spacing_inside_strings(self, controller: TerminalController) -> None:
        line = 'update 0 {"todos": [{"text": "buy  milk", "completed": false}]}'
        assert run(controller, line) == "Updated plugin Tasks (ID: 0)"
        assert controller.dashboard.plugins[0].state["todos"][0]["text"] == "buy  milk"

    def test_free_text_arguments_keep_spacing(self, controller: TerminalController) -> None:
        assert run(controller, "add-todo tasks buy  milk") == "Added task to Tasks: buy  milk"

    @pytest.mark.parametrize("payload", ['{"todos": 5}', '{"todos": [{"text": 1}]}', '{"todos": ["milk"]}'])
    def test_update_with_invalid_tasks_changes_nothing(self, controller: TerminalController, payload: str) -> None:
        before = controller.dashboard.serialize()
        assert run(controller, f"update 0 {payload}") == "Failed to parse update payload for Tasks (ID: 0)"
        assert controller.dashboard.serialize() == before
        assert run(controller, "list-todos 0") == "No tasks"

    def test_update_with_malformed_payload_changes_nothing(self, controller: TerminalController) -> None:
        before = controller.dashboard.serialize()
        assert run(controller, "update tasks {todos: oops") == "Failed to parse update payload for Tasks (ID: 0)"
        assert run(controller, "update tasks [1, 2]") == "Failed to parse update payload for Tasks (ID: 0)"
        assert controller.dashboard.serialize() == before

    def test_resize_snaps_to_grid(self, controller: TerminalController) -> None:
        assert run(controller, "resize tasks 230 120") == "Resized plugin Tasks (ID: 0) to 250x100"
        assert run(controller, "resize 0 20 20") == "Resized plugin Tasks (ID: 0) to 150x100"

    def test_resize_invalid(self, controller: TerminalController) -> None:
        assert run(controller, "resize tasks wide") == "Plugin tasks not found or invalid dimensions"

    def test_move_snaps_to_grid(self, controller: TerminalController) -> None:
        assert run(controller, "move tasks 74 126") == "Moved plugin Tasks (ID: 0) to (50, 150)"
        run(controller, "settings set gridSize 20")
        assert run(controller, "move tasks 74 126") == "Moved plugin Tasks (ID: 0) to (80, 120)"

    def test_move_invalid(self, controller: TerminalController) -> None:
        assert run(controller, "move nope 1 2") == "Plugin nope not found or invalid coordinates"


class TestSettings:
    def test_grid_size_range(self, controller: TerminalController) -> None:
        assert run(controller, "settings set gridsize 999") == "Invalid gridSize (10-500)"
        assert run(controller, "settings set gridsize 100") == "gridSize set to 100"
        assert run(controller, "settings get gridsize") == "gridSize 100"

    def test_lines_per_page(self, controller: TerminalController) -> None:
        assert run(controller, "settings set linesPerPage 1") == "Invalid linesPerPage (2-50)"
        assert run(controller, "settings set linesPerPage 10") == "linesPerPage set to 10"
        assert controller.state.visible_page_rows == 10
        assert run(controller, "settings list") == "gridSize 50\nlinesPerPage 10"

    def test_unknown_key(self, controller: TerminalController) -> None:
        assert run(controller, "settings get colour") == "Unknown setting colour"

    def test_help_listing(self, controller: TerminalController) -> None:
        assert run(controller, "settings").startswith("settings get <key>")


class TestLayoutCommands:
    def test_compact_twice_is_a_no_op(self, controller: TerminalController) -> None:
        before = run(controller, "settings list")
        assert run(controller, "compact") == "Compact mode: ON"
        assert run(controller, "compact") == "Compact mode: OFF"
        assert run(controller, "settings list") == before
        assert controller.dashboard.layout.is_compact is False

    def test_exit_closes_quietly(self, controller: TerminalController) -> None:
        controller.toggle()
        assert run(controller, "exit") == ""
        assert controller.state.is_open is False


class TestHelpAndSnapshots:
    def test_help(self, controller: TerminalController) -> None:
        text = run(controller, "help")
        assert text.startswith("Core commands:\n")
        assert "load-json" in text
        assert text.endswith("Loaded modules:\nclock\ntodo")

    def test_help_for_a_type(self, controller: TerminalController) -> None:
        assert run(controller, "help clock").startswith("clock-format <id|name>")
        assert run(controller, "help weather") == "No module commands for type weather"

    def test_save_prints_the_snapshot(self, controller: TerminalController) -> None:
        snapshot = json.loads(run(controller, "save"))
        assert snapshot == controller.dashboard.serialize()
        assert snapshot["layout"] == {"gridSize": 50, "isCompact": False}
        assert [p["title"] for p in snapshot["plugins"]] == ["Tasks", "Clock"]

    def test_load_json_needs_a_url(self, controller: TerminalController) -> None:
        assert run(controller, "load-json") == "Usage: load-json <url>"


class TestPaging:
    @pytest.fixture
    def busy(self, controller: TerminalController) -> TerminalController:
        controller.set_viewport_rows(4)
        for _ in range(5):
            run(controller, "list")
        return controller

    def test_next_at_bottom(self, busy: TerminalController) -> None:
        assert run(busy, "next") == "No more pages"

    def test_prev_keeps_its_position(self, busy: TerminalController) -> None:
        start = busy.state.output_line_offset
        assert start == busy.paging().max_start_offset
        assert run(busy, "prev") == "Prev"
        assert busy.state.output_line_offset == start - 3

        run(busy, "list")
        assert busy.state.output_line_offset == busy.paging().max_start_offset

    def test_prev_at_top(self, busy: TerminalController) -> None:
        busy.scroll_home()
        assert run(busy, "prev") == "Already at first page"
        assert busy.state.output_line_offset == 0
