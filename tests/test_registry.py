"""Tests for dashterm.core.registry."""

import pytest

from dashterm.core.dashboard import Dashboard
from dashterm.core.registry import rebuild_registry


class TestRebuild:
    def test_core_suffix_and_base_entries(self, dashboard: Dashboard) -> None:
        registry = rebuild_registry({"help": lambda args: "help"}, dashboard.plugins)
        for name in ("help", "clock-format", "clock-format-1", "add-todo", "add-todo-0"):
            assert registry.get(name) is not None
        assert "clock-format-0" not in registry.handlers
        assert set(registry.by_name["clock-format"]) == {1}

    def test_registry_is_read_only(self, dashboard: Dashboard) -> None:
        registry = rebuild_registry({}, dashboard.plugins)
        with pytest.raises(TypeError):
            registry.handlers["new"] = lambda args: ""

    def test_base_dispatch_by_name_and_id(self, dashboard: Dashboard) -> None:
        registry = rebuild_registry({}, dashboard.plugins)
        assert registry.get("clock-format")(["clock", "12"]) == "Clock Clock set to 12-hour format"
        assert registry.get("clock-format")(["1"]) == "Clock Clock uses 12-hour format"

    def test_base_dispatch_errors(self, dashboard: Dashboard) -> None:
        registry = rebuild_registry({}, dashboard.plugins)
        assert registry.get("clock-format")(["nope"]) == "Plugin nope not found"
        assert registry.get("clock-format")(["tasks", "24"]) == "Command clock-format not supported for todo"

    def test_base_dispatcher_wins_over_core_unless_pinned(self, dashboard: Dashboard) -> None:
        core = {"clock-format": lambda args: "core"}
        assert rebuild_registry(core, dashboard.plugins).get("clock-format")(["1"]) != "core"
        pinned = rebuild_registry(core, dashboard.plugins, pinned=["clock-format"])
        assert pinned.get("clock-format")(["1"]) == "core"
        assert pinned.get("clock-format-1")(["24"]) == "Clock Clock set to 24-hour format"


class TestSuffixAfterReload:
    def test_suffix_resolves_against_current_widgets(self, dashboard: Dashboard) -> None:
        registry = rebuild_registry({}, dashboard.plugins)
        snapshot = {
            "layout": {"gridSize": 50, "isCompact": False},
            "plugins": [{"id": 7, "type": "clock", "title": "Lobby", "state": {"is24h": True}}],
        }
        assert dashboard.apply(snapshot)
        lobby = dashboard.plugins[0]
        assert lobby.id == 0

        # stale registry: "clock-format-1" pointed at the old Clock
        assert registry.get("clock-format-1")(["12"]) == "Plugin 1 not found"
        assert lobby.state["is24h"] is True

    def test_suffix_uses_new_widget_with_same_id(self, empty_dashboard: Dashboard) -> None:
        empty_dashboard.add("clock", "Old")
        registry = rebuild_registry({}, empty_dashboard.plugins)
        empty_dashboard.apply({"plugins": [{"type": "clock", "title": "New"}]})
        assert registry.get("clock-format-0")(["12"]) == "Clock New set to 12-hour format"
        assert empty_dashboard.plugins[0].state["is24h"] is False
