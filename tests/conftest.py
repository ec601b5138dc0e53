"""Shared fixtures for the dashterm tests."""
from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from dashterm.core.controller import TerminalController
from dashterm.core.dashboard import Dashboard
from dashterm.core.plugin_types import PluginTypes
from plugins.clock import ClockPlugin
from plugins.todo import TodoPlugin


class FakeLoader:
    """Stands in for HttpLoader: returns a canned document or raises."""

    def __init__(self, result: Any = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.requested: list[str] = []

    async def fetch_json(self, url: str) -> Any:
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        return self.result


def frozen_clock() -> datetime:
    return datetime(2024, 1, 1, 15, 4, 5)


@pytest.fixture
def plugin_types() -> PluginTypes:
    return PluginTypes([TodoPlugin, ClockPlugin])


@pytest.fixture
def dashboard(plugin_types: PluginTypes) -> Dashboard:
    """Tasks (id 0) and Clock (id 1), the default layout."""
    board = Dashboard(plugin_types)
    board.add("todo", "Tasks")
    board.add("clock", "Clock", x=220)
    return board


@pytest.fixture
def empty_dashboard(plugin_types: PluginTypes) -> Dashboard:
    return Dashboard(plugin_types)


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def controller(dashboard: Dashboard, loader: FakeLoader) -> TerminalController:
    return TerminalController(dashboard, measure=len, max_width=40, viewport_rows=6, loader=loader)


def run(controller: TerminalController, line: str) -> str:
    """Executes a line and returns the text of the block it appended."""
    before = len(controller.state.scrollback)
    controller.execute(line)
    block = controller.state.scrollback[before:]
    if not block:
        return ""
    assert block[0] == "" and block[-1] == ""
    return "\n".join(block[1:-1])
