from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from dashterm.config import GRID_SIZE_DEFAULT, GRID_SIZE_RANGE
from dashterm.core.plugin import PluginBase
from dashterm.core.plugin_types import PluginTypes
from textual import log


@dataclass
class LayoutState:
    grid_size: int | float = GRID_SIZE_DEFAULT
    is_compact: bool = False


def resolve_target(id_or_name: str | None, plugins: list[PluginBase]) -> PluginBase | None:
    """
    Finds a widget by numeric id, or else by a case-insensitive substring
    of its title. The first match in the current order wins.
    """
    if id_or_name is None:
        return None
    try:
        target_id = int(id_or_name)
    except ValueError:
        needle = str(id_or_name).lower()
        return next((p for p in plugins if needle in p.title.lower()), None)
    return next((p for p in plugins if p.id == target_id), None)


class Dashboard:
    """
    The live widget collection and the layout settings it is drawn with.

    `revision` increases whenever the set of widgets changes, so owners of
    derived data (the command registry) know when to rebuild.
    """

    def __init__(self, plugin_types: PluginTypes, layout: LayoutState | None = None):
        self.plugin_types = plugin_types
        self.layout = layout or LayoutState()
        self.plugins: list[PluginBase] = []
        self.revision: int = 0
        self._next_id: int = 0

    # ─────────────────────────────────────────────────────────────────────────
    # Widgets
    # ─────────────────────────────────────────────────────────────────────────

    def add(self, plugin_type: str, title: str | None = None, **geometry: Any) -> PluginBase | None:
        """Creates a widget of a registered type, or returns None for an unknown type."""
        ctor = self.plugin_types.constructor(plugin_type)
        if ctor is None:
            return None
        plugin = ctor(self._next_id, title or f"Plugin {len(self.plugins) + 1}", **geometry)
        self._next_id += 1
        self.plugins.append(plugin)
        self._changed()
        return plugin

    def remove(self, plugin: PluginBase) -> None:
        self.plugins[:] = [p for p in self.plugins if p.id != plugin.id]
        self._changed()

    def find(self, id_or_name: str | None) -> PluginBase | None:
        return resolve_target(id_or_name, self.plugins)

    def bring_to_front(self, plugin: PluginBase) -> None:
        self.plugins.remove(plugin)
        self.plugins.append(plugin)

    def _changed(self) -> None:
        self.revision += 1

    # ─────────────────────────────────────────────────────────────────────────
    # Layout
    # ─────────────────────────────────────────────────────────────────────────

    def set_grid_size(self, value: Any) -> bool:
        try:
            size = float(value)
        except (TypeError, ValueError):
            return False
        low, high = GRID_SIZE_RANGE
        if not math.isfinite(size) or not low <= size <= high:
            return False
        self.layout.grid_size = int(size) if size.is_integer() else size
        return True

    def toggle_compact(self) -> bool:
        self.layout.is_compact = not self.layout.is_compact
        return self.layout.is_compact

    def quantize(self, value: float) -> int:
        """Snaps a coordinate or a length to the grid."""
        grid = self.layout.grid_size
        return int(round(value / grid) * grid)

    # ─────────────────────────────────────────────────────────────────────────
    # Snapshots
    # ─────────────────────────────────────────────────────────────────────────

    def serialize(self) -> dict[str, Any]:
        return {
            "layout": {
                "gridSize": self.layout.grid_size,
                "isCompact": self.layout.is_compact,
            },
            "plugins": [p.serialize() for p in self.plugins],
        }

    def _from_serialized(self, data: Any, index: int) -> PluginBase | None:
        if not isinstance(data, dict):
            raise ValueError(f"plugin entry {index} is not an object")
        ctor = self.plugin_types.constructor(data.get("type"))
        if ctor is None:
            log.warning(f"Skipping plugin of unknown type {data.get('type')!r}")
            return None
        geometry = {key: data[key] for key in ("x", "y", "width", "height") if data.get(key) is not None}
        plugin = ctor(index, data.get("title"), **geometry)
        state = data.get("state") or {}
        if not isinstance(state, dict):
            raise ValueError(f"plugin entry {index} has a non-object state")
        plugin.state.update(state)
        plugin.update(state)
        return plugin

    def apply(self, snapshot: Any) -> bool:
        """
        Replaces the layout and the widget set with a snapshot. Widgets get
        fresh ids by position. Nothing is changed when the snapshot is malformed.
        """
        if not isinstance(snapshot, dict):
            return False
        layout = snapshot.get("layout") or {}
        entries = snapshot.get("plugins") or []
        if not isinstance(layout, dict) or not isinstance(entries, list):
            return False
        try:
            built = [self._from_serialized(entry, i) for i, entry in enumerate(entries)]
        except (TypeError, ValueError) as e:
            log.warning(f"Rejected dashboard snapshot: {e}")
            return False

        if layout.get("gridSize") is not None:
            self.set_grid_size(layout["gridSize"])
        if isinstance(layout.get("isCompact"), bool):
            self.layout.is_compact = layout["isCompact"]

        instances = [p for p in built if p is not None]
        for index, plugin in enumerate(instances):
            plugin.id = index
        self.plugins[:] = instances
        self._next_id = len(instances)
        self._changed()
        return True
