from __future__ import annotations

from dashterm.core.dashboard import Dashboard
from dashterm.core.events import PluginDropped
from dashterm.display.panel import PluginWindow
from textual import log
from textual.app import ComposeResult
from textual.containers import Container


class Desktop(Container):
    """
    The dashboard surface. Holds one PluginWindow per widget, in z-order,
    and recomposes when the widget set changes.
    """
    DEFAULT_CSS = """
    Desktop {
        layer: base;
        width: 100%;
        height: 100%;
    }
    Desktop.-compact PluginWindow {
        padding: 0;
    }
    """

    def __init__(self, dashboard: Dashboard, **kwargs):
        super().__init__(**kwargs)
        self.dashboard = dashboard
        self._revision = dashboard.revision

    def compose(self) -> ComposeResult:
        for plugin in self.dashboard.plugins:
            yield PluginWindow(plugin, id=f"plugin-{plugin.id}")

    def on_mount(self) -> None:
        self.set_class(self.dashboard.layout.is_compact, "-compact")
        self.set_interval(1, self.tick)

    @property
    def windows(self) -> list[PluginWindow]:
        return [child for child in self.children if isinstance(child, PluginWindow)]

    def tick(self) -> None:
        """Repaints every panel so time-based widgets stay current."""
        for window in self.windows:
            window.refresh()

    def sync(self) -> None:
        """Brings the panels in line with the dashboard after a command or a load."""
        self.set_class(self.dashboard.layout.is_compact, "-compact")
        if self.dashboard.revision != self._revision:
            log(f"Recomposing desktop for revision {self.dashboard.revision}")
            self._revision = self.dashboard.revision
            self.refresh(recompose=True)
            return
        for window in self.windows:
            window.sync()

    def on_plugin_dropped(self, event: PluginDropped) -> None:
        plugin = event.plugin
        plugin.x = self.dashboard.quantize(event.x)
        plugin.y = self.dashboard.quantize(event.y)
        self.dashboard.bring_to_front(plugin)
        for window in self.windows:
            if window.plugin is plugin:
                window.sync()
        event.stop()
