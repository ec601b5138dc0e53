"""
dashterm v0.1
A widget dashboard with an in-app command terminal
Built with Textual v6.5.0

- Floating widget panels (tasks, clock) on a snapping grid
- A command terminal overlay: paging, history, completion, selection
- Dashboard snapshots: autosave, restore, save, load-json <url>
- Mouse & keyboard navigation

Keys:
  /                open the terminal
  Esc              close the terminal
  Tab              complete a command or widget name
  Up / Down        command history
  PgUp / PgDn      page through output
  Shift+Up/Down    extend the line selection, Ctrl+C copies it
"""
from __future__ import annotations

import argparse

import dashterm.display.glyphs as glyphs
from dashterm.config import AUTOSAVE_SECONDS, STATE_PATH
from dashterm.core.controller import TerminalController
from dashterm.core.dashboard import Dashboard
from dashterm.core.events import DashboardChanged, TerminalToggled
from dashterm.core.persistence import HttpLoader, SnapshotStore
from dashterm.core.plugin_types import PluginTypes
from dashterm.display.desktop import Desktop
from dashterm.display.terminal import TerminalOverlay
from dashterm.display.toast import Toast
from textual import log, on
from textual.app import App, ComposeResult
from textual.events import Key


# ─────────────────────────────────────────────────────────────────────────────
#  Main Application
# ─────────────────────────────────────────────────────────────────────────────
class DashTerm(App):
    """
    Wires the dashboard, its panels and the terminal overlay together and
    keeps the on-disk snapshot current.
    """
    CSS = """
    Screen {
        layers: base overlay;
    }
    """
    BINDINGS = [
        ("ctrl+s", "save_state", "Save Dashboard"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, dashboard: Dashboard, controller: TerminalController,
                 store: SnapshotStore | None = None, **kwargs):
        super().__init__(**kwargs)
        self.dashboard = dashboard
        self.controller = controller
        self.store = store
        self.toast = Toast()

    def compose(self) -> ComposeResult:
        yield self.toast
        yield Desktop(self.dashboard, id="desktop")
        yield TerminalOverlay(self.controller, id="terminal")

    def on_mount(self) -> None:
        if self.store is not None:
            self.set_interval(AUTOSAVE_SECONDS, self.autosave)

    def on_key(self, event: Key) -> None:
        # reaches here only when no panel or the terminal handled the key
        if event.key == "slash":
            terminal = self.query_one(TerminalOverlay)
            if not terminal.is_open:
                terminal.open()
                event.prevent_default()
                event.stop()

    @on(DashboardChanged)
    def update_desktop(self, message: DashboardChanged) -> None:
        self.query_one(Desktop).sync()

    @on(TerminalToggled)
    def show_terminal_state(self, message: TerminalToggled) -> None:
        self.toast.show("Terminal opened" if message.is_open else "Terminal closed")

    def autosave(self) -> None:
        if self.store.save_if_changed(self.dashboard.serialize()):
            log(f"Autosaved dashboard to {self.store.path}")

    def action_save_state(self) -> None:
        if self.store is None:
            self.toast.show("Saving is disabled")
            return
        saved = self.store.save(self.dashboard.serialize())
        self.toast.show(f"Saved to {self.store.path}" if saved else "Save failed")


# ─────────────────────────────────────────────────────────────────────────────
#  Startup
# ─────────────────────────────────────────────────────────────────────────────
def add_default_widgets(dashboard: Dashboard) -> None:
    dashboard.add("todo", "Tasks", x=10, y=10, width=200, height=150)
    dashboard.add("clock", "Clock", x=220, y=10, width=200, height=100)


def build_app(args: argparse.Namespace) -> DashTerm:
    plugin_types = PluginTypes.discover("plugins")
    dashboard = Dashboard(plugin_types)
    store = SnapshotStore(args.state)

    restored = False
    if not args.no_restore:
        snapshot = store.load()
        restored = snapshot is not None and dashboard.apply(snapshot)
    if not restored:
        print("No saved dashboard, starting with the default widgets.")
        add_default_widgets(dashboard)

    controller = TerminalController(dashboard, loader=HttpLoader())
    return DashTerm(dashboard, controller, store=store)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dashterm", description="Widget dashboard with a command terminal.")
    parser.add_argument("--state", default=str(STATE_PATH), help="snapshot file used for autosave and restore")
    parser.add_argument("--glyphs", default="compatible", choices=["compatible", "standard", "nerdfont"],
                        help="icon set")
    parser.add_argument("--no-restore", action="store_true", help="start from the default widgets")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    glyphs.init(args.glyphs)
    build_app(args).run()


if __name__ == "__main__":
    main()
