from __future__ import annotations

import copy
from typing import Any, Callable, Mapping

from dashterm.config import MIN_HEIGHT, MIN_WIDTH

# handler(args, plugin) -> str | Outcome
Handler = Callable[[list[str], "PluginBase"], Any]

TITLE_BAR_HEIGHT = 20
RESIZE_HANDLE = 10


class PluginBase:
    """
    A base class for dashboard widgets. Subclasses set the class attributes
    and override the hooks they need; the terminal only ever talks to a
    widget through its `commands` map.
    """
    PLUGIN_TYPE: str = "base"
    PLUGIN_NAME: str = "Untitled Plugin"
    ICON_NAME: str | None = None
    HELP: str | None = None
    COMMANDS: Mapping[str, Handler] = {}
    DEFAULT_WIDTH: int = 200
    DEFAULT_HEIGHT: int = 150

    def __init__(
        self,
        id: int,
        title: str | None = None,
        x: int = 10,
        y: int = 10,
        width: int | None = None,
        height: int | None = None,
    ):
        self.id = id
        self.title = title or self.PLUGIN_NAME
        self.x = x
        self.y = y
        self.width = max(MIN_WIDTH, self.DEFAULT_WIDTH if width is None else width)
        self.height = max(MIN_HEIGHT, self.DEFAULT_HEIGHT if height is None else height)
        self.state: dict[str, Any] = self.initial_state()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} title={self.title!r}>"

    @property
    def type(self) -> str:
        return self.PLUGIN_TYPE

    @property
    def commands(self) -> Mapping[str, Handler]:
        return self.COMMANDS

    def initial_state(self) -> dict[str, Any]:
        return {}

    def update(self, data: Mapping[str, Any]) -> None:
        """Applies a partial state; keys the widget does not know are ignored."""
        for key, value in data.items():
            if key in self.state:
                self.state[key] = value

    def serialize(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "state": copy.deepcopy(self.state),
        }

    # ─────────────────────────────────────────────────────────────────────────
    # Drawing & input hooks
    # ─────────────────────────────────────────────────────────────────────────

    def render_lines(self) -> list[str]:
        """Content lines painted below the title bar."""
        return []

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def in_resize_handle(self, x: int, y: int) -> bool:
        return (
            self.x + self.width - RESIZE_HANDLE <= x <= self.x + self.width
            and self.y + self.height - RESIZE_HANDLE <= y <= self.y + self.height
        )

    def content_bounds(self) -> tuple[int, int, int, int]:
        return self.x, self.y + TITLE_BAR_HEIGHT, self.width, self.height - TITLE_BAR_HEIGHT

    def on_pointer_down(self, x: int, y: int) -> bool:
        """Returns True when the widget consumed the click."""
        return False

    def on_key_down(self, key: str, character: str | None = None) -> bool:
        """Returns True when the widget consumed the key."""
        return False
