from textual.app import ComposeResult
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import Label


class Toast(Widget):
    """A one-line status overlay that hides itself after a timeout."""

    DEFAULT_CSS = """
    Toast {
        layer: overlay;
        dock: top;
        width: auto;
        height: 1;
        padding: 0 1;
        background: $accent;
        display: none;
    }
    Toast.visible {
        display: block;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._label = Label()
        self._hide_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        yield self._label

    def hide(self) -> None:
        self.remove_class("visible")

    def show(self, message: str, timeout: float = 1.5) -> None:
        self._label.update(message)
        self.add_class("visible")
        if self._hide_timer:
            self._hide_timer.stop()
        self._hide_timer = self.set_timer(timeout, self.hide)
