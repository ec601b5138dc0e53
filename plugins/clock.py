"""Clock widget. Shows the local time in 12 or 24 hour format."""
from datetime import datetime
from typing import Callable

from dashterm.core.plugin import PluginBase


def clock_format(args: list[str], plugin: "ClockPlugin") -> str:
    value = args[0] if args else None
    if value is None:
        return f"Clock {plugin.title} uses {'24' if plugin.state['is24h'] else '12'}-hour format"
    if value == "12":
        plugin.state["is24h"] = False
    elif value == "24":
        plugin.state["is24h"] = True
    else:
        return "Invalid format. Use 12 or 24"
    return f"Clock {plugin.title} set to {'24' if plugin.state['is24h'] else '12'}-hour format"


class ClockPlugin(PluginBase):
    PLUGIN_TYPE = "clock"
    PLUGIN_NAME = "Clock"
    ICON_NAME = "clock"
    HELP = "clock-format <id|name> [12|24]    Get or set time format (12|24)"
    COMMANDS = {"clock-format": clock_format}
    DEFAULT_WIDTH = 200
    DEFAULT_HEIGHT = 100

    def __init__(self, *args, clock: Callable[[], datetime] = datetime.now, **kwargs):
        self.clock = clock
        super().__init__(*args, **kwargs)

    def initial_state(self) -> dict:
        offset = datetime.now().astimezone().utcoffset()
        return {
            "is24h": True,
            "timezoneOffsetMin": int(-offset.total_seconds() // 60) if offset is not None else 0,
        }

    def display_time(self) -> str:
        now = self.clock()
        if self.state["is24h"]:
            return f"{now:%H:%M:%S}"
        return f"{now:%I:%M:%S %p}"

    def render_lines(self) -> list[str]:
        return [self.display_time()]
