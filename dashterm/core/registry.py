"""
Command registry built from the core command table and the live widgets.

The registry is an immutable snapshot. It is never patched: whenever the
widget set changes the owner calls `rebuild_registry` again.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from dashterm.core.dashboard import resolve_target
from dashterm.core.plugin import Handler, PluginBase

Command = Callable[[list[str]], Any]


@dataclass(frozen=True)
class CommandRegistry:
    handlers: Mapping[str, Command] = field(default_factory=dict)
    by_name: Mapping[str, Mapping[int, Handler]] = field(default_factory=dict)

    def get(self, name: str) -> Command | None:
        return self.handlers.get(name)

    @property
    def names(self) -> list[str]:
        return sorted(self.handlers)


def _suffix_command(name: str, plugin_id: int, by_name: Mapping[str, Mapping[int, Handler]],
                    plugins: list[PluginBase]) -> Command:
    """`<name>-<id> ...args`: the target is looked up again on every call."""
    def run(args: list[str]) -> Any:
        target = next((p for p in plugins if p.id == plugin_id), None)
        if target is None:
            return f"Plugin {plugin_id} not found"
        handler = by_name.get(name, {}).get(target.id)
        if handler is None:
            return f"Command {name} not supported for {target.type}"
        return handler(args, target)
    return run


def _base_command(name: str, by_name: Mapping[str, Mapping[int, Handler]],
                  plugins: list[PluginBase]) -> Command:
    """`<name> <idOrName> ...args`: the first argument selects the widget."""
    def run(args: list[str]) -> Any:
        id_or_name, rest = (args[0], args[1:]) if args else (None, [])
        target = resolve_target(id_or_name, plugins)
        if target is None:
            return f"Plugin {id_or_name if id_or_name is not None else ''} not found"
        handler = by_name.get(name, {}).get(target.id)
        if handler is None:
            return f"Command {name} not supported for {target.type}"
        return handler(rest, target)
    return run


def rebuild_registry(
    core: Mapping[str, Command],
    plugins: list[PluginBase],
    pinned: Iterable[str] = (),
) -> CommandRegistry:
    """
    Merges the core table with every widget's commands.

    Each widget command is reachable as `<name>-<id>` and through a base
    dispatcher `<name> <idOrName>`. Base dispatchers replace core entries of
    the same name unless that name is pinned.
    """
    handlers: dict[str, Command] = dict(core)
    by_name: dict[str, dict[int, Handler]] = {}

    for plugin in plugins:
        for name, handler in plugin.commands.items():
            by_name.setdefault(name, {})[plugin.id] = handler
            handlers[f"{name}-{plugin.id}"] = _suffix_command(name, plugin.id, by_name, plugins)

    pinned = set(pinned)
    for name in by_name:
        if name in pinned and name in core:
            continue
        handlers[name] = _base_command(name, by_name, plugins)

    frozen_by_name = {name: MappingProxyType(per_plugin) for name, per_plugin in by_name.items()}
    return CommandRegistry(
        handlers=MappingProxyType(handlers),
        by_name=MappingProxyType(frozen_by_name),
    )
