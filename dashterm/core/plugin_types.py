import importlib
import inspect
from pathlib import Path
from typing import Iterable

from dashterm.core.plugin import PluginBase
from textual import log


class PluginTypes:
    """Maps a widget type name to its class and its help text."""

    def __init__(self, classes: Iterable[type[PluginBase]] = ()):
        self._constructors: dict[str, type[PluginBase]] = {}
        self._help: dict[str, str] = {}
        for cls in classes:
            self.register(cls)

    def register(self, cls: type[PluginBase], help: str | None = None) -> None:
        plugin_type = getattr(cls, "PLUGIN_TYPE", None)
        if not plugin_type or not isinstance(plugin_type, str):
            raise ValueError(f"{cls.__name__} must define a non-empty PLUGIN_TYPE")
        if not (inspect.isclass(cls) and issubclass(cls, PluginBase)):
            raise TypeError(f"{cls!r} is not a PluginBase subclass")
        self._constructors[plugin_type] = cls
        text = help if help is not None else cls.HELP
        if text:
            self._help[plugin_type] = str(text)

    def constructor(self, plugin_type: str) -> type[PluginBase] | None:
        return self._constructors.get(plugin_type)

    def help_text(self, plugin_type: str) -> str | None:
        return self._help.get(plugin_type)

    def set_help_text(self, plugin_type: str, text: str) -> None:
        self._help[plugin_type] = str(text)

    @property
    def types(self) -> list[str]:
        return list(self._constructors)

    @classmethod
    def discover(cls, package: str = "plugins") -> "PluginTypes":
        """
        Imports every module of a package and registers the PluginBase
        subclasses found in them. Modules that fail to import are logged
        and skipped.
        """
        registry = cls()
        try:
            root = importlib.import_module(package)
        except ImportError as e:
            log.error(f"Could not import plugin package {package}: {e}")
            return registry

        for base_path in map(Path, getattr(root, "__path__", [])):
            for file_path in sorted(base_path.rglob("*.py")):
                if file_path.name.startswith("__"):
                    continue
                relative = file_path.relative_to(base_path).with_suffix("")
                module_str = ".".join((package, *relative.parts))
                try:
                    module = importlib.import_module(module_str)
                except Exception as e:
                    log.warning(f"Could not discover plugins in {file_path}: {e}")
                    continue
                for _, member in inspect.getmembers(module, inspect.isclass):
                    if issubclass(member, PluginBase) and member is not PluginBase and member.__module__ == module.__name__:
                        registry.register(member)
                        log(f"Registered plugin type '{member.PLUGIN_TYPE}' from {module_str}")
        return registry
