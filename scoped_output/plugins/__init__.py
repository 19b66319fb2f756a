"""
Output format plugins and the loader that drives their lifecycle hooks.

A plugin is a module exposing four functions:
    plugin_loaded(), plugin_initialize(registry),
    plugin_shutdown(registry), plugin_unloaded()
plugin_initialize must register the plugin's format and plugin_shutdown
must unregister it.
"""

import importlib
from types import ModuleType
from typing import List
import logging

from ..core.errors import OutputError, PluginError
from ..core.registry import FormatRegistry

logger = logging.getLogger(__name__)

BUILTIN_PLUGINS = (
    'scoped_output.plugins.csv',
)

REQUIRED_HOOKS = ('plugin_loaded', 'plugin_initialize', 'plugin_shutdown', 'plugin_unloaded')


class PluginLoader:
    """Loads plugin modules and registers their formats in a registry."""

    def __init__(self, registry: FormatRegistry):
        self.registry = registry
        self.loaded: List[ModuleType] = []

    def load(self, module_name: str) -> ModuleType:
        """
        Import a plugin module and run its load and initialize hooks.

        Args:
            module_name: Dotted module path of the plugin

        Returns:
            The plugin module

        Raises:
            PluginError: If the module cannot be imported, lacks a hook,
                or a hook reports failure
        """
        for module in self.loaded:
            if module.__name__ == module_name:
                logger.debug(f"Plugin {module_name} already loaded")
                return module

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise PluginError(f"cannot import plugin {module_name}: {e}") from e

        missing = [hook for hook in REQUIRED_HOOKS if not callable(getattr(module, hook, None))]
        if missing:
            raise PluginError(f"plugin {module_name} is missing hooks: {', '.join(missing)}")

        if _failed(module.plugin_loaded()):
            raise PluginError(f"plugin {module_name} failed to load")

        try:
            result = module.plugin_initialize(self.registry)
        except OutputError as e:
            module.plugin_unloaded()
            raise PluginError(f"plugin {module_name} failed to initialize: {e}") from e
        except Exception:
            module.plugin_unloaded()
            raise

        if _failed(result):
            module.plugin_unloaded()
            raise PluginError(f"plugin {module_name} failed to initialize")

        self.loaded.append(module)
        logger.info(f"Loaded plugin {module_name}")
        return module

    def load_builtin(self) -> List[ModuleType]:
        """Load every plugin shipped with the package."""
        return [self.load(name) for name in BUILTIN_PLUGINS]

    def shutdown_all(self) -> None:
        """Run shutdown and unload hooks in reverse load order."""
        while self.loaded:
            module = self.loaded.pop()
            module.plugin_shutdown(self.registry)
            module.plugin_unloaded()
            logger.debug(f"Unloaded plugin {module.__name__}")


def _failed(result) -> bool:
    # 0 or None means success; False or any other number is a failure.
    if result is None or result is True:
        return False
    return result is False or result != 0
