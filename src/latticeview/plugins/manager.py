"""PluginManager: a pluggy manager preloaded with the view hook specs.

Installed plugins advertise themselves under the ``latticeview.plugins``
entry-point group. An entry point may name a class or an instance; classes
are instantiated with no arguments. Names listed in ``[plugins] disabled``
are blocked before discovery and never imported.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

import pluggy

from latticeview.plugins.hookspecs import LatticeviewHookSpec

PROJECT_NAME = "latticeview"
ENTRY_POINT_GROUP = "latticeview.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Discovery, registration and the hook relay for view plugins."""

    def __init__(self, *, disabled: Iterable[str] = ()) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(LatticeviewHookSpec)
        for name in disabled:
            self._pm.set_blocked(name)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def discover_and_load(self) -> list[str]:
        """Import every enabled entry-point plugin; return all registered names."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        for name, plugin in list(self._pm.list_name_plugin()):
            if inspect.isclass(plugin):
                self._instantiate(name, plugin)
        self._loaded = True
        logger.debug("Loaded %d entry-point plugin(s)", count)
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin* directly, named after its class unless *name* is given."""
        name = name or type(plugin).__name__
        if self._pm.is_blocked(name):
            logger.debug("Skipped disabled plugin %s", name)
            return
        self._pm.register(plugin, name=name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def list_plugin_names(self) -> list[str]:
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    def _instantiate(self, name: str, cls: type) -> None:
        # Hooks registered on a class object would be called without ``self``.
        self._pm.unregister(name=name)
        try:
            instance = cls()
        except Exception:
            logger.warning("Could not instantiate plugin %s", name, exc_info=True)
            return
        self._pm.register(instance, name=name)
