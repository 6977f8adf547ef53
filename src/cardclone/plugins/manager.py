"""Plugin registry for card lifecycle hooks.

The host registers the built-in audit plugin itself; third-party plugins
arrive through the ``cardclone.plugins`` entry point group. An entry point
may name either a plugin instance or a plugin class.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from cardclone.plugins.hookspecs import CardcloneHookSpec

PROJECT_NAME = "cardclone"
ENTRY_POINT_GROUP = "cardclone.plugins"

logger = logging.getLogger(__name__)


def _has_hook_impls(cls: type) -> bool:
    """True when any public attribute of *cls* is marked ``@hookimpl``."""
    marker = f"{PROJECT_NAME}_impl"
    return any(
        getattr(getattr(cls, attr, None), marker, None)
        for attr in dir(cls)
        if not attr.startswith("_")
    )


class PluginManager:
    """Holds the pluggy manager and exposes the card hook relay."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CardcloneHookSpec)

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register *plugin* under *name* (defaults to its class name)."""
        resolved_name = name or type(plugin).__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins and return every registered plugin name."""
        count = self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        if count:
            self._instantiate_plugin_classes()
        names = self.list_plugin_names()
        logger.debug("Plugins after discovery: %s", ", ".join(names) or "(none)")
        return names

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def _instantiate_plugin_classes(self) -> None:
        """Swap entry points that registered a class for an instance of it.

        Hooks on a bare class would be called with ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not _has_hook_impls(plugin):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("Could not instantiate plugin %s; skipped", name, exc_info=True)
                continue
            self._pm.register(instance, name=name)
