"""Plugin discovery and loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
Capabilities: contributing named rule tables.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from metafilter.plugins.hookspecs import PROJECT_NAME, MetafilterHookSpec

ENTRY_POINT_GROUP = "metafilter.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and table registration."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(MetafilterHookSpec)
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load plugins from the ``metafilter.plugins`` entry point group.

        Tables contributed by every registered plugin are added to the
        table registry. Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        for plugin in self._pm.get_plugins():
            self._register_plugin_tables(plugin, self._plugin_name(plugin))
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly.

        When discovery has already run, the plugin's tables are registered
        immediately.
        """
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._register_plugin_tables(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._plugin_name(p) for p in self._pm.get_plugins()]

    def _plugin_name(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or plugin.__class__.__name__

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _register_plugin_tables(plugin: object, plugin_name: str) -> None:
        """Register rule tables exposed by a single plugin instance."""
        from metafilter.domain.tables import register_table

        hook = getattr(plugin, "register_rule_tables", None)
        if hook is None:
            return

        try:
            table_map = hook()
        except Exception:
            logger.warning(
                "Failed to collect rule tables from plugin %s",
                plugin_name,
                exc_info=True,
            )
            return

        if table_map is None:
            return
        if not isinstance(table_map, dict):
            logger.warning("Plugin %s returned non-dict rule table registrations", plugin_name)
            return

        for table_name, factory in table_map.items():
            try:
                register_table(table_name, factory)
            except (TypeError, ValueError):
                logger.warning(
                    "Skipping rule table %r from plugin %s",
                    table_name,
                    plugin_name,
                    exc_info=True,
                )
