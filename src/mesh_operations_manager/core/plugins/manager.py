"""Plugin discovery and lifecycle."""

from __future__ import annotations

import importlib.metadata
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from mesh_operations_manager.core.plugins.base import PROJECT_NAME, Plugin, _PluginSpec

if TYPE_CHECKING:
    import typer

logger = structlog.get_logger()


class PluginManager:
    """Loads plugins from entry points and drives their hooks.

    A plugin that fails to load or initialize is logged and skipped; the
    remaining plugins keep working.
    """

    NAMESPACE = f"{PROJECT_NAME}.plugins"

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(_PluginSpec)
        self._plugins: dict[str, Plugin] = {}
        self._initialized = False

    def _entry_points(self) -> Iterable[importlib.metadata.EntryPoint]:
        return importlib.metadata.entry_points(group=self.NAMESPACE)

    def discover_plugins(self) -> list[str]:
        """Names of every plugin advertised under ``NAMESPACE``."""
        try:
            names = [ep.name for ep in self._entry_points()]
        except Exception as e:
            logger.warning("plugin_discovery_failed", error=str(e))
            return []
        logger.debug("discovered_plugins", names=names)
        return names

    def load_plugin(self, name: str) -> bool:
        """Load and register one plugin.

        Returns:
            True when the plugin is registered (now or previously).
        """
        if name in self._plugins:
            return True

        try:
            entry_point = next((ep for ep in self._entry_points() if ep.name == name), None)
            if entry_point is None:
                logger.warning("plugin_not_found", name=name)
                return False

            target = entry_point.load()
            plugin = target() if callable(target) else target
            self._pm.register(plugin, name=name)
        except Exception as e:
            logger.error("plugin_load_failed", name=name, error=str(e))
            return False

        self._plugins[name] = plugin
        logger.debug("loaded_plugin", name=name, version=plugin.version)
        return True

    def load_enabled(self, enabled: Iterable[str]) -> list[str]:
        """Load every named plugin, returning the names that loaded."""
        return [name for name in enabled if self.load_plugin(name)]

    def initialize_all(self, config: dict[str, Any]) -> None:
        """Hand each plugin its ``plugins.<name>`` section of ``config``."""
        sections = config.get("plugins") or {}
        for name, plugin in self._plugins.items():
            section = sections.get(name) if isinstance(sections, dict) else None
            try:
                plugin.initialize(section if isinstance(section, dict) else {})
            except Exception as e:
                logger.error("plugin_initialize_failed", name=name, error=str(e))
                continue
            logger.debug("initialized_plugin", name=name)
        self._initialized = True

    def register_commands(self, app: typer.Typer) -> None:
        """Let every loaded plugin add its commands to ``app``."""
        try:
            self._pm.hook.register_commands(app=app)
        except Exception as e:
            logger.error("plugin_command_registration_failed", error=str(e))

    def cleanup_all(self) -> None:
        try:
            self._pm.hook.cleanup()
        except Exception as e:
            logger.error("plugin_cleanup_failed", error=str(e))
        self._initialized = False

    def get_plugin(self, name: str) -> Plugin | None:
        return self._plugins.get(name)

    def list_plugins(self) -> list[dict[str, Any]]:
        """Name, version, description and state of every loaded plugin."""
        return [
            {
                "name": p.name,
                "version": p.version,
                "description": p.description,
                "initialized": p.is_initialized,
            }
            for p in self._plugins.values()
        ]
