"""Plugin system for mesh_operations_manager."""

from mesh_operations_manager.core.plugins.base import Plugin, hookimpl, hookspec
from mesh_operations_manager.core.plugins.manager import PluginManager

__all__ = ["Plugin", "PluginManager", "hookimpl", "hookspec"]
