"""Revision tag CLI commands."""

from mesh_operations_manager.plugins.istio.commands.tags import register_tag_commands

__all__ = ["register_tag_commands"]
