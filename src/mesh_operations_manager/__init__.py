"""Mesh Operations Manager - revision tag tooling for service mesh control planes."""

from mesh_operations_manager.__version__ import __version__

__all__ = ["__version__"]
