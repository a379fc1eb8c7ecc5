"""Version information for mesh_operations_manager."""

__version__ = "0.1.0"
