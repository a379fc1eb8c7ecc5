"""Logging configuration for mesh_operations_manager."""

from mesh_operations_manager.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
