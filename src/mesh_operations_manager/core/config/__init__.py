"""Configuration management with Pydantic validation."""

from mesh_operations_manager.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    PluginsConfig,
    ProfileConfig,
    SystemConfig,
    load_config,
    load_raw_config,
)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "PluginsConfig",
    "ProfileConfig",
    "SystemConfig",
    "load_config",
    "load_raw_config",
]
