"""Plugin contract, expressed as pluggy hook specifications."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    import typer

PROJECT_NAME = "mesh_operations_manager"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class _PluginSpec:
    """Hooks every plugin may implement."""

    @hookspec
    def initialize(self, config: dict[str, Any]) -> None:
        """Receive the plugin's section of the configuration file.

        Args:
            config: Contents of ``plugins.<name>``, or an empty dict.
        """

    @hookspec
    def register_commands(self, app: typer.Typer) -> None:
        """Attach the plugin's commands to the root application."""

    @hookspec
    def cleanup(self) -> None:
        """Release resources held by the plugin."""

    @hookspec
    def get_name(self) -> str:
        return ""

    @hookspec
    def get_version(self) -> str:
        return ""


class Plugin:
    """Base class for plugins.

    Subclasses set ``name`` and ``version`` and override ``on_initialize``,
    ``register_commands`` and ``cleanup`` as needed.
    """

    name: str = "base"
    version: str = "0.0.0"
    description: str = ""

    def __init__(self) -> None:
        cls_name = self.__class__.__name__
        if self.name == "base":
            raise ValueError(f"{cls_name} must define 'name' class attribute")
        if self.version == "0.0.0":
            raise ValueError(f"{cls_name} must define 'version' class attribute")
        self._config: dict[str, Any] = {}
        self._initialized = False

    @hookimpl
    def get_name(self) -> str:
        return self.name

    @hookimpl
    def get_version(self) -> str:
        return self.version

    @hookimpl
    def initialize(self, config: dict[str, Any]) -> None:
        """Store the configuration section, then run ``on_initialize``."""
        self._config = config or {}
        self._initialized = True
        self.on_initialize()

    def on_initialize(self) -> None:
        """Subclass hook run after configuration is stored."""

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        """Subclass hook for adding commands."""

    @hookimpl
    def cleanup(self) -> None:
        self._initialized = False

    def get_config(self, key: str, default: Any = None) -> Any:
        """Read one key from the plugin's configuration section."""
        return self._config.get(key, default)

    @property
    def is_initialized(self) -> bool:
        return self._initialized
