"""Built-in core plugin."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import typer
from rich.console import Console

from mesh_operations_manager.cli.output import Table
from mesh_operations_manager.core.plugins.base import Plugin, hookimpl

console = Console()


class CorePlugin(Plugin):
    """Provides ``meshops plugins``.

    The listing callback is supplied by whoever owns the plugin manager;
    without one, only this plugin is shown.
    """

    name = "core"
    version = "0.1.0"
    description = "Core commands"

    def __init__(self) -> None:
        super().__init__()
        self._list_plugins: Callable[[], list[dict[str, Any]]] | None = None

    def bind_listing(self, list_plugins: Callable[[], list[dict[str, Any]]]) -> None:
        self._list_plugins = list_plugins

    def _plugin_rows(self) -> list[dict[str, Any]]:
        if self._list_plugins is not None:
            return self._list_plugins()
        return [
            {
                "name": self.name,
                "version": self.version,
                "description": self.description,
                "initialized": self.is_initialized,
            }
        ]

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        @app.command("plugins")
        def list_plugins() -> None:
            """List loaded plugins."""
            table = Table(title="Loaded Plugins")
            table.add_column("Name", style="cyan")
            table.add_column("Version", style="green")
            table.add_column("Description")
            table.add_column("Initialized")

            for row in self._plugin_rows():
                table.add_row(
                    row["name"],
                    row["version"],
                    row["description"],
                    "yes" if row["initialized"] else "no",
                )
            console.print(table)
