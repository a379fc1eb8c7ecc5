"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import typer
from rich.console import Console

from mesh_operations_manager import __version__
from mesh_operations_manager.cli.commands import init
from mesh_operations_manager.core.config.models import (
    CONFIG_FILE,
    PluginsConfig,
    load_config,
    load_raw_config,
)
from mesh_operations_manager.core.plugins.manager import PluginManager
from mesh_operations_manager.logging.config import configure_logging
from mesh_operations_manager.plugins.core import CorePlugin

app = typer.Typer(
    name="meshops",
    help="Mesh Operations Manager CLI for service mesh control planes.",
    add_completion=True,
    no_args_is_help=True,
)

logger = structlog.get_logger()
console = Console()
plugin_manager = PluginManager()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"meshops version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """Mesh Operations Manager - manage Istio revision tags with ease."""
    configure_logging(verbose=verbose, debug=debug)


def _enabled_plugins(raw_config: dict[str, Any]) -> list[str]:
    section = raw_config.get("plugins")
    if isinstance(section, dict) and isinstance(section.get("enabled"), list):
        return [str(name) for name in section["enabled"]]
    return PluginsConfig().enabled


def load_plugins(
    target: typer.Typer,
    manager: PluginManager,
    config_path: Path | None = None,
) -> list[str]:
    """Load, initialize and register the plugins enabled in the config file.

    The file is validated against ``SystemConfig`` first. An invalid file is
    logged and the raw ``plugins.enabled`` list is used instead.

    Returns:
        Names of the plugins that loaded.
    """
    raw_config = load_raw_config(config_path)
    enabled = _enabled_plugins(raw_config)
    try:
        system_config = load_config(config_path)
    except ValueError as e:
        logger.warning("config_invalid", path=str(config_path or CONFIG_FILE), error=str(e))
    else:
        if system_config is not None:
            enabled = system_config.plugins.enabled
    loaded = manager.load_enabled(enabled)

    core = manager.get_plugin("core")
    if isinstance(core, CorePlugin):
        core.bind_listing(manager.list_plugins)

    manager.initialize_all(raw_config)
    manager.register_commands(target)
    return loaded


# Register subcommands
app.add_typer(init.app, name="init")

# Plugin load messages go to stderr until the callback reconfigures logging
configure_logging(log_to_file=False)
load_plugins(app, plugin_manager)


if __name__ == "__main__":
    app()
