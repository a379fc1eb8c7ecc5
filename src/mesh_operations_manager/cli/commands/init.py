"""Init command for writing the default configuration file."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console
from rich.panel import Panel

from mesh_operations_manager.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    SystemConfig,
)

app = typer.Typer(help="Initialize meshops configuration.")
console = Console()
logger = structlog.get_logger()


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration.",
    ),
) -> None:
    """Write a default configuration to ~/.config/meshops/config.yaml."""
    if ctx.invoked_subcommand is not None:
        return

    if CONFIG_FILE.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {CONFIG_FILE}[/yellow]")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(SystemConfig().to_yaml())

    console.print(
        Panel(
            f"[green]Configuration initialized successfully![/green]\n\n"
            f"Configuration created at: {CONFIG_FILE}\n\n"
            f"Next steps:\n"
            f"  1. Set plugins.istio.active_cluster (or MESHOPS_K8S_CONTEXT)\n"
            f"  2. Run [bold]meshops tag list[/bold] to verify cluster access",
            title="meshops init",
            border_style="green",
        )
    )

    logger.info("config_initialized", config_file=str(CONFIG_FILE))
