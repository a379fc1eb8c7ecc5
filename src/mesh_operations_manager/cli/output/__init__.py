"""Shared CLI output helpers.

Usage:
    from mesh_operations_manager.cli.output import Table

    table = Table(title="Revision Tags")
    table.add_column("TAG", style="cyan")
    table.add_row("prod")
    console.print(table)
"""

from mesh_operations_manager.cli.output.table import Table

__all__ = ["Table"]
