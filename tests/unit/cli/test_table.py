"""Tests for the shared CLI table."""

from __future__ import annotations

import pytest
from rich.console import Console
from rich.table import Table as RichTable

from mesh_operations_manager.cli.output import Table


@pytest.mark.unit
class TestTable:
    """Column defaults of the CLI table."""

    def test_is_rich_table(self) -> None:
        assert isinstance(Table(), RichTable)

    def test_columns_fold_by_default(self) -> None:
        table = Table()
        table.add_column("NAMESPACES")
        assert table.columns[0].overflow == "fold"

    def test_overflow_can_be_overridden(self) -> None:
        table = Table()
        table.add_column("TAG", overflow="ellipsis", no_wrap=True)
        assert table.columns[0].overflow == "ellipsis"
        assert table.columns[0].no_wrap is True

    def test_keyword_arguments_pass_through(self) -> None:
        table = Table()
        table.add_column("REVISION", style="cyan", min_width=4)
        column = table.columns[0]
        assert column.style == "cyan"
        assert column.min_width == 4

    def test_long_values_are_not_truncated(self) -> None:
        console = Console(width=30, record=True)
        table = Table()
        table.add_column("NAMESPACES")
        value = "alpha,bravo,charlie,delta,echo,foxtrot"
        table.add_row(value)

        console.print(table)
        text = console.export_text().replace("\n", "").replace(" ", "").replace("│", "")

        for name in value.split(","):
            assert name in text
