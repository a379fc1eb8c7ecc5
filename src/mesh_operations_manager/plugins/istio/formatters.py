"""Output formatters for revision tag commands.

Table, JSON and YAML renderings behind one interface, chosen with
``--output``.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console

from mesh_operations_manager.cli.output import Table


class OutputFormat(StrEnum):
    """Supported output formats for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def _as_data(item: Any) -> Any:
    if hasattr(item, "model_dump"):
        return item.model_dump(exclude_none=True)
    return item


class TagFormatter(ABC):
    """Base class for revision tag output formatters."""

    def __init__(self, console: Console) -> None:
        self.console = console

    @abstractmethod
    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        """Render a sequence of models or dicts.

        Args:
            items: Rows in display order.
            columns: ``(field, header)`` pairs used by tabular output.
            title: Optional table title.
        """

    @abstractmethod
    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        """Render a single mapping."""


class TableFormatter(TagFormatter):
    """Rich table output."""

    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        table = Table(title=title or None, show_header=True, box=None, pad_edge=False)
        for _field, header in columns:
            table.add_column(header, style="cyan" if header == "TAG" else None)

        for item in items:
            data = item.model_dump() if hasattr(item, "model_dump") else item
            table.add_row(*(self._format_cell(data.get(field)) for field, _ in columns))

        self.console.print(table)

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        table = Table(title=title or None, show_header=True)
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Value")
        for key, value in data.items():
            table.add_row(key, self._format_cell(value))
        self.console.print(table)

    def _format_cell(self, value: Any) -> str:
        # namespace lists are shown in full, never truncated
        if isinstance(value, list):
            return ",".join(str(v) for v in value)
        if isinstance(value, dict):
            return json.dumps(value)
        if value is None:
            return ""
        return str(value)


class JsonFormatter(TagFormatter):
    """JSON output."""

    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        data = [_as_data(item) for item in items]
        self.console.print_json(json.dumps(data, default=str))

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        self.console.print_json(json.dumps(data, default=str))


class YamlFormatter(TagFormatter):
    """YAML output."""

    def format_list(
        self,
        items: Sequence[Any],
        columns: list[tuple[str, str]],
        title: str = "",
    ) -> None:
        self._print([_as_data(item) for item in items])

    def format_dict(self, data: dict[str, Any], title: str = "") -> None:
        self._print(data)

    def _print(self, data: Any) -> None:
        rendered = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        self.console.print(rendered.rstrip("\n"), markup=False, highlight=False, soft_wrap=True)


_FORMATTERS: dict[OutputFormat, type[TagFormatter]] = {
    OutputFormat.TABLE: TableFormatter,
    OutputFormat.JSON: JsonFormatter,
    OutputFormat.YAML: YamlFormatter,
}


def get_formatter(format_type: OutputFormat, console: Console | None = None) -> TagFormatter:
    """Return the formatter for ``format_type`` (table when unknown)."""
    formatter_class = _FORMATTERS.get(format_type, TableFormatter)
    return formatter_class(console or Console())
