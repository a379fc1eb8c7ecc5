"""Rich table with CLI defaults."""

from __future__ import annotations

from typing import Any, Literal

from rich.table import Table as RichTable

OverflowMethod = Literal["fold", "crop", "ellipsis", "ignore"]


class Table(RichTable):
    """Rich ``Table`` whose columns wrap long values instead of truncating.

    Webhook and namespace names are long and must be readable in full, so
    ``add_column`` defaults to ``overflow="fold"``. Pass ``overflow`` or
    ``no_wrap`` explicitly to opt out for a column.
    """

    def add_column(
        self,
        *args: Any,
        overflow: OverflowMethod = "fold",
        **kwargs: Any,
    ) -> None:
        super().add_column(*args, overflow=overflow, **kwargs)
