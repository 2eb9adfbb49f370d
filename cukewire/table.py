"""Data tables passed to steps as a list of rows keyed by column name."""

from __future__ import annotations

from collections.abc import Sequence


class RowSizeError(ValueError):
    """A row's length does not match the table's columns."""


class Table:
    """A table whose columns are fixed before the first row is added."""

    def __init__(self) -> None:
        self._columns: list[str] = []
        self._rows: list[dict[str, str]] = []

    @property
    def columns(self) -> list[str]:
        return list(self._columns)

    def add_column(self, column: str) -> None:
        if self._rows:
            raise RuntimeError("Cannot alter columns after rows have been added")
        self._columns.append(column)

    def add_row(self, row: Sequence[str]) -> None:
        if not self._columns:
            raise RuntimeError("No column defined yet")
        if len(row) != len(self._columns):
            raise RowSizeError("Row size does not match the table column size")
        self._rows.append(dict(zip(self._columns, row)))

    def hashes(self) -> list[dict[str, str]]:
        """Every row as a mapping from column name to cell value."""
        return [dict(row) for row in self._rows]