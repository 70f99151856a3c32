"""
app/ledger/stores/memory.py

Process-local ledger store for dry runs and tests.
"""

from __future__ import annotations

from typing import Sequence

from app.ledger.colors import CellColor
from app.ledger.grid import HEADER_ROW, LedgerGrid
from app.ledger.stores.base import LedgerStore, LedgerStoreError


class InMemoryLedgerStore(LedgerStore):
    """
    Keeps cell values and background colours in plain lists and dicts.
    """

    def __init__(self, values: Sequence[Sequence[str]] | None = None) -> None:
        self._rows: list[list[str]] = [list(row) for row in values or ()]
        self.formats: dict[tuple[int, int], CellColor] = {}

    def read_grid(self) -> LedgerGrid:
        return LedgerGrid.from_values(self._rows)

    def append_row(self, values: Sequence[str]) -> int:
        row_number = self.read_grid().row_count + 1
        self._ensure_rows(row_number)
        self._rows[row_number - 1] = list(values)
        return row_number

    def append_column_header(self, value: str) -> int:
        column = len(self.read_grid().header)
        self.write_cell_value(HEADER_ROW, column, value)
        return column

    def write_rows(self, start_row: int, rows: Sequence[Sequence[str]]) -> None:
        self._check_address(start_row, 0)
        self._ensure_rows(start_row + len(rows) - 1)
        for offset, values in enumerate(rows):
            current = self._rows[start_row - 1 + offset]
            for column, value in enumerate(values):
                self._set(current, column, value)

    def write_cell_value(self, row: int, column: int, value: str) -> None:
        self._check_address(row, column)
        self._ensure_rows(row)
        self._set(self._rows[row - 1], column, value)

    def write_cell_format(self, row: int, column: int, color: CellColor) -> None:
        self._check_address(row, column)
        self.formats[(row, column)] = color

    def _ensure_rows(self, row: int) -> None:
        while len(self._rows) < row:
            self._rows.append([])

    @staticmethod
    def _set(values: list[str], column: int, value: str) -> None:
        while len(values) <= column:
            values.append("")
        values[column] = value

    @staticmethod
    def _check_address(row: int, column: int) -> None:
        if row < 1 or column < 0:
            raise LedgerStoreError(f"Invalid cell address row={row} column={column}.")
