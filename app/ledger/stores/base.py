"""
app/ledger/stores/base.py

Ledger store interface.

Every method addresses cells by 1-based row number and 0-based column
index; implementations translate to their native addressing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from app.ledger.colors import CellColor
from app.ledger.grid import LedgerGrid


class LedgerStoreError(RuntimeError):
    """
    Raised when the backing store rejects a read or write.
    """


class LedgerStore(ABC):
    """
    Narrow read/append/write surface over the physical ledger.
    """

    @abstractmethod
    def read_grid(self) -> LedgerGrid:
        """
        Return a fresh snapshot of every populated cell value.
        """

    @abstractmethod
    def append_row(self, values: Sequence[str]) -> int:
        """
        Append *values* as a new row below the last populated row and
        return its row number.
        """

    @abstractmethod
    def append_column_header(self, value: str) -> int:
        """
        Write *value* into the header row right after its last populated
        column and return that column index.
        """

    @abstractmethod
    def write_rows(self, start_row: int, rows: Sequence[Sequence[str]]) -> None:
        """
        Overwrite consecutive rows from *start_row*, each starting at
        column 0. Cells beyond a given row's values are left untouched.
        """

    @abstractmethod
    def write_cell_value(self, row: int, column: int, value: str) -> None:
        """
        Overwrite one cell value.
        """

    @abstractmethod
    def write_cell_format(self, row: int, column: int, color: CellColor) -> None:
        """
        Set one cell's background colour.
        """
