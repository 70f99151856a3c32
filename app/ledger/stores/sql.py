"""
app/ledger/stores/sql.py

Ledger store backed by the ``ledger_cells`` table.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.ledger.colors import CellColor
from app.ledger.grid import HEADER_ROW, LedgerGrid
from app.ledger.stores.base import LedgerStore, LedgerStoreError
from db.models.ledger_cell import LedgerCell

logger = logging.getLogger(__name__)


class SqlLedgerStore(LedgerStore):
    """
    Stores only populated cells; blank cells have no row in the table.
    Every mutating call commits on success and rolls back on failure.
    """

    def __init__(self, db: Session, *, ledger_name: str) -> None:
        self._db = db
        self._ledger_name = ledger_name

    def read_grid(self) -> LedgerGrid:
        try:
            cells = self._db.scalars(
                select(LedgerCell)
                .where(LedgerCell.ledger_name == self._ledger_name)
                .order_by(LedgerCell.row_number, LedgerCell.column_index)
            ).all()
        except SQLAlchemyError as exc:
            raise LedgerStoreError(f"Failed to read ledger {self._ledger_name!r}.") from exc

        rows: list[list[str]] = []
        for cell in cells:
            while len(rows) < cell.row_number:
                rows.append([])
            values = rows[cell.row_number - 1]
            while len(values) <= cell.column_index:
                values.append("")
            values[cell.column_index] = cell.value
        return LedgerGrid.from_values(rows)

    def append_row(self, values: Sequence[str]) -> int:
        row_number = self.read_grid().row_count + 1
        self._commit(lambda: self._put_row(row_number, values))
        return row_number

    def append_column_header(self, value: str) -> int:
        column = len(self.read_grid().header)
        self.write_cell_value(HEADER_ROW, column, value)
        return column

    def write_rows(self, start_row: int, rows: Sequence[Sequence[str]]) -> None:
        def apply() -> None:
            for offset, values in enumerate(rows):
                self._put_row(start_row + offset, values)

        self._commit(apply)

    def write_cell_value(self, row: int, column: int, value: str) -> None:
        self._commit(lambda: self._put_value(row, column, value))

    def write_cell_format(self, row: int, column: int, color: CellColor) -> None:
        def apply() -> None:
            self._cell(row, column).background_color = color.to_hex()

        self._commit(apply)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _put_row(self, row: int, values: Sequence[str]) -> None:
        for column, value in enumerate(values):
            self._put_value(row, column, value)

    def _put_value(self, row: int, column: int, value: str) -> None:
        self._cell(row, column).value = value

    def _cell(self, row: int, column: int) -> LedgerCell:
        if row < 1 or column < 0:
            raise LedgerStoreError(f"Invalid cell address row={row} column={column}.")
        cell = self._db.scalar(
            select(LedgerCell).where(
                LedgerCell.ledger_name == self._ledger_name,
                LedgerCell.row_number == row,
                LedgerCell.column_index == column,
            )
        )
        if cell is None:
            cell = LedgerCell(
                ledger_name=self._ledger_name,
                row_number=row,
                column_index=column,
                value="",
            )
            self._db.add(cell)
        return cell

    def _commit(self, apply: Callable[[], None]) -> None:
        try:
            apply()
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Ledger SQL write failed ledger=%s error=%s", self._ledger_name, exc)
            raise LedgerStoreError(f"Failed to write ledger {self._ledger_name!r}.") from exc
        except LedgerStoreError:
            self._db.rollback()
            raise
