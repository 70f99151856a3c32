"""
db/models/ledger_cell.py

One populated cell of a ledger grid stored in SQL.
"""

from __future__ import annotations

from sqlalchemy import Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin

_CELL_CONSTRAINT = "uq_ledger_cells_ledger_row_column"


class LedgerCell(Base, TimestampMixin):
    """
    Sparse cell storage for the SQL ledger backend.

    ``row_number`` is 1-based and ``column_index`` 0-based, matching the
    grid addressing. The unique constraint on
    ``(ledger_name, row_number, column_index)`` makes every write an
    upsert of exactly one cell.
    """

    __tablename__ = "ledger_cells"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ledger_name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        comment="Logical ledger (worksheet) name",
    )
    row_number: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-based row")
    column_index: Mapped[int] = mapped_column(Integer, nullable=False, comment="0-based column")
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    background_color: Mapped[str | None] = mapped_column(
        String(7),
        nullable=True,
        comment="#RRGGBB background colour",
    )

    __table_args__ = (
        UniqueConstraint("ledger_name", "row_number", "column_index", name=_CELL_CONSTRAINT),
        Index("ix_ledger_cells_ledger_row", "ledger_name", "row_number"),
    )
