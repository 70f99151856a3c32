"""
app/ledger/grid.py

Immutable snapshot of the ledger grid and its fixed layout.

Addressing: rows are 1-based (row 1 is the caption row), columns are
0-based.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Sequence

CAPTION_ROW = 1
HEADER_ROW = 2
FIRST_DATA_ROW = 3

SERIAL_COLUMN = 0
SCHEME_COLUMN = 1
ZONE_COLUMN = 2
NAME_COLUMN = 3
TYPE_COLUMN = 4
FIRST_DATE_COLUMN = 5

IDENTITY_HEADERS: tuple[str, ...] = (
    "Sl No.",
    "Scheme Name",
    "Zone",
    "Pump House",
    "Pump House Type",
)
CAPTION_TEXT = "REMARKS"


def caption_row_values() -> list[str]:
    values = [""] * FIRST_DATE_COLUMN
    values.append(CAPTION_TEXT)
    return values


def _trim(values: Sequence[str]) -> tuple[str, ...]:
    end = len(values)
    while end > 0 and values[end - 1] == "":
        end -= 1
    return tuple(values[:end])


@dataclass(frozen=True)
class LedgerGrid:
    """
    Point-in-time copy of every populated ledger cell value.

    Trailing blank cells of a row and trailing blank rows are dropped,
    mirroring what spreadsheet value reads return, so ``len(row)`` is one
    past the last populated column and ``row_count`` is the last populated
    row.
    """

    rows: tuple[tuple[str, ...], ...] = ()

    @classmethod
    def from_values(cls, values: Sequence[Sequence[Any]] | None) -> "LedgerGrid":
        normalized = []
        for row in values or ():
            normalized.append(_trim(["" if cell is None else str(cell) for cell in row]))
        while normalized and not normalized[-1]:
            normalized.pop()
        return cls(rows=tuple(normalized))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def row(self, row_number: int) -> tuple[str, ...]:
        if row_number < 1 or row_number > len(self.rows):
            return ()
        return self.rows[row_number - 1]

    def cell(self, row_number: int, column: int) -> str:
        values = self.row(row_number)
        if column < 0 or column >= len(values):
            return ""
        return values[column]

    @property
    def header(self) -> tuple[str, ...]:
        return self.row(HEADER_ROW)

    @property
    def has_header(self) -> bool:
        return any(self.header)

    @property
    def has_caption(self) -> bool:
        return any(self.row(CAPTION_ROW))

    def data_rows(self) -> Iterator[tuple[int, tuple[str, ...]]]:
        """Yield ``(row_number, values)`` for every row from the first data row."""
        for index in range(FIRST_DATA_ROW - 1, len(self.rows)):
            yield index + 1, self.rows[index]
