"""
app/ledger/index.py

Resolves pump houses to ledger rows and dates to ledger columns,
appending new rows and columns at the grid's growing edge on a miss.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.domain.pump_house import PumpHouse
from app.ledger.grid import (
    CAPTION_ROW,
    FIRST_DATA_ROW,
    FIRST_DATE_COLUMN,
    HEADER_ROW,
    IDENTITY_HEADERS,
    NAME_COLUMN,
    SCHEME_COLUMN,
    TYPE_COLUMN,
    LedgerGrid,
    caption_row_values,
)
from app.ledger.identity import AssetIdentity, identity_of, parse_date_key
from app.ledger.stores.base import LedgerStore

logger = logging.getLogger(__name__)


def pump_house_row_values(pump_house: PumpHouse, serial: int | None = None) -> list[str]:
    """
    Identity columns of a new ledger row; date columns are left blank.
    """

    return [
        "" if serial is None else str(serial),
        pump_house.scheme or "",
        pump_house.zone or "N/A",
        pump_house.name or "",
        pump_house.type or "",
    ]


def find_date_column(grid: LedgerGrid, day_key: str) -> int | None:
    target = parse_date_key(day_key)
    if target is None:
        raise ValueError(f"Invalid ledger date key {day_key!r}; expected D/M/YYYY.")
    for column, value in enumerate(grid.header):
        if parse_date_key(value) == target:
            return column
    return None


def find_asset_row(grid: LedgerGrid, identity: AssetIdentity) -> int | None:
    for row_number, values in grid.data_rows():
        scheme = values[SCHEME_COLUMN] if len(values) > SCHEME_COLUMN else ""
        name = values[NAME_COLUMN] if len(values) > NAME_COLUMN else ""
        pump_type = values[TYPE_COLUMN] if len(values) > TYPE_COLUMN else ""
        if (scheme, name, pump_type) == tuple(identity):
            return row_number
    return None


class LedgerIndex:
    """
    Maps ``(scheme, name, type)`` identities and ``D/M/YYYY`` date keys onto
    ledger coordinates.

    Both resolvers are idempotent for a given snapshot: a key already
    present in *grid* always resolves to the same index without touching
    the store.

    Precondition
    ------------
    The *grid* passed to :meth:`resolve_asset_row` and
    :meth:`resolve_date_column` must be read from the store immediately
    before the call. Earlier appends in the same run are invisible to an
    older snapshot, and resolving against it appends a duplicate row.
    """

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def initialize_if_empty(self, pump_houses: Sequence[PumpHouse], day_key: str) -> bool:
        """
        Lay out a fresh ledger when it holds at most a caption row.

        Writes the caption row, the header row with *day_key* as the first
        date column, and one row per distinct identity in input order.
        Returns ``True`` when the ledger was initialised.
        """

        grid = self._store.read_grid()
        if grid.row_count > 1:
            return False

        header = list(IDENTITY_HEADERS) + [day_key]
        rows: list[list[str]] = [caption_row_values(), header]
        seen: set[AssetIdentity] = set()
        for pump_house in pump_houses:
            identity = identity_of(pump_house)
            if identity in seen:
                continue
            seen.add(identity)
            rows.append(pump_house_row_values(pump_house, len(seen)))
        self._store.write_rows(CAPTION_ROW, rows)
        logger.info(
            "Initialized empty ledger pump_houses=%s date=%s",
            len(seen),
            day_key,
        )
        return True

    def ensure_structure(self, grid: LedgerGrid) -> LedgerGrid:
        """
        Repair a missing caption or header row in place.

        Returns *grid* unchanged when nothing was missing, otherwise a fresh
        snapshot taken after the repair.
        """

        repaired = False
        if not grid.has_caption:
            self._store.write_rows(CAPTION_ROW, [caption_row_values()])
            repaired = True
        if len(grid.header) < FIRST_DATE_COLUMN or not all(grid.header[:FIRST_DATE_COLUMN]):
            self._store.write_rows(HEADER_ROW, [list(IDENTITY_HEADERS)])
            repaired = True
        if not repaired:
            return grid

        logger.warning("Repaired ledger structure caption_row=%s header_row=%s", CAPTION_ROW, HEADER_ROW)
        return self._store.read_grid()

    def resolve_date_column(self, grid: LedgerGrid, day_key: str) -> int:
        """
        Return the column whose header parses to the same date as
        *day_key*, appending a new header cell when none does.
        """

        grid = self.ensure_structure(grid)
        column = find_date_column(grid, day_key)
        if column is not None:
            return column

        column = self._store.append_column_header(day_key)
        logger.info("Appended ledger date column date=%s column=%s", day_key, column)
        return column

    def resolve_asset_row(self, grid: LedgerGrid, pump_house: PumpHouse) -> int:
        """
        Return the row holding *pump_house*'s identity, appending a new row
        when no data row matches scheme, name and type exactly.
        """

        grid = self.ensure_structure(grid)
        identity = identity_of(pump_house)
        row_number = find_asset_row(grid, identity)
        if row_number is not None:
            return row_number

        expected_row = max(grid.row_count, HEADER_ROW) + 1
        serial = expected_row - FIRST_DATA_ROW + 1
        row_number = self._store.append_row(pump_house_row_values(pump_house, serial))
        logger.info(
            "Appended ledger row scheme=%r name=%r type=%r row=%s",
            identity.scheme,
            identity.name,
            identity.type,
            row_number,
        )
        return row_number
