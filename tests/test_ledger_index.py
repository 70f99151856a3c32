"""
tests/test_ledger_index.py

Pytest unit tests for LedgerIndex and LedgerGrid against the in-memory
store.

Coverage
--------
- Grid snapshot trimming and addressing
- Empty-ledger initialisation
- Date column resolution: hit, strict miss, append
- Asset row resolution: hit, append, identity-only matching
- Idempotence and stability of previously assigned indices
- Repair of a missing caption or header row
"""

from __future__ import annotations

import pytest

from app.domain.pump_house import LEGACY_PUMP_HOUSES, AssetOrigin, PumpHouse
from app.ledger.grid import CAPTION_TEXT, IDENTITY_HEADERS, LedgerGrid
from app.ledger.index import LedgerIndex, find_date_column, pump_house_row_values
from app.ledger.stores.memory import InMemoryLedgerStore

TODAY = "5/6/2025"
YESTERDAY = "4/6/2025"


def _ledger_values() -> list[list[str]]:
    return [
        ["", "", "", "", "", CAPTION_TEXT],
        [*IDENTITY_HEADERS, YESTERDAY],
        pump_house_row_values(LEGACY_PUMP_HOUSES[0], 1) + ["All OK."],
        pump_house_row_values(LEGACY_PUMP_HOUSES[1], 2) + ["API Error"],
    ]


def _new_pump(name: str, pump_id: str = "77") -> PumpHouse:
    return PumpHouse(
        id=pump_id,
        name=name,
        type="Intermediate",
        scheme="Baruipur PWSS",
        origin=AssetOrigin.CURRENT,
        zone="Zone 2",
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore(_ledger_values())


@pytest.fixture()
def index(store: InMemoryLedgerStore) -> LedgerIndex:
    return LedgerIndex(store)


# ---------------------------------------------------------------------------
# LedgerGrid
# ---------------------------------------------------------------------------


class TestLedgerGrid:
    def test_trailing_blanks_are_trimmed(self) -> None:
        grid = LedgerGrid.from_values([["a", "", ""], ["b", None], [], ["", ""]])
        assert grid.rows == (("a",), ("b",))
        assert grid.row_count == 2

    def test_addressing_is_one_based_rows_zero_based_columns(self) -> None:
        grid = LedgerGrid.from_values(_ledger_values())
        assert grid.cell(1, 5) == CAPTION_TEXT
        assert grid.cell(2, 0) == "Sl No."
        assert grid.cell(3, 3) == "Pump House I"
        assert grid.cell(99, 0) == ""
        assert grid.cell(3, 99) == ""

    def test_data_rows_start_at_row_three(self) -> None:
        grid = LedgerGrid.from_values(_ledger_values())
        assert [row for row, _ in grid.data_rows()] == [3, 4]


# ---------------------------------------------------------------------------
# Initialisation
# ---------------------------------------------------------------------------


class TestInitializeIfEmpty:
    def test_lays_out_empty_ledger(self) -> None:
        store = InMemoryLedgerStore()
        initialized = LedgerIndex(store).initialize_if_empty(LEGACY_PUMP_HOUSES, TODAY)

        grid = store.read_grid()
        assert initialized is True
        assert grid.cell(1, 5) == CAPTION_TEXT
        assert grid.header == (*IDENTITY_HEADERS, TODAY)
        assert grid.row_count == 2 + len(LEGACY_PUMP_HOUSES)
        assert grid.row(3) == ("1", "Humaipur PWSS", "N/A", "Pump House I", "Basic")
        assert grid.row(6) == ("4", "Humaipur PWSS", "N/A", "Pump House IV", "Basic")

    def test_caption_only_ledger_is_initialized(self) -> None:
        store = InMemoryLedgerStore([["", "", "", "", "", CAPTION_TEXT]])
        assert LedgerIndex(store).initialize_if_empty(LEGACY_PUMP_HOUSES[:1], TODAY) is True
        assert store.read_grid().row_count == 3

    def test_populated_ledger_is_left_alone(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        before = store.read_grid()
        assert index.initialize_if_empty(LEGACY_PUMP_HOUSES, TODAY) is False
        assert store.read_grid() == before


# ---------------------------------------------------------------------------
# Date columns
# ---------------------------------------------------------------------------


class TestResolveDateColumn:
    def test_existing_date_is_found(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        assert index.resolve_date_column(store.read_grid(), YESTERDAY) == 5

    def test_padded_header_matches_by_date(self) -> None:
        store = InMemoryLedgerStore([["x"], [*IDENTITY_HEADERS, "04/06/2025"]])
        assert LedgerIndex(store).resolve_date_column(store.read_grid(), YESTERDAY) == 5

    def test_missing_date_is_appended_after_last_header(
        self,
        store: InMemoryLedgerStore,
        index: LedgerIndex,
    ) -> None:
        column = index.resolve_date_column(store.read_grid(), TODAY)
        assert column == 6
        assert store.read_grid().header[6] == TODAY

    def test_resolution_is_idempotent(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        first = index.resolve_date_column(store.read_grid(), TODAY)
        header_length = len(store.read_grid().header)
        second = index.resolve_date_column(store.read_grid(), TODAY)
        assert first == second
        assert len(store.read_grid().header) == header_length

    def test_identity_headers_never_match_a_date(self) -> None:
        grid = LedgerGrid.from_values([["x"], list(IDENTITY_HEADERS)])
        assert find_date_column(grid, TODAY) is None

    def test_invalid_date_key_is_rejected(self, store: InMemoryLedgerStore) -> None:
        with pytest.raises(ValueError):
            find_date_column(store.read_grid(), "2025-06-05")


# ---------------------------------------------------------------------------
# Asset rows
# ---------------------------------------------------------------------------


class TestResolveAssetRow:
    def test_existing_pump_house_is_found(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        assert index.resolve_asset_row(store.read_grid(), LEGACY_PUMP_HOUSES[1]) == 4

    def test_same_identity_with_other_id_and_origin_resolves_same_row(
        self,
        store: InMemoryLedgerStore,
        index: LedgerIndex,
    ) -> None:
        legacy = LEGACY_PUMP_HOUSES[0]
        twin = PumpHouse(
            id="5001",
            name=legacy.name,
            type=legacy.type,
            scheme=legacy.scheme,
            origin=AssetOrigin.CURRENT,
            zone="Somewhere else",
        )
        assert index.resolve_asset_row(store.read_grid(), twin) == index.resolve_asset_row(
            store.read_grid(), legacy
        )
        assert store.read_grid().row_count == 4

    def test_new_pump_house_is_appended_with_serial(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        row = index.resolve_asset_row(store.read_grid(), _new_pump("Pump House V"))
        assert row == 5
        assert store.read_grid().row(5) == ("3", "Baruipur PWSS", "Zone 2", "Pump House V", "Intermediate")

    def test_resolution_is_idempotent(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        pump = _new_pump("Pump House V")
        first = index.resolve_asset_row(store.read_grid(), pump)
        row_count = store.read_grid().row_count
        second = index.resolve_asset_row(store.read_grid(), pump)
        assert first == second
        assert store.read_grid().row_count == row_count

    def test_appends_never_move_earlier_rows_or_columns(
        self,
        store: InMemoryLedgerStore,
        index: LedgerIndex,
    ) -> None:
        column = index.resolve_date_column(store.read_grid(), TODAY)
        assigned = {
            pump.name: index.resolve_asset_row(store.read_grid(), pump)
            for pump in (*LEGACY_PUMP_HOUSES, _new_pump("Pump House V"), _new_pump("Pump House VI", "78"))
        }
        before = store.read_grid()

        index.resolve_asset_row(store.read_grid(), _new_pump("Pump House VII", "79"))

        after = store.read_grid()
        for row in range(1, before.row_count + 1):
            assert after.row(row) == before.row(row)
        assert index.resolve_date_column(after, TODAY) == column
        for pump in LEGACY_PUMP_HOUSES:
            assert index.resolve_asset_row(after, pump) == assigned[pump.name]

    def test_rename_produces_a_new_row(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        legacy = LEGACY_PUMP_HOUSES[0]
        renamed = PumpHouse(
            id=legacy.id,
            name="pump house i",
            type=legacy.type,
            scheme=legacy.scheme,
            origin=legacy.origin,
        )
        assert index.resolve_asset_row(store.read_grid(), renamed) == 5

    def test_stale_snapshot_duplicates_rows(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        stale = store.read_grid()
        pump = _new_pump("Pump House V")
        index.resolve_asset_row(stale, pump)
        index.resolve_asset_row(stale, pump)
        names = [values[3] for _, values in store.read_grid().data_rows()]
        assert names.count("Pump House V") == 2


# ---------------------------------------------------------------------------
# Structure repair
# ---------------------------------------------------------------------------


class TestEnsureStructure:
    def test_missing_caption_is_restored(self) -> None:
        values = _ledger_values()
        values[0] = []
        store = InMemoryLedgerStore(values)

        grid = LedgerIndex(store).ensure_structure(store.read_grid())

        assert grid.cell(1, 5) == CAPTION_TEXT
        assert grid.row(3)[3] == "Pump House I"

    def test_blank_identity_header_is_restored_without_touching_dates(self) -> None:
        values = _ledger_values()
        values[1] = ["", "", "", "", "", YESTERDAY]
        store = InMemoryLedgerStore(values)

        grid = LedgerIndex(store).ensure_structure(store.read_grid())

        assert grid.header == (*IDENTITY_HEADERS, YESTERDAY)

    def test_intact_grid_is_returned_unchanged(self, store: InMemoryLedgerStore, index: LedgerIndex) -> None:
        grid = store.read_grid()
        assert index.ensure_structure(grid) is grid

    def test_row_resolution_repairs_headerless_ledger(self) -> None:
        store = InMemoryLedgerStore([["", "", "", "", "", CAPTION_TEXT]])
        row = LedgerIndex(store).resolve_asset_row(store.read_grid(), LEGACY_PUMP_HOUSES[0])
        grid = store.read_grid()
        assert row == 3
        assert grid.header == IDENTITY_HEADERS
        assert grid.row(3)[0] == "1"
