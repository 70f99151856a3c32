"""
app/domain/pump_house.py

Pump house asset records and the fixed legacy fleet.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AssetOrigin(str, Enum):
    """
    Source system a pump house is monitored through.
    """

    LEGACY = "legacy"
    CURRENT = "current"


# Ledger-facing pump house classes.
PUMP_HOUSE_TYPE_BASIC = "Basic"
PUMP_HOUSE_TYPE_INTERMEDIATE = "Intermediate"
PUMP_HOUSE_TYPE_DIRECT = "Direct"

_ROSTER_TYPE_MAP: dict[str, str] = {
    "OHR": PUMP_HOUSE_TYPE_INTERMEDIATE,
    "Non-OHR": PUMP_HOUSE_TYPE_BASIC,
    "Non-OHR Direct": PUMP_HOUSE_TYPE_DIRECT,
    "Non-OHR-Direct": PUMP_HOUSE_TYPE_DIRECT,
}


def map_pump_house_type(roster_type_name: str | None) -> str:
    """
    Translate a roster ``pump_house_type_name`` into the ledger type label.

    Unknown names pass through unchanged; a missing name maps to ``""``.
    """

    if not roster_type_name:
        return ""
    return _ROSTER_TYPE_MAP.get(roster_type_name, roster_type_name)


@dataclass(frozen=True)
class PumpHouse:
    """
    One monitored pump house.

    ``id`` is opaque and origin-specific. Ledger rows are keyed by
    ``(scheme, name, type)`` instead, so the same pump house resolves to
    the same row whichever system reported it.
    """

    id: str
    name: str
    type: str
    scheme: str
    origin: AssetOrigin
    zone: str = "N/A"
    station_id: str | None = None

    @property
    def is_legacy(self) -> bool:
        return self.origin is AssetOrigin.LEGACY


def _legacy(station_id: str, name: str, pump_type: str) -> PumpHouse:
    return PumpHouse(
        id=station_id,
        name=name,
        type=pump_type,
        scheme="Humaipur PWSS",
        origin=AssetOrigin.LEGACY,
        zone="N/A",
        station_id=station_id,
    )


LEGACY_PUMP_HOUSES: tuple[PumpHouse, ...] = (
    _legacy("DXPWMS-02", "Pump House I", PUMP_HOUSE_TYPE_BASIC),
    _legacy("DXPWMS-03", "Pump House II", PUMP_HOUSE_TYPE_BASIC),
    _legacy("DXPWMS-01", "Pump House III", PUMP_HOUSE_TYPE_INTERMEDIATE),
    _legacy("DXPWMS-04", "Pump House IV", PUMP_HOUSE_TYPE_BASIC),
)
