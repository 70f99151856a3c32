"""
app/domain package marker.
"""

from app.domain.audit import AuditRunSummary, PumpHouseAuditResult
from app.domain.pump_house import LEGACY_PUMP_HOUSES, AssetOrigin, PumpHouse, map_pump_house_type
from app.domain.telemetry import ActivityEvent, Reading, parse_last_recorded
from app.domain.verdict import ALL_OK, API_ERROR, FETCH_TIMEOUT, Severity, Verdict

__all__ = [
    "AuditRunSummary",
    "PumpHouseAuditResult",
    "ALL_OK",
    "API_ERROR",
    "ActivityEvent",
    "AssetOrigin",
    "FETCH_TIMEOUT",
    "LEGACY_PUMP_HOUSES",
    "PumpHouse",
    "Reading",
    "Severity",
    "Verdict",
    "map_pump_house_type",
    "parse_last_recorded",
]
