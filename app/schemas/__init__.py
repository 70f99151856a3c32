"""
app/schemas package marker.
"""

from app.schemas.telemetry import DataEnvelope, KPIItemPayload, PumpActivityPayload, PumpHousePayload

__all__ = [
    "DataEnvelope",
    "KPIItemPayload",
    "PumpActivityPayload",
    "PumpHousePayload",
]
