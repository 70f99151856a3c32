"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError, ConnectorTimeoutError
from app.connectors.telemetry import (
    CurrentPumpHouseConnector,
    LegacyStationConnector,
    TelemetryFetchError,
    TelemetryGateway,
)

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "ConnectorTimeoutError",
    "CurrentPumpHouseConnector",
    "LegacyStationConnector",
    "TelemetryFetchError",
    "TelemetryGateway",
]
