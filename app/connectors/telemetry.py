"""
app/connectors/telemetry.py

Telemetry clients for the legacy and current pump house monitoring
systems, and a gateway that routes each pump house to its system.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

import requests
from pydantic import ValidationError

from app.config import ExternalHTTPSettings, TelemetrySettings
from app.connectors.base import BaseConnector, ConnectorRequestError
from app.domain.pump_house import AssetOrigin, PumpHouse, map_pump_house_type
from app.domain.telemetry import ActivityEvent, Reading
from app.schemas.telemetry import DataEnvelope, KPIItemPayload, PumpActivityPayload, PumpHousePayload
from diagnostics.readings import ReadingSet

logger = logging.getLogger(__name__)


class TelemetryFetchError(ConnectorRequestError):
    """
    Raised when a telemetry response cannot be interpreted.
    """


def _envelope_items(source: str, payload: Any) -> list[Any]:
    if payload is None:
        return []
    try:
        return DataEnvelope.model_validate(payload).items
    except ValidationError as exc:
        raise TelemetryFetchError(f"{source}: unexpected response shape.") from exc


def _to_readings(source: str, items: list[Any]) -> ReadingSet:
    readings: list[Reading] = []
    for index, item in enumerate(items):
        try:
            parsed = KPIItemPayload.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping malformed KPI item source=%s index=%s error=%s", source, index, exc)
            continue
        label = parsed.label or parsed.key
        if not label:
            continue
        readings.append(
            Reading(
                label=label,
                key=parsed.key,
                qualifier=parsed.badge,
                value=parsed.value or "",
            )
        )
    return ReadingSet(readings)


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return BaseConnector.parse_iso_datetime(value)
    except ValueError:
        return None


def _to_activity(source: str, items: list[Any]) -> list[ActivityEvent]:
    events: list[ActivityEvent] = []
    for index, item in enumerate(items):
        try:
            parsed = PumpActivityPayload.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping malformed pump activity source=%s index=%s error=%s", source, index, exc)
            continue
        events.append(
            ActivityEvent(
                timestamp=_parse_timestamp(parsed.timestamp),
                is_on=parsed.pump_is_on,
                transition_timestamp=_parse_timestamp(parsed.transition_at),
            )
        )
    return events


class LegacyStationConnector(BaseConnector):
    """
    Client for the legacy station API. Every call is a POST with the
    station id in the query string.
    """

    def __init__(
        self,
        *,
        settings: TelemetrySettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="legacy_telemetry", http_settings=http_settings, session=session)
        self._base_url = settings.legacy_base_url

    def fetch_readings(self, pump_house: PumpHouse, *, deadline: float | None = None) -> ReadingSet:
        payload = self._request_json(
            method="POST",
            url=f"{self._base_url}/api/kpi",
            params={"stationId": self._station_id(pump_house)},
            deadline=deadline,
        )
        return _to_readings(self.source, _envelope_items(self.source, payload))

    def fetch_activity(
        self,
        pump_house: PumpHouse,
        start_date: date,
        end_date: date,
        *,
        deadline: float | None = None,
    ) -> list[ActivityEvent]:
        payload = self._request_json(
            method="POST",
            url=f"{self._base_url}/api/pump-activity",
            params={
                "stationId": self._station_id(pump_house),
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
            deadline=deadline,
        )
        return _to_activity(self.source, _envelope_items(self.source, payload))

    @staticmethod
    def _station_id(pump_house: PumpHouse) -> str:
        return pump_house.station_id or pump_house.id


class CurrentPumpHouseConnector(BaseConnector):
    """
    Client for the current monitoring system: KPI and activity reads by
    pump house id, plus the pump house roster.
    """

    def __init__(
        self,
        *,
        settings: TelemetrySettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="current_telemetry", http_settings=http_settings, session=session)
        self._settings = settings

    def fetch_readings(self, pump_house: PumpHouse, *, deadline: float | None = None) -> ReadingSet:
        payload = self._request_json(
            method="GET",
            url=f"{self._settings.current_kpi_base_url}/api/gen/get_kpi",
            params={"id": pump_house.id},
            deadline=deadline,
        )
        return _to_readings(self.source, _envelope_items(self.source, payload))

    def fetch_activity(
        self,
        pump_house: PumpHouse,
        start_date: date,
        end_date: date,
        *,
        deadline: float | None = None,
    ) -> list[ActivityEvent]:
        payload = self._request_json(
            method="GET",
            url=f"{self._settings.current_activity_base_url}/api/gen/pump-activity",
            params={
                "id": pump_house.id,
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat(),
            },
            deadline=deadline,
        )
        return _to_activity(self.source, _envelope_items(self.source, payload))

    def fetch_roster(self) -> list[PumpHouse]:
        """
        Return every pump house registered in the current system.

        Entries that fail validation are skipped with a warning.
        """

        payload = self._request_json(method="GET", url=self._settings.roster_url)
        pump_houses: list[PumpHouse] = []
        for index, item in enumerate(_envelope_items(self.source, payload)):
            try:
                parsed = PumpHousePayload.model_validate(item)
            except ValidationError as exc:
                logger.warning("Skipping malformed roster entry index=%s error=%s", index, exc)
                continue
            pump_houses.append(
                PumpHouse(
                    id=parsed.id,
                    name=parsed.pump_house_name,
                    type=map_pump_house_type(parsed.pump_house_type_name),
                    scheme=parsed.scheme_name or "",
                    origin=AssetOrigin.CURRENT,
                    zone=parsed.zone_name or "N/A",
                )
            )
        return pump_houses


class TelemetryGateway:
    """
    Routes telemetry reads to the connector of the pump house's origin.
    """

    def __init__(
        self,
        *,
        legacy: LegacyStationConnector,
        current: CurrentPumpHouseConnector,
    ) -> None:
        self._current = current
        self._connectors: dict[AssetOrigin, LegacyStationConnector | CurrentPumpHouseConnector] = {
            AssetOrigin.LEGACY: legacy,
            AssetOrigin.CURRENT: current,
        }

    @classmethod
    def from_settings(
        cls,
        *,
        settings: TelemetrySettings,
        http_settings: ExternalHTTPSettings,
    ) -> "TelemetryGateway":
        return cls(
            legacy=LegacyStationConnector(settings=settings, http_settings=http_settings),
            current=CurrentPumpHouseConnector(settings=settings, http_settings=http_settings),
        )

    def fetch_readings(self, pump_house: PumpHouse, *, deadline: float | None = None) -> ReadingSet:
        return self._connectors[pump_house.origin].fetch_readings(pump_house, deadline=deadline)

    def fetch_activity(
        self,
        pump_house: PumpHouse,
        start_date: date,
        end_date: date,
        *,
        deadline: float | None = None,
    ) -> list[ActivityEvent]:
        return self._connectors[pump_house.origin].fetch_activity(
            pump_house, start_date, end_date, deadline=deadline
        )

    def fetch_roster(self) -> list[PumpHouse]:
        return self._current.fetch_roster()
