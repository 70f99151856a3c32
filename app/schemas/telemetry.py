"""
app/schemas/telemetry.py

Payload schemas for the pump house telemetry APIs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class KPIItemPayload(BaseModel):
    """
    One KPI entry as returned by either telemetry system.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    label: str | None = None
    key: str | None = None
    badge: str | None = None
    value: str | None = None

    @field_validator("label", "key", "badge", "value", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return _as_text(value)


class PumpActivityPayload(BaseModel):
    """
    One pump activity sample. Legacy and current systems name the state
    fields differently; both spellings are accepted.
    """

    model_config = ConfigDict(extra="ignore")

    timestamp: str | None = None
    main_pump_status: bool | None = None
    is_on: bool | None = None
    main_pump_transition_timestamp: str | None = None
    transition_timestamp: str | None = None

    @property
    def pump_is_on(self) -> bool | None:
        if self.main_pump_status is False or self.is_on is False:
            return False
        if self.main_pump_status is True or self.is_on is True:
            return True
        return None

    @property
    def transition_at(self) -> str | None:
        return self.main_pump_transition_timestamp or self.transition_timestamp


class PumpHousePayload(BaseModel):
    """
    One entry of the current-system pump house roster.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str
    pump_house_name: str = Field(min_length=1)
    pump_house_type_name: str | None = None
    zone_name: str | None = None
    scheme_name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return _as_text(value)


class DataEnvelope(BaseModel):
    """
    ``{"data": [...]}`` wrapper shared by every telemetry endpoint.
    """

    model_config = ConfigDict(extra="ignore")

    data: list[Any] | None = None

    @property
    def items(self) -> list[Any]:
        return self.data or []
