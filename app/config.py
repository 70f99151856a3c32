"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from db.config import load_env_files

_ALLOWED_LEDGER_BACKENDS = {"sheets", "sql", "memory"}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_list_env(name: str) -> tuple[str, ...]:
    """
    Read a comma-separated list, dropping blank entries.
    """

    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return ()
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class TelemetrySettings:
    """
    Pump house telemetry endpoints for both source systems.
    """

    legacy_base_url: str = "https://poc.pwms.wbphed.wtlprojects.com"
    current_kpi_base_url: str = "http://thundertusk.distronix.in"
    current_activity_base_url: str = "https://pwms.wbphed.wtlprojects.com"
    roster_url: str = "http://thundertusk.distronix.in/api/pump_house/get_pumphouses"


@dataclass(frozen=True)
class AuditSettings:
    """
    Daily audit run behaviour.
    """

    timezone: str = "Asia/Kolkata"
    pacing_seconds: float = 30.0
    asset_timeout_seconds: float = 120.0
    schedule_hour: int = 6
    schedule_minute: int = 0


@dataclass(frozen=True)
class LedgerSettings:
    """
    Ledger backend selection and Google Sheets addressing.
    """

    backend: str = "sheets"
    spreadsheet_id: str | None = None
    sheet_name: str | None = None
    service_account_file: str = "credentials.json"
    sheets_base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    ledger_name: str = "pump_house_remarks"


@dataclass(frozen=True)
class MailgunSettings:
    """
    Completion notification settings.
    """

    enabled: bool = True
    api_key: str | None = None
    domain: str | None = None
    from_email: str | None = None
    from_name: str = "Pump House Bot"
    recipients: tuple[str, ...] = field(default_factory=tuple)
    base_url: str = "https://api.mailgun.net/v3"
    ledger_url: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.domain and self.from_email and self.recipients)


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_telemetry_settings() -> TelemetrySettings:
    """
    Return telemetry endpoint settings from environment variables.
    """

    defaults = TelemetrySettings()
    return TelemetrySettings(
        legacy_base_url=_get_str_env("LEGACY_TELEMETRY_BASE_URL", defaults.legacy_base_url).rstrip("/"),
        current_kpi_base_url=_get_str_env(
            "CURRENT_TELEMETRY_BASE_URL", defaults.current_kpi_base_url
        ).rstrip("/"),
        current_activity_base_url=_get_str_env(
            "CURRENT_ACTIVITY_BASE_URL", defaults.current_activity_base_url
        ).rstrip("/"),
        roster_url=_get_str_env("PUMP_HOUSE_ROSTER_URL", defaults.roster_url),
    )


@lru_cache(maxsize=1)
def get_audit_settings() -> AuditSettings:
    """
    Return audit run settings from environment variables.
    """

    return AuditSettings(
        timezone=_get_str_env("AUDIT_TIMEZONE", "Asia/Kolkata"),
        pacing_seconds=max(0.0, _get_float_env("AUDIT_PACING_SECONDS", 30.0)),
        asset_timeout_seconds=max(1.0, _get_float_env("AUDIT_ASSET_TIMEOUT_SECONDS", 120.0)),
        schedule_hour=min(23, max(0, _get_int_env("AUDIT_SCHEDULE_HOUR", 6))),
        schedule_minute=min(59, max(0, _get_int_env("AUDIT_SCHEDULE_MINUTE", 0))),
    )


@lru_cache(maxsize=1)
def get_ledger_settings() -> LedgerSettings:
    """
    Return ledger settings from environment variables.

    Raises RuntimeError if LEDGER_BACKEND names an unknown backend.
    """

    backend = _get_str_env("LEDGER_BACKEND", "sheets").lower()
    if backend not in _ALLOWED_LEDGER_BACKENDS:
        raise RuntimeError(
            f"LEDGER_BACKEND '{backend}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_LEDGER_BACKENDS)}."
        )
    return LedgerSettings(
        backend=backend,
        spreadsheet_id=_get_optional_str_env("SPREADSHEET_ID"),
        sheet_name=_get_optional_str_env("SHEET_NAME"),
        service_account_file=_get_str_env("GOOGLE_SERVICE_ACCOUNT_FILE", "credentials.json"),
        sheets_base_url=_get_str_env(
            "GOOGLE_SHEETS_BASE_URL", "https://sheets.googleapis.com/v4/spreadsheets"
        ).rstrip("/"),
        ledger_name=_get_str_env("LEDGER_NAME", "pump_house_remarks"),
    )


@lru_cache(maxsize=1)
def get_mailgun_settings() -> MailgunSettings:
    """
    Return Mailgun notification settings from environment variables.
    """

    return MailgunSettings(
        enabled=_get_bool_env("MAILGUN_ENABLED", True),
        api_key=_get_optional_str_env("MAILGUN_API_KEY"),
        domain=_get_optional_str_env("MAILGUN_DOMAIN"),
        from_email=_get_optional_str_env("MAILGUN_FROM_EMAIL"),
        from_name=_get_str_env("MAILGUN_FROM_NAME", "Pump House Bot"),
        recipients=_get_list_env("MAILGUN_RECIPIENTS"),
        base_url=_get_str_env("MAILGUN_BASE_URL", "https://api.mailgun.net/v3").rstrip("/"),
        ledger_url=_get_optional_str_env("LEDGER_PUBLIC_URL"),
    )
