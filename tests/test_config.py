"""
tests/test_config.py

Pytest unit tests for environment-driven settings and the scheduler
factory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest

from app import config
from app.scheduler.jobs import build_scheduler, run_daily_audit
from db.config import load_env_files, normalize_database_url, resolve_database_url

_GETTERS = (
    config.get_external_http_settings,
    config.get_telemetry_settings,
    config.get_audit_settings,
    config.get_ledger_settings,
    config.get_mailgun_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


# ---------------------------------------------------------------------------
# App settings
# ---------------------------------------------------------------------------


class TestAuditSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("AUDIT_TIMEZONE", "AUDIT_PACING_SECONDS", "AUDIT_ASSET_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)
        settings = config.get_audit_settings()
        assert settings.timezone == "Asia/Kolkata"
        assert settings.pacing_seconds == 30.0
        assert settings.asset_timeout_seconds == 120.0

    def test_overrides_and_clamping(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDIT_PACING_SECONDS", "-5")
        monkeypatch.setenv("AUDIT_SCHEDULE_HOUR", "30")
        monkeypatch.setenv("AUDIT_ASSET_TIMEOUT_SECONDS", "not-a-number")
        settings = config.get_audit_settings()
        assert settings.pacing_seconds == 0.0
        assert settings.schedule_hour == 23
        assert settings.asset_timeout_seconds == 120.0


class TestLedgerSettings:
    def test_unknown_backend_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEDGER_BACKEND", "excel")
        with pytest.raises(RuntimeError, match="LEDGER_BACKEND"):
            config.get_ledger_settings()

    def test_backend_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEDGER_BACKEND", "SQL")
        assert config.get_ledger_settings().backend == "sql"


class TestMailgunSettings:
    def test_recipient_list_is_split(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAILGUN_RECIPIENTS", "a@example.org, ,b@example.org")
        assert config.get_mailgun_settings().recipients == ("a@example.org", "b@example.org")

    def test_enabled_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAILGUN_ENABLED", "off")
        assert config.get_mailgun_settings().enabled is False


# ---------------------------------------------------------------------------
# Database URL
# ---------------------------------------------------------------------------


class TestDatabaseConfig:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgres://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
            ("postgresql://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
            ("postgresql+psycopg://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
            ("sqlite:///ledger.db", "sqlite:///ledger.db"),
        ],
    )
    def test_normalize(self, url: str, expected: str) -> None:
        assert normalize_database_url(url) == expected

    def test_ledger_url_takes_priority(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LEDGER_DATABASE_URL", "sqlite:///ledger.db")
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@h/db")
        assert resolve_database_url() == "sqlite:///ledger.db"

    def test_env_file_does_not_override_process_env(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        (tmp_path / ".env").write_text(
            "# comment\nexport SHEET_NAME='Remarks'\nSPREADSHEET_ID=from-file\n",
            encoding="utf-8",
        )
        monkeypatch.delenv("SHEET_NAME", raising=False)
        monkeypatch.setenv("SPREADSHEET_ID", "from-env")

        try:
            load_env_files(tmp_path)
            assert os.environ["SHEET_NAME"] == "Remarks"
            assert os.environ["SPREADSHEET_ID"] == "from-env"
        finally:
            os.environ.pop("SHEET_NAME", None)


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


class TestScheduler:
    def test_daily_job_uses_configured_time(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDIT_SCHEDULE_HOUR", "7")
        monkeypatch.setenv("AUDIT_SCHEDULE_MINUTE", "15")

        scheduler = build_scheduler("memory")

        job = scheduler.get_job("daily_pump_house_audit")
        assert job is not None
        assert job.kwargs == {"backend": "memory"}
        fields = {f.name: str(f) for f in job.trigger.fields}
        assert fields["hour"] == "7"
        assert fields["minute"] == "15"
        assert str(job.trigger.timezone) == "Asia/Kolkata"

    def test_failed_run_is_logged_not_raised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(backend=None):
            raise RuntimeError("Google Sheets ledger is not configured.")

        monkeypatch.setattr("app.scheduler.jobs.build_daily_audit_orchestrator", _boom)
        assert run_daily_audit("sheets") is None
