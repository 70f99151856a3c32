"""
app/services/audit_orchestrator.py

Daily pump house audit: fetch telemetry, diagnose, and record one
verdict per pump house in today's ledger column.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Sequence
from zoneinfo import ZoneInfo

from app.config import (
    AuditSettings,
    get_audit_settings,
    get_external_http_settings,
    get_ledger_settings,
    get_mailgun_settings,
    get_telemetry_settings,
)
from app.connectors.base import ConnectorRequestError, ConnectorTimeoutError
from app.connectors.telemetry import TelemetryGateway
from app.domain.audit import AuditRunSummary, PumpHouseAuditResult
from app.domain.pump_house import LEGACY_PUMP_HOUSES, PumpHouse
from app.domain.telemetry import ActivityEvent
from app.domain.verdict import API_ERROR, FETCH_TIMEOUT, Verdict
from app.ledger.identity import date_key
from app.ledger.index import LedgerIndex
from app.ledger.stores.base import LedgerStore, LedgerStoreError
from app.ledger.stores.memory import InMemoryLedgerStore
from app.ledger.stores.sheets import SheetsLedgerStore
from app.ledger.writer import LedgerWriter
from app.logging_utils import log_event
from app.notifications.mailgun import BaseNotifier, build_notifier
from diagnostics.base import BaseDiagnosticEngine
from diagnostics.pump_rules import PumpHouseDiagnosticEngine
from diagnostics.readings import ReadingSet

logger = logging.getLogger(__name__)

NOTIFICATION_SUBJECT = "Pump House Automation: Daily Report Ready"


class DailyAuditOrchestrator:
    """
    Processes pump houses strictly one at a time, in input order.

    For each pump house the ledger grid is re-read immediately before its
    row is resolved, so rows appended for earlier pump houses in the same
    run are visible and never duplicated. A fixed pacing delay separates
    consecutive pump houses.

    Each pump house's telemetry fetch runs in the calling thread against a
    deadline of ``asset_timeout_seconds``; a fetch that overruns is recorded
    as a fetch-failure verdict and the run moves on to the next pump house.
    The run date is fixed at start, while age-based rules see the clock as
    read when each pump house is evaluated.
    """

    def __init__(
        self,
        *,
        telemetry: TelemetryGateway,
        store: LedgerStore,
        notifier: BaseNotifier,
        settings: AuditSettings,
        engine: BaseDiagnosticEngine | None = None,
        legacy_pump_houses: Sequence[PumpHouse] = LEGACY_PUMP_HOUSES,
        ledger_url: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._telemetry = telemetry
        self._store = store
        self._notifier = notifier
        self._settings = settings
        self._timezone = ZoneInfo(settings.timezone)
        self._engine = engine or PumpHouseDiagnosticEngine(timezone=settings.timezone)
        self._legacy_pump_houses = tuple(legacy_pump_houses)
        self._ledger_url = ledger_url
        self._sleep = sleep
        self._clock = clock or (lambda: datetime.now(tz=self._timezone))
        self._index = LedgerIndex(store)
        self._writer = LedgerWriter(store)

    def collect_pump_houses(self) -> list[PumpHouse]:
        """
        Return the fixed legacy pump houses followed by the current roster.

        A roster failure is logged and leaves only the legacy pump houses.
        """

        try:
            roster = self._telemetry.fetch_roster()
        except ConnectorRequestError as exc:
            logger.error("Failed to fetch pump house roster error=%s", exc)
            roster = []
        return [*self._legacy_pump_houses, *roster]

    def run(self, pump_houses: Sequence[PumpHouse] | None = None) -> AuditRunSummary:
        """
        Execute one audit run.

        Ledger failures during setup (initialisation or resolving today's
        column) propagate; every per-pump-house failure is contained.
        """

        today = self._clock().date()
        yesterday = today - timedelta(days=1)
        day_key = date_key(today)

        selected = list(pump_houses) if pump_houses is not None else self.collect_pump_houses()
        logger.info("Audit run starting date=%s pump_houses=%s", day_key, len(selected))

        self._index.initialize_if_empty(selected, day_key)
        column = self._index.resolve_date_column(self._store.read_grid(), day_key)

        results: list[PumpHouseAuditResult] = []
        for position, pump_house in enumerate(selected):
            if position > 0 and self._settings.pacing_seconds > 0:
                self._sleep(self._settings.pacing_seconds)
            results.append(self._process(pump_house, column, yesterday, today))

        summary = AuditRunSummary(date_key=day_key, column=column, results=results)
        summary = replace(summary, notified=self._notify(summary))
        logger.info(
            "Audit run complete date=%s processed=%s written=%s failures=%s",
            day_key,
            summary.pump_houses_processed,
            summary.cells_written,
            summary.write_failures,
        )
        return summary

    # ------------------------------------------------------------------
    # Per pump house
    # ------------------------------------------------------------------

    def _process(
        self,
        pump_house: PumpHouse,
        column: int,
        start_date: date,
        end_date: date,
    ) -> PumpHouseAuditResult:
        verdict = self._diagnose(pump_house, start_date, end_date)

        try:
            grid = self._store.read_grid()
            row = self._index.resolve_asset_row(grid, pump_house)
        except LedgerStoreError as exc:
            logger.error(
                "Failed to resolve ledger row pump_house=%r scheme=%r error=%s",
                pump_house.name,
                pump_house.scheme,
                exc,
            )
            return PumpHouseAuditResult(
                pump_house=pump_house,
                verdict=verdict,
                row=None,
                written=False,
                error=str(exc),
            )

        outcome = self._writer.write_cell(row, column, verdict)
        log_event(
            logger,
            logging.INFO if outcome.success else logging.ERROR,
            "pump_house_audited",
            pump_house=pump_house.name,
            pump_house_type=pump_house.type,
            scheme=pump_house.scheme,
            origin=pump_house.origin.value,
            row=row,
            column=column,
            remark=verdict.remark,
            severity=verdict.severity.value,
            written=outcome.success,
            failed_stage=outcome.stage,
        )
        return PumpHouseAuditResult(
            pump_house=pump_house,
            verdict=verdict,
            row=row,
            written=outcome.success,
            error=outcome.error,
        )

    def _diagnose(
        self,
        pump_house: PumpHouse,
        start_date: date,
        end_date: date,
    ) -> Verdict:
        deadline = time.monotonic() + self._settings.asset_timeout_seconds
        try:
            readings, activity = self._fetch(pump_house, start_date, end_date, deadline)
        except ConnectorTimeoutError:
            logger.warning(
                "Telemetry fetch timed out pump_house=%r timeout_seconds=%s",
                pump_house.name,
                self._settings.asset_timeout_seconds,
            )
            return FETCH_TIMEOUT
        except ConnectorRequestError as exc:
            logger.error("Failed to fetch telemetry pump_house=%r error=%s", pump_house.name, exc)
            return API_ERROR
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unhandled telemetry failure pump_house=%r error=%s", pump_house.name, exc)
            return API_ERROR

        return self._engine.evaluate(readings, activity, now=self._clock())

    def _fetch(
        self,
        pump_house: PumpHouse,
        start_date: date,
        end_date: date,
        deadline: float,
    ) -> tuple[ReadingSet, list[ActivityEvent]]:
        readings = self._telemetry.fetch_readings(pump_house, deadline=deadline)
        activity = self._telemetry.fetch_activity(pump_house, start_date, end_date, deadline=deadline)
        return readings, activity

    # ------------------------------------------------------------------
    # Notification
    # ------------------------------------------------------------------

    def _notify(self, summary: AuditRunSummary) -> bool:
        counts = summary.severity_counts()
        lines = [
            "Hello,",
            "",
            f"The pump house report for {summary.date_key} is ready.",
            "",
            f"Pump houses processed: {summary.pump_houses_processed}",
            f"Cells written: {summary.cells_written}",
            f"Write failures: {summary.write_failures}",
        ]
        for severity in ("RED", "ORANGE", "YELLOW", "WHITE"):
            lines.append(f"{severity}: {counts.get(severity, 0)}")
        if self._ledger_url:
            lines.extend(["", f"View the ledger here: {self._ledger_url}"])
        lines.extend(["", "Regards,", "Pump House Bot"])

        try:
            return self._notifier.notify(NOTIFICATION_SUBJECT, "\n".join(lines))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Notification failed: %s", exc)
            return False


def build_ledger_store(backend: str) -> LedgerStore:
    """
    Build the ledger store for *backend* (``sheets``, ``sql`` or ``memory``).

    Raises RuntimeError when the backend's credentials or URL are missing.
    """

    ledger_settings = get_ledger_settings()
    if backend == "sheets":
        return SheetsLedgerStore.from_settings(
            settings=ledger_settings,
            http_settings=get_external_http_settings(),
        )
    if backend == "sql":
        from app.ledger.stores.sql import SqlLedgerStore
        from db.session import SessionLocal

        return SqlLedgerStore(SessionLocal(), ledger_name=ledger_settings.ledger_name)
    if backend == "memory":
        return InMemoryLedgerStore()
    raise ValueError(f"Unsupported ledger backend '{backend}'. Allowed: memory, sheets, sql.")


def build_daily_audit_orchestrator(backend: str | None = None) -> DailyAuditOrchestrator:
    """
    Build the orchestrator from environment configuration.
    """

    http_settings = get_external_http_settings()
    mailgun_settings = get_mailgun_settings()
    return DailyAuditOrchestrator(
        telemetry=TelemetryGateway.from_settings(
            settings=get_telemetry_settings(),
            http_settings=http_settings,
        ),
        store=build_ledger_store(backend or get_ledger_settings().backend),
        notifier=build_notifier(mailgun_settings, http_settings),
        settings=get_audit_settings(),
        ledger_url=mailgun_settings.ledger_url,
    )
