"""
app/scheduler/jobs.py

APScheduler-based daily scheduler for the pump house audit.

Schedule (audit timezone, ``AUDIT_TIMEZONE``)
----------------------------------------------
  daily_pump_house_audit: AUDIT_SCHEDULE_HOUR:AUDIT_SCHEDULE_MINUTE every day

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BlockingScheduler``
and call ``.start()`` on it; it blocks the calling thread until shutdown.
A run still in progress when the next trigger fires is not started twice
(``max_instances=1``).
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.blocking import BlockingScheduler

from app.config import get_audit_settings
from app.domain.audit import AuditRunSummary
from app.services.audit_orchestrator import build_daily_audit_orchestrator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Job: Daily pump house audit
# ---------------------------------------------------------------------------


def run_daily_audit(backend: str | None = None) -> AuditRunSummary | None:
    """
    Build a fresh orchestrator and execute one audit run.

    Failures are logged so that the scheduler keeps its next trigger.
    """
    logger.info("Scheduler: daily_pump_house_audit starting")
    try:
        summary = build_daily_audit_orchestrator(backend).run()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Scheduler: daily_pump_house_audit failed: %s", exc)
        return None

    logger.info(
        "Scheduler: daily_pump_house_audit complete date=%s processed=%s failures=%s",
        summary.date_key,
        summary.pump_houses_processed,
        summary.write_failures,
    )
    return summary


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler(backend: str | None = None) -> BlockingScheduler:
    """
    Build the scheduler and register the daily audit job.

    Returns a configured but *not yet started* ``BlockingScheduler``.
    """
    settings = get_audit_settings()
    scheduler = BlockingScheduler(timezone=settings.timezone)

    scheduler.add_job(
        run_daily_audit,
        trigger="cron",
        hour=settings.schedule_hour,
        minute=settings.schedule_minute,
        kwargs={"backend": backend},
        id="daily_pump_house_audit",
        name="Daily pump house audit",
        replace_existing=True,
        max_instances=1,
        misfire_grace_time=3600,
    )

    return scheduler
