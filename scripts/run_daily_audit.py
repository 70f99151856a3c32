"""
Run the daily pump house audit from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging

from app.logging_utils import configure_logging
from app.scheduler.jobs import build_scheduler
from app.services.audit_orchestrator import build_daily_audit_orchestrator

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the daily pump house audit.")
    parser.add_argument(
        "--backend",
        dest="backend",
        choices=("sheets", "sql", "memory"),
        default=None,
        help="Ledger backend; defaults to LEDGER_BACKEND.",
    )
    parser.add_argument(
        "--schedule",
        dest="schedule",
        action="store_true",
        help="Stay running and execute the audit every day at the configured time.",
    )
    args = parser.parse_args()

    configure_logging()

    if args.schedule:
        scheduler = build_scheduler(args.backend)
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")
        return 0

    summary = build_daily_audit_orchestrator(args.backend).run()
    payload = {
        "date": summary.date_key,
        "column": summary.column,
        "pump_houses_processed": summary.pump_houses_processed,
        "cells_written": summary.cells_written,
        "write_failures": summary.write_failures,
        "severity_counts": summary.severity_counts(),
        "notified": summary.notified,
        "results": [
            {
                "pump_house": result.pump_house.name,
                "scheme": result.pump_house.scheme,
                "row": result.row,
                "remark": result.verdict.remark,
                "severity": result.verdict.severity.value,
                "written": result.written,
                "error": result.error,
            }
            for result in summary.results
        ],
    }
    print(json.dumps(payload, indent=2))
    return 0 if summary.write_failures == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
