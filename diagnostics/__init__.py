"""
diagnostics package.

``evaluate`` runs the default pump house rule set; build a
:class:`PumpHouseDiagnosticEngine` directly to pick another timezone.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from app.domain.telemetry import ActivityEvent
from app.domain.verdict import Verdict
from diagnostics.base import BaseDiagnosticEngine
from diagnostics.pump_rules import PUMP_HOUSE_RULES, DiagnosticRule, PumpHouseDiagnosticEngine
from diagnostics.readings import ReadingSet, parse_number

_DEFAULT_ENGINE = PumpHouseDiagnosticEngine()


def evaluate(
    readings: ReadingSet,
    activity: Sequence[ActivityEvent] = (),
    *,
    now: datetime | None = None,
) -> Verdict:
    return _DEFAULT_ENGINE.evaluate(readings, activity, now=now)


__all__ = [
    "BaseDiagnosticEngine",
    "DiagnosticRule",
    "PUMP_HOUSE_RULES",
    "PumpHouseDiagnosticEngine",
    "ReadingSet",
    "evaluate",
    "parse_number",
]
