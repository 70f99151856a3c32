"""
app/domain/audit.py

Domain models for daily audit runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.pump_house import PumpHouse
from app.domain.verdict import Verdict


@dataclass(frozen=True)
class PumpHouseAuditResult:
    """
    Outcome for one pump house in one run.

    ``row`` is ``None`` when the ledger row could not be resolved.
    """

    pump_house: PumpHouse
    verdict: Verdict
    row: int | None
    written: bool
    error: str | None = None


@dataclass(frozen=True)
class AuditRunSummary:
    """
    End-of-run audit summary.
    """

    date_key: str
    column: int
    results: list[PumpHouseAuditResult] = field(default_factory=list)
    notified: bool = False

    @property
    def pump_houses_processed(self) -> int:
        return len(self.results)

    @property
    def cells_written(self) -> int:
        return sum(1 for result in self.results if result.written)

    @property
    def write_failures(self) -> int:
        return sum(1 for result in self.results if not result.written)

    def severity_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for result in self.results:
            name = result.verdict.severity.value
            counts[name] = counts.get(name, 0) + 1
        return counts
