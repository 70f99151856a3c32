"""
app/domain/verdict.py

Diagnostic verdict recorded in the ledger for one pump house per day.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    """
    Display severity. Ordered for readability only; rules never rank by it.
    """

    WHITE = "WHITE"
    YELLOW = "YELLOW"
    ORANGE = "ORANGE"
    RED = "RED"


@dataclass(frozen=True)
class Verdict:
    remark: str
    severity: Severity


ALL_OK = Verdict(remark="All OK.", severity=Severity.WHITE)
API_ERROR = Verdict(remark="API Error", severity=Severity.RED)
FETCH_TIMEOUT = Verdict(remark="Fetch failure: telemetry request timed out.", severity=Severity.RED)
