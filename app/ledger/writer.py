"""
app/ledger/writer.py

Writes one verdict into one ledger cell.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.domain.verdict import Verdict
from app.ledger.colors import color_for
from app.ledger.stores.base import LedgerStore, LedgerStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteOutcome:
    """
    Result of one cell update. ``stage`` names the failed operation
    (``"value"`` or ``"format"``) when ``success`` is false.
    """

    row: int
    column: int
    success: bool
    stage: str | None = None
    error: str | None = None


class LedgerWriter:
    """
    Applies a verdict as a value write followed by a background-format
    write. The cell counts as updated only when both succeed; store
    failures are returned, never raised.
    """

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def write_cell(self, row: int, column: int, verdict: Verdict) -> WriteOutcome:
        try:
            self._store.write_cell_value(row, column, verdict.remark)
        except LedgerStoreError as exc:
            logger.error("Ledger value write failed row=%s column=%s error=%s", row, column, exc)
            return WriteOutcome(row=row, column=column, success=False, stage="value", error=str(exc))

        try:
            self._store.write_cell_format(row, column, color_for(verdict.severity))
        except LedgerStoreError as exc:
            logger.error("Ledger format write failed row=%s column=%s error=%s", row, column, exc)
            return WriteOutcome(row=row, column=column, success=False, stage="format", error=str(exc))

        return WriteOutcome(row=row, column=column, success=True)
