"""
diagnostics/base.py

Abstract base class for pump house diagnostic engines.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence

from app.domain.telemetry import ActivityEvent
from app.domain.verdict import Verdict
from diagnostics.readings import ReadingSet


class BaseDiagnosticEngine(ABC):
    """
    Contract for diagnostic engine implementations.

    Subclasses receive the readings and recent pump activity of one pump
    house and must return exactly one :class:`Verdict`.

    :meth:`evaluate` must be pure and must never raise for missing or
    malformed readings.
    """

    @abstractmethod
    def evaluate(
        self,
        readings: ReadingSet,
        activity: Sequence[ActivityEvent],
        *,
        now: datetime | None = None,
    ) -> Verdict:
        """
        Produce the verdict for one pump house.

        Parameters
        ----------
        readings:
            Readings for the pump house, in provider order.

        activity:
            Pump state samples, most recent first.

        now:
            Wall-clock reference for age-based rules. Implementations use
            the current time in their configured timezone when omitted.

        Returns
        -------
        Verdict
            The remark and display severity to record.
        """
