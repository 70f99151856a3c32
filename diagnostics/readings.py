"""
diagnostics/readings.py

Reading lookup helpers shared by diagnostic rules.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Iterator

from app.domain.telemetry import LAST_RECORDED_PREFIX, Reading

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

ZERO_DURATION = "00 h 00 m 00 s"


def parse_number(text: str | None) -> float | None:
    """
    Parse the leading numeric prefix of a reading value.

    ``"12.5"`` and ``"12.5 m3"`` both give ``12.5``. Text without a numeric
    prefix gives ``None`` so callers treat the reading as not applicable.
    """

    if text is None:
        return None
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return None
    return float(match.group(1))


def is_zero_duration(text: str | None) -> bool:
    return bool(text) and text.startswith(ZERO_DURATION)


class ReadingSet:
    """
    Read-only collection of one pump house's readings.

    Lookups return the first match in provider order. A reading whose
    value is empty is reported as absent.
    """

    def __init__(self, readings: Iterable[Reading] = ()) -> None:
        self._readings: tuple[Reading, ...] = tuple(readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def get(self, label: str, qualifier: str | None = None) -> str | None:
        """
        Return the value of the first reading matching *label* (by label or
        key) and, when given, *qualifier*.
        """

        for reading in self._readings:
            if reading.matches(label, qualifier):
                return reading.value or None
        return None

    def get_number(self, label: str, qualifier: str | None = None) -> float | None:
        return parse_number(self.get(label, qualifier))

    def get_last_recorded_time(self, label: str) -> datetime | None:
        """
        Return the naive ``Last Recorded`` timestamp annotated on *label*.

        Only readings whose label matches exactly are considered. ``None``
        when no such annotation exists or it is malformed.
        """

        for reading in self._readings:
            if reading.label != label or not reading.qualifier:
                continue
            if reading.qualifier.startswith(LAST_RECORDED_PREFIX):
                return reading.recorded_at
        return None
