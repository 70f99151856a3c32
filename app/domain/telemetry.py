"""
app/domain/telemetry.py

Typed telemetry records consumed by the diagnostic rules.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

LAST_RECORDED_PREFIX = "Last Recorded"

_LAST_RECORDED_PATTERN = re.compile(r"\((\d{2}-\d{2}-\d{4} \d{2}:\d{2}:\d{2})\)")
_LAST_RECORDED_FORMAT = "%d-%m-%Y %H:%M:%S"


def parse_last_recorded(annotation: str | None) -> datetime | None:
    """
    Extract the naive timestamp from ``"Last Recorded (DD-MM-YYYY HH:mm:ss)"``.

    Returns ``None`` when the annotation is missing, carries no
    parenthesised timestamp in exactly that layout, or names an impossible
    calendar date.
    """

    if not annotation:
        return None
    match = _LAST_RECORDED_PATTERN.search(annotation)
    if match is None:
        return None
    try:
        return datetime.strptime(match.group(1), _LAST_RECORDED_FORMAT)
    except ValueError:
        return None


@dataclass(frozen=True)
class Reading:
    """
    One labelled telemetry measurement.

    ``qualifier`` holds the provider's badge text verbatim. It is either a
    period tag (``"Today"``, ``"Yesterday"``) or a freshness annotation
    (``"Last Recorded (04-06-2025 17:43:18)"``).
    """

    label: str
    value: str
    qualifier: str | None = None
    key: str | None = None

    def matches(self, label: str, qualifier: str | None = None) -> bool:
        if self.label != label and self.key != label:
            return False
        return qualifier is None or self.qualifier == qualifier

    @property
    def recorded_at(self) -> datetime | None:
        if not self.qualifier or not self.qualifier.startswith(LAST_RECORDED_PREFIX):
            return None
        return parse_last_recorded(self.qualifier)


@dataclass(frozen=True)
class ActivityEvent:
    """
    One pump state sample. ``is_on`` is ``None`` when the provider omitted it.
    """

    timestamp: datetime | None
    is_on: bool | None
    transition_timestamp: datetime | None
