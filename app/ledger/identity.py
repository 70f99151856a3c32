"""
app/ledger/identity.py

Stable keys used to locate a pump house row and a date column.
"""

from __future__ import annotations

import re
from datetime import date
from typing import NamedTuple

from app.domain.pump_house import PumpHouse

# Ledger date headers are written as D/M/YYYY without zero padding.
_DATE_KEY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


class AssetIdentity(NamedTuple):
    """
    Composite ledger key of a pump house. Compared by exact,
    case-sensitive string equality.
    """

    scheme: str
    name: str
    type: str


def identity_of(pump_house: PumpHouse) -> AssetIdentity:
    return AssetIdentity(
        scheme=pump_house.scheme or "",
        name=pump_house.name or "",
        type=pump_house.type or "",
    )


def date_key(day: date) -> str:
    """Render *day* the way ledger headers store it, e.g. ``"4/6/2025"``."""
    return f"{day.day}/{day.month}/{day.year}"


def parse_date_key(text: str | None) -> date | None:
    """
    Strictly parse a ledger header cell as ``D/M/YYYY``.

    Blank cells, other layouts and impossible dates all give ``None``.
    """

    if not text:
        return None
    match = _DATE_KEY_PATTERN.match(text.strip())
    if match is None:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None
