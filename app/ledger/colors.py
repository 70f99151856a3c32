"""
app/ledger/colors.py

Severity to cell background colour mapping.
"""

from __future__ import annotations

from typing import NamedTuple

from app.domain.verdict import Severity


class CellColor(NamedTuple):
    """RGB background colour with channels in [0, 1]."""

    red: float
    green: float
    blue: float

    def to_hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(
            round(self.red * 255),
            round(self.green * 255),
            round(self.blue * 255),
        )


NEUTRAL = CellColor(1.0, 1.0, 1.0)

SEVERITY_COLORS: dict[Severity, CellColor] = {
    Severity.RED: CellColor(1.0, 0.0, 0.0),
    Severity.ORANGE: CellColor(1.0, 0.65, 0.0),
    Severity.YELLOW: CellColor(1.0, 1.0, 0.0),
    Severity.WHITE: NEUTRAL,
}


def color_for(severity: Severity | str | None) -> CellColor:
    """
    Return the background colour for *severity*.

    Accepts the enum or its name; anything unrecognised is neutral.
    """

    if isinstance(severity, Severity):
        return SEVERITY_COLORS.get(severity, NEUTRAL)
    try:
        return SEVERITY_COLORS[Severity(str(severity).upper())]
    except (KeyError, ValueError):
        return NEUTRAL
