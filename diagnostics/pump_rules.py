"""
diagnostics/pump_rules.py

Deterministic, first-match diagnostic engine for pump house telemetry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Callable, Sequence
from zoneinfo import ZoneInfo

from app.domain.telemetry import ActivityEvent
from app.domain.verdict import ALL_OK, Severity, Verdict
from diagnostics.base import BaseDiagnosticEngine
from diagnostics.readings import ReadingSet, is_zero_duration, parse_number

DEFAULT_TIMEZONE = "Asia/Kolkata"


# ---------------------------------------------------------------------------
# Reading labels
# ---------------------------------------------------------------------------

TODAY = "Today"
YESTERDAY = "Yesterday"

TOTAL_ON_TIME = "Total On Time"
TOTAL_FLOW = "Total Flow of Pump(m³)"
CHLORINE_AT_OHR = "Residual Chlorine(ppm) at OHR"
CHLORINE_AT_SOURCE = "Residual Chlorine(ppm) at Source Side"
OHR_WATER_LEVEL = "Water Level of OHR(m)"
# Provider spelling.
OHR_WATER_PRESSURE = "Water Presure in OHR (PSI)"
TUBEWELL_LEVEL = "Tubewell Water Level(m)"
DISCHARGE_FLOW = "Discharge From Service OHR - Total Flow(m³)"
DISCHARGE_VELOCITY = "Discharge From Service OHR - Velocity(m/s)"
DISCHARGE_RATE = "Discharge From Service OHR(m³/h)"


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

PUMP_OFF_ALERT_HOURS = 24
CHLORINE_STALE_HOURS = 6

OHR_WATER_LEVEL_RANGE = (0.1, 6.0)
OHR_WATER_PRESSURE_RANGE = (20.0, 36.0)
TUBEWELL_LEVEL_RANGE = (1.0, 32.0)


# ---------------------------------------------------------------------------
# Rule plumbing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RuleContext:
    readings: ReadingSet
    activity: Sequence[ActivityEvent]
    now: datetime
    timezone: tzinfo

    def localize(self, value: datetime) -> datetime:
        """Attach the audit timezone to naive provider timestamps."""
        if value.tzinfo is None:
            return value.replace(tzinfo=self.timezone)
        return value

    def whole_hours_since(self, value: datetime) -> int:
        elapsed = self.now - self.localize(value)
        return int(elapsed.total_seconds() / 3600)


@dataclass(frozen=True)
class DiagnosticRule:
    """
    One guard in the decision list. ``check`` returns a verdict when the
    guard holds and ``None`` otherwise.
    """

    name: str
    check: Callable[[RuleContext], Verdict | None]


def _out_of_range(value: float | None, bounds: tuple[float, float]) -> bool:
    if value is None:
        return False
    low, high = bounds
    return value < low or value > high


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _pump_off_over_24h(ctx: RuleContext) -> Verdict | None:
    if not ctx.activity:
        return None
    latest = ctx.activity[0]
    if latest.is_on is not False or latest.transition_timestamp is None:
        return None
    if ctx.whole_hours_since(latest.transition_timestamp) < PUMP_OFF_ALERT_HOURS:
        return None
    return Verdict("Pump Status OFF for more than 24 hours.", Severity.ORANGE)


def _chlorine_pump_off(ctx: RuleContext) -> Verdict | None:
    # No off-duration data is reported for the chlorine pump, so this guard
    # never fires. It keeps its slot so later rules keep their positions.
    return None


def _runtime_flow_mismatch(period: str) -> Callable[[RuleContext], Verdict | None]:
    def check(ctx: RuleContext) -> Verdict | None:
        if not is_zero_duration(ctx.readings.get(TOTAL_ON_TIME, period)):
            return None
        flow = ctx.readings.get_number(TOTAL_FLOW, period)
        if flow is None or flow <= 0:
            return None
        return Verdict(
            f"Total On Time ({period}) is zero but Total Flow {period} is non-zero. "
            "Pump Controller Detector Issue.",
            Severity.RED,
        )

    return check


def _zero_runtime_yesterday(ctx: RuleContext) -> Verdict | None:
    if is_zero_duration(ctx.readings.get(TOTAL_ON_TIME, YESTERDAY)):
        return Verdict("Total On Time (Yesterday) is zero.", Severity.ORANGE)
    return None


def _residual_chlorine_stale_zero(ctx: RuleContext) -> Verdict | None:
    chlorine = ctx.readings.get(CHLORINE_AT_OHR) or ctx.readings.get(CHLORINE_AT_SOURCE)
    if parse_number(chlorine) != 0:
        return None
    last_recorded = (
        ctx.readings.get_last_recorded_time(CHLORINE_AT_OHR)
        or ctx.readings.get_last_recorded_time(CHLORINE_AT_SOURCE)
    )
    if last_recorded is None or ctx.whole_hours_since(last_recorded) <= CHLORINE_STALE_HOURS:
        return None
    return Verdict("Residual Chlorine is zero for more than 6 hours.", Severity.ORANGE)


def _ohr_water_level_range(ctx: RuleContext) -> Verdict | None:
    if _out_of_range(ctx.readings.get_number(OHR_WATER_LEVEL), OHR_WATER_LEVEL_RANGE):
        return Verdict(
            "Water Level of OHR shows out of range (<0.1m or >6m). READING ERROR.",
            Severity.ORANGE,
        )
    return None


def _ohr_water_pressure_range(ctx: RuleContext) -> Verdict | None:
    if _out_of_range(ctx.readings.get_number(OHR_WATER_PRESSURE), OHR_WATER_PRESSURE_RANGE):
        return Verdict(
            "Water Pressure in OHR shows out of range (<20psi or >36psi). READING ERROR.",
            Severity.ORANGE,
        )
    return None


def _tubewell_level_range(ctx: RuleContext) -> Verdict | None:
    if _out_of_range(ctx.readings.get_number(TUBEWELL_LEVEL), TUBEWELL_LEVEL_RANGE):
        return Verdict(
            "Tubewell Water Level out of range (should be 1-32m). SENSOR ERROR.",
            Severity.ORANGE,
        )
    return None


def _discharge_consistency_today(ctx: RuleContext) -> Verdict | None:
    values = [
        ctx.readings.get_number(label, TODAY)
        for label in (DISCHARGE_FLOW, DISCHARGE_VELOCITY, DISCHARGE_RATE)
    ]
    present = [value for value in values if value is not None]
    if any(value > 0 for value in present) and any(value == 0 for value in present):
        return Verdict(
            "Discharge From Service OHR - Total Flow, Velocity, or Discharge mismatch. "
            "SENSOR ERROR.",
            Severity.RED,
        )
    return None


def _discharge_zero_yesterday(ctx: RuleContext) -> Verdict | None:
    if ctx.readings.get_number(DISCHARGE_FLOW, YESTERDAY) == 0:
        return Verdict(
            "Discharge From Service OHR - Total Flow (Yesterday) is zero. Inspection error.",
            Severity.YELLOW,
        )
    return None


# Evaluation order is part of the contract: the first guard that holds
# decides the verdict. The runtime/flow mismatch must stay ahead of the
# plain zero-runtime guard it overlaps with.
PUMP_HOUSE_RULES: tuple[DiagnosticRule, ...] = (
    DiagnosticRule("pump_off_over_24h", _pump_off_over_24h),
    DiagnosticRule("chlorine_pump_off", _chlorine_pump_off),
    DiagnosticRule("runtime_flow_mismatch_yesterday", _runtime_flow_mismatch(YESTERDAY)),
    DiagnosticRule("zero_runtime_yesterday", _zero_runtime_yesterday),
    DiagnosticRule("runtime_flow_mismatch_today", _runtime_flow_mismatch(TODAY)),
    DiagnosticRule("residual_chlorine_stale_zero", _residual_chlorine_stale_zero),
    DiagnosticRule("ohr_water_level_range", _ohr_water_level_range),
    DiagnosticRule("ohr_water_pressure_range", _ohr_water_pressure_range),
    DiagnosticRule("tubewell_level_range", _tubewell_level_range),
    DiagnosticRule("discharge_consistency_today", _discharge_consistency_today),
    DiagnosticRule("discharge_zero_yesterday", _discharge_zero_yesterday),
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class PumpHouseDiagnosticEngine(BaseDiagnosticEngine):
    """
    Rule-based diagnostic engine for pump house telemetry.

    Applies :data:`PUMP_HOUSE_RULES` in order and returns the verdict of
    the first rule whose guard holds; later rules are not consulted.
    Returns ``"All OK."`` / WHITE when no guard holds.

    Naive timestamps from the provider are read in *timezone*.
    """

    def __init__(
        self,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        rules: Sequence[DiagnosticRule] = PUMP_HOUSE_RULES,
    ) -> None:
        self._timezone = ZoneInfo(timezone)
        self._rules = tuple(rules)

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self._rules]

    def evaluate(
        self,
        readings: ReadingSet,
        activity: Sequence[ActivityEvent],
        *,
        now: datetime | None = None,
    ) -> Verdict:
        if now is None:
            now = datetime.now(tz=self._timezone)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=self._timezone)

        ctx = RuleContext(
            readings=readings,
            activity=tuple(activity),
            now=now,
            timezone=self._timezone,
        )
        for rule in self._rules:
            verdict = rule.check(ctx)
            if verdict is not None:
                return verdict
        return ALL_OK
