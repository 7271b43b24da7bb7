"""
rate_core/automation.py

Rate automation - a second adjustment pipeline layered after rule-based
resolution.

AutomationAdjuster plugs into RateResolver as a RateAdjuster: it runs on the
clamped rule-based rate and the resolver re-clamps its output to the plan
bounds. Only plans with ``automation_enabled`` whose settings are enabled are
touched.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional
import logging

from pydantic import Field, model_validator

from rate_core.models import CamelModel, RateContext, RatePlan
from rate_core.resolver import clamp

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

DEMAND_HIGH = "high"
DEMAND_NORMAL = "normal"
DEMAND_LOW = "low"


class CompetitorPosition(str, Enum):
    BELOW = "below"
    MATCH = "match"
    ABOVE = "above"


class UpdateFrequency(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class OccupancyAdjustment(CamelModel):
    occupancy_threshold: float = Field(..., ge=0, le=100)
    adjustment: Decimal = Field(..., ge=-100, le=200)


class OccupancyBasedSettings(CamelModel):
    enabled: bool = False
    rules: List[OccupancyAdjustment] = Field(default_factory=list)


class DemandBasedSettings(CamelModel):
    enabled: bool = False
    high_demand_multiplier: Decimal = Field(Decimal("1"), ge=Decimal("0.5"), le=3)
    low_demand_multiplier: Decimal = Field(Decimal("1"), ge=Decimal("0.5"), le=Decimal("1.5"))
    look_ahead_days: int = Field(7, ge=1, le=90)


class CompetitorBasedSettings(CamelModel):
    enabled: bool = False
    target_position: CompetitorPosition = CompetitorPosition.MATCH
    adjustment_percentage: Decimal = Field(Decimal("0"), ge=0, le=50)
    competitors: List[str] = Field(default_factory=list)


class EarlyBookingDiscount(CamelModel):
    enabled: bool = False
    days_in_advance: int = Field(30, ge=1, le=365)
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)


class LastMinuteDiscount(CamelModel):
    enabled: bool = False
    days_before_arrival: int = Field(3, ge=0, le=30)
    discount_percentage: Decimal = Field(Decimal("0"), ge=0, le=100)


class TimeBasedSettings(CamelModel):
    enabled: bool = False
    early_booking_discount: EarlyBookingDiscount = Field(default_factory=EarlyBookingDiscount)
    last_minute_discount: LastMinuteDiscount = Field(default_factory=LastMinuteDiscount)


class AutomationConstraints(CamelModel):
    minimum_rate: Decimal = Field(..., ge=1)
    maximum_rate: Decimal = Field(..., ge=1)
    maximum_adjustment_per_day: Decimal = Field(Decimal("100"), ge=0, le=100)
    update_frequency: UpdateFrequency = UpdateFrequency.DAILY

    @model_validator(mode="after")
    def validate_bounds(self) -> "AutomationConstraints":
        # Equal bounds freeze the rate
        if self.minimum_rate > self.maximum_rate:
            raise ValueError("Minimum rate must not exceed maximum rate")
        return self


class RateAutomationSettings(CamelModel):
    """Per-plan automation settings."""

    id: str
    rate_plan_id: str
    enabled: bool = False
    occupancy_based: OccupancyBasedSettings = Field(default_factory=OccupancyBasedSettings)
    demand_based: DemandBasedSettings = Field(default_factory=DemandBasedSettings)
    competitor_based: CompetitorBasedSettings = Field(default_factory=CompetitorBasedSettings)
    time_based: TimeBasedSettings = Field(default_factory=TimeBasedSettings)
    constraints: AutomationConstraints
    last_updated: Optional[datetime] = None


def classify_demand(occupancies: Iterable[float], high: float = 80, low: float = 40) -> str:
    """
    Classify demand from look-ahead occupancy figures.

    Args:
        occupancies: Occupancy percentages for the look-ahead window
        high: Average occupancy at or above which demand is high
        low: Average occupancy at or below which demand is low

    Returns:
        "high", "normal" or "low"; "normal" without data.
    """
    values = list(occupancies)
    if not values:
        return DEMAND_NORMAL
    average = sum(values) / len(values)
    if average >= high:
        return DEMAND_HIGH
    if average <= low:
        return DEMAND_LOW
    return DEMAND_NORMAL


def occupancy_adjustment(settings: OccupancyBasedSettings, occupancy_pct: float) -> Decimal:
    """
    Percentage adjustment for the current occupancy.

    Increases apply at or above their threshold (the highest threshold reached
    wins); decreases apply below their threshold (the lowest one wins).
    """
    if not settings.enabled or not settings.rules:
        return Decimal("0")

    increases = sorted(
        (r for r in settings.rules if r.adjustment >= 0),
        key=lambda r: r.occupancy_threshold,
        reverse=True,
    )
    for rule in increases:
        if occupancy_pct >= rule.occupancy_threshold:
            return rule.adjustment

    decreases = sorted(
        (r for r in settings.rules if r.adjustment < 0),
        key=lambda r: r.occupancy_threshold,
    )
    for rule in decreases:
        if occupancy_pct < rule.occupancy_threshold:
            return rule.adjustment

    return Decimal("0")


def competitor_target(settings: CompetitorBasedSettings, competitor_rate: Decimal) -> Decimal:
    """Target rate relative to a competitor's rate."""
    delta = competitor_rate * settings.adjustment_percentage / HUNDRED
    if settings.target_position == CompetitorPosition.BELOW:
        return competitor_rate - delta
    if settings.target_position == CompetitorPosition.ABOVE:
        return competitor_rate + delta
    return competitor_rate


def time_based_discount(settings: TimeBasedSettings, advance_booking_days: int) -> Decimal:
    """Discount percentage for the booking lead time."""
    if not settings.enabled:
        return Decimal("0")
    early = settings.early_booking_discount
    if early.enabled and advance_booking_days >= early.days_in_advance:
        return early.discount_percentage
    last_minute = settings.last_minute_discount
    if last_minute.enabled and advance_booking_days <= last_minute.days_before_arrival:
        return last_minute.discount_percentage
    return Decimal("0")


class AutomationAdjuster:
    """
    RateAdjuster applying RateAutomationSettings.

    Steps, in order: occupancy adjustment, demand multiplier, competitor
    positioning, time-based discount; the total change is then capped to
    maximum_adjustment_per_day percent and clamped to the constraint bounds.
    """

    def __init__(self, settings: Optional[Iterable[RateAutomationSettings]] = None):
        self._settings: Dict[str, RateAutomationSettings] = {}
        for item in settings or []:
            self.register(item)

    def register(self, settings: RateAutomationSettings) -> None:
        """Register (or replace) a plan's settings."""
        self._settings[settings.rate_plan_id] = settings

    def settings_for(self, rate_plan_id: str) -> Optional[RateAutomationSettings]:
        return self._settings.get(rate_plan_id)

    def adjust(self, plan: RatePlan, on_date: date, rate: Decimal, context: RateContext) -> Decimal:
        settings = self._settings.get(plan.id)
        if settings is None or not settings.enabled or not plan.automation_enabled:
            return rate

        adjusted = rate

        pct = occupancy_adjustment(settings.occupancy_based, context.occupancy_pct)
        if pct:
            adjusted = adjusted + adjusted * pct / HUNDRED

        demand = settings.demand_based
        if demand.enabled:
            if context.demand_level == DEMAND_HIGH:
                adjusted = adjusted * demand.high_demand_multiplier
            elif context.demand_level == DEMAND_LOW:
                adjusted = adjusted * demand.low_demand_multiplier

        if settings.competitor_based.enabled and context.competitor_rate is not None:
            adjusted = competitor_target(settings.competitor_based, Decimal(str(context.competitor_rate)))

        discount = time_based_discount(settings.time_based, context.advance_booking_days)
        if discount:
            adjusted = adjusted - adjusted * discount / HUNDRED

        constraints = settings.constraints
        limit = rate * constraints.maximum_adjustment_per_day / HUNDRED
        adjusted = clamp(adjusted, rate - limit, rate + limit)
        adjusted = clamp(adjusted, constraints.minimum_rate, constraints.maximum_rate)

        if adjusted != rate:
            logger.debug(f"Automation adjusted {plan.id} on {on_date.isoformat()}: {rate} -> {adjusted}")
        return adjusted


__all__ = [
    "DEMAND_HIGH",
    "DEMAND_NORMAL",
    "DEMAND_LOW",
    "CompetitorPosition",
    "UpdateFrequency",
    "OccupancyAdjustment",
    "OccupancyBasedSettings",
    "DemandBasedSettings",
    "CompetitorBasedSettings",
    "EarlyBookingDiscount",
    "LastMinuteDiscount",
    "TimeBasedSettings",
    "AutomationConstraints",
    "RateAutomationSettings",
    "classify_demand",
    "occupancy_adjustment",
    "competitor_target",
    "time_based_discount",
    "AutomationAdjuster",
]
