"""
rate_core/models.py

Rate plan data model.

Plans arrive from the persistence/API layer as camelCase JSON; every model
accepts both the camelCase alias and the Python field name. Models are frozen,
resolution never mutates them.

Pricing rules are a tagged union keyed by ``ruleType``: each variant carries
only the condition fields relevant to its type and rejects the others.
"""
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Frozen model parsed from / serialized to camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============== Enums ==============

class ModifierKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed-amount"
    OVERRIDE = "override"


class RuleType(str, Enum):
    DATE_RANGE = "date-range"
    DAY_OF_WEEK = "day-of-week"
    OCCUPANCY_LEVEL = "occupancy-level"
    ADVANCE_BOOKING = "advance-booking"
    MINIMUM_STAY = "minimum-stay"
    MAXIMUM_STAY = "maximum-stay"


class RatePlanType(str, Enum):
    STANDARD = "standard"
    SEASONAL = "seasonal"
    PROMOTIONAL = "promotional"
    CORPORATE = "corporate"
    GROUP = "group"


class RatePlanStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"
    ARCHIVED = "archived"


class PricingStrategy(str, Enum):
    FIXED = "fixed"
    DYNAMIC = "dynamic"
    OCCUPANCY_BASED = "occupancy-based"
    DEMAND_BASED = "demand-based"
    COMPETITOR_BASED = "competitor-based"


# ============== Modifiers ==============

class RateModifier(CamelModel):
    """
    A single adjustment attached to a pricing rule.

    ``value`` is a percentage delta (``-15`` = 15% off) for percentage
    modifiers, a currency delta for fixed-amount modifiers and the absolute
    nightly rate for overrides.
    """

    id: str
    name: str
    kind: ModifierKind = Field(alias="type")
    value: Decimal
    description: Optional[str] = None
    apply_to_base_rate: bool = True

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Modifier value must be a finite number")
        return v

    @model_validator(mode="after")
    def validate_percentage(self) -> "RateModifier":
        if self.kind == ModifierKind.PERCENTAGE and self.value < -100:
            raise ValueError("Percentage modifier cannot reduce a rate by more than 100%")
        return self


# ============== Rule conditions ==============

class DateRange(CamelModel):
    start: date
    end: date


class OccupancyRange(CamelModel):
    min: float = Field(..., ge=0, le=100)
    max: float = Field(..., ge=0, le=100)


class AdvanceBookingWindow(CamelModel):
    min: Optional[int] = Field(None, ge=0)
    max: Optional[int] = Field(None, ge=0)


class RuleBase(CamelModel):
    """Fields shared by every pricing rule variant."""

    model_config = ConfigDict(extra="forbid")

    id: str
    rate_plan_id: Optional[str] = None
    name: str
    enabled: bool = True
    priority: int = 0
    modifiers: List[RateModifier] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DateRangeRule(RuleBase):
    rule_type: Literal["date-range"] = "date-range"
    date_range: DateRange


class DayOfWeekRule(RuleBase):
    rule_type: Literal["day-of-week"] = "day-of-week"
    days_of_week: List[int]

    @field_validator("days_of_week")
    @classmethod
    def validate_days(cls, v: List[int]) -> List[int]:
        for day in v:
            if day < 0 or day > 6:
                raise ValueError("Days of week must be between 0 (Sunday) and 6 (Saturday)")
        return v


class OccupancyRule(RuleBase):
    rule_type: Literal["occupancy-level"] = "occupancy-level"
    occupancy_range: OccupancyRange


class AdvanceBookingRule(RuleBase):
    rule_type: Literal["advance-booking"] = "advance-booking"
    advance_booking_days: AdvanceBookingWindow


class MinimumStayRule(RuleBase):
    rule_type: Literal["minimum-stay"] = "minimum-stay"
    minimum_stay: int = Field(..., ge=1)


class MaximumStayRule(RuleBase):
    rule_type: Literal["maximum-stay"] = "maximum-stay"
    maximum_stay: int = Field(..., ge=1)


PricingRule = Annotated[
    Union[
        DateRangeRule,
        DayOfWeekRule,
        OccupancyRule,
        AdvanceBookingRule,
        MinimumStayRule,
        MaximumStayRule,
    ],
    Field(discriminator="rule_type"),
]


# ============== Rate plan ==============

class RatePlan(CamelModel):
    """A named pricing policy applicable to one or more properties."""

    id: str
    name: str
    description: str = ""
    type: RatePlanType = RatePlanType.STANDARD
    status: RatePlanStatus = RatePlanStatus.DRAFT

    property_ids: List[str] = Field(default_factory=list)
    room_type_ids: Optional[List[str]] = None

    base_rate: Decimal = Field(..., ge=0)
    currency: str = "USD"
    pricing_strategy: PricingStrategy = PricingStrategy.FIXED

    # Declaration order, not evaluation order
    rules: List[PricingRule] = Field(default_factory=list)

    allow_weekend_pricing: bool = False
    weekend_multiplier: Optional[Decimal] = Field(None, gt=0)
    allow_seasonal_pricing: bool = False
    allow_dynamic_pricing: bool = False

    automation_enabled: bool = False
    minimum_rate: Optional[Decimal] = Field(None, ge=0)
    maximum_rate: Optional[Decimal] = Field(None, ge=0)

    minimum_stay: Optional[int] = Field(None, ge=1)
    maximum_stay: Optional[int] = Field(None, ge=1)
    advance_booking_days: Optional[int] = Field(None, ge=0)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isalpha():
            raise ValueError("Currency code must be 3 letters")
        return v.upper()

    @model_validator(mode="after")
    def validate_bounds(self) -> "RatePlan":
        if self.minimum_rate is not None and self.maximum_rate is not None:
            if self.minimum_rate >= self.maximum_rate:
                raise ValueError("Minimum rate must be less than maximum rate")
        if self.minimum_stay is not None and self.maximum_stay is not None:
            if self.minimum_stay > self.maximum_stay:
                raise ValueError("Minimum stay must be less than or equal to maximum stay")
        if self.pricing_strategy == PricingStrategy.FIXED and self.allow_dynamic_pricing:
            raise ValueError("Fixed pricing strategy does not allow dynamic pricing")
        return self

    @property
    def is_active(self) -> bool:
        return self.status == RatePlanStatus.ACTIVE

    def rule(self, rule_id: str):
        """Get a rule by ID."""
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None


# ============== Evaluation context ==============

@dataclass(frozen=True)
class RateContext:
    """
    Date-independent context for a resolution.

    Attributes:
        occupancy_pct: Current occupancy, 0-100
        nights_in_stay: Length of the stay being priced
        advance_booking_days: Days between booking creation and check-in
        available_rooms: Optional inventory figure copied onto the entry
        booked_rooms: Optional inventory figure copied onto the entry
        demand_level: Optional "high" / "normal" / "low" signal for automation
        competitor_rate: Optional competitor nightly rate for automation
    """

    occupancy_pct: float = 0.0
    nights_in_stay: int = 1
    advance_booking_days: int = 0
    available_rooms: Optional[int] = None
    booked_rooms: Optional[int] = None
    demand_level: Optional[str] = None
    competitor_rate: Optional[Decimal] = None

    def evolve(self, **changes) -> "RateContext":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


# ============== Derived results ==============

class RateCalendarEntry(CamelModel):
    """Resolved rate for one (rate plan, date). Never stored, never mutated."""

    rate_plan_id: str
    date: date
    base_rate: Decimal
    pre_clamp_rate: Decimal
    final_rate: Decimal
    modifiers: List[RateModifier] = Field(default_factory=list)
    applied_rules: List[str] = Field(default_factory=list)
    weekend_multiplier_applied: bool = False
    occupancy: float = 0.0
    available_rooms: Optional[int] = None
    booked_rooms: Optional[int] = None


class StayQuote(CamelModel):
    """Price quote for a stay, with the per-night breakdown."""

    rate_plan_id: str
    currency: str
    check_in: date
    check_out: date
    nights: int
    subtotal: Decimal
    taxes: Decimal
    fees: Decimal
    discount: Decimal
    total: Decimal
    nightly: List[RateCalendarEntry] = Field(default_factory=list)


__all__ = [
    "CamelModel",
    "ModifierKind",
    "RuleType",
    "RatePlanType",
    "RatePlanStatus",
    "PricingStrategy",
    "RateModifier",
    "DateRange",
    "OccupancyRange",
    "AdvanceBookingWindow",
    "RuleBase",
    "DateRangeRule",
    "DayOfWeekRule",
    "OccupancyRule",
    "AdvanceBookingRule",
    "MinimumStayRule",
    "MaximumStayRule",
    "PricingRule",
    "RatePlan",
    "RateContext",
    "RateCalendarEntry",
    "StayQuote",
]
