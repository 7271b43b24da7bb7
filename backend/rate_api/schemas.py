"""
Pydantic schemas
Request/response validation for the rate API
"""
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional
from pydantic import Field, model_validator

from rate_core.aggregator import StayCharges, lead_time_days
from rate_core.calendar import CalendarSummary
from rate_core.models import CamelModel, RateCalendarEntry, RateContext


DemandLevel = Literal["high", "normal", "low"]


# ============== Nightly rate ==============

class NightlyRateRequest(CamelModel):
    on_date: date = Field(..., alias="date")
    occupancy_pct: float = Field(0, ge=0, le=100)
    nights_in_stay: int = Field(1, ge=1)
    advance_booking_days: int = Field(0, ge=0)
    available_rooms: Optional[int] = Field(None, ge=0)
    booked_rooms: Optional[int] = Field(None, ge=0)
    demand_level: Optional[DemandLevel] = None
    competitor_rate: Optional[Decimal] = Field(None, gt=0)

    def to_context(self) -> RateContext:
        return RateContext(
            occupancy_pct=self.occupancy_pct,
            nights_in_stay=self.nights_in_stay,
            advance_booking_days=self.advance_booking_days,
            available_rooms=self.available_rooms,
            booked_rooms=self.booked_rooms,
            demand_level=self.demand_level,
            competitor_rate=self.competitor_rate,
        )


# ============== Quote ==============

class QuoteRequest(CamelModel):
    check_in: date
    check_out: date
    occupancy_pct: float = Field(0, ge=0, le=100)
    occupancy_by_date: Dict[date, Annotated[float, Field(ge=0, le=100)]] = Field(default_factory=dict)
    advance_booking_days: Optional[int] = Field(None, ge=0)
    booking_date: Optional[date] = None
    demand_level: Optional[DemandLevel] = None
    competitor_rate: Optional[Decimal] = Field(None, gt=0)

    # Charges
    tax_rate: Decimal = Field(Decimal("0"), ge=0)
    fee_per_stay: Decimal = Field(Decimal("0"), ge=0)
    fee_per_night: Decimal = Field(Decimal("0"), ge=0)
    discount_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    discount_amount: Decimal = Field(Decimal("0"), ge=0)

    @model_validator(mode="after")
    def validate_lead_time(self) -> "QuoteRequest":
        if self.advance_booking_days is not None and self.booking_date is not None:
            raise ValueError("Give either advanceBookingDays or bookingDate, not both")
        return self

    def lead_time(self) -> int:
        if self.booking_date is not None:
            return lead_time_days(self.booking_date, self.check_in)
        return self.advance_booking_days or 0

    def to_context(self) -> RateContext:
        return RateContext(
            occupancy_pct=self.occupancy_pct,
            advance_booking_days=self.lead_time(),
            demand_level=self.demand_level,
            competitor_rate=self.competitor_rate,
        )

    def to_charges(self) -> StayCharges:
        return StayCharges(
            tax_rate=self.tax_rate,
            fee_per_stay=self.fee_per_stay,
            fee_per_night=self.fee_per_night,
            discount_rate=self.discount_rate,
            discount_amount=self.discount_amount,
        )


# ============== Calendar ==============

class RateCalendarResponse(CamelModel):
    rate_plan_id: str
    currency: str
    start: date
    end: date
    entries: List[RateCalendarEntry]
    summary: CalendarSummary


# ============== Inventory feed ==============

class FeedEventRequest(CamelModel):
    event: str = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)
    source: str = "api"


class FeedEventResponse(CamelModel):
    event_id: str
    event_type: str
    subscriber_count: int
    success_count: int
    failure_count: int
    errors: List[str] = Field(default_factory=list)
