"""
rate_core/aggregator.py

Stay aggregator - sums resolved nightly rates into a quote.

Taxes, fees and discounts are business parameters supplied by the caller
(StayCharges), they are not part of the rate plan.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Tuple
import logging

from rate_core.dates import DateLike, add_days, nights_between, to_date
from rate_core.errors import EligibilityViolation, InvalidPlanState
from rate_core.models import RateCalendarEntry, RateContext, RatePlan, StayQuote
from rate_core.resolver import RateResolver, round_amount

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class StayCharges:
    """
    Caller-supplied charges for a quote.

    Attributes:
        tax_rate: Tax percentage applied to the subtotal
        fee_per_stay: Flat fee charged once
        fee_per_night: Flat fee charged per night
        discount_rate: Discount percentage of the subtotal
        discount_amount: Flat discount
    """

    tax_rate: Decimal = ZERO
    fee_per_stay: Decimal = ZERO
    fee_per_night: Decimal = ZERO
    discount_rate: Decimal = ZERO
    discount_amount: Decimal = ZERO

    def __post_init__(self):
        for name in ("tax_rate", "fee_per_stay", "fee_per_night", "discount_rate", "discount_amount"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))


def lead_time_days(booking_date: DateLike, check_in: DateLike) -> int:
    """Days between booking creation and check-in (negative if booked after arrival)."""
    return (to_date(check_in) - to_date(booking_date)).days


def check_eligibility(plan: RatePlan, nights: int, advance_booking_days: int) -> List[Tuple[str, str]]:
    """
    Check a stay against the plan's stay-length and lead-time bounds.

    Returns:
        (constraint, message) for every violated bound; empty if eligible.
    """
    violations = []
    if plan.minimum_stay is not None and nights < plan.minimum_stay:
        violations.append(
            ("minimum_stay", f"Stay of {nights} nights is shorter than the minimum of {plan.minimum_stay}")
        )
    if plan.maximum_stay is not None and nights > plan.maximum_stay:
        violations.append(
            ("maximum_stay", f"Stay of {nights} nights is longer than the maximum of {plan.maximum_stay}")
        )
    if plan.advance_booking_days is not None and advance_booking_days < plan.advance_booking_days:
        violations.append(
            (
                "advance_booking_days",
                f"Booked {advance_booking_days} days ahead, plan requires at least {plan.advance_booking_days}",
            )
        )
    return violations


def quote_stay(
    plan: RatePlan,
    check_in: DateLike,
    check_out: DateLike,
    context: Optional[RateContext] = None,
    charges: Optional[StayCharges] = None,
    resolver: Optional[RateResolver] = None,
    occupancy_by_date: Optional[Mapping[DateLike, float]] = None,
) -> StayQuote:
    """
    Quote a stay from check-in (inclusive) to check-out (exclusive).

    Args:
        plan: Active rate plan
        check_in: Arrival date
        check_out: Departure date
        context: Occupancy and lead time; nights_in_stay is set from the dates
        charges: Taxes, fees and discounts
        resolver: Resolver to use, a default one if omitted
        occupancy_by_date: Per-night occupancy overriding context.occupancy_pct,
            keyed by date or ISO string

    Returns:
        StayQuote with the nightly breakdown.

    Raises:
        InvalidDate / InvalidDateRange: Malformed or inverted dates,
            including occupancy_by_date keys.
        InvalidPlanState: If the plan is not active.
        EligibilityViolation: If the stay violates plan bounds.
    """
    arrival, departure = to_date(check_in), to_date(check_out)
    nights = nights_between(arrival, departure)

    if not plan.is_active:
        raise InvalidPlanState(plan.id, plan.status.value)

    context = (context or RateContext()).evolve(nights_in_stay=nights)
    charges = charges or StayCharges()
    resolver = resolver or RateResolver()

    violations = check_eligibility(plan, nights, context.advance_booking_days)
    if violations:
        logger.info(f"Stay {arrival}..{departure} not eligible for {plan.id}: {[v[0] for v in violations]}")
        raise EligibilityViolation([v[0] for v in violations], [v[1] for v in violations])

    occupancy: Dict[date, float] = {to_date(day): pct for day, pct in (occupancy_by_date or {}).items()}
    nightly: List[RateCalendarEntry] = []
    for offset in range(nights):
        night = add_days(arrival, offset)
        night_context = context
        if night in occupancy:
            night_context = context.evolve(occupancy_pct=occupancy[night])
        nightly.append(resolver.resolve_nightly_rate(plan, night, night_context))

    places = resolver.precision_for(plan.currency)
    subtotal = round_amount(sum((e.final_rate for e in nightly), ZERO), places)
    taxes = round_amount(subtotal * charges.tax_rate / HUNDRED, places)
    fees = round_amount(charges.fee_per_stay + charges.fee_per_night * nights, places)
    discount = round_amount(subtotal * charges.discount_rate / HUNDRED + charges.discount_amount, places)
    total = max(ZERO, subtotal + taxes + fees - discount)

    logger.info(f"Quoted {plan.id} {arrival}..{departure}: {nights} nights, total {total} {plan.currency}")

    return StayQuote(
        rate_plan_id=plan.id,
        currency=plan.currency,
        check_in=arrival,
        check_out=departure,
        nights=nights,
        subtotal=subtotal,
        taxes=taxes,
        fees=fees,
        discount=discount,
        total=round_amount(total, places),
        nightly=nightly,
    )


__all__ = [
    "StayCharges",
    "lead_time_days",
    "check_eligibility",
    "quote_stay",
]
