"""
rate_core/calendar.py

Rate calendar - one resolved entry per date of a range, with occupancy and
room counts taken from the inventory ledger when one is supplied.
"""
from decimal import Decimal
from typing import List, Optional
import logging

from rate_core.automation import classify_demand
from rate_core.dates import DateLike, add_days, iter_dates, to_date
from rate_core.errors import InvalidDateRange
from rate_core.inventory import InventoryLedger
from rate_core.models import CamelModel, RateCalendarEntry, RateContext, RatePlan
from rate_core.resolver import DEFAULT_PRECISION, RateResolver, round_amount

logger = logging.getLogger(__name__)


class CalendarSummary(CamelModel):
    nights: int = 0
    average_rate: Decimal = Decimal("0")
    minimum_rate: Decimal = Decimal("0")
    maximum_rate: Decimal = Decimal("0")
    average_occupancy: float = 0.0


def build_rate_calendar(
    plan: RatePlan,
    start: DateLike,
    end: DateLike,
    resolver: Optional[RateResolver] = None,
    context: Optional[RateContext] = None,
    ledger: Optional[InventoryLedger] = None,
    property_id: Optional[str] = None,
    demand_window: Optional[int] = None,
    demand_high: float = 80,
    demand_low: float = 40,
) -> List[RateCalendarEntry]:
    """
    Resolve a plan for every date from start to end inclusive.

    Args:
        plan: Active rate plan
        start: First date
        end: Last date
        resolver: Resolver to use, a default one if omitted
        context: Base context; per-date inventory figures override it
        ledger: Inventory ledger providing occupancy and room counts
        property_id: Property whose inventory is used
        demand_window: Look-ahead days used to classify demand from the ledger
        demand_high: Average occupancy classed as high demand
        demand_low: Average occupancy classed as low demand

    Raises:
        InvalidDateRange: If end is before start.
    """
    first, last = to_date(start), to_date(end)
    if last < first:
        raise InvalidDateRange(f"Calendar end {last.isoformat()} is before start {first.isoformat()}")

    resolver = resolver or RateResolver()
    context = context or RateContext()
    use_ledger = ledger is not None and property_id is not None

    entries = []
    for night in iter_dates(first, last):
        night_context = context
        if use_ledger:
            snapshot = ledger.snapshot_for(property_id, night)
            if snapshot is not None:
                night_context = night_context.evolve(
                    occupancy_pct=snapshot.occupancy_pct,
                    available_rooms=snapshot.available_rooms,
                    booked_rooms=snapshot.booked_rooms,
                )
            if demand_window:
                window = iter_dates(night, add_days(night, demand_window), inclusive=False)
                night_context = night_context.evolve(
                    demand_level=classify_demand(
                        ledger.occupancies(property_id, window), high=demand_high, low=demand_low
                    )
                )
        entries.append(resolver.resolve_nightly_rate(plan, night, night_context))

    logger.info(f"Built rate calendar for {plan.id}: {first}..{last} ({len(entries)} days)")
    return entries


def summarize_calendar(entries: List[RateCalendarEntry], precision: int = DEFAULT_PRECISION) -> CalendarSummary:
    """Average / minimum / maximum rate and average occupancy of a calendar."""
    if not entries:
        return CalendarSummary()
    rates = [e.final_rate for e in entries]
    return CalendarSummary(
        nights=len(entries),
        average_rate=round_amount(sum(rates, Decimal("0")) / len(rates), precision),
        minimum_rate=min(rates),
        maximum_rate=max(rates),
        average_occupancy=round(sum(e.occupancy for e in entries) / len(entries), 2),
    )


__all__ = [
    "CalendarSummary",
    "build_rate_calendar",
    "summarize_calendar",
]
