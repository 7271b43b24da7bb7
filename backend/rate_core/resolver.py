"""
rate_core/resolver.py

Rate resolver - turns a rate plan, a night and an evaluation context into a
RateCalendarEntry.

Resolution order:
1. Collect enabled rules whose condition matches
2. Sort by priority, highest first (ties keep declaration order)
3. Start from the plan's base rate
4. Apply each rule's modifiers in list order
5. Apply the plan's weekend multiplier on Friday/Saturday, per WeekendPolicy
6. Clamp to the plan's minimum/maximum rate
   - registered adjusters (automation layer) run here, re-clamped afterwards
7. Round to the currency's minor unit

The resolver is pure: plans and contexts are never mutated and identical
inputs produce identical entries, so dates can be resolved in any order.
"""
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol
import logging

from rate_core.dates import DateLike, iter_dates, to_date
from rate_core.errors import ConfigurationError, InvalidDateRange, InvalidPlanState
from rate_core.matcher import matches, sunday_weekday
from rate_core.models import (
    RateCalendarEntry,
    RateContext,
    RateModifier,
    RatePlan,
    RuleType,
)
from rate_core.modifiers import apply_modifier, is_supported

logger = logging.getLogger(__name__)

# Friday, Saturday (0=Sunday)
WEEKEND_DAYS = frozenset({5, 6})

DEFAULT_PRECISION = 2

# ISO 4217 minor units that differ from 2
CURRENCY_PRECISIONS: Dict[str, int] = {
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    "CLP": 0,
    "ISK": 0,
    "BHD": 3,
    "JOD": 3,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
}


class WeekendPolicy(str, Enum):
    """How the plan-level weekend multiplier interacts with day-of-week rules."""

    SKIP_IF_DAY_RULE = "skip-if-day-rule"
    ALWAYS = "always"
    NEVER = "never"


class RateAdjuster(Protocol):
    """Post-clamp adjustment layer (e.g. rate automation)."""

    def adjust(self, plan: RatePlan, on_date: date, rate: Decimal, context: RateContext) -> Decimal:
        ...


def clamp(value: Decimal, minimum: Optional[Decimal], maximum: Optional[Decimal]) -> Decimal:
    """Clamp value to optional bounds."""
    if minimum is not None and value < minimum:
        value = minimum
    if maximum is not None and value > maximum:
        value = maximum
    return value


def round_amount(value: Decimal, precision: int) -> Decimal:
    """Round half-up to ``precision`` decimal places."""
    return value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


class RateResolver:
    """
    Nightly rate resolver.

    Example:
        >>> resolver = RateResolver()
        >>> entry = resolver.resolve_nightly_rate(plan, "2025-06-20", RateContext(occupancy_pct=72))
        >>> entry.final_rate
        Decimal('202.50')
    """

    def __init__(
        self,
        weekend_policy: WeekendPolicy = WeekendPolicy.SKIP_IF_DAY_RULE,
        precision: Optional[int] = None,
        currency_precisions: Optional[Dict[str, int]] = None,
        default_precision: int = DEFAULT_PRECISION,
        adjusters: Optional[Iterable[RateAdjuster]] = None,
    ):
        """
        Args:
            weekend_policy: Weekend multiplier policy
            precision: Fixed rounding precision, overrides the currency table
            currency_precisions: Currency code -> decimal places
            default_precision: Decimal places for currencies not in the table
            adjusters: Adjustment layers run after the clamp
        """
        self.weekend_policy = WeekendPolicy(weekend_policy)
        self.precision = precision
        self.currency_precisions = dict(CURRENCY_PRECISIONS if currency_precisions is None else currency_precisions)
        self.default_precision = default_precision
        self._adjusters: List[RateAdjuster] = list(adjusters or [])

    def add_adjuster(self, adjuster: RateAdjuster) -> None:
        """Register an adjustment layer."""
        self._adjusters.append(adjuster)

    def precision_for(self, currency: str, precision: Optional[int] = None) -> int:
        """Decimal places used to round amounts in ``currency``."""
        if precision is not None:
            return precision
        if self.precision is not None:
            return self.precision
        return self.currency_precisions.get(currency.upper(), self.default_precision)

    def _weekend_applies(self, plan: RatePlan, on_date: date, matched_types: List[str]) -> bool:
        if not plan.allow_weekend_pricing or self.weekend_policy == WeekendPolicy.NEVER:
            return False
        if sunday_weekday(on_date) not in WEEKEND_DAYS:
            return False
        if self.weekend_policy == WeekendPolicy.SKIP_IF_DAY_RULE:
            # A matched day-of-week rule always covers the night's weekday
            return RuleType.DAY_OF_WEEK.value not in matched_types
        return True

    def resolve_nightly_rate(
        self,
        plan: RatePlan,
        on_date: DateLike,
        context: Optional[RateContext] = None,
        precision: Optional[int] = None,
    ) -> RateCalendarEntry:
        """
        Resolve the nightly rate of a plan for one date.

        Args:
            plan: Active rate plan
            on_date: Night being priced (date or ISO string)
            context: Evaluation context, defaults to an empty context
            precision: Rounding precision for this call

        Returns:
            RateCalendarEntry with the final rate, applied modifiers and rule IDs.

        Raises:
            InvalidPlanState: If the plan is not active.
            InvalidDate: If the date is malformed.
            ConfigurationError: If a matched rule carries an unsupported modifier.
        """
        if not plan.is_active:
            raise InvalidPlanState(plan.id, plan.status.value)

        night = to_date(on_date)
        context = context or RateContext()
        places = self.precision_for(plan.currency, precision)

        matched = [rule for rule in plan.rules if matches(rule, night, context)]
        ordered = sorted(matched, key=lambda r: r.priority, reverse=True)

        running = plan.base_rate
        applied: List[RateModifier] = []
        for rule in ordered:
            for modifier in rule.modifiers:
                if not is_supported(modifier):
                    raise ConfigurationError(
                        f"Rule {rule.id} has modifier {modifier.id} of unsupported kind {modifier.kind!r}"
                    )
                running = apply_modifier(modifier, running, plan.base_rate)
                applied.append(modifier)

        weekend_applied = self._weekend_applies(plan, night, [r.rule_type for r in ordered])
        if weekend_applied:
            running = running * (plan.weekend_multiplier or Decimal("1"))

        pre_clamp = running
        running = clamp(running, plan.minimum_rate, plan.maximum_rate)

        for adjuster in self._adjusters:
            running = adjuster.adjust(plan, night, running, context)
            running = clamp(running, plan.minimum_rate, plan.maximum_rate)

        final_rate = round_amount(running, places)

        logger.debug(
            f"Resolved {plan.id} on {night.isoformat()}: {plan.base_rate} -> {final_rate} "
            f"(rules={[r.id for r in ordered]}, weekend={weekend_applied})"
        )

        return RateCalendarEntry(
            rate_plan_id=plan.id,
            date=night,
            base_rate=plan.base_rate,
            pre_clamp_rate=round_amount(pre_clamp, places),
            final_rate=final_rate,
            modifiers=applied,
            applied_rules=[r.id for r in ordered],
            weekend_multiplier_applied=weekend_applied,
            occupancy=context.occupancy_pct,
            available_rooms=context.available_rooms,
            booked_rooms=context.booked_rooms,
        )

    def resolve_range(
        self,
        plan: RatePlan,
        start: DateLike,
        end: DateLike,
        context: Optional[RateContext] = None,
    ) -> List[RateCalendarEntry]:
        """
        Resolve every date of an inclusive range with the same context.

        Raises:
            InvalidDateRange: If end is before start.
        """
        first, last = to_date(start), to_date(end)
        if last < first:
            raise InvalidDateRange(f"Range end {last.isoformat()} is before start {first.isoformat()}")
        return [self.resolve_nightly_rate(plan, night, context) for night in iter_dates(first, last)]


__all__ = [
    "WEEKEND_DAYS",
    "DEFAULT_PRECISION",
    "CURRENCY_PRECISIONS",
    "WeekendPolicy",
    "RateAdjuster",
    "clamp",
    "round_amount",
    "RateResolver",
]
