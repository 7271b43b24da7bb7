"""
rate_core/matcher.py

Rule matcher - decides whether a pricing rule's condition holds for a date and
evaluation context.

Matching is fail-closed: a disabled rule, an unknown rule type or a missing /
malformed condition payload never matches. The matcher never raises on model
input.
"""
from datetime import date
from numbers import Real
from typing import Any, Callable, Dict, Optional
import logging

from rate_core.models import RateContext, RuleType

logger = logging.getLogger(__name__)


def sunday_weekday(d: date) -> int:
    """Weekday of ``d`` with 0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _match_date_range(rule: Any, on_date: date, context: RateContext) -> Optional[bool]:
    window = getattr(rule, "date_range", None)
    start = getattr(window, "start", None)
    end = getattr(window, "end", None)
    if not isinstance(start, date) or not isinstance(end, date):
        return None
    return start <= on_date <= end


def _match_day_of_week(rule: Any, on_date: date, context: RateContext) -> Optional[bool]:
    days = getattr(rule, "days_of_week", None)
    if not isinstance(days, (list, tuple, set, frozenset)):
        return None
    return sunday_weekday(on_date) in days


def _match_occupancy(rule: Any, on_date: date, context: RateContext) -> Optional[bool]:
    window = getattr(rule, "occupancy_range", None)
    low = getattr(window, "min", None)
    high = getattr(window, "max", None)
    if not _is_number(low) or not _is_number(high):
        return None
    return low <= context.occupancy_pct <= high


def _match_advance_booking(rule: Any, on_date: date, context: RateContext) -> Optional[bool]:
    window = getattr(rule, "advance_booking_days", None)
    if window is None:
        return None
    low = getattr(window, "min", None)
    high = getattr(window, "max", None)
    if low is None:
        low = 0
    if not _is_number(low) or (high is not None and not _is_number(high)):
        return None
    if context.advance_booking_days < low:
        return False
    return high is None or context.advance_booking_days <= high


def _match_minimum_stay(rule: Any, on_date: date, context: RateContext) -> Optional[bool]:
    nights = getattr(rule, "minimum_stay", None)
    if not _is_number(nights):
        return None
    return context.nights_in_stay >= nights


def _match_maximum_stay(rule: Any, on_date: date, context: RateContext) -> Optional[bool]:
    nights = getattr(rule, "maximum_stay", None)
    if not _is_number(nights):
        return None
    return context.nights_in_stay <= nights


# A condition check returns None when the payload is unusable
CONDITION_MATCHERS: Dict[str, Callable[[Any, date, RateContext], Optional[bool]]] = {
    RuleType.DATE_RANGE.value: _match_date_range,
    RuleType.DAY_OF_WEEK.value: _match_day_of_week,
    RuleType.OCCUPANCY_LEVEL.value: _match_occupancy,
    RuleType.ADVANCE_BOOKING.value: _match_advance_booking,
    RuleType.MINIMUM_STAY.value: _match_minimum_stay,
    RuleType.MAXIMUM_STAY.value: _match_maximum_stay,
}


def matches(rule: Any, on_date: date, context: RateContext) -> bool:
    """
    Check whether a pricing rule applies.

    Args:
        rule: Pricing rule (any variant)
        on_date: Night being priced
        context: Evaluation context

    Returns:
        True if the rule is enabled and its condition holds.
    """
    if not getattr(rule, "enabled", False):
        return False

    rule_type = getattr(rule, "rule_type", None)
    if isinstance(rule_type, RuleType):
        rule_type = rule_type.value

    check = CONDITION_MATCHERS.get(rule_type)
    if check is None:
        logger.warning(f"Rule {getattr(rule, 'id', '?')} has unsupported type {rule_type!r}, skipping")
        return False

    result = check(rule, on_date, context)
    if result is None:
        logger.warning(f"Rule {getattr(rule, 'id', '?')} has a malformed {rule_type} condition, skipping")
        return False
    return result


__all__ = [
    "sunday_weekday",
    "CONDITION_MATCHERS",
    "matches",
]
