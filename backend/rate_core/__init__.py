"""
rate_core - rate resolution engine

Pure, synchronous pricing components:
- models: rate plan / pricing rule / modifier data model
- modifiers: modifier application
- matcher: pricing rule condition matching
- resolver: nightly rate resolution
- aggregator: stay quotes
- automation: automation adjustment layer
- calendar: rate calendar and summary statistics
- catalog: rate plan catalog and filters
- inventory / event_bus: live inventory feed

Usage:
    >>> from rate_core import RatePlanCatalog, RateResolver, RateContext, quote_stay
    >>> catalog = RatePlanCatalog.load("rate_plans.json")
    >>> quote = quote_stay(catalog.get("rate-1"), "2025-06-20", "2025-06-23", RateContext(advance_booking_days=120))
"""

from rate_core.errors import (
    RateEngineError,
    InvalidPlanState,
    InvalidDate,
    InvalidDateRange,
    EligibilityViolation,
    ConfigurationError,
    PlanNotFound,
)

from rate_core.models import (
    ModifierKind,
    RuleType,
    RatePlanType,
    RatePlanStatus,
    PricingStrategy,
    RateModifier,
    DateRangeRule,
    DayOfWeekRule,
    OccupancyRule,
    AdvanceBookingRule,
    MinimumStayRule,
    MaximumStayRule,
    PricingRule,
    RatePlan,
    RateContext,
    RateCalendarEntry,
    StayQuote,
)

from rate_core.modifiers import apply_modifier
from rate_core.matcher import matches, sunday_weekday
from rate_core.resolver import WeekendPolicy, RateAdjuster, RateResolver
from rate_core.aggregator import StayCharges, lead_time_days, quote_stay
from rate_core.automation import RateAutomationSettings, AutomationAdjuster, classify_demand
from rate_core.calendar import CalendarSummary, build_rate_calendar, summarize_calendar
from rate_core.catalog import RateFilters, RatePlanCatalog
from rate_core.event_bus import Event, EventBus, PublishResult
from rate_core.inventory import InventoryLedger, InventorySnapshot


__all__ = [
    "RateEngineError",
    "InvalidPlanState",
    "InvalidDate",
    "InvalidDateRange",
    "EligibilityViolation",
    "ConfigurationError",
    "PlanNotFound",
    "ModifierKind",
    "RuleType",
    "RatePlanType",
    "RatePlanStatus",
    "PricingStrategy",
    "RateModifier",
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
    "apply_modifier",
    "matches",
    "sunday_weekday",
    "WeekendPolicy",
    "RateAdjuster",
    "RateResolver",
    "StayCharges",
    "lead_time_days",
    "quote_stay",
    "RateAutomationSettings",
    "AutomationAdjuster",
    "classify_demand",
    "CalendarSummary",
    "build_rate_calendar",
    "summarize_calendar",
    "RateFilters",
    "RatePlanCatalog",
    "Event",
    "EventBus",
    "PublishResult",
    "InventoryLedger",
    "InventorySnapshot",
]
