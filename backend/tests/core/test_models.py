"""
Tests for rate_core.models
"""
import pytest
from decimal import Decimal
from pydantic import ValidationError

from rate_core.models import (
    AdvanceBookingRule,
    DateRangeRule,
    DayOfWeekRule,
    ModifierKind,
    RateContext,
    RateModifier,
    RatePlanStatus,
)


class TestRatePlanValidation:
    def test_valid_plan(self, make_plan, summer_rule, weekend_rule):
        plan = make_plan(rules=[summer_rule, weekend_rule], minimumRate=100, maximumRate=300)
        assert plan.status == RatePlanStatus.ACTIVE
        assert plan.is_active
        assert plan.base_rate == Decimal("150")

    def test_currency_upper_cased(self, make_plan):
        assert make_plan(currency="eur").currency == "EUR"

    @pytest.mark.parametrize("currency", ["US", "USDX", "U5D"])
    def test_invalid_currency(self, make_plan, currency):
        with pytest.raises(ValidationError):
            make_plan(currency=currency)

    def test_negative_base_rate(self, make_plan):
        with pytest.raises(ValidationError):
            make_plan(baseRate=-1)

    @pytest.mark.parametrize("minimum,maximum", [(300, 100), (200, 200)])
    def test_minimum_rate_must_be_below_maximum(self, make_plan, minimum, maximum):
        with pytest.raises(ValidationError):
            make_plan(minimumRate=minimum, maximumRate=maximum)

    def test_minimum_stay_above_maximum(self, make_plan):
        with pytest.raises(ValidationError):
            make_plan(minimumStay=5, maximumStay=3)

    def test_equal_stay_bounds(self, make_plan):
        plan = make_plan(minimumStay=3, maximumStay=3)
        assert plan.minimum_stay == plan.maximum_stay

    def test_fixed_strategy_rejects_dynamic_pricing(self, make_plan):
        with pytest.raises(ValidationError):
            make_plan(pricingStrategy="fixed", allowDynamicPricing=True)

    def test_weekend_multiplier_must_be_positive(self, make_plan):
        with pytest.raises(ValidationError):
            make_plan(allowWeekendPricing=True, weekendMultiplier=0)

    def test_plan_is_frozen(self, make_plan):
        plan = make_plan()
        with pytest.raises(ValidationError):
            plan.base_rate = Decimal("1")

    def test_rule_lookup(self, make_plan, summer_rule):
        plan = make_plan(rules=[summer_rule])
        assert plan.rule("rule-1").name == "rule-1"
        assert plan.rule("missing") is None


class TestPricingRuleUnion:
    def test_variants_by_rule_type(self, make_plan, make_rule):
        plan = make_plan(rules=[
            make_rule("a", "date-range", dateRange={"start": "2025-06-15", "end": "2025-08-31"}),
            make_rule("b", "day-of-week", daysOfWeek=[5, 6]),
            make_rule("c", "advance-booking", advanceBookingDays={"min": 30}),
        ])
        assert [type(r) for r in plan.rules] == [DateRangeRule, DayOfWeekRule, AdvanceBookingRule]
        assert plan.rules[2].advance_booking_days.max is None

    def test_unknown_rule_type(self, make_plan, make_rule):
        with pytest.raises(ValidationError):
            make_plan(rules=[make_rule("a", "season", dateRange={"start": "2025-06-15", "end": "2025-08-31"})])

    def test_missing_condition(self, make_plan, make_rule):
        with pytest.raises(ValidationError):
            make_plan(rules=[make_rule("a", "day-of-week")])

    def test_foreign_condition_rejected(self, make_plan, make_rule):
        """A day-of-week rule cannot carry a date range"""
        with pytest.raises(ValidationError):
            make_plan(rules=[make_rule(
                "a", "day-of-week", daysOfWeek=[5], dateRange={"start": "2025-06-15", "end": "2025-08-31"},
            )])

    @pytest.mark.parametrize("days", [[7], [-1], [0, 8]])
    def test_days_of_week_range(self, make_plan, make_rule, days):
        with pytest.raises(ValidationError):
            make_plan(rules=[make_rule("a", "day-of-week", daysOfWeek=days)])

    def test_occupancy_out_of_range(self, make_plan, make_rule):
        with pytest.raises(ValidationError):
            make_plan(rules=[make_rule("a", "occupancy-level", occupancyRange={"min": 50, "max": 120})])

    def test_camel_case_round_trip(self, make_plan, weekend_rule):
        plan = make_plan(rules=[weekend_rule])
        dumped = plan.model_dump(by_alias=True, mode="json")
        assert dumped["baseRate"] == "150"
        assert dumped["rules"][0]["ruleType"] == "day-of-week"
        assert dumped["rules"][0]["daysOfWeek"] == [5, 6]
        assert dumped["rules"][0]["modifiers"][0]["type"] == "percentage"


class TestRateModifier:
    def test_parse_alias(self):
        modifier = RateModifier.model_validate({"id": "m", "name": "M", "type": "fixed-amount", "value": -50})
        assert modifier.kind == ModifierKind.FIXED_AMOUNT
        assert modifier.apply_to_base_rate is True

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            RateModifier.model_validate({"id": "m", "name": "M", "type": "multiplier", "value": 2})

    def test_percentage_below_minus_100(self):
        with pytest.raises(ValidationError):
            RateModifier.model_validate({"id": "m", "name": "M", "type": "percentage", "value": -101})

    def test_fixed_amount_may_exceed_minus_100(self):
        modifier = RateModifier.model_validate({"id": "m", "name": "M", "type": "fixed-amount", "value": -150})
        assert modifier.value == Decimal("-150")

    @pytest.mark.parametrize("value", ["NaN", "Infinity"])
    def test_non_finite_value(self, value):
        with pytest.raises(ValidationError):
            RateModifier.model_validate({"id": "m", "name": "M", "type": "override", "value": value})


class TestRateContext:
    def test_defaults(self):
        ctx = RateContext()
        assert ctx.occupancy_pct == 0.0
        assert ctx.nights_in_stay == 1
        assert ctx.advance_booking_days == 0

    def test_evolve_returns_copy(self):
        ctx = RateContext(occupancy_pct=50)
        changed = ctx.evolve(nights_in_stay=4)
        assert changed.nights_in_stay == 4
        assert changed.occupancy_pct == 50
        assert ctx.nights_in_stay == 1
