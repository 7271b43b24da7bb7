"""
Tests for rate_core.aggregator
"""
import pytest
from datetime import date
from decimal import Decimal

from rate_core.aggregator import StayCharges, check_eligibility, lead_time_days, quote_stay
from rate_core.errors import EligibilityViolation, InvalidDate, InvalidDateRange, InvalidPlanState
from rate_core.models import RateContext


class TestQuoteStay:
    def test_summer_peak_three_nights(self, make_plan, summer_rule):
        """3 x 202.50 under Summer Peak Season"""
        plan = make_plan(rules=[summer_rule])
        quote = quote_stay(plan, "2025-06-20", "2025-06-23")

        assert quote.nights == 3
        assert quote.subtotal == Decimal("607.50")
        assert quote.total == Decimal("607.50")
        assert [e.final_rate for e in quote.nightly] == [Decimal("202.50")] * 3

    def test_checkout_night_excluded(self, make_plan):
        quote = quote_stay(make_plan(), date(2025, 6, 20), date(2025, 6, 23))
        assert [e.date for e in quote.nightly] == [date(2025, 6, 20), date(2025, 6, 21), date(2025, 6, 22)]
        assert quote.check_in == date(2025, 6, 20)
        assert quote.check_out == date(2025, 6, 23)

    def test_charges(self, make_plan, summer_rule):
        plan = make_plan(rules=[summer_rule])
        charges = StayCharges(tax_rate=10, fee_per_stay=25, fee_per_night=5, discount_rate=5)

        quote = quote_stay(plan, "2025-06-20", "2025-06-23", charges=charges)

        assert quote.taxes == Decimal("60.75")
        assert quote.fees == Decimal("40.00")
        assert quote.discount == Decimal("30.38")
        assert quote.total == Decimal("677.87")

    def test_total_never_negative(self, make_plan):
        charges = StayCharges(discount_amount=10000)
        quote = quote_stay(make_plan(), "2025-06-20", "2025-06-22", charges=charges)
        assert quote.subtotal == Decimal("300.00")
        assert quote.total == Decimal("0.00")

    def test_nights_in_stay_drives_stay_rules(self, make_plan, make_rule, make_modifier):
        """Weekly stay discount only applies once the stay reaches 7 nights"""
        weekly = make_rule("r1", "minimum-stay", minimumStay=7, modifiers=[make_modifier(value=-10)])
        plan = make_plan(rules=[weekly])

        short = quote_stay(plan, "2025-07-01", "2025-07-04")
        week = quote_stay(plan, "2025-07-01", "2025-07-08")

        assert short.subtotal == Decimal("450.00")
        assert week.subtotal == Decimal("945.00")

    def test_occupancy_by_date(self, make_plan, make_rule, make_modifier):
        busy = make_rule("r1", "occupancy-level", occupancyRange={"min": 70, "max": 100},
                         modifiers=[make_modifier(value=10)])
        plan = make_plan(rules=[busy])

        quote = quote_stay(
            plan, "2025-06-20", "2025-06-23",
            context=RateContext(occupancy_pct=40),
            occupancy_by_date={date(2025, 6, 21): 80},
        )

        assert [e.final_rate for e in quote.nightly] == [Decimal("150.00"), Decimal("165.00"), Decimal("150.00")]
        assert quote.subtotal == Decimal("465.00")

    def test_occupancy_by_iso_date(self, make_plan, make_rule, make_modifier):
        busy = make_rule("r1", "occupancy-level", occupancyRange={"min": 70, "max": 100},
                         modifiers=[make_modifier(value=10)])
        plan = make_plan(rules=[busy])

        quote = quote_stay(plan, "2025-06-20", "2025-06-22", occupancy_by_date={"2025-06-21": 80})

        assert [e.final_rate for e in quote.nightly] == [Decimal("150.00"), Decimal("165.00")]

    def test_context_not_mutated(self, make_plan):
        ctx = RateContext(occupancy_pct=55, nights_in_stay=1)
        quote_stay(make_plan(), "2025-06-20", "2025-06-23", context=ctx)
        assert ctx.nights_in_stay == 1


class TestEligibility:
    def test_below_minimum_stay(self, make_plan):
        plan = make_plan(minimumStay=2)
        with pytest.raises(EligibilityViolation) as exc_info:
            quote_stay(plan, "2025-06-20", "2025-06-21")
        assert exc_info.value.violations == ["minimum_stay"]

    def test_above_maximum_stay(self, make_plan):
        plan = make_plan(maximumStay=3)
        with pytest.raises(EligibilityViolation) as exc_info:
            quote_stay(plan, "2025-06-20", "2025-06-25")
        assert exc_info.value.violations == ["maximum_stay"]

    def test_lead_time_too_short(self, make_plan):
        plan = make_plan(advanceBookingDays=30)
        with pytest.raises(EligibilityViolation) as exc_info:
            quote_stay(plan, "2025-06-20", "2025-06-22", context=RateContext(advance_booking_days=10))
        assert exc_info.value.violations == ["advance_booking_days"]

    def test_lead_time_satisfied(self, make_plan):
        plan = make_plan(advanceBookingDays=30)
        quote = quote_stay(plan, "2025-06-20", "2025-06-22", context=RateContext(advance_booking_days=30))
        assert quote.nights == 2

    def test_all_violations_enumerated(self, make_plan):
        plan = make_plan(minimumStay=2, advanceBookingDays=30)
        violations = check_eligibility(plan, nights=1, advance_booking_days=5)
        assert [name for name, _ in violations] == ["minimum_stay", "advance_booking_days"]

    def test_eligible_stay(self, make_plan):
        plan = make_plan(minimumStay=2, maximumStay=7)
        assert check_eligibility(plan, nights=4, advance_booking_days=0) == []

    def test_violation_message(self, make_plan):
        plan = make_plan(minimumStay=2)
        with pytest.raises(EligibilityViolation) as exc_info:
            quote_stay(plan, "2025-06-20", "2025-06-21")
        assert "minimum of 2" in str(exc_info.value)


class TestQuoteErrors:
    def test_same_day_checkout(self, make_plan):
        with pytest.raises(InvalidDateRange):
            quote_stay(make_plan(), "2025-06-20", "2025-06-20")

    def test_checkout_before_checkin(self, make_plan):
        with pytest.raises(InvalidDateRange):
            quote_stay(make_plan(), "2025-06-23", "2025-06-20")

    def test_malformed_date(self, make_plan):
        with pytest.raises(InvalidDate):
            quote_stay(make_plan(), "2025-06-31", "2025-07-02")

    def test_malformed_occupancy_date(self, make_plan):
        with pytest.raises(InvalidDate):
            quote_stay(make_plan(), "2025-06-20", "2025-06-22", occupancy_by_date={"2025-06-32": 80})

    def test_inactive_plan(self, make_plan):
        with pytest.raises(InvalidPlanState):
            quote_stay(make_plan(status="inactive"), "2025-06-20", "2025-06-22")


class TestLeadTime:
    def test_days_until_check_in(self):
        assert lead_time_days("2025-06-10", "2025-06-20") == 10

    def test_same_day(self):
        assert lead_time_days(date(2025, 6, 20), date(2025, 6, 20)) == 0


class TestStayCharges:
    def test_values_coerced_to_decimal(self):
        charges = StayCharges(tax_rate=12.5, fee_per_night="4.99")
        assert charges.tax_rate == Decimal("12.5")
        assert charges.fee_per_night == Decimal("4.99")
        assert charges.discount_amount == Decimal("0")
