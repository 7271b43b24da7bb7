"""
rate_core/errors.py

Rate engine exceptions. All failures are local and synchronous; callers decide
whether to surface them or fall back to the plan's base rate.
"""
from typing import List, Optional


class RateEngineError(Exception):
    """Base class for rate engine errors."""

    pass


class InvalidPlanState(RateEngineError):
    """Rate plan is not active."""

    def __init__(self, plan_id: str, status: str):
        self.plan_id = plan_id
        self.status = status
        super().__init__(f"Rate plan {plan_id} is {status}, only active plans can be resolved")


class InvalidDate(RateEngineError):
    """Date is malformed or outside the representable calendar."""

    pass


class InvalidDateRange(RateEngineError):
    """Check-out does not fall after check-in."""

    pass


class EligibilityViolation(RateEngineError):
    """
    Stay violates the plan's stay-length or lead-time bounds.

    Attributes:
        violations: Constraint names that failed, e.g. "minimum_stay".
        messages: Human readable description per violation.
    """

    def __init__(self, violations: List[str], messages: Optional[List[str]] = None):
        self.violations = list(violations)
        self.messages = list(messages or violations)
        super().__init__("; ".join(self.messages))


class ConfigurationError(RateEngineError):
    """Malformed rate plan, rule or modifier configuration."""

    pass


class PlanNotFound(RateEngineError):
    """No rate plan with the given id."""

    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        super().__init__(f"Rate plan {plan_id} not found")


__all__ = [
    "RateEngineError",
    "InvalidPlanState",
    "InvalidDate",
    "InvalidDateRange",
    "EligibilityViolation",
    "ConfigurationError",
    "PlanNotFound",
]
