"""
Pytest configuration and shared fixtures
"""
import copy
import pytest
from fastapi.testclient import TestClient

from rate_api.config import DEFAULT_RATE_PLANS_FILE, Settings
from rate_api.main import create_app
from rate_core.catalog import RatePlanCatalog
from rate_core.models import RatePlan


BASE_PLAN = {
    "id": "rate-test",
    "name": "Test Rate",
    "description": "Plan used by the unit tests",
    "type": "standard",
    "status": "active",
    "propertyIds": ["prop-1"],
    "baseRate": 150,
    "currency": "USD",
    "pricingStrategy": "dynamic",
    "rules": [],
    "allowWeekendPricing": False,
    "allowSeasonalPricing": True,
    "allowDynamicPricing": True,
    "automationEnabled": False,
}


def modifier(mod_id="mod-1", kind="percentage", value=10, apply_to_base_rate=True, name=None):
    return {
        "id": mod_id,
        "name": name or mod_id,
        "type": kind,
        "value": value,
        "applyToBaseRate": apply_to_base_rate,
    }


def rule(rule_id, rule_type, priority=5, modifiers=None, enabled=True, **condition):
    data = {
        "id": rule_id,
        "ratePlanId": BASE_PLAN["id"],
        "name": rule_id,
        "ruleType": rule_type,
        "enabled": enabled,
        "priority": priority,
        "modifiers": modifiers or [],
    }
    data.update(condition)
    return data


# ============== Plan fixtures ==============

@pytest.fixture
def make_modifier():
    return modifier


@pytest.fixture
def make_rule():
    return rule


@pytest.fixture
def make_plan():
    """Factory building a RatePlan from camelCase overrides"""
    def _make(**overrides) -> RatePlan:
        data = copy.deepcopy(BASE_PLAN)
        data.update(overrides)
        return RatePlan.model_validate(data)
    return _make


@pytest.fixture
def summer_rule():
    """Summer Peak Season: +35% from 2025-06-15 to 2025-08-31"""
    return rule(
        "rule-1",
        "date-range",
        priority=9,
        dateRange={"start": "2025-06-15", "end": "2025-08-31"},
        modifiers=[modifier("mod-4", value=35, name="High Season Premium")],
    )


@pytest.fixture
def weekend_rule():
    """Weekend Premium: +20% on Friday and Saturday"""
    return rule(
        "rule-2",
        "day-of-week",
        priority=7,
        daysOfWeek=[5, 6],
        modifiers=[modifier("mod-1", value=20, name="Weekend Surcharge")],
    )


@pytest.fixture
def catalog():
    """Catalog loaded from the bundled rate plan snapshot"""
    return RatePlanCatalog.load(DEFAULT_RATE_PLANS_FILE)


# ============== API fixtures ==============

@pytest.fixture
def client():
    """Test client running the app lifespan"""
    app = create_app(Settings(RATE_PLANS_FILE=str(DEFAULT_RATE_PLANS_FILE)))
    with TestClient(app) as test_client:
        yield test_client
