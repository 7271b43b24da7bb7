"""
rate_core/catalog.py

Rate plan catalog - the read-only snapshot of plans and automation settings
handed over by the persistence/API layer as JSON.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
import json
import logging

from pydantic import TypeAdapter, ValidationError

from rate_core.automation import RateAutomationSettings
from rate_core.errors import ConfigurationError, PlanNotFound
from rate_core.models import PricingStrategy, RatePlan, RatePlanStatus, RatePlanType

logger = logging.getLogger(__name__)

_plans_adapter = TypeAdapter(List[RatePlan])
_automation_adapter = TypeAdapter(List[RateAutomationSettings])


@dataclass
class RateFilters:
    """
    Plan list filters. Empty filters match everything.

    Attributes:
        search: Case-insensitive text matched against name and description
        statuses: Allowed statuses
        types: Allowed plan types
        property_id: Plan must apply to this property
        pricing_strategies: Allowed pricing strategies
    """

    search: Optional[str] = None
    statuses: List[RatePlanStatus] = field(default_factory=list)
    types: List[RatePlanType] = field(default_factory=list)
    property_id: Optional[str] = None
    pricing_strategies: List[PricingStrategy] = field(default_factory=list)

    def accepts(self, plan: RatePlan) -> bool:
        if self.search:
            needle = self.search.strip().lower()
            if needle not in plan.name.lower() and needle not in plan.description.lower():
                return False
        if self.statuses and plan.status not in self.statuses:
            return False
        if self.types and plan.type not in self.types:
            return False
        if self.property_id and self.property_id not in plan.property_ids:
            return False
        if self.pricing_strategies and plan.pricing_strategy not in self.pricing_strategies:
            return False
        return True


class RatePlanCatalog:
    """In-memory catalog of rate plans keyed by id, in load order."""

    def __init__(
        self,
        plans: Optional[Iterable[RatePlan]] = None,
        automation: Optional[Iterable[RateAutomationSettings]] = None,
    ):
        self._plans: Dict[str, RatePlan] = {}
        self._automation: Dict[str, RateAutomationSettings] = {}
        for plan in plans or []:
            self.add(plan)
        for settings in automation or []:
            self._automation[settings.rate_plan_id] = settings

    @classmethod
    def from_payload(cls, payload: Union[Dict[str, Any], List[Any]]) -> "RatePlanCatalog":
        """
        Build a catalog from decoded JSON.

        Accepts ``{"ratePlans": [...], "automationSettings": [...]}`` or a bare
        list of plans.

        Raises:
            ConfigurationError: If the payload does not describe valid plans.
        """
        if isinstance(payload, list):
            raw_plans, raw_automation = payload, []
        elif isinstance(payload, dict):
            raw_plans = payload.get("ratePlans", [])
            raw_automation = payload.get("automationSettings", [])
        else:
            raise ConfigurationError(f"Unsupported rate plan payload of type {type(payload).__name__}")

        try:
            plans = _plans_adapter.validate_python(raw_plans)
            automation = _automation_adapter.validate_python(raw_automation)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid rate plan configuration: {e}") from e

        return cls(plans, automation)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "RatePlanCatalog":
        """
        Load a catalog from a JSON file.

        Raises:
            ConfigurationError: If the file is missing, not JSON or invalid.
        """
        path = Path(path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read rate plans from {path}: {e}") from e

        catalog = cls.from_payload(payload)
        logger.info(f"Loaded {len(catalog)} rate plans from {path}")
        return catalog

    def add(self, plan: RatePlan) -> None:
        """
        Add a plan.

        Raises:
            ConfigurationError: If the plan id already exists.
        """
        if plan.id in self._plans:
            raise ConfigurationError(f"Duplicate rate plan id {plan.id}")
        self._plans[plan.id] = plan

    def get(self, plan_id: str) -> RatePlan:
        """
        Get a plan by ID.

        Raises:
            PlanNotFound: If no plan has this id.
        """
        try:
            return self._plans[plan_id]
        except KeyError:
            raise PlanNotFound(plan_id) from None

    def all(self) -> List[RatePlan]:
        return list(self._plans.values())

    def by_property(self, property_id: str) -> List[RatePlan]:
        return [p for p in self._plans.values() if property_id in p.property_ids]

    def by_status(self, status: RatePlanStatus) -> List[RatePlan]:
        return [p for p in self._plans.values() if p.status == status]

    def filter(self, filters: RateFilters) -> List[RatePlan]:
        return [p for p in self._plans.values() if filters.accepts(p)]

    def automation_for(self, plan_id: str) -> Optional[RateAutomationSettings]:
        return self._automation.get(plan_id)

    def automation_settings(self) -> List[RateAutomationSettings]:
        return list(self._automation.values())

    def __len__(self) -> int:
        return len(self._plans)

    def __contains__(self, plan_id: object) -> bool:
        return plan_id in self._plans


__all__ = [
    "RateFilters",
    "RatePlanCatalog",
]
