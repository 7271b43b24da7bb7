"""
Rate plan routes - plan lookup, nightly rates, quotes and the rate calendar
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi import status as http_status
from rate_api.config import Settings
from rate_api.dependencies import get_catalog, get_ledger, get_resolver, get_settings, http_error
from rate_api.schemas import NightlyRateRequest, QuoteRequest, RateCalendarResponse
from rate_core.aggregator import quote_stay
from rate_core.calendar import build_rate_calendar, summarize_calendar
from rate_core.catalog import RateFilters, RatePlanCatalog
from rate_core.errors import RateEngineError
from rate_core.inventory import InventoryLedger
from rate_core.models import (
    PricingStrategy,
    RateCalendarEntry,
    RateContext,
    RatePlan,
    RatePlanStatus,
    RatePlanType,
    StayQuote,
)
from rate_core.resolver import RateResolver

router = APIRouter(prefix="/rate-plans", tags=["rate plans"])


def _check_span(days: int, limit: int, unit: str):
    if days > limit:
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail=f"Requested {days} {unit}, at most {limit} allowed",
        )


@router.get("", response_model=List[RatePlan])
def list_rate_plans(
    search: Optional[str] = None,
    status: Optional[List[RatePlanStatus]] = Query(None),
    type: Optional[List[RatePlanType]] = Query(None),
    property_id: Optional[str] = None,
    pricing_strategy: Optional[List[PricingStrategy]] = Query(None),
    catalog: RatePlanCatalog = Depends(get_catalog),
):
    """List rate plans"""
    filters = RateFilters(
        search=search,
        statuses=status or [],
        types=type or [],
        property_id=property_id,
        pricing_strategies=pricing_strategy or [],
    )
    return catalog.filter(filters)


@router.get("/{rate_plan_id}", response_model=RatePlan)
def get_rate_plan(rate_plan_id: str, catalog: RatePlanCatalog = Depends(get_catalog)):
    """Get a rate plan"""
    try:
        return catalog.get(rate_plan_id)
    except RateEngineError as e:
        raise http_error(e)


@router.post("/{rate_plan_id}/nightly-rate", response_model=RateCalendarEntry)
def resolve_nightly_rate(
    rate_plan_id: str,
    data: NightlyRateRequest,
    catalog: RatePlanCatalog = Depends(get_catalog),
    resolver: RateResolver = Depends(get_resolver),
):
    """Resolve the nightly rate of a plan for one date"""
    try:
        plan = catalog.get(rate_plan_id)
        return resolver.resolve_nightly_rate(plan, data.on_date, data.to_context())
    except RateEngineError as e:
        raise http_error(e)


@router.post("/{rate_plan_id}/quote", response_model=StayQuote)
def create_quote(
    rate_plan_id: str,
    data: QuoteRequest,
    catalog: RatePlanCatalog = Depends(get_catalog),
    resolver: RateResolver = Depends(get_resolver),
    settings: Settings = Depends(get_settings),
):
    """Quote a stay"""
    _check_span((data.check_out - data.check_in).days, settings.MAX_STAY_NIGHTS, "nights")
    try:
        plan = catalog.get(rate_plan_id)
        return quote_stay(
            plan,
            data.check_in,
            data.check_out,
            context=data.to_context(),
            charges=data.to_charges(),
            resolver=resolver,
            occupancy_by_date=data.occupancy_by_date,
        )
    except RateEngineError as e:
        raise http_error(e)


@router.get("/{rate_plan_id}/calendar", response_model=RateCalendarResponse)
def get_rate_calendar(
    rate_plan_id: str,
    start: date,
    end: date,
    property_id: Optional[str] = None,
    occupancy_pct: float = Query(0, ge=0, le=100),
    advance_booking_days: int = Query(0, ge=0),
    catalog: RatePlanCatalog = Depends(get_catalog),
    resolver: RateResolver = Depends(get_resolver),
    ledger: InventoryLedger = Depends(get_ledger),
    settings: Settings = Depends(get_settings),
):
    """Rate calendar for a date range (inclusive)"""
    _check_span((end - start).days + 1, settings.MAX_CALENDAR_DAYS, "days")
    try:
        plan = catalog.get(rate_plan_id)

        demand_window = None
        automation = catalog.automation_for(plan.id)
        if automation is not None and automation.demand_based.enabled:
            demand_window = automation.demand_based.look_ahead_days

        entries = build_rate_calendar(
            plan,
            start,
            end,
            resolver=resolver,
            context=RateContext(occupancy_pct=occupancy_pct, advance_booking_days=advance_booking_days),
            ledger=ledger,
            property_id=property_id,
            demand_window=demand_window,
            demand_high=settings.DEMAND_HIGH_OCCUPANCY,
            demand_low=settings.DEMAND_LOW_OCCUPANCY,
        )
    except RateEngineError as e:
        raise http_error(e)

    return RateCalendarResponse(
        rate_plan_id=plan.id,
        currency=plan.currency,
        start=start,
        end=end,
        entries=entries,
        summary=summarize_calendar(entries, resolver.precision_for(plan.currency)),
    )
