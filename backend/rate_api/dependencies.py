"""
FastAPI dependencies - engine objects live on app.state, built at startup
"""
from fastapi import HTTPException, Request, status

from rate_api.config import Settings
from rate_core.catalog import RatePlanCatalog
from rate_core.errors import (
    ConfigurationError,
    EligibilityViolation,
    InvalidDate,
    InvalidDateRange,
    InvalidPlanState,
    PlanNotFound,
    RateEngineError,
)
from rate_core.event_bus import EventBus
from rate_core.inventory import InventoryLedger
from rate_core.resolver import RateResolver


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(request: Request) -> RatePlanCatalog:
    return request.app.state.catalog


def get_resolver(request: Request) -> RateResolver:
    return request.app.state.resolver


def get_event_bus(request: Request) -> EventBus:
    return request.app.state.event_bus


def get_ledger(request: Request) -> InventoryLedger:
    return request.app.state.ledger


def http_error(e: RateEngineError) -> HTTPException:
    """Translate an engine error into an HTTP error"""
    if isinstance(e, PlanNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, InvalidPlanState):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, (InvalidDate, InvalidDateRange)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, EligibilityViolation):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"violations": e.violations, "messages": e.messages},
        )
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
