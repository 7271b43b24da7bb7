"""
Rate engine application entry point
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from rate_api.config import Settings, settings as default_settings
from rate_api.routers import rates, inventory
from rate_core.automation import AutomationAdjuster
from rate_core.catalog import RatePlanCatalog
from rate_core.event_bus import EventBus
from rate_core.inventory import InventoryLedger
from rate_core.resolver import RateResolver

logger = logging.getLogger(__name__)


def init_engine(app: FastAPI, settings: Settings) -> None:
    """Load the plan catalog and wire the engine objects onto app.state"""
    catalog = RatePlanCatalog.load(settings.RATE_PLANS_FILE)

    resolver = RateResolver(
        weekend_policy=settings.WEEKEND_POLICY,
        default_precision=settings.DEFAULT_CURRENCY_PRECISION,
        adjusters=[AutomationAdjuster(catalog.automation_settings())],
    )

    bus = EventBus(history_size=settings.EVENT_HISTORY_SIZE)
    ledger = InventoryLedger()
    ledger.attach(bus)

    app.state.settings = settings
    app.state.catalog = catalog
    app.state.resolver = resolver
    app.state.event_bus = bus
    app.state.ledger = ledger


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.LOG_LEVEL.upper())
        init_engine(app, settings)
        logger.info(f"{settings.APP_NAME} started with {len(app.state.catalog)} rate plans")
        yield
        app.state.event_bus.clear()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Rate plan resolution, stay quotes and rate calendars",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(rates.router)
    app.include_router(inventory.router)

    @app.get("/health")
    def health():
        return {"status": "ok", "app": settings.APP_NAME}

    return app


app = create_app()
