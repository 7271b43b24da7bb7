"""
Application settings
Read from environment variables / .env
"""
import os
from pathlib import Path
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from rate_core.resolver import WeekendPolicy

DEFAULT_RATE_PLANS_FILE = Path(__file__).parent / "data" / "rate_plans.json"


class Settings(BaseSettings):
    """Application settings"""

    APP_NAME: str = "Rate Engine"
    DEBUG: bool = False
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # Rate plan snapshot handed over by the persistence layer
    RATE_PLANS_FILE: str = str(DEFAULT_RATE_PLANS_FILE)

    # Resolution
    WEEKEND_POLICY: WeekendPolicy = WeekendPolicy.SKIP_IF_DAY_RULE
    DEFAULT_CURRENCY_PRECISION: int = 2

    # Inventory feed
    EVENT_HISTORY_SIZE: int = 100

    # Request limits (nights per quote, days per calendar)
    MAX_STAY_NIGHTS: int = 90
    MAX_CALENDAR_DAYS: int = 366

    # Demand classification for automation (average look-ahead occupancy, %)
    DEMAND_HIGH_OCCUPANCY: float = 80
    DEMAND_LOW_OCCUPANCY: float = 40

    model_config = ConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
