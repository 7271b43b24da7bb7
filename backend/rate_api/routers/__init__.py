# API Routers
from rate_api.routers import rates, inventory

__all__ = ['rates', 'inventory']
