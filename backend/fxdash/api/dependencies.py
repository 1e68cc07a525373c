"""
Request-scoped access to the services built in the app lifespan.

Routes depend on these providers instead of module-level singletons,
so tests swap in fakes with app.dependency_overrides.
"""

from fastapi import Request

from fxdash.core.config import Settings
from fxdash.services.binance import BinanceClient
from fxdash.services.indicators import IndicatorServiceInterface
from fxdash.services.prices import PriceRepositoryInterface

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Surrogate-Control": "no-store",
}


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_price_repository(request: Request) -> PriceRepositoryInterface:
    return request.app.state.price_repository


def get_indicator_service(request: Request) -> IndicatorServiceInterface:
    return request.app.state.indicator_service


def get_binance_client(request: Request) -> BinanceClient:
    return request.app.state.binance_client
